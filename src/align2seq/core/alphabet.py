"""
Module for classifying single-byte residues into small integer codes
"""
from typing import Union, Iterable, Final, ClassVar

import numpy as np

from align2seq.utils.resources import Align2SeqError, Align2SeqWarning


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlphabetError(Align2SeqError):
    """Raised when an alphabet is invalid or a sequence cannot be read as single-byte text."""


class TranslationError(AlphabetError):
    """Raised when nucleotide-to-amino-acid translation is given invalid arguments (e.g. negative frame)."""


class TranslationWarning(Align2SeqWarning): pass


# Classes --------------------------------------------------------------------------------------------------------------
class Alphabet:
    """
    A class to represent an alphabet of ASCII symbols.

    Symbol ``i`` is encoded as ``i + 1``; code ``0`` is reserved for anything outside the alphabet,
    so encoding never fails and never drops characters.

    Examples:
        >>> Alphabet.NUCLEOTIDE.encode(b'ACGTUn')
        array([3, 2, 4, 1, 1, 0], dtype=uint8)
    """
    __slots__ = ('_data', '_lookup_table', '_trans_table', '_decode_table')
    DTYPE: Final = np.uint8
    UNKNOWN: Final = 0
    UNKNOWN_SYMBOL: Final = b'X'
    MAX_LEN: Final = np.iinfo(DTYPE).max
    ENCODING: Final = 'ascii'

    NUCLEOTIDE: ClassVar['Alphabet']
    AMINO: ClassVar['Alphabet']

    def __init__(self, symbols: bytes, aliases: dict[bytes, bytes] = None):
        """
        Initializes an Alphabet.

        Args:
            symbols: The symbols in the alphabet as bytes, in code order.
            aliases: Optional mapping of extra characters to existing symbols (e.g. {b'U': b'T'}).

        Raises:
            AlphabetError: If symbols are not ASCII, too long, contain duplicates, or if an alias is invalid.
        """
        if not symbols.isascii(): raise AlphabetError('Alphabet symbols must be a valid ASCII string')
        if len(symbols) > self.MAX_LEN:
            raise AlphabetError(f'Alphabet size cannot exceed {self.MAX_LEN} symbols ({self.DTYPE})')
        if len(set(symbols.upper())) != len(symbols): raise AlphabetError('Alphabet contains duplicate symbols')

        self._data: np.ndarray = np.frombuffer(symbols.upper(), dtype=self.DTYPE)

        # Build Lookup Table (0 is the sentinel for unknown)
        self._lookup_table = np.full(256, self.UNKNOWN, dtype=self.DTYPE)
        codes = np.arange(1, len(symbols) + 1, dtype=self.DTYPE)
        self._lookup_table[self._data] = codes
        self._lookup_table[np.frombuffer(symbols.lower(), dtype=self.DTYPE)] = codes

        if aliases:
            for src, dst in aliases.items():
                if len(src) != 1 or len(dst) != 1: raise AlphabetError("Aliases must be single bytes")
                if (dst_code := self._lookup_table[ord(dst)]) == self.UNKNOWN:
                    raise AlphabetError(f"Alias target {dst} not in alphabet")
                self._lookup_table[ord(src.upper())] = dst_code
                self._lookup_table[ord(src.lower())] = dst_code

        self._lookup_table.flags.writeable = False
        self._trans_table = self._lookup_table.tobytes()

        # Decode Table (unknown and out-of-range codes decode to X)
        decode_map = np.full(256, ord(self.UNKNOWN_SYMBOL), dtype=self.DTYPE)
        decode_map[1:len(self._data) + 1] = self._data
        self._decode_table = decode_map.tobytes()

    def __len__(self):
        return len(self._data)

    def __contains__(self, item):
        try:
            if isinstance(item, (int, np.integer)):
                return self._lookup_table[item] != self.UNKNOWN
            if isinstance(item, (str, bytes)):
                if len(item) != 1: return False
                val = ord(item) if isinstance(item, str) else item[0]
                return self._lookup_table[val] != self.UNKNOWN
        except (IndexError, ValueError, TypeError):
            pass
        return False

    def __repr__(self):
        return f"Alphabet({self._data.tobytes()!r})"

    def __eq__(self, other):
        if self is other: return True
        if not isinstance(other, Alphabet): return False
        return np.array_equal(self._lookup_table, other._lookup_table)

    def __hash__(self):
        return hash(self._lookup_table.tobytes())

    @property
    def size(self) -> int:
        """Number of codes including the unknown sentinel, i.e. the dimension of a matching score matrix."""
        return len(self._data) + 1

    @classmethod
    def as_bytes(cls, text: Union[str, bytes, bytearray, memoryview]) -> bytes:
        """Coerces text to bytes, rejecting strings that are not single-byte ASCII."""
        if isinstance(text, bytes): return text
        if isinstance(text, str):
            try: return text.encode(cls.ENCODING)
            except UnicodeEncodeError:
                raise AlphabetError(f'Sequence must be {cls.ENCODING} text, got {text!r}') from None
        if isinstance(text, (bytearray, memoryview)): return bytes(text)
        raise TypeError(f'Cannot read a sequence from {type(text)}')

    def code(self, symbol: Union[str, bytes, int]) -> int:
        """Returns the code of a single symbol (0 if it is not in the alphabet)."""
        if isinstance(symbol, (str, bytes)):
            if len(symbol) != 1: raise ValueError(f'Expected a single symbol, got {symbol!r}')
            symbol = ord(symbol)
        return int(self._lookup_table[symbol]) if 0 <= symbol < 256 else self.UNKNOWN

    def encode(self, text: Union[str, bytes]) -> np.ndarray:
        """
        Encodes text to an array of codes of the same length.

        Args:
            text: The text to encode as bytes (or ASCII string).

        Returns:
            A numpy array of encoded indices.
        """
        return np.frombuffer(self.as_bytes(text).translate(self._trans_table), dtype=self.DTYPE)

    def decode(self, encoded: np.ndarray) -> bytes:
        """Decodes an array of codes back to (upper-case) bytes; unknown codes become ``X``.

        Args:
            encoded: The numpy array of codes (uint8).

        Returns:
            The decoded bytes string.
        """
        if encoded.dtype != self.DTYPE:
            encoded = encoded.astype(self.DTYPE, copy=False)
        return encoded.tobytes().translate(self._decode_table)

    def encode_batch(self, texts: Iterable[Union[str, bytes]]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Encodes many sequences into a single flat buffer.

        Args:
            texts: An iterable of sequences.

        Returns:
            A tuple of (data, starts, lengths) where sequence ``i`` is ``data[starts[i]:starts[i] + lengths[i]]``.
        """
        items = [self.encode(t) for t in texts]
        count = len(items)
        lengths = np.fromiter((len(i) for i in items), dtype=np.int64, count=count)
        starts = np.zeros(count, dtype=np.int64)
        if count > 1: np.cumsum(lengths[:-1], out=starts[1:])
        data = np.concatenate(items) if count else np.empty(0, dtype=self.DTYPE)
        return data, starts, lengths


Alphabet.NUCLEOTIDE = Alphabet(b'TCAG', aliases={b'U': b'T'})
Alphabet.AMINO = Alphabet(b'CSTPAGNDEQHRKMILVFYW')
