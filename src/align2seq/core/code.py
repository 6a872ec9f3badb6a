"""
Codon lookup and nucleotide-to-amino-acid translation.
"""
from typing import Union, Iterable, ClassVar

import numpy as np

from align2seq.core.alphabet import Alphabet, TranslationError
from align2seq.utils.resources import jit, RESOURCES

if RESOURCES.has_module('numba'):
    from numba import prange
else:
    prange = range


# Classes --------------------------------------------------------------------------------------------------------------
class GeneticCode:
    """
    Represents a genetic code as a dense ``(5, 5, 5)`` table indexed by nucleotide codes.

    Any codon touching the unknown code ``0`` translates to ``X``; stop codons translate to ``_``.

    Examples:
        >>> GeneticCode.STANDARD.translate(b'ATGTAA')
        b'M_'
    """
    __slots__ = ('_data', '_stops')
    _DNA = Alphabet.NUCLEOTIDE
    _BASES = b'TCAG'
    STANDARD: ClassVar['GeneticCode']

    def __init__(self, table: bytes, stop: bytes = b'_', unknown: bytes = Alphabet.UNKNOWN_SYMBOL):
        """Initializes a genetic code.

        Args:
            table: 64-byte ASCII string of amino acids for codons in TCAG order, with ``*`` marking stops.
            stop: Symbol written for stop codons.
            unknown: Symbol written for codons containing an unknown base.
        """
        if len(table) != 64: raise ValueError(f'Genetic code table must have 64 entries, got {len(table)}')
        flat = np.frombuffer(table, dtype=Alphabet.DTYPE).copy()
        stops = flat == ord('*')
        flat[stops] = ord(stop)

        # Place the 4x4x4 block at the codes of T, C, A and G; everything else stays unknown
        block = np.ix_(*[[self._DNA.code(b) for b in self._BASES]] * 3)
        self._data = np.full((5, 5, 5), ord(unknown), dtype=Alphabet.DTYPE)
        self._data[block] = flat.reshape(4, 4, 4)
        self._data.flags.writeable = False
        self._stops = np.zeros((5, 5, 5), dtype=bool)
        self._stops[block] = stops.reshape(4, 4, 4)
        self._stops.flags.writeable = False

    @property
    def stops(self) -> np.ndarray:
        """Boolean ``(5, 5, 5)`` array indicating stop codons."""
        return self._stops

    def __array__(self, dtype=None, copy=None):
        return self._data.astype(dtype, copy=False) if dtype else self._data

    def __repr__(self):
        return f"GeneticCode({self._data.shape})"

    def codon(self, triplet: Union[str, bytes]) -> bytes:
        """Translates a single codon."""
        if len(encoded := self._DNA.encode(triplet)) != 3:
            raise TranslationError(f'A codon must have 3 bases, got {len(encoded)}')
        return bytes([self._data[encoded[0], encoded[1], encoded[2]]])

    def translate(self, seq: Union[str, bytes], frame: int = 0) -> bytes:
        """
        Translates a nucleotide sequence to amino acids.

        Reading starts ``frame`` bases in; trailing bases that do not fill a codon are ignored.

        Args:
            seq: The nucleotide sequence.
            frame: Number of leading bases to skip.

        Returns:
            The translated protein sequence (empty if no complete codon fits).

        Raises:
            TranslationError: If the frame is negative.
        """
        if frame < 0: raise TranslationError(f'Frame offset must be non-negative, got {frame}')
        encoded = self._DNA.encode(seq)
        n_codons = (len(encoded) - frame) // 3
        if n_codons <= 0: return b''
        return _translate_kernel(encoded, self._data, frame, n_codons).tobytes()

    def translate_batch(self, seqs: Iterable[Union[str, bytes]], frame: int = 0) -> list[bytes]:
        """
        Translates many nucleotide sequences in the same frame.

        Args:
            seqs: The nucleotide sequences.
            frame: Number of leading bases to skip in each sequence.

        Returns:
            A list with one translation per input sequence.
        """
        if frame < 0: raise TranslationError(f'Frame offset must be non-negative, got {frame}')
        data, starts, lengths = self._DNA.encode_batch(seqs)
        if len(lengths) == 0: return []

        # 1. Output lengths and offsets
        new_lengths = np.maximum((lengths - frame) // 3, 0)
        new_starts = np.zeros(len(lengths), dtype=np.int64)
        np.cumsum(new_lengths[:-1], out=new_starts[1:])
        new_data = np.empty(int(new_starts[-1] + new_lengths[-1]), dtype=Alphabet.DTYPE)

        # 2. Fill
        if len(new_data):
            _batch_translate_fill_kernel(data, starts, self._data, frame, new_data, new_starts, new_lengths)
        return [new_data[s:s + n].tobytes() for s, n in zip(new_starts, new_lengths)]


GeneticCode.STANDARD = GeneticCode(b'FFLLSSSSYY**CC*WLLLLPPPPHHQQRRRRIIIMTTTTNNKKSSRRVVVVAAAADDEEGGGG')


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _translate_kernel(encoded_seq, table, start, n_codons):
    """Translates codes -> amino acid bytes through the (5, 5, 5) table."""
    res = np.empty(n_codons, dtype=np.uint8)
    for i in range(n_codons):
        base = start + (i * 3)
        res[i] = table[encoded_seq[base], encoded_seq[base + 1], encoded_seq[base + 2]]
    return res


@jit(nopython=True, cache=True, nogil=True, parallel=True)
def _batch_translate_fill_kernel(data, starts, table, frame, out_data, out_starts, out_lengths):
    n = len(starts)
    for i in prange(n):
        s = starts[i] + frame
        out_s = out_starts[i]
        for j in range(out_lengths[i]):
            base = s + (j * 3)
            out_data[out_s + j] = table[data[base], data[base + 1], data[base + 2]]
