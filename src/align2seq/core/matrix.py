"""
Constant substitution matrices indexed by pairs of residue codes.
"""
from typing import Union, Iterable, ClassVar

import numpy as np


# Classes --------------------------------------------------------------------------------------------------------------
class ScoreMatrix:
    """
    Represents a read-only substitution matrix for alignment.

    Row and column 0 score any pairing with the unknown residue code.

    Attributes:
        _data (np.ndarray): The raw matrix data.

    Examples:
        >>> ScoreMatrix.NUCLEOTIDE.score(3, 3)
        3
    """
    _DTYPE = np.int32
    __slots__ = ('_data',)

    NUCLEOTIDE: ClassVar['ScoreMatrix']
    BLOSUM62: ClassVar['ScoreMatrix']

    def __init__(self, data: Union[np.ndarray, Iterable]):
        self._data = np.array(data, dtype=self._DTYPE)
        if self._data.ndim != 2 or self._data.shape[0] != self._data.shape[1]:
            raise ValueError(f"Score matrix must be square, got shape {self._data.shape}")
        self._data.flags.writeable = False

    def __getitem__(self, item): return self._data[item]
    def __len__(self): return len(self._data)
    def __array__(self, dtype=None, copy=None): return self._data.astype(dtype, copy=False) if dtype else self._data
    def __repr__(self): return f"ScoreMatrix{self._data.shape}"
    @property
    def shape(self): return self._data.shape

    def score(self, a: int, b: int) -> int:
        """Returns the substitution score for residue codes ``a`` (row) and ``b`` (column)."""
        return int(self._data[a, b])


# Constants ------------------------------------------------------------------------------------------------------------
# Codes follow Alphabet.NUCLEOTIDE: X(unknown), T/U, C, A, G
ScoreMatrix.NUCLEOTIDE = ScoreMatrix([
    [-1, -1, -1, -1, -1],
    [-1,  3,  1,  1,  1],
    [-1,  1,  3,  1,  1],
    [-1,  1,  1,  3,  1],
    [-1,  1,  1,  1,  3],
])

# Codes follow Alphabet.AMINO: X(unknown), C, S, T, P, A, G, N, D, E, Q, H, R, K, M, I, L, V, F, Y, W
# Rows index the first sequence; the table is not symmetric.
ScoreMatrix.BLOSUM62 = ScoreMatrix([
    [-20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20, -20],
    [-20,   9,  -1,  -1,  -3,   0,  -3,  -3,  -3,  -4,  -3,  -3,  -3,  -3,  -1,  -1,  -1,  -1,  -2,  -2,  -2],
    [-20,  -1,   4,   1,  -1,   1,   0,   1,   0,   0,   0,  -1,  -1,   0,  -1,  -2,  -2,  -2,  -2,  -2,  -3],
    [-20,  -1,   1,   4,   1,  -1,   1,   0,   1,   0,   0,   0,  -1,   0,  -1,  -2,  -2,  -2,  -2,  -2,  -3],
    [-20,  -3,  -1,   1,   7,  -1,  -2,  -1,  -1,  -1,  -1,  -2,  -2,  -1,  -2,  -3,  -3,  -2,  -4,  -3,  -4],
    [-20,   0,   1,  -1,  -1,   4,   0,  -1,  -2,  -1,  -1,  -2,  -1,  -1,  -1,  -1,  -1,  -2,  -2,  -2,  -3],
    [-20,  -3,   0,   1,  -2,   0,   6,  -2,  -1,  -2,  -2,  -2,  -2,  -2,  -3,  -4,  -4,   0,  -3,  -3,  -2],
    [-20,  -3,   1,   0,  -2,  -2,   0,   6,   1,   0,   0,  -1,   0,   0,  -2,  -3,  -3,  -3,  -3,  -2,  -4],
    [-20,  -3,   0,   1,  -1,  -2,  -1,   1,   6,   2,   0,  -1,  -2,  -1,  -3,  -3,  -4,  -3,  -3,  -3,  -4],
    [-20,  -4,   0,   0,  -1,  -1,  -2,   0,   2,   5,   2,   0,   0,   1,  -2,  -3,  -3,  -3,  -3,  -2,  -3],
    [-20,  -3,   0,   0,  -1,  -1,  -2,   0,   0,   2,   5,   0,   1,   1,   0,  -3,  -2,  -2,  -3,  -1,  -2],
    [-20,  -3,  -1,   0,  -2,  -2,  -2,   1,   1,   0,   0,   8,   0,  -1,  -2,  -3,  -3,  -2,  -1,   2,  -2],
    [-20,  -3,  -1,  -1,  -2,  -1,  -2,   0,  -2,   0,   1,   0,   5,   2,  -1,  -3,  -2,  -3,  -3,  -2,  -3],
    [-20,  -3,   0,   0,  -1,  -1,  -2,   0,  -1,   1,   1,  -1,   2,   5,  -1,  -3,  -2,  -3,  -3,  -2,  -3],
    [-20,  -1,  -1,  -1,  -2,  -1,  -3,  -2,  -3,  -2,   0,  -2,  -1,  -1,   5,   1,   2,  -2,   0,  -1,  -1],
    [-20,  -1,  -2,  -2,  -3,  -1,  -4,  -3,  -3,  -3,  -3,  -3,  -3,  -3,   1,   4,   2,   1,   0,  -1,  -3],
    [-20,  -1,  -2,  -2,  -3,  -1,  -4,  -3,  -4,  -3,  -2,  -3,  -2,  -2,   2,   2,   4,   3,   0,  -1,  -2],
    [-20,  -1,  -2,  -2,  -2,   0,  -3,  -3,  -3,  -2,  -2,  -3,  -3,  -2,   1,   3,   1,   4,  -1,  -1,  -3],
    [-20,  -2,  -2,  -2,  -4,  -2,  -3,  -3,  -3,  -3,  -3,  -1,  -3,  -3,   0,   0,   0,  -1,   6,   3,   1],
    [-20,  -2,  -2,  -2,  -3,  -2,  -3,  -2,  -3,  -2,  -1,   2,  -2,  -2,  -1,  -1,  -1,  -1,   3,   7,   2],
    [-20,  -2,  -3,  -3,  -4,  -3,  -2,  -4,  -4,  -3,  -2,  -2,  -3,  -3,  -1,  -3,  -2,  -3,   1,   2,  11],
])
