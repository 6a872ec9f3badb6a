"""Pairwise similarity scoring with a sign-encoded gap heuristic over a dynamic programming matrix."""
from typing import Union, Iterable, Sequence, ClassVar

import numpy as np

from align2seq.core.alphabet import Alphabet
from align2seq.core.matrix import ScoreMatrix
from align2seq.utils.resources import Align2SeqError, RESOURCES, jit

if RESOURCES.has_module('numba'):
    from numba import prange
else:
    prange = range


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlignmentError(Align2SeqError):
    """Raised when an alignment request cannot be computed (e.g. the scratch matrix would be too large)."""


# Constants ------------------------------------------------------------------------------------------------------------
GAP_EXTEND_PENALTY = 1
GAP_OPEN_PENALTY = 3


# Classes --------------------------------------------------------------------------------------------------------------
class Aligner:
    """
    Scores pairs of sequences with a matched alphabet and substitution matrix.

    A cell of the DP matrix is negative while it represents an open or extending gap; the score of an alignment is
    the largest magnitude seen among the inner cells.

    Examples:
        >>> Aligner.NUCLEOTIDE.score(b'AA', b'AA')
        6
    """
    __slots__ = ('_matrix', '_alphabet')
    NUCLEOTIDE: ClassVar['Aligner']
    PROTEIN: ClassVar['Aligner']

    def __init__(self, matrix: ScoreMatrix, alphabet: Alphabet):
        if len(matrix) != alphabet.size:
            raise ValueError(f"{matrix!r} does not match an alphabet of {alphabet.size} codes")
        self._matrix = matrix
        self._alphabet = alphabet

    def __repr__(self): return f"Aligner({self._matrix!r}, {self._alphabet!r})"

    @property
    def matrix(self) -> ScoreMatrix: return self._matrix
    @property
    def alphabet(self) -> Alphabet: return self._alphabet

    def score(self, seq1: Union[str, bytes], seq2: Union[str, bytes]) -> int:
        """
        Scores two sequences.

        Args:
            seq1: First sequence (rows of the DP matrix).
            seq2: Second sequence (columns of the DP matrix).

        Returns:
            The best score; 0 if either sequence is shorter than 2.

        Raises:
            AlignmentError: If ``len(seq1) * len(seq2)`` exceeds ``RESOURCES.max_cells``.
        """
        a, b = self._alphabet.encode(seq1), self._alphabet.encode(seq2)
        _check_cells(len(a), len(b))
        return int(_score_kernel(a, b, np.asarray(self._matrix)))

    def score_pairs(self, seqs1: Sequence[Union[str, bytes]], seqs2: Sequence[Union[str, bytes]]) -> np.ndarray:
        """
        Scores sequences element-wise: ``out[i] = score(seqs1[i], seqs2[i])``.

        Raises:
            AlignmentError: If the inputs differ in length or a pair is too large.
        """
        if len(seqs1) != len(seqs2):
            raise AlignmentError(f"Cannot pair {len(seqs1)} sequences with {len(seqs2)} sequences")
        d1, s1, l1 = self._alphabet.encode_batch(seqs1)
        d2, s2, l2 = self._alphabet.encode_batch(seqs2)
        out = np.zeros(len(l1), dtype=np.int32)
        if len(out) == 0: return out
        i = int(np.argmax(l1 * l2))
        _check_cells(int(l1[i]), int(l2[i]))
        _score_pairs_driver(d1, s1, l1, d2, s2, l2, np.asarray(self._matrix), out)
        return out

    def score_matrix(self, queries: Iterable[Union[str, bytes]], targets: Iterable[Union[str, bytes]]) -> np.ndarray:
        """
        Scores every query against every target.

        Returns:
            An int32 array of shape ``(n_queries, n_targets)``.

        Raises:
            AlignmentError: If the largest query/target pair is too large.
        """
        q_data, q_starts, q_lengths = self._alphabet.encode_batch(queries)
        t_data, t_starts, t_lengths = self._alphabet.encode_batch(targets)
        out = np.zeros((len(q_lengths), len(t_lengths)), dtype=np.int32)
        if out.size == 0: return out
        _check_cells(int(q_lengths.max()), int(t_lengths.max()))
        _score_matrix_driver(q_data, q_starts, q_lengths, t_data, t_starts, t_lengths, np.asarray(self._matrix), out)
        return out


Aligner.NUCLEOTIDE = Aligner(ScoreMatrix.NUCLEOTIDE, Alphabet.NUCLEOTIDE)
Aligner.PROTEIN = Aligner(ScoreMatrix.BLOSUM62, Alphabet.AMINO)


# Functions ------------------------------------------------------------------------------------------------------------
def align(seq1: Union[str, bytes], seq2: Union[str, bytes], matrix: ScoreMatrix, alphabet: Alphabet) -> int:
    """Scores two sequences with the given substitution matrix and the alphabet that encodes its indices."""
    return Aligner(matrix, alphabet).score(seq1, seq2)


def _check_cells(n1: int, n2: int):
    if n1 * n2 > RESOURCES.max_cells:
        raise AlignmentError(f"A {n1} x {n2} alignment exceeds the limit of {RESOURCES.max_cells} cells")


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True)
def _score_kernel(seq1, seq2, matrix):
    """
    Fills the DP matrix and returns the largest absolute value of any inner cell.

    Row 0 and column 0 hold raw substitution scores and are never counted. Each inner cell starts from the diagonal
    (``|M[i-1, j-1]| + s``, floored at 0) and is replaced by a gap candidate only if that candidate is negative and
    strictly larger in magnitude; the vertical candidate is tried before the horizontal one.
    """
    n1 = len(seq1)
    n2 = len(seq2)
    if n1 == 0 or n2 == 0: return 0

    M = np.empty((n1, n2), dtype=np.int32)
    for i in range(n1):
        M[i, 0] = matrix[seq1[i], seq2[0]]
    for j in range(1, n2):
        M[0, j] = matrix[seq1[0], seq2[j]]

    highest = 0
    for i in range(1, n1):
        for j in range(1, n2):
            best = abs(M[i - 1, j - 1]) + matrix[seq1[i], seq2[j]]
            if best < 0: best = 0

            # Gap in seq2
            prev = M[i - 1, j]
            if prev < 0:
                gap = prev + GAP_EXTEND_PENALTY
            else:
                gap = -prev + GAP_OPEN_PENALTY
            if gap < 0 and abs(gap) > abs(best): best = gap

            # Gap in seq1
            prev = M[i, j - 1]
            if prev < 0:
                gap = prev + GAP_EXTEND_PENALTY
            else:
                gap = -prev + GAP_OPEN_PENALTY
            if gap < 0 and abs(gap) > abs(best): best = gap

            M[i, j] = best
            if abs(best) > highest: highest = abs(best)
    return highest


# Drivers --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True, parallel=True)
def _score_pairs_driver(d1, s1, l1, d2, s2, l2, matrix, out):
    for k in prange(len(out)):
        out[k] = _score_kernel(d1[s1[k]:s1[k] + l1[k]], d2[s2[k]:s2[k] + l2[k]], matrix)


@jit(nopython=True, cache=True, nogil=True, parallel=True)
def _score_matrix_driver(q_data, q_starts, q_lengths, t_data, t_starts, t_lengths, matrix, out):
    n_q, n_t = out.shape
    for k in prange(n_q * n_t):
        qi = k // n_t
        ti = k % n_t
        out[qi, ti] = _score_kernel(
            q_data[q_starts[qi]:q_starts[qi] + q_lengths[qi]],
            t_data[t_starts[ti]:t_starts[ti] + t_lengths[ti]],
            matrix
        )
