"""
Public entry points: nucleotide and protein similarity scores, and codon translation.

``align_n``, ``align_p`` and ``n2p`` are kept as aliases of the three operations.
"""
from typing import Union, Iterable
from warnings import warn

import numpy as np

from align2seq.core.alphabet import TranslationWarning
from align2seq.core.code import GeneticCode
from align2seq.engines.pairwise import Aligner

SeqLike = Union[str, bytes, bytearray, memoryview]


# Functions ------------------------------------------------------------------------------------------------------------
def align_nucleotide(seq1: SeqLike, seq2: SeqLike) -> int:
    """
    Scores two nucleotide sequences (``A``, ``C``, ``G``, ``T``/``U`` in either case; anything else is unknown).

    Examples:
        >>> align_nucleotide('AA', 'AA')
        6
    """
    return Aligner.NUCLEOTIDE.score(seq1, seq2)


def align_protein(seq1: SeqLike, seq2: SeqLike) -> int:
    """Scores two protein sequences (the twenty standard one-letter codes in either case)."""
    return Aligner.PROTEIN.score(seq1, seq2)


def translate(seq: SeqLike, frame: int = 0) -> bytes:
    """
    Translates a nucleotide sequence with the standard genetic code.

    Args:
        seq: The nucleotide sequence.
        frame: Number of leading bases to skip before reading codons.

    Returns:
        One byte per complete codon: an amino acid letter, ``_`` for a stop, or ``X`` for a codon with an unknown base.

    Raises:
        TranslationError: If the frame is negative.

    Warns:
        TranslationWarning: If the sequence holds a full codon but the frame skips past it.

    Examples:
        >>> translate('ATG')
        b'M'
    """
    protein = GeneticCode.STANDARD.translate(seq, frame)
    if not protein and len(seq) >= 3:
        warn(f'Translated to an empty sequence: {seq!r} (frame {frame})', TranslationWarning, stacklevel=2)
    return protein


def align_nucleotide_batch(queries: Iterable[SeqLike], targets: Iterable[SeqLike]) -> np.ndarray:
    """All-vs-all nucleotide scores as an int32 array of shape ``(n_queries, n_targets)``."""
    return Aligner.NUCLEOTIDE.score_matrix(queries, targets)


def align_protein_batch(queries: Iterable[SeqLike], targets: Iterable[SeqLike]) -> np.ndarray:
    """All-vs-all protein scores as an int32 array of shape ``(n_queries, n_targets)``."""
    return Aligner.PROTEIN.score_matrix(queries, targets)


def translate_batch(seqs: Iterable[SeqLike], frame: int = 0) -> list[bytes]:
    """Translates every sequence in the same frame."""
    return GeneticCode.STANDARD.translate_batch(seqs, frame)


align_n = align_nucleotide
align_p = align_protein
n2p = translate
