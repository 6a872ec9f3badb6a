"""
Sequence similarity scoring and codon translation for nucleotide and protein sequences.
"""
from align2seq.utils.resources import RESOURCES, Align2SeqError, Align2SeqWarning, DependencyWarning
from align2seq.core.alphabet import Alphabet, AlphabetError, TranslationError, TranslationWarning
from align2seq.core.matrix import ScoreMatrix
from align2seq.core.code import GeneticCode
from align2seq.engines.pairwise import Aligner, AlignmentError, align
from align2seq.api import (align_nucleotide, align_protein, translate, align_nucleotide_batch, align_protein_batch,
                           translate_batch, align_n, align_p, n2p)
