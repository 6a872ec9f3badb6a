import numpy as np
import pytest
from align2seq.core.alphabet import Alphabet
from align2seq.core.matrix import ScoreMatrix
from align2seq.engines.pairwise import Aligner, AlignmentError, align
from align2seq.utils.resources import RESOURCES


class TestAlignerInit:
    def test_mismatched_pair(self):
        with pytest.raises(ValueError, match="does not match"):
            Aligner(ScoreMatrix.BLOSUM62, Alphabet.NUCLEOTIDE)

    def test_properties(self):
        assert Aligner.NUCLEOTIDE.matrix is ScoreMatrix.NUCLEOTIDE
        assert Aligner.PROTEIN.alphabet is Alphabet.AMINO


class TestScoreDegenerate:
    @pytest.mark.parametrize("aligner", [Aligner.NUCLEOTIDE, Aligner.PROTEIN])
    @pytest.mark.parametrize("seq1, seq2", [
        (b'', b''), (b'', b'ACGT'), (b'ACGT', b''), (b'A', b'ACGTACGT'), (b'WWWW', b'W'), (b'C', b'C'),
    ])
    def test_short_sequences_score_zero(self, aligner, seq1, seq2):
        assert aligner.score(seq1, seq2) == 0

    def test_single_unknown(self):
        # The only cell is a seed, which never counts
        assert Aligner.NUCLEOTIDE.score(b'A', b'Z') == 0


class TestScoreRecurrence:
    def test_exact_match_pair(self):
        assert Aligner.NUCLEOTIDE.score(b'AA', b'AA') == 6

    def test_mismatch_in_seed(self):
        # M[0][0] = 3, M[1][0] = M[0][1] = 1; gap candidates are 2 (not negative)
        assert Aligner.NUCLEOTIDE.score(b'AC', b'AC') == 6

    @pytest.mark.parametrize("n", [2, 3, 4, 7])
    def test_homopolymer(self, n):
        assert Aligner.NUCLEOTIDE.score(b'A' * n, b'A' * n) == 3 * n

    def test_case_insensitive(self):
        assert Aligner.NUCLEOTIDE.score(b'acgt', b'ACGU') == Aligner.NUCLEOTIDE.score(b'ACGT', b'ACGT')

    def test_diagonal_clamped_then_vertical_extension(self):
        # M[0][1] = s(W, ?) = -20 extends to -19; the clamped diagonal (11 - 20 -> 0) loses
        assert Aligner.PROTEIN.score(b'WW', b'WZ') == 19

    def test_horizontal_replaces_vertical(self):
        # Vertical opens from M[0][1] = 11 (-8), horizontal extends M[1][0] = -20 (-19), larger magnitude wins
        assert Aligner.PROTEIN.score(b'WZ', b'WW') == 19

    def test_gap_open_from_positive(self):
        # Diagonal is 11 - 4 = 7; opening from M[0][1] = 11 gives -8, which wins on magnitude
        assert Aligner.PROTEIN.score(b'WD', b'WW') == 8

    def test_gap_open_loses_to_diagonal(self):
        # Opening from M[1][0] = 11 gives -8, smaller than the diagonal 11 - 2 = 9
        assert Aligner.PROTEIN.score(b'WW', b'WC') == 9

    def test_rows_are_first_sequence(self):
        # L/V scores differ by direction in the protein table
        assert Aligner.PROTEIN.score(b'LL', b'LV') == 7
        assert Aligner.PROTEIN.score(b'LV', b'LL') == 5

    def test_deterministic(self):
        seq1, seq2 = b'MKVLAAGIWHRCT', b'MKILAGGWWHRT'
        scores = {Aligner.PROTEIN.score(seq1, seq2) for _ in range(5)}
        assert len(scores) == 1

    def test_str_and_bytes_agree(self):
        assert Aligner.PROTEIN.score('MKVL', 'mkil') == Aligner.PROTEIN.score(b'MKVL', bytearray(b'MKIL'))

    def test_returns_int(self):
        assert type(Aligner.NUCLEOTIDE.score(b'ACGT', b'ACGT')) is int

    def test_align_function(self):
        assert align(b'AA', b'AA', ScoreMatrix.NUCLEOTIDE, Alphabet.NUCLEOTIDE) == 6


class TestCellLimit:
    def test_too_many_cells(self, monkeypatch):
        monkeypatch.setattr(RESOURCES, 'max_cells', 15)
        assert Aligner.NUCLEOTIDE.score(b'ACG', b'ACGTA') >= 0
        with pytest.raises(AlignmentError, match="exceeds"):
            Aligner.NUCLEOTIDE.score(b'ACGT', b'ACGTA')

    def test_batch_limit(self, monkeypatch):
        monkeypatch.setattr(RESOURCES, 'max_cells', 15)
        with pytest.raises(AlignmentError):
            Aligner.NUCLEOTIDE.score_matrix([b'A', b'ACGT'], [b'ACGTA'])
        with pytest.raises(AlignmentError):
            Aligner.NUCLEOTIDE.score_pairs([b'A', b'ACGT'], [b'A', b'ACGTA'])

    def test_env_variable(self, monkeypatch):
        monkeypatch.setenv(RESOURCES.MAX_CELLS_VARIABLE, '10')
        assert type(RESOURCES).max_cells.func(RESOURCES) == 10
        monkeypatch.setenv(RESOURCES.MAX_CELLS_VARIABLE, 'lots')
        with pytest.raises(ValueError):
            type(RESOURCES).max_cells.func(RESOURCES)


class TestBatchScoring:
    QUERIES = [b'ACGTTGCA', b'', b'A', b'GGGCCCAAATTT', b'acgnnacg']
    TARGETS = [b'ACGTTGCA', b'TTTT', b'CAGTAGC', b'N']

    def test_score_matrix_matches_single(self):
        out = Aligner.NUCLEOTIDE.score_matrix(self.QUERIES, self.TARGETS)
        assert out.shape == (len(self.QUERIES), len(self.TARGETS))
        assert out.dtype == np.int32
        expected = [[Aligner.NUCLEOTIDE.score(q, t) for t in self.TARGETS] for q in self.QUERIES]
        np.testing.assert_array_equal(out, expected)

    def test_score_pairs_matches_single(self):
        seqs1 = [b'MKVLAAG', b'WW', b'', b'HRCT']
        seqs2 = [b'MKILAGG', b'WZ', b'MK', b'HRCS']
        out = Aligner.PROTEIN.score_pairs(seqs1, seqs2)
        np.testing.assert_array_equal(out, [Aligner.PROTEIN.score(a, b) for a, b in zip(seqs1, seqs2)])

    def test_score_pairs_length_mismatch(self):
        with pytest.raises(AlignmentError, match="Cannot pair"):
            Aligner.PROTEIN.score_pairs([b'MK'], [b'MK', b'MV'])

    def test_empty_batches(self):
        assert Aligner.NUCLEOTIDE.score_matrix([], [b'ACGT']).shape == (0, 1)
        assert Aligner.NUCLEOTIDE.score_matrix([b'ACGT'], []).shape == (1, 0)
        assert len(Aligner.NUCLEOTIDE.score_pairs([], [])) == 0


def _reference_matrix(seq1, seq2, aligner):
    """Cell-by-cell rendition of the recurrence on plain lists."""
    a, b = aligner.alphabet.encode(seq1).tolist(), aligner.alphabet.encode(seq2).tolist()
    s = np.asarray(aligner.matrix).tolist()
    if not a or not b: return []
    m = [[0] * len(b) for _ in a]
    for i in range(len(a)): m[i][0] = s[a[i]][b[0]]
    for j in range(1, len(b)): m[0][j] = s[a[0]][b[j]]
    for i in range(1, len(a)):
        for j in range(1, len(b)):
            best = max(abs(m[i - 1][j - 1]) + s[a[i]][b[j]], 0)
            for prev in (m[i - 1][j], m[i][j - 1]):
                gap = prev + 1 if prev < 0 else -prev + 3
                if gap < 0 and abs(gap) > abs(best): best = gap
            m[i][j] = best
    return m


def _reference_score(seq1, seq2, aligner):
    m = _reference_matrix(seq1, seq2, aligner)
    return max((abs(v) for row in m[1:] for v in row[1:]), default=0)


class TestScoreAgainstReference:
    @staticmethod
    def _random_pairs(symbols, n, seed):
        rng = np.random.default_rng(seed)
        pool = list(symbols + symbols.lower() + 'NX*')
        for _ in range(n):
            yield tuple(''.join(rng.choice(pool, rng.integers(0, 13))) for _ in range(2))

    @pytest.mark.parametrize("aligner, symbols, seed", [
        (Aligner.NUCLEOTIDE, 'ACGTU', 7), (Aligner.PROTEIN, 'CSTPAGNDEQHRKMILVFYW', 11),
    ])
    def test_random_pairs(self, aligner, symbols, seed):
        for seq1, seq2 in self._random_pairs(symbols, 400, seed):
            assert aligner.score(seq1, seq2) == _reference_score(seq1, seq2, aligner), (seq1, seq2)

    def test_reference_agrees_on_known_scores(self):
        assert _reference_score(b'WZ', b'WW', Aligner.PROTEIN) == 19
        assert _reference_score(b'WD', b'WW', Aligner.PROTEIN) == 8
        assert _reference_score(b'AAAA', b'AAAA', Aligner.NUCLEOTIDE) == 12

    def test_gap_runs_through_unknown_block(self):
        # Unknown residues push cells negative, so gaps keep extending from negative neighbours
        for aligner, seq1, seq2 in [(Aligner.PROTEIN, b'WZZZZW', b'WZZZZW'), (Aligner.PROTEIN, b'MKZZZZZVL', b'MKVL'),
                                    (Aligner.NUCLEOTIDE, b'ACNNNNGT', b'ACGT')]:
            m = _reference_matrix(seq1, seq2, aligner)
            chained = sum(m[i][j] < 0 and (m[i - 1][j] < 0 or m[i][j - 1] < 0)
                          for i in range(1, len(m)) for j in range(1, len(m[0])))
            assert chained >= 2
            assert aligner.score(seq1, seq2) == _reference_score(seq1, seq2, aligner)
