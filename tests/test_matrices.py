"""
test_matrices.py — Tests for table-based and diagonal similarity matrices
"""

import numpy as np
import pytest

from pwalign.alphabets import AMBIGUOUS_DNA, AMBIGUOUS_PROTEIN, AMBIGUOUS_RNA
from pwalign.matrices import (
    DiagonalSimilarityMatrix,
    SimilarityMatrix,
    StandardSimilarityMatrix,
    nucleotide_table,
    parse_matrix_text,
)


class TestStandardMatrices:

    @pytest.mark.parametrize("a,b,expected", [
        ("A", "A", 2), ("T", "T", 3), ("G", "G", 5), ("C", "C", 12),
        ("W", "W", 17), ("I", "V", 4), ("A", "R", -2), ("*", "*", 1),
    ])
    def test_pam250_values(self, pam250, a, b, expected):
        assert pam250.score(a, b) == expected
        assert pam250.score(b, a) == expected

    @pytest.mark.parametrize("a,b,expected", [
        ("A", "A", 4), ("W", "W", 11), ("A", "R", -1), ("C", "C", 9), ("I", "V", 3),
    ])
    def test_blosum62_values(self, a, b, expected):
        blosum62 = SimilarityMatrix.standard(StandardSimilarityMatrix.BLOSUM62)
        assert blosum62.score(a, b) == expected

    @pytest.mark.parametrize("name", ["BLOSUM62", "blosum62", "PAM250", "AmbiguousDna", "ambiguous_rna"])
    def test_lookup_by_name(self, name):
        matrix = SimilarityMatrix.standard(name)
        assert np.array_equal(matrix.table, matrix.table.T)

    def test_cached(self):
        assert SimilarityMatrix.standard("PAM250") is SimilarityMatrix.standard("pam250")

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown similarity matrix"):
            SimilarityMatrix.standard("BLOSUM99")

    def test_alphabets_attached(self):
        assert SimilarityMatrix.standard("PAM250").alphabet is AMBIGUOUS_PROTEIN
        assert SimilarityMatrix.standard("AmbiguousDna").alphabet is AMBIGUOUS_DNA
        assert SimilarityMatrix.standard("AmbiguousRna").alphabet is AMBIGUOUS_RNA

    def test_diagonal_by_name(self):
        matrix = SimilarityMatrix.standard("Diagonal")
        assert isinstance(matrix, DiagonalSimilarityMatrix)
        assert matrix.score("A", "A") == 2

    def test_table_is_read_only(self, pam250):
        with pytest.raises(ValueError):
            pam250.table[0, 0] = 100


class TestAmbiguousNucleotides:
    """Partial credit for overlapping ambiguity codes."""

    @pytest.mark.parametrize("a,b,expected", [
        ("A", "A", 5), ("A", "C", -4), ("A", "N", -2), ("A", "R", 1),
        ("R", "R", 1), ("N", "N", -2), ("C", "Y", 1), ("A", "Y", -4),
    ])
    def test_dna_values(self, a, b, expected):
        matrix = SimilarityMatrix.standard("AmbiguousDna")
        assert matrix.score(a, b) == expected

    def test_rna_uses_u(self):
        matrix = SimilarityMatrix.standard("AmbiguousRna")
        assert matrix.is_symbol_supported("U")
        assert not matrix.is_symbol_supported("T")
        assert matrix.score("U", "U") == 5

    def test_custom_scores(self):
        symbols, table = nucleotide_table(AMBIGUOUS_DNA, match=1, mismatch=0)
        assert table[symbols.index("A"), symbols.index("A")] == 1
        assert table[symbols.index("A"), symbols.index("C")] == 0


class TestSimilarityMatrix:
    """Construction and lookups of table-based matrices."""

    def test_lookup(self):
        matrix = SimilarityMatrix("AB", [[1, -1], [-1, 3]], name="toy")
        assert matrix.score("B", "B") == 3
        assert matrix.score("A", "B") == -1
        assert matrix.symbols == "AB"
        assert matrix.is_symbol_supported("A")
        assert not matrix.is_symbol_supported("C")
        assert matrix.validate_sequence("ABBA")
        assert not matrix.validate_sequence("ABC")
        assert matrix.profile("A", "ABA") == [1, -1, 1]

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError, match="must be 2x2"):
            SimilarityMatrix("AB", [[1, 2, 3], [4, 5, 6]])

    def test_rejects_duplicates(self):
        with pytest.raises(ValueError, match="Duplicate"):
            SimilarityMatrix("AA", [[1, 0], [0, 1]])

    def test_rejects_asymmetric(self):
        with pytest.raises(ValueError, match="not symmetric"):
            SimilarityMatrix("AB", [[1, 2], [0, 1]])

    def test_asymmetric_allowed_when_requested(self):
        matrix = SimilarityMatrix("AB", [[1, 2], [0, 1]], symmetric=False)
        assert matrix.score("A", "B") == 2
        assert matrix.score("B", "A") == 0

    def test_parse_matrix_text(self):
        symbols, table = parse_matrix_text("""
           A  B
        A  1 -1
        B -1  2
        """)
        assert symbols == "AB"
        np.testing.assert_array_equal(table, [[1, -1], [-1, 2]])

    def test_parse_rejects_mismatched_rows(self):
        with pytest.raises(ValueError):
            parse_matrix_text("""
               A  B
            B  1 -1
            A -1  2
            """)


class TestDiagonalSimilarityMatrix:

    def test_scores(self, diagonal_2_2):
        assert diagonal_2_2.score("A", "A") == 2
        assert diagonal_2_2.score("A", "C") == -2
        assert diagonal_2_2.score("a", "A") == -2

    @pytest.mark.parametrize("symbol,supported", [
        ("A", True), ("z", True), ("*", True), ("-", True), ("1", False), (" ", False),
    ])
    def test_supported_symbols(self, diagonal_2_2, symbol, supported):
        assert diagonal_2_2.is_symbol_supported(symbol) is supported

    def test_validate_and_profile(self, diagonal_2_2):
        assert diagonal_2_2.validate_sequence("ACGT")
        assert not diagonal_2_2.validate_sequence("AC1T")
        assert diagonal_2_2.profile("C", "ACGC") == [-2, 2, -2, 2]
        assert diagonal_2_2.alphabet is None
