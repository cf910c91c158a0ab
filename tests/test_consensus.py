"""
test_consensus.py — Tests for alphabets and the frequency-fraction consensus
"""

import pytest

from pwalign.alphabets import AMBIGUOUS_DNA, AMBIGUOUS_PROTEIN, AMBIGUOUS_RNA
from pwalign.aligners import PairwiseAligner, align_global, needleman_wunsch, smith_waterman
from pwalign.consensus import ConsensusResolver, SimpleConsensusResolver
from pwalign.matrices import DiagonalSimilarityMatrix


class TestAlphabet:

    def test_gap_and_ambiguity(self):
        assert AMBIGUOUS_DNA.is_gap("-")
        assert not AMBIGUOUS_DNA.is_gap("A")
        assert AMBIGUOUS_DNA.is_ambiguous("N")
        assert not AMBIGUOUS_DNA.is_ambiguous("A")
        assert AMBIGUOUS_DNA.basic_symbols_of("R") == frozenset("AG")
        assert AMBIGUOUS_DNA.basic_symbols_of("A") == frozenset("A")

    @pytest.mark.parametrize("symbols,expected", [
        ("A", "A"),
        ("AG", "R"),
        ("CT", "Y"),
        ("ACG", "V"),
        ("ACGT", "N"),
        ("RY", "N"),
        ("A-", "A"),
        ("--", "-"),
        ("", "-"),
    ])
    def test_dna_consensus_symbol(self, symbols, expected):
        assert AMBIGUOUS_DNA.consensus_symbol(symbols) == expected

    def test_rna_codes(self):
        assert AMBIGUOUS_RNA.consensus_symbol("AU") == "W"

    def test_protein_codes(self):
        assert AMBIGUOUS_PROTEIN.consensus_symbol("DN") == "B"
        assert AMBIGUOUS_PROTEIN.consensus_symbol("LI") == "J"
        assert AMBIGUOUS_PROTEIN.consensus_symbol("AW") == "X"

    def test_foreign_symbol_is_itself(self):
        assert AMBIGUOUS_DNA.consensus_symbol("a") == "a"
        assert AMBIGUOUS_DNA.consensus_symbol("aA") == "N"

    def test_symbols(self):
        assert set("ACGTRYN-") <= set(AMBIGUOUS_DNA.symbols)


class TestSimpleConsensusResolver:
    """Frequency-fraction consensus over one alignment column."""

    @pytest.mark.parametrize("column,threshold,expected", [
        (["A", "A"], 0, "A"),
        (["A", "G"], 0, "R"),
        (["A", "G"], 50, "R"),
        (["A", "A", "G"], 50, "A"),
        (["A", "A", "G"], 0, "R"),
        (["A", "R"], 50, "A"),
        (["A", "R"], 0, "R"),
        (["N", "A"], 0, "N"),
        (["A", "-"], 0, "A"),
        (["-", "-"], 0, "-"),
        (["A", "C", "G", "T"], 30, "N"),
    ])
    def test_dna_columns(self, column, threshold, expected):
        resolver = SimpleConsensusResolver(AMBIGUOUS_DNA)
        assert resolver.consensus(column, threshold) == expected

    def test_default_threshold_from_constructor(self):
        resolver = SimpleConsensusResolver(AMBIGUOUS_DNA, threshold=50)
        assert resolver.consensus(["A", "A", "G"]) == "A"
        assert resolver.consensus(["A", "A", "G"], threshold=0) == "R"

    def test_protein(self):
        resolver = SimpleConsensusResolver(AMBIGUOUS_PROTEIN)
        assert resolver.consensus(["L", "I"]) == "J"
        assert resolver.consensus(["A", "W"]) == "X"
        assert resolver.consensus(["A", "-"]) == "A"

    def test_deterministic(self):
        resolver = SimpleConsensusResolver()
        column = ["C", "T", "Y", "-"]
        assert resolver.consensus(column) == resolver.consensus(column) == "Y"

    def test_empty_column(self):
        with pytest.raises(ValueError):
            SimpleConsensusResolver().consensus([])

    @pytest.mark.parametrize("threshold", [-1, 100.5])
    def test_threshold_range(self, threshold):
        with pytest.raises(ValueError, match="threshold"):
            SimpleConsensusResolver(threshold=threshold)

    def test_is_a_resolver(self):
        assert isinstance(SimpleConsensusResolver(), ConsensusResolver)
        with pytest.raises(TypeError):
            ConsensusResolver()


class TestCustomResolver:
    """Aligners accept any ConsensusResolver."""

    def test_custom_resolver_used(self, diagonal_2_2):
        class LowerCase(ConsensusResolver):
            def consensus(self, symbols, threshold=None):
                return symbols[0].lower()

        aligner = PairwiseAligner(consensus_resolver=LowerCase())
        [result] = aligner.align("ACGT", "ACGT", diagonal_2_2, -8, -1)
        assert result.consensus == "acgt"


class TestDefaultAlphabet:
    """Choice of consensus alphabet when no resolver is given."""

    def test_protein_with_diagonal_matrix(self):
        """K/R is not read as the nucleotide codes K (GT) and R (AG)."""
        [result] = smith_waterman.align_simple("MKWL", "MRWL", DiagonalSimilarityMatrix(5, 1), -8)
        assert result.first == "MKWL"
        assert result.second == "MRWL"
        assert result.consensus == "MXWL"

    def test_dna_with_diagonal_matrix(self, diagonal_2_2):
        [result] = needleman_wunsch.align_simple("ACGT", "AGGT", diagonal_2_2, -8)
        assert result.consensus == "ASGT"

    @pytest.mark.parametrize("alphabet,expected", [
        (AMBIGUOUS_PROTEIN, "XA"),
        (AMBIGUOUS_DNA, "DA"),
    ])
    def test_explicit_alphabet(self, alphabet, expected):
        aligner = PairwiseAligner(alphabet=alphabet)
        [result] = aligner.align_simple("KA", "RA", DiagonalSimilarityMatrix(5, 1), -8)
        assert result.consensus == expected

    def test_matrix_alphabet(self, pam250):
        [result] = align_global("DK", "NR", pam250, -8.0, -2.0)
        assert result.consensus == "BX"
