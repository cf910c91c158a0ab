"""
test_errors.py — Input validation of the alignment entry points
"""

import pytest

from pwalign.aligners import PairwiseAligner, align_local, smith_waterman
from pwalign.errors import (
    AlignmentError,
    AlphabetMismatchError,
    InvalidGapModelError,
    InvalidInputError,
    SequenceTooLargeError,
)
from pwalign.matrices import SimilarityMatrix


class TestInvalidInput:

    @pytest.mark.parametrize("X,Y", [("", "ACGT"), ("ACGT", ""), ("", "")])
    def test_empty_sequence(self, X, Y, diagonal_2_2):
        with pytest.raises(InvalidInputError, match="empty"):
            smith_waterman.align(X, Y, diagonal_2_2, -8, -1)

    @pytest.mark.parametrize("X,Y", [(None, "ACGT"), ("ACGT", None)])
    def test_none_sequence(self, X, Y, diagonal_2_2):
        with pytest.raises(InvalidInputError):
            smith_waterman.align_simple(X, Y, diagonal_2_2, -8)

    def test_not_a_sequence(self, diagonal_2_2):
        with pytest.raises(InvalidInputError):
            smith_waterman.align(12345, "ACGT", diagonal_2_2, -8, -1)

    @pytest.mark.parametrize("sequence", [["AC", "G"], ["A", "", "G"], ["A", 7, "G"]])
    def test_symbols_must_be_single_characters(self, sequence, diagonal_2_2):
        with pytest.raises(InvalidInputError, match="one-character"):
            smith_waterman.align(sequence, "ACGT", diagonal_2_2, -8, -1)

    def test_missing_matrix(self):
        with pytest.raises(InvalidInputError, match="similarity matrix"):
            smith_waterman.align("ACGT", "ACGT", None, -8, -1)


class TestAlphabetMismatch:

    def test_symbol_not_in_table(self):
        dna = SimilarityMatrix.standard("AmbiguousDna")
        with pytest.raises(AlphabetMismatchError, match="Z"):
            smith_waterman.align("ACGZ", "ACGT", dna, -8, -1)

    def test_query_symbol_not_in_table(self, pam250):
        with pytest.raises(AlphabetMismatchError, match="query"):
            align_local("ACDE", "AC1E", pam250, -8.0, -2.0)

    def test_diagonal_rejects_digits(self, diagonal_2_2):
        with pytest.raises(AlphabetMismatchError):
            smith_waterman.align("AC9T", "ACGT", diagonal_2_2, -8, -1)


class TestInvalidGapModel:

    @pytest.mark.parametrize("gap_open,gap_extend", [
        (0.0, -1.0),       # open must be negative
        (2.0, -1.0),
        (-8.0, 1.0),       # extension must not be positive
        (-1.0, -8.0),      # open more expensive than extension
    ])
    def test_affine(self, gap_open, gap_extend, diagonal_2_2):
        with pytest.raises(InvalidGapModelError):
            smith_waterman.align("ACGT", "ACGT", diagonal_2_2, gap_open, gap_extend)

    def test_linear_zero_cost(self, diagonal_2_2):
        with pytest.raises(InvalidGapModelError):
            smith_waterman.align_simple("ACGT", "ACGT", diagonal_2_2, 0)

    def test_zero_extension_allowed(self, diagonal_2_2):
        [result] = smith_waterman.align("ACGT", "ACGT", diagonal_2_2, -8, 0)
        assert result.score == 8


class TestSequenceTooLarge:

    def test_raised_before_fill(self, diagonal_2_2):
        aligner = PairwiseAligner(max_traceback_cells=10)
        with pytest.raises(SequenceTooLargeError, match="NUCmer"):
            aligner.align("AAAA", "AAAA", diagonal_2_2, -8, -1)

    def test_linear_message(self, diagonal_2_2):
        aligner = PairwiseAligner(max_traceback_cells=10)
        with pytest.raises(SequenceTooLargeError) as excinfo:
            aligner.align_simple("AAAA", "AAAA", diagonal_2_2, -8)
        assert "gap-length" not in str(excinfo.value)
        assert "5 x 5" in str(excinfo.value)


class TestHierarchy:

    @pytest.mark.parametrize("cls", [
        InvalidInputError, AlphabetMismatchError, InvalidGapModelError, SequenceTooLargeError,
    ])
    def test_subclasses(self, cls):
        assert issubclass(cls, AlignmentError)
        assert issubclass(cls, ValueError)

    def test_caught_as_value_error(self, diagonal_2_2):
        with pytest.raises(ValueError):
            smith_waterman.align("", "A", diagonal_2_2, -8, -1)
