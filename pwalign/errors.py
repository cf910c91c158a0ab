"""
errors.py — Input validation errors raised by the alignment engine

Every error derives from ValueError, so callers that already guard
alignment calls with ``except ValueError`` keep working.  All of them
are raised before any DP table is allocated.
"""


class AlignmentError(ValueError):
    """Base class for alignment input and configuration errors."""


class InvalidInputError(AlignmentError):
    """A sequence (or the similarity matrix) is missing or empty."""


class AlphabetMismatchError(AlignmentError):
    """A sequence contains a symbol the similarity matrix cannot score."""


class InvalidGapModelError(AlignmentError):
    """Gap costs are inconsistent, e.g. gap_open > gap_extend."""


class SequenceTooLargeError(AlignmentError):
    """The (rows x cols) DP tables exceed the configured size limit."""
