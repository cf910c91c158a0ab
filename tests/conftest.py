"""
conftest.py — Shared pytest fixtures for the pwalign test suite

Provides common scoring parameters, similarity matrices and random
number generators used across all test modules.
"""

import pytest
import numpy as np

from pwalign.matrices import DiagonalSimilarityMatrix, SimilarityMatrix


# ---------------------------------------------------------------------------
# Default scoring fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_bases() -> str:
    """Default DNA alphabet."""
    return "ACGT"


@pytest.fixture
def similarity_matrix() -> DiagonalSimilarityMatrix:
    """Simple match/mismatch matrix: +5 on diagonal, -5 off-diagonal."""
    return DiagonalSimilarityMatrix(5.0, -5.0)


@pytest.fixture
def diagonal_2_2() -> DiagonalSimilarityMatrix:
    """Match +2 / mismatch -2, the package default."""
    return DiagonalSimilarityMatrix(2.0, -2.0)


@pytest.fixture
def pam250() -> SimilarityMatrix:
    return SimilarityMatrix.standard("PAM250")


@pytest.fixture
def gap_open() -> float:
    """Gap opening penalty."""
    return -20.0


@pytest.fixture
def gap_extend() -> float:
    """Gap extension penalty."""
    return -1.0


@pytest.fixture
def scoring_params(similarity_matrix, gap_open, gap_extend):
    """Bundle all scoring parameters into a dict for easy unpacking."""
    return {
        "similarity_matrix": similarity_matrix,
        "gap_open": gap_open,
        "gap_extend": gap_extend,
    }


@pytest.fixture
def linear_params(similarity_matrix):
    """Linear gap model: gap_extend=None, every gap column costs -6."""
    return {
        "similarity_matrix": similarity_matrix,
        "gap_open": -6.0,
        "gap_extend": None,
    }


# ---------------------------------------------------------------------------
# Random number generator fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rng():
    """Seeded random generator for reproducible tests."""
    return np.random.default_rng(888)


@pytest.fixture
def rng_alt():
    """Alternative seed for diversity in randomized tests."""
    return np.random.default_rng(123)


# ---------------------------------------------------------------------------
# Sequence generation helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def random_dna_factory(default_bases):
    """Factory fixture returning a function to generate random DNA strings."""
    def _random_dna(length: int, rng: np.random.Generator) -> str:
        return "".join(rng.choice(list(default_bases), size=length))
    return _random_dna
