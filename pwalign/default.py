"""
default.py — Default parameters for pwalign

Provides the match/mismatch scoring scheme, gap costs, gap symbol,
consensus threshold and DP size limits used throughout examples and tests.
"""

import numpy as np

from .alphabets import AMBIGUOUS_DNA
from .matrices import DiagonalSimilarityMatrix

# Gap symbol inserted into aligned sequences
GAP = "-"

# Diagonal scoring: +2 for match, -2 for mismatch
MATCH_SCORE = 2.0
MISMATCH_SCORE = -2.0
SIMILARITY_MATRIX = DiagonalSimilarityMatrix(MATCH_SCORE, MISMATCH_SCORE)

## Affine gap penalties
GAP_OPEN = -8.0
GAP_EXTEND = -1.0

# Alphabet used for consensus when the similarity matrix does not name one
ALPHABET = AMBIGUOUS_DNA

# A symbol enters the consensus only if its frequency (percent) exceeds this
CONSENSUS_THRESHOLD = 0.0

## Size limits (number of DP cells, rows * cols)
# The traceback table is always kept whole, so exceeding this is fatal.
MAX_TRACEBACK_CELLS = int(np.iinfo(np.int32).max)
# The optional score table is dropped (with a warning) above this size.
MAX_SCORE_TABLE_CELLS = 10_000_000


def align_params(*, affine: bool = True) -> dict:
    """
    Bundle default scoring parameters into a dict for easy unpacking.

    Parameters:
        affine (bool): If False, drop gap_extend so the linear gap model is used.

    Usage:
        result = align_local(X, Y, **align_params())"""
    params = {
        "similarity_matrix": SIMILARITY_MATRIX,
        "gap_open": GAP_OPEN,
    }
    if affine:
        params["gap_extend"] = GAP_EXTEND
    return params


def get_default_scoring():
    """
    Convenience helper returning the default scoring components:

        similarity_matrix, gap_open, gap_extend
    """
    return (
        SIMILARITY_MATRIX,
        GAP_OPEN,
        GAP_EXTEND,
    )
