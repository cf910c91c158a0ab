"""
validation.py — independent baselines and regression helpers for pwalign

This module provides an independent full-matrix implementation of
Gotoh local and global alignment scores (sw_score_naive, nw_score_naive),
an alignment rescoring helper, and small helpers for randomized tests.

The goals are:

  1. Verify that the optimal scores reported by the aligners match a
     plain three-layer Gotoh recurrence on (X, Y).

  2. Verify that traceback inverts the fill: rescoring the emitted
     alignment column by column gives back the reported score.

This module is independent of dp_core: the naive scorers keep all three
score layers for the whole matrix so that bugs in the rolling-row fill
and the run-length traceback cannot mask each other during testing.
"""

from typing import Optional, Tuple

import numpy as np

from . import default


def _gotoh_layers(X: str, Y: str, similarity_matrix, gap_open: float, gap_extend: float, local: bool):
    """
    Fill the three Gotoh layers H (best), E (gap in Y, horizontal) and
    F (gap in X, vertical).  Rows index Y, columns index X.
    """
    n, m = len(Y), len(X)
    gs, ge = gap_open, gap_extend

    H = np.full((n + 1, m + 1), -np.inf, dtype=float)
    E = np.full((n + 1, m + 1), -np.inf, dtype=float)
    F = np.full((n + 1, m + 1), -np.inf, dtype=float)

    H[0, 0] = 0.0
    for j in range(1, m + 1):
        H[0, j] = 0.0 if local else gs + (j - 1) * ge
    for i in range(1, n + 1):
        H[i, 0] = 0.0 if local else gs + (i - 1) * ge

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            E[i, j] = max(H[i, j - 1] + gs, E[i, j - 1] + ge)
            F[i, j] = max(H[i - 1, j] + gs, F[i - 1, j] + ge)
            diag = H[i - 1, j - 1] + similarity_matrix.score(Y[i - 1], X[j - 1])
            best = max(diag, E[i, j], F[i, j])
            H[i, j] = max(best, 0.0) if local else best
    return H, E, F


def sw_score_naive(
    X: str,
    Y: str,
    similarity_matrix=default.SIMILARITY_MATRIX,
    gap_open: float = default.GAP_OPEN,
    gap_extend: Optional[float] = None,
) -> float:
    """
    Smith-Waterman/Gotoh local score of reference X and query Y.
    gap_extend=None means a linear gap cost of gap_open per column.
    """
    if gap_extend is None:
        gap_extend = gap_open
    H, _, _ = _gotoh_layers(X, Y, similarity_matrix, gap_open, gap_extend, local=True)
    return float(H.max())


def nw_score_naive(
    X: str,
    Y: str,
    similarity_matrix=default.SIMILARITY_MATRIX,
    gap_open: float = default.GAP_OPEN,
    gap_extend: Optional[float] = None,
) -> float:
    """
    Needleman-Wunsch/Gotoh global score NWG(X, Y).
    """
    if gap_extend is None:
        gap_extend = gap_open
    H, _, _ = _gotoh_layers(X, Y, similarity_matrix, gap_open, gap_extend, local=False)
    return float(H[len(Y), len(X)])


# ---------------------------------------------------------------------------
# Alignment rescoring and validity
# ---------------------------------------------------------------------------

def rescore_alignment(
    first: str,
    second: str,
    similarity_matrix,
    gap_open: float,
    gap_extend: Optional[float] = None,
    gap: str = default.GAP,
) -> float:
    """
    Score an alignment column by column.

    Each maximal run of gaps in one row costs gap_open + (L - 1) * gap_extend;
    with gap_extend=None every gap column costs gap_open.
    """
    if gap_extend is None:
        gap_extend = gap_open
    score = 0.0
    in_first_gap = False
    in_second_gap = False
    for a, b in zip(first, second):
        if a == gap:
            score += gap_extend if in_first_gap else gap_open
            in_first_gap, in_second_gap = True, False
        elif b == gap:
            score += gap_extend if in_second_gap else gap_open
            in_first_gap, in_second_gap = False, True
        else:
            score += similarity_matrix.score(b, a)
            in_first_gap = in_second_gap = False
    return score


def check_alignment_validity(
    result,
    X: str,
    Y: str,
    similarity_matrix,
    gap_open: float,
    gap_extend: Optional[float] = None,
    gap: str = default.GAP,
) -> Tuple[bool, str]:
    """
    Check that an AlignedPair is a consistent alignment of X and Y.

    Verifies that first and second:
    - Have the same length
    - Don't have simultaneous gaps at any position
    - Are, without gaps, the substrings of X and Y given by
      start_offsets / end_offsets
    - Rescore to the reported score under the given scoring parameters.

    Returns
    -------
    valid : bool
        True if the alignment passes all checks.
    message : str
        Description of what was checked or what failed.
    """
    first, second = result.first, result.second
    if len(first) != len(second):
        return False, f"Length mismatch: first={len(first)}, second={len(second)}"

    for k, (a, b) in enumerate(zip(first, second)):
        if a == gap and b == gap:
            return False, f"Double gap found in alignment at position {k}"

    (x_start, y_start), (x_end, y_end) = result.start_offsets, result.end_offsets
    if first.replace(gap, "") != X[x_start:x_end + 1]:
        return False, f"First row does not spell X[{x_start}:{x_end + 1}]"
    if second.replace(gap, "") != Y[y_start:y_end + 1]:
        return False, f"Second row does not spell Y[{y_start}:{y_end + 1}]"

    computed = rescore_alignment(first, second, similarity_matrix, gap_open, gap_extend, gap)
    if not np.isclose(computed, result.score):
        return False, f"Score mismatch: computed {computed}, reported {result.score}"

    return True, f"Valid alignment of length {len(first)}"


# ---------------------------------------------------------------------------
# Random sequence helpers for testing
# ---------------------------------------------------------------------------

def random_sequence(length: int, rng: np.random.Generator, symbols: str = "ACGT") -> str:
    """
    Generate a random string of a given length over `symbols`.

    Parameters
    ----------
    length : int
        Length of the string to generate.
    rng : np.random.Generator
        NumPy random generator instance.
    symbols : str
        Symbols to draw from (default: DNA bases).
    """
    return "".join(rng.choice(list(symbols), size=length))


def mutate_sequence(
    seq: str,
    rng,
    sub_rate: float = 0.1,
    indel_rate: float = 0.05,
    symbols: str = "ACGT",
) -> str:
    """
    Apply random substitutions, insertions and deletions to a sequence.

    Parameters
    ----------
    seq : str
        Input sequence.
    rng : numpy random generator
        Random number generator (e.g., np.random.default_rng(seed)).
    sub_rate : float
        Per-symbol substitution probability (default 0.1).
    indel_rate : float
        Per-symbol insertion/deletion probability (default 0.05).
    symbols : str
        Symbols used for substitutions and insertions.
    """
    result = []
    for symbol in seq:
        # Deletion
        if rng.random() < indel_rate:
            continue

        # Substitution
        if rng.random() < sub_rate:
            others = [s for s in symbols if s != symbol]
            symbol = str(rng.choice(others))

        result.append(symbol)

        # Insertion (after current symbol)
        if rng.random() < indel_rate:
            result.append(str(rng.choice(list(symbols))))

    return "".join(result)
