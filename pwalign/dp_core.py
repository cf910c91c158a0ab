"""
dp_core.py — pairwise alignment dynamic programming core

This module implements the score / traceback fill shared by local
(Smith-Waterman), global (Needleman-Wunsch) and overlap alignment:

  - AlignInput      : sequences, similarity matrix and gap costs of one call.
  - AlignmentData   : per-call DP context (traceback, gap-length tables,
                      optional score table).  Never shared between calls.
  - AlignmentPolicy : floor / boundary / start-cell rules of a variant.
  - LinearGapModel, AffineGapModel : the two fill routines.
  - run_alignment   : validate, allocate, fill, return start cells.

Rows index the query (second sequence), columns the reference (first
sequence); row 0 and column 0 stand for the empty prefixes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import (
    AlphabetMismatchError,
    InvalidGapModelError,
    InvalidInputError,
    SequenceTooLargeError,
)
from . import default

logger = logging.getLogger(__name__)

NEG_INF = float("-inf")


class Direction(IntEnum):
    """Traceback codes stored per DP cell."""
    STOP = 0
    DIAGONAL = 1
    UP = 2
    LEFT = 3


GLYPHS = {
    Direction.STOP: "*",
    Direction.DIAGONAL: "\\",
    Direction.UP: "^",
    Direction.LEFT: "<",
}


# ---------------------------------------------------------------------------
# Input, DP state and output containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreCell:
    """A DP cell (row, col) together with its score."""
    row: int
    col: int
    score: float


@dataclass
class AlignInput:
    """
    Configuration for a single alignment run.

    Attributes
    ----------
    reference : str
        First sequence (DP columns).

    query : str
        Second sequence (DP rows).

    similarity_matrix : SimilarityMatrix or DiagonalSimilarityMatrix
        Substitution scores; score(query symbol, reference symbol) is used
        for diagonal moves.

    gap_open, gap_extend : float
        Gap costs (negative).  A gap run of length L costs
        gap_open + (L - 1) * gap_extend.  The linear model uses
        gap_open for every gap column.
    """
    reference: str
    query: str
    similarity_matrix: Any
    gap_open: float
    gap_extend: float

    @property
    def rows(self) -> int:
        return len(self.query) + 1

    @property
    def cols(self) -> int:
        return len(self.reference) + 1

    def pair_score(self, i: int, j: int) -> float:
        """
        Return σ(query_i, reference_j) for DP indices i, j (1-based).
        """
        return float(self.similarity_matrix.score(self.query[i - 1], self.reference[j - 1]))


@dataclass
class AlignmentData:
    """
    DP tables of one alignment call.

    traceback : (rows, cols) array of int8
        Direction code per cell.

    h_gap_length, v_gap_length : (rows, cols) arrays of int, or None
        Affine model only.  Run length of the best horizontal (gap in the
        query) / vertical (gap in the reference) gap ending at each cell.
        A LEFT or UP code at (i, j) stands for the whole run.

    score_table : (rows, cols) array of float, or None
        Full score matrix, kept only when requested as a diagnostic.
    """
    rows: int
    cols: int
    traceback: NDArray[np.int8]
    h_gap_length: Optional[NDArray[np.integer]] = None
    v_gap_length: Optional[NDArray[np.integer]] = None
    score_table: Optional[NDArray[np.floating]] = None


@dataclass(frozen=True)
class AlignedPair:
    """
    One optimal pairwise alignment.

    Attributes
    ----------
    first, second : str
        Aligned reference and query, with gap symbols inserted.

    consensus : str
        One consensus symbol per aligned column.

    score : float
        Alignment score at the start cell.

    first_offset, second_offset : int
        Leading offset of each aligned sequence relative to the other.

    start_offsets, end_offsets : (int, int)
        0-based (reference, query) positions of the first and last aligned
        columns in the original sequences.

    insertions : (int, int)
        Gap columns in (reference, query).

    identical_count, similarity_count : int
        Identical columns, and columns that are identical or score > 0.

    score_table : str or None
        Rendered score/traceback matrix, when requested.

    data : AlignmentData or None
        Full DP tables, when requested.
    """
    first: str
    second: str
    consensus: str
    score: float
    first_offset: int
    second_offset: int
    start_offsets: Tuple[int, int]
    end_offsets: Tuple[int, int]
    insertions: Tuple[int, int]
    identical_count: int
    similarity_count: int
    score_table: Optional[str] = None
    data: Optional[AlignmentData] = field(default=None, repr=False, compare=False)

    @property
    def metadata(self) -> Dict[str, Any]:
        """Alignment statistics keyed by name."""
        meta = {
            "Score": self.score,
            "FirstOffset": self.first_offset,
            "SecondOffset": self.second_offset,
            "Consensus": self.consensus,
            "StartOffsets": self.start_offsets,
            "EndOffsets": self.end_offsets,
            "Insertions": self.insertions,
            "IdenticalCount": self.identical_count,
            "SimilarityCount": self.similarity_count,
        }
        if self.score_table is not None:
            meta["ScoreTable"] = self.score_table
        return meta

    def __str__(self):
        return f"{self.consensus}\n{self.first}\n{self.second}\n"


# ---------------------------------------------------------------------------
# Start-cell trackers
# ---------------------------------------------------------------------------

class MaxCellTracker:
    """
    All cells holding the running maximum score (local alignment).

    Only positive scores are candidates.  When nothing scores above zero
    the single empty alignment at (0, 0) is reported.
    """

    def __init__(self, rows: int, cols: int):
        self.best = 0.0
        self._cells: List[ScoreCell] = []

    def observe(self, i: int, row: List[float]) -> None:
        row_max = max(row[1:])
        if row_max <= 0.0 or row_max < self.best:
            return
        if row_max > self.best:
            self.best = row_max
            self._cells = []
        self._cells.extend(
            ScoreCell(i, j, row_max) for j in range(1, len(row)) if row[j] == row_max
        )

    def cells(self) -> List[ScoreCell]:
        return list(self._cells) or [ScoreCell(0, 0, 0.0)]


class CornerCellTracker:
    """The bottom-right cell only (global alignment)."""

    def __init__(self, rows: int, cols: int):
        self.rows, self.cols = rows, cols
        self._cell: Optional[ScoreCell] = None

    def observe(self, i: int, row: List[float]) -> None:
        if i == self.rows - 1:
            self._cell = ScoreCell(i, self.cols - 1, row[self.cols - 1])

    def cells(self) -> List[ScoreCell]:
        return [self._cell]


class BorderCellTracker:
    """
    Maximal cells of the last column and the last row (overlap alignment),
    in row-major order.
    """

    def __init__(self, rows: int, cols: int):
        self.rows, self.cols = rows, cols
        self._border: List[ScoreCell] = []

    def observe(self, i: int, row: List[float]) -> None:
        if i < self.rows - 1:
            self._border.append(ScoreCell(i, self.cols - 1, row[self.cols - 1]))
        else:
            self._border.extend(ScoreCell(i, j, row[j]) for j in range(1, self.cols))

    def cells(self) -> List[ScoreCell]:
        best = max(c.score for c in self._border)
        return [c for c in self._border if c.score == best]


# ---------------------------------------------------------------------------
# Alignment policies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AlignmentPolicy:
    """
    The three rules that distinguish alignment variants.

    name : str
        Algorithm name.

    floor : float or None
        Cell values <= floor are replaced by floor and coded STOP
        (0 for local alignment).  None disables the floor.

    free_ends : bool
        If True, row 0 and column 0 score 0 and are coded STOP, so leading
        overhangs cost nothing.  If False, they hold leading gap runs
        coded LEFT / UP and traceback ends at (0, 0).

    tracker : callable (rows, cols) -> tracker
        Builds the start-cell tracker fed with each filled row.
    """
    name: str
    description: str
    floor: Optional[float]
    free_ends: bool
    tracker: Callable[[int, int], Any]


LOCAL = AlignmentPolicy(
    name="Smith-Waterman",
    description="Pairwise local alignment",
    floor=0.0,
    free_ends=True,
    tracker=MaxCellTracker,
)

GLOBAL = AlignmentPolicy(
    name="Needleman-Wunsch",
    description="Pairwise global alignment",
    floor=None,
    free_ends=False,
    tracker=CornerCellTracker,
)

OVERLAP = AlignmentPolicy(
    name="Pairwise-Overlap",
    description="Pairwise overlap alignment",
    floor=None,
    free_ends=True,
    tracker=BorderCellTracker,
)


# ---------------------------------------------------------------------------
# Per-cell choice
# ---------------------------------------------------------------------------

def best_direction(diag: float, up: float, left: float) -> Tuple[float, Direction]:
    """
    Best of the three predecessor scores.

    Ties prefer DIAGONAL over LEFT over UP.
    """
    if diag >= left and diag >= up:
        return diag, Direction.DIAGONAL
    if left >= up:
        return left, Direction.LEFT
    return up, Direction.UP


# ---------------------------------------------------------------------------
# Validation and allocation
# ---------------------------------------------------------------------------

def validate_input(config: AlignInput) -> None:
    """
    Check sequences, symbol coverage and gap costs.

    Raises
    ------
    InvalidInputError
        Empty sequence or missing similarity matrix.
    AlphabetMismatchError
        A symbol the similarity matrix cannot score.
    InvalidGapModelError
        gap_open >= 0, gap_extend > 0, or gap_open > gap_extend.
    """
    if config.similarity_matrix is None:
        raise InvalidInputError("A similarity matrix is required")
    for label, seq in (("reference", config.reference), ("query", config.query)):
        if not seq:
            raise InvalidInputError(f"The {label} sequence is empty")
        matrix = config.similarity_matrix
        if not matrix.validate_sequence(seq):
            bad = sorted({s for s in seq if not matrix.is_symbol_supported(s)})
            raise AlphabetMismatchError(
                f"The {label} sequence contains symbols not in the similarity matrix: {bad}"
            )
    gs, ge = config.gap_open, config.gap_extend
    if gs >= 0:
        raise InvalidGapModelError(f"Gap open cost must be less than 0, got {gs}")
    if ge > 0:
        raise InvalidGapModelError(f"Gap extension cost must not be positive, got {ge}")
    if gs > ge:
        raise InvalidGapModelError(
            f"Gap open cost ({gs}) is greater than gap extension cost ({ge})"
        )


def size_too_large_message(rows: int, cols: int, limit: int, tables: str) -> str:
    return (
        f"Sequences too large for pairwise alignment: the {tables} would need "
        f"{rows} x {cols} cells but the maximum allowed is {limit}. "
        "If your sequences are large, a seed-and-extend algorithm (like NUCmer) "
        "is likely more appropriate as it will use far less memory."
    )


# ---------------------------------------------------------------------------
# Gap models
# ---------------------------------------------------------------------------

class LinearGapModel:
    """Every gap column costs gap_open.  Scores kept for two rows only."""

    name = "linear"
    affine = False

    def allocate(self, config: AlignInput, keep_scores: bool) -> AlignmentData:
        rows, cols = config.rows, config.cols
        return AlignmentData(
            rows=rows,
            cols=cols,
            traceback=np.zeros((rows, cols), dtype=np.int8),
            score_table=np.zeros((rows, cols), dtype=float) if keep_scores else None,
        )

    def gap_run(self, data: AlignmentData, i: int, j: int, direction: Direction) -> int:
        return 1

    def fill(self, config: AlignInput, policy: AlignmentPolicy, data: AlignmentData, tracker) -> None:
        rows, cols = data.rows, data.cols
        gap = config.gap_open
        floor = policy.floor
        tb = data.traceback
        matrix = config.similarity_matrix
        reference = config.reference

        prev, first_col = init_boundaries(config, policy, data, gap)

        for i in range(1, rows):
            row = [first_col[i]] + [0.0] * (cols - 1)
            prof = matrix.profile(config.query[i - 1], reference)
            tb_row = tb[i]
            for j in range(1, cols):
                # M[i,j] = MAX(M[i-1,j-1] + S[i,j], M[i,j-1] + gap, M[i-1,j] + gap)
                score, direction = best_direction(
                    prev[j - 1] + prof[j - 1],
                    prev[j] + gap,
                    row[j - 1] + gap,
                )
                if floor is not None and score <= floor:
                    score, direction = floor, Direction.STOP
                row[j] = score
                tb_row[j] = direction

            tracker.observe(i, row)
            if data.score_table is not None:
                data.score_table[i] = row
            prev = row


class AffineGapModel:
    """
    Gotoh affine gaps: opening a gap costs gap_open, each further column
    gap_extend.  Keeps the running horizontal/vertical gap scores for two
    rows, and the full gap run-length tables for traceback.
    """

    name = "affine"
    affine = True

    def allocate(self, config: AlignInput, keep_scores: bool) -> AlignmentData:
        rows, cols = config.rows, config.cols
        return AlignmentData(
            rows=rows,
            cols=cols,
            traceback=np.zeros((rows, cols), dtype=np.int8),
            h_gap_length=np.zeros((rows, cols), dtype=int),
            v_gap_length=np.zeros((rows, cols), dtype=int),
            score_table=np.zeros((rows, cols), dtype=float) if keep_scores else None,
        )

    def gap_run(self, data: AlignmentData, i: int, j: int, direction: Direction) -> int:
        if direction == Direction.LEFT:
            return int(data.h_gap_length[i, j])
        return int(data.v_gap_length[i, j])

    def fill(self, config: AlignInput, policy: AlignmentPolicy, data: AlignmentData, tracker) -> None:
        rows, cols = data.rows, data.cols
        gs, ge = config.gap_open, config.gap_extend
        floor = policy.floor
        tb, h_len, v_len = data.traceback, data.h_gap_length, data.v_gap_length
        matrix = config.similarity_matrix
        reference = config.reference

        prev, first_col = init_boundaries(config, policy, data, ge)
        # Vertical gap scores of the previous row; no gap can end in row 0.
        prev_v = [NEG_INF] * cols

        for i in range(1, rows):
            row = [first_col[i]] + [0.0] * (cols - 1)
            v_row = [NEG_INF] * cols
            h = NEG_INF  # no horizontal gap ends in column 0
            prof = matrix.profile(config.query[i - 1], reference)
            tb_row, h_row, v_len_row, v_len_prev = tb[i], h_len[i], v_len[i], v_len[i - 1]
            for j in range(1, cols):
                # Gap in the reference (vertical)
                v_open = prev[j] + gs
                v_extend = prev_v[j] + ge
                if v_open > v_extend:
                    v = v_open
                    v_len_row[j] = 1
                else:
                    v = v_extend
                    v_len_row[j] = v_len_prev[j] + 1
                v_row[j] = v

                # Gap in the query (horizontal)
                h_open = row[j - 1] + gs
                h_extend = h + ge
                if h_open > h_extend:
                    h = h_open
                    h_row[j] = 1
                else:
                    h = h_extend
                    h_row[j] = h_row[j - 1] + 1

                score, direction = best_direction(prev[j - 1] + prof[j - 1], v, h)
                if floor is not None and score <= floor:
                    score, direction = floor, Direction.STOP
                row[j] = score
                tb_row[j] = direction

            tracker.observe(i, row)
            if data.score_table is not None:
                data.score_table[i] = row
            prev, prev_v = row, v_row


LINEAR_GAPS = LinearGapModel()
AFFINE_GAPS = AffineGapModel()


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

def init_boundaries(
    config: AlignInput,
    policy: AlignmentPolicy,
    data: AlignmentData,
    gap_extend: float,
) -> Tuple[List[float], List[float]]:
    """
    Initialize row 0 and column 0.

    With free ends both hold 0 and STOP (the zero-initialized traceback).
    Otherwise they hold leading gap runs

        S(0, j) = g_o + (j - 1) g_e,   S(i, 0) = g_o + (i - 1) g_e

    coded LEFT / UP, where g_e is the extension cost of the gap model in
    use (g_o itself for the linear model).  Under the affine model the
    whole run is recorded in the gap-length tables so traceback crosses it
    in one step.

    Returns
    -------
    first_row, first_col : list of float
        S(0, j) for all j and S(i, 0) for all i.
    """
    rows, cols = data.rows, data.cols
    first_row = [0.0] * cols
    first_col = [0.0] * rows
    if policy.free_ends:
        return first_row, first_col

    gs, ge = config.gap_open, gap_extend
    for j in range(1, cols):
        first_row[j] = gs + (j - 1) * ge
    for i in range(1, rows):
        first_col[i] = gs + (i - 1) * ge

    data.traceback[0, 1:] = Direction.LEFT
    data.traceback[1:, 0] = Direction.UP
    if data.h_gap_length is not None:
        data.h_gap_length[0, :] = np.arange(cols)
        data.v_gap_length[:, 0] = np.arange(rows)
    if data.score_table is not None:
        data.score_table[0, :] = first_row
        data.score_table[:, 0] = first_col
    return first_row, first_col


# ---------------------------------------------------------------------------
# Top-level driver
# ---------------------------------------------------------------------------

def run_alignment(
    config: AlignInput,
    policy: AlignmentPolicy = LOCAL,
    gap_model=AFFINE_GAPS,
    include_score_table: bool = False,
    max_traceback_cells: int = default.MAX_TRACEBACK_CELLS,
    max_score_table_cells: int = default.MAX_SCORE_TABLE_CELLS,
) -> Tuple[AlignmentData, List[ScoreCell]]:
    """
    Validate the input, fill the DP tables and collect the start cells.

    Parameters
    ----------
    config : AlignInput
        Sequences, similarity matrix and gap costs.
    policy : AlignmentPolicy, default LOCAL
        Alignment variant.
    gap_model : LinearGapModel or AffineGapModel
        Gap cost model, chosen once for the whole fill.
    include_score_table : bool, default False
        Keep the full score matrix for diagnostics.  Silently dropped
        (with a logged warning) above max_score_table_cells.
    max_traceback_cells, max_score_table_cells : int
        Size limits on rows * cols.

    Returns
    -------
    data : AlignmentData
        Filled tables for traceback.
    cells : list of ScoreCell
        Start cells of all optimal alignments.

    Raises
    ------
    InvalidInputError, AlphabetMismatchError, InvalidGapModelError,
    SequenceTooLargeError
        Before any table is allocated.
    """
    validate_input(config)
    rows, cols = config.rows, config.cols
    n_cells = rows * cols

    if n_cells > max_traceback_cells:
        tables = "traceback and gap-length tables" if gap_model.affine else "traceback table"
        raise SequenceTooLargeError(
            size_too_large_message(rows, cols, max_traceback_cells, tables)
        )
    if include_score_table and n_cells > max_score_table_cells:
        logger.warning(
            "Score table of %d x %d cells exceeds the limit of %d; not capturing it",
            rows, cols, max_score_table_cells,
        )
        include_score_table = False

    logger.debug(
        "%s alignment, %s gaps, %d x %d cells (gap_open=%g, gap_extend=%g)",
        policy.name, gap_model.name, rows, cols, config.gap_open, config.gap_extend,
    )

    data = gap_model.allocate(config, include_score_table)
    tracker = policy.tracker(rows, cols)
    gap_model.fill(config, policy, data, tracker)
    cells = tracker.cells()

    logger.debug("%d optimal cell(s) with score %g", len(cells), cells[0].score)
    return data, cells
