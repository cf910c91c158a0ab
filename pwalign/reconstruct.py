"""
reconstruct.py — Traceback from an optimal cell to an AlignedPair

The walk inverts the forward fill: starting from a ScoreCell it follows
the direction codes back to a STOP cell, emitting aligned symbol pairs
back to front.  Under the affine model one LEFT/UP code stands for a
whole gap run whose length is read from the gap-length tables.
"""

from __future__ import annotations

from typing import List, Optional

from . import default
from .consensus import ConsensusResolver
from .dp_core import (
    GLYPHS,
    AlignedPair,
    AlignInput,
    AlignmentData,
    Direction,
    ScoreCell,
)


def traceback_alignment(
    config: AlignInput,
    data: AlignmentData,
    gap_model,
    start: ScoreCell,
    resolver: ConsensusResolver,
    score_table: Optional[str] = None,
    return_data: bool = False,
    gap: str = default.GAP,
) -> AlignedPair:
    """
    Recover the alignment ending at `start`.

    Parameters
    ----------
    config : AlignInput
        The input the tables were filled from.
    data : AlignmentData
        Filled traceback (and gap-length) tables.
    gap_model : LinearGapModel or AffineGapModel
        The model used for the fill; supplies gap run lengths.
    start : ScoreCell
        Cell to start the walk from.
    resolver : ConsensusResolver
        Called once per aligned column.
    score_table : str, optional
        Rendered score table to attach to the result.
    return_data : bool, default False
        Attach `data` to the result.
    gap : str
        Gap symbol.

    Returns
    -------
    AlignedPair
    """
    reference, query = config.reference, config.query
    matrix = config.similarity_matrix
    tb = data.traceback

    first: List[str] = []
    second: List[str] = []
    i, j = start.row, start.col
    reference_gaps = query_gaps = identical = similar = 0

    while tb[i, j] != Direction.STOP:
        direction = tb[i, j]
        if direction == Direction.DIAGONAL:
            r, q = reference[j - 1], query[i - 1]
            first.append(r)
            second.append(q)
            i -= 1
            j -= 1
            if r == q and r != gap:
                identical += 1
                similar += 1
            elif matrix.score(q, r) > 0:
                similar += 1
        elif direction == Direction.LEFT:
            run = gap_model.gap_run(data, i, j, Direction.LEFT)
            for _ in range(run):
                j -= 1
                first.append(reference[j])
                second.append(gap)
            query_gaps += run
        else:  # Direction.UP
            run = gap_model.gap_run(data, i, j, Direction.UP)
            for _ in range(run):
                i -= 1
                first.append(gap)
                second.append(query[i])
            reference_gaps += run

    first.reverse()
    second.reverse()
    consensus = "".join(resolver.consensus([a, b]) for a, b in zip(first, second))

    # Offset of the alignment start in one sequence relative to the other.
    if i >= j:
        first_offset, second_offset = i - j, 0
    else:
        first_offset, second_offset = 0, j - i

    return AlignedPair(
        first="".join(first),
        second="".join(second),
        consensus=consensus,
        score=float(start.score),
        first_offset=first_offset,
        second_offset=second_offset,
        start_offsets=(j, i),
        end_offsets=(start.col - 1, start.row - 1),
        insertions=(reference_gaps, query_gaps),
        identical_count=identical,
        similarity_count=similar,
        score_table=score_table,
        data=data if return_data else None,
    )


def format_score_table(config: AlignInput, data: AlignmentData) -> str:
    """
    Render the score and traceback matrices as text.

    Columns are labeled with reference symbols, rows with query symbols;
    each cell shows a direction glyph (\\ diagonal, < left, ^ up, * stop)
    followed by its score.  Returns "" if no score table was captured.
    """
    if data.score_table is None:
        return ""

    def cell(i, j):
        value = float(data.score_table[i, j])
        text = str(int(value)) if value.is_integer() else f"{value:g}"
        return GLYPHS[Direction(int(data.traceback[i, j]))] + text

    cells = [[cell(i, j) for j in range(data.cols)] for i in range(data.rows)]
    width = max(len(c) for row in cells for c in row)

    col_labels = " " + config.reference
    row_labels = " " + config.query
    lines = ["  " + " ".join(label.rjust(width) for label in col_labels)]
    for i, row in enumerate(cells):
        lines.append(row_labels[i] + " " + " ".join(c.rjust(width) for c in row))
    return "\n".join(lines) + "\n"
