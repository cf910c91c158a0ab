"""
aligners.py — User-facing pairwise aligners

PairwiseAligner wraps the DP core and the reconstructor.  It holds only
immutable configuration (variant policy, consensus resolver, diagnostic
switches and size limits); every call builds its own AlignInput and
AlignmentData, so a single aligner may be shared between threads.

    align(seq1, seq2, matrix, gap_open_cost, gap_extension_cost)
        affine gap model
    align_simple(seq1, seq2, matrix, gap_cost)
        linear gap model

seq1 is the reference (DP columns) and seq2 the query (DP rows).

The module-level helpers align_local, align_global and align_overlap run
one alignment with a fresh aligner and return the list of optimal
AlignedPair results.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from . import default
from .alphabets import AMBIGUOUS_PROTEIN, Alphabet
from .consensus import ConsensusResolver, SimpleConsensusResolver
from .dp_core import (
    AFFINE_GAPS,
    GLOBAL,
    LINEAR_GAPS,
    LOCAL,
    OVERLAP,
    AlignedPair,
    AlignInput,
    AlignmentPolicy,
    run_alignment,
)
from .errors import InvalidInputError
from .reconstruct import format_score_table, traceback_alignment

logger = logging.getLogger(__name__)

SequenceLike = Union[str, Iterable[str]]


def _as_symbols(sequence: Optional[SequenceLike], label: str) -> str:
    """Coerce a sequence (str or iterable of one-character symbols) to str."""
    if sequence is None:
        raise InvalidInputError(f"The {label} sequence is None")
    if isinstance(sequence, str):
        return sequence
    try:
        symbols = list(sequence)
    except TypeError as exc:
        raise InvalidInputError(f"The {label} sequence must be a string of symbols") from exc
    for k, symbol in enumerate(symbols):
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise InvalidInputError(
                f"The {label} sequence must hold one-character symbols, got {symbol!r} at position {k}"
            )
    return "".join(symbols)


class PairwiseAligner:
    """
    Pairwise aligner for one alignment variant.

    Parameters
    ----------
    policy : AlignmentPolicy, default LOCAL
        LOCAL (Smith-Waterman), GLOBAL (Needleman-Wunsch) or OVERLAP.
    consensus_resolver : ConsensusResolver, optional
        Defaults to a SimpleConsensusResolver over `alphabet`.
    alphabet : Alphabet, optional
        Alphabet of the input sequences, used for the default consensus.
        If omitted, the similarity matrix's alphabet is used; a matrix that
        names none (DiagonalSimilarityMatrix) falls back to default.ALPHABET,
        or to AMBIGUOUS_PROTEIN when the sequences hold symbols outside it.
    include_score_table : bool, default False
        Attach the rendered score/traceback matrix to every result.
    return_data : bool, default False
        Attach the DP tables (AlignmentData) to every result.
    max_traceback_cells, max_score_table_cells : int
        Size limits on rows * cols, see dp_core.run_alignment.
    """

    def __init__(
        self,
        policy: AlignmentPolicy = LOCAL,
        consensus_resolver: Optional[ConsensusResolver] = None,
        alphabet: Optional[Alphabet] = None,
        include_score_table: bool = False,
        return_data: bool = False,
        max_traceback_cells: int = default.MAX_TRACEBACK_CELLS,
        max_score_table_cells: int = default.MAX_SCORE_TABLE_CELLS,
    ):
        self.policy = policy
        self.consensus_resolver = consensus_resolver
        self.alphabet = alphabet
        self.include_score_table = include_score_table
        self.return_data = return_data
        self.max_traceback_cells = max_traceback_cells
        self.max_score_table_cells = max_score_table_cells

    def __repr__(self):
        return f"PairwiseAligner({self.policy.name})"

    @property
    def name(self) -> str:
        return self.policy.name

    @property
    def description(self) -> str:
        return self.policy.description

    def align(
        self,
        sequence1: SequenceLike,
        sequence2: SequenceLike,
        similarity_matrix=default.SIMILARITY_MATRIX,
        gap_open_cost: float = default.GAP_OPEN,
        gap_extension_cost: float = default.GAP_EXTEND,
    ) -> List[AlignedPair]:
        """
        Align two sequences under the affine gap model.

        Returns
        -------
        list of AlignedPair
            One result per optimal start cell, in row-major order.
        """
        return self._align(
            sequence1, sequence2, similarity_matrix,
            gap_open_cost, gap_extension_cost, AFFINE_GAPS,
        )

    def align_simple(
        self,
        sequence1: SequenceLike,
        sequence2: SequenceLike,
        similarity_matrix=default.SIMILARITY_MATRIX,
        gap_cost: float = default.GAP_OPEN,
    ) -> List[AlignedPair]:
        """
        Align two sequences under the linear gap model: every gap column
        costs gap_cost.
        """
        return self._align(
            sequence1, sequence2, similarity_matrix,
            gap_cost, gap_cost, LINEAR_GAPS,
        )

    def _resolver_for(self, config: AlignInput) -> ConsensusResolver:
        if self.consensus_resolver is not None:
            return self.consensus_resolver
        alphabet = self.alphabet or getattr(config.similarity_matrix, "alphabet", None)
        if alphabet is None:
            alphabet = default.ALPHABET
            known = set(alphabet.symbols)
            if any(s.upper() not in known for s in config.reference + config.query):
                alphabet = AMBIGUOUS_PROTEIN
        return SimpleConsensusResolver(alphabet)

    def _align(self, sequence1, sequence2, similarity_matrix, gap_open, gap_extend, gap_model):
        config = AlignInput(
            reference=_as_symbols(sequence1, "first"),
            query=_as_symbols(sequence2, "second"),
            similarity_matrix=similarity_matrix,
            gap_open=gap_open,
            gap_extend=gap_extend,
        )
        data, cells = run_alignment(
            config,
            policy=self.policy,
            gap_model=gap_model,
            include_score_table=self.include_score_table,
            max_traceback_cells=self.max_traceback_cells,
            max_score_table_cells=self.max_score_table_cells,
        )
        resolver = self._resolver_for(config)
        table_text = format_score_table(config, data) if data.score_table is not None else None

        results = [
            traceback_alignment(
                config, data, gap_model, cell, resolver,
                score_table=table_text,
                return_data=self.return_data,
            )
            for cell in cells
        ]
        logger.debug("%s produced %d alignment(s)", self.policy.name, len(results))
        return results


# Ready-made aligners for the three variants
smith_waterman = PairwiseAligner(policy=LOCAL)
needleman_wunsch = PairwiseAligner(policy=GLOBAL)
pairwise_overlap = PairwiseAligner(policy=OVERLAP)


# ---------------------------------------------------------------------------
# Core helper: one alignment with a given policy
# ---------------------------------------------------------------------------

def align_with_policy(
    X: SequenceLike,
    Y: SequenceLike,
    policy: AlignmentPolicy,
    similarity_matrix=default.SIMILARITY_MATRIX,
    gap_open: float = default.GAP_OPEN,
    gap_extend: Optional[float] = None,
    **aligner_options,
) -> List[AlignedPair]:
    """
    Align reference X against query Y with the given policy.

    Parameters
    ----------
    X, Y : str
        Reference (columns) and query (rows).

    policy : AlignmentPolicy
        LOCAL, GLOBAL or OVERLAP.

    similarity_matrix : SimilarityMatrix or DiagonalSimilarityMatrix
        Substitution scores.

    gap_open, gap_extend : float
        Gap costs.  If gap_extend is None the linear gap model is used
        with gap_open per gap column; otherwise the affine model.

    **aligner_options
        Passed on to PairwiseAligner (consensus_resolver,
        include_score_table, return_data, size limits).

    Returns
    -------
    list of AlignedPair
    """
    aligner = PairwiseAligner(policy=policy, **aligner_options)
    if gap_extend is None:
        return aligner.align_simple(X, Y, similarity_matrix, gap_open)
    return aligner.align(X, Y, similarity_matrix, gap_open, gap_extend)


def align_local(X, Y, similarity_matrix=default.SIMILARITY_MATRIX, gap_open=default.GAP_OPEN,
                gap_extend=None, **aligner_options) -> List[AlignedPair]:
    """
    Smith-Waterman local alignment.  All maximal-score alignments are
    returned; an empty alignment of score 0 if nothing scores above 0.
    """
    return align_with_policy(X, Y, LOCAL, similarity_matrix, gap_open, gap_extend, **aligner_options)


def align_global(X, Y, similarity_matrix=default.SIMILARITY_MATRIX, gap_open=default.GAP_OPEN,
                 gap_extend=None, **aligner_options) -> List[AlignedPair]:
    """
    Needleman-Wunsch global alignment: both sequences end to end, leading
    and trailing gaps charged like any other gap.
    """
    return align_with_policy(X, Y, GLOBAL, similarity_matrix, gap_open, gap_extend, **aligner_options)


def align_overlap(X, Y, similarity_matrix=default.SIMILARITY_MATRIX, gap_open=default.GAP_OPEN,
                  gap_extend=None, **aligner_options) -> List[AlignedPair]:
    """
    Overlap alignment: leading and trailing overhangs are free, so the
    best suffix of one sequence is aligned against a prefix of the other
    (or one sequence contained in the other).
    """
    return align_with_policy(X, Y, OVERLAP, similarity_matrix, gap_open, gap_extend, **aligner_options)
