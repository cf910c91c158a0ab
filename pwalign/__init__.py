"""
pwalign: pairwise sequence alignment (Smith-Waterman, Needleman-Wunsch, overlap).
"""

# =============================================================================
# CORE ALIGNMENT
# =============================================================================

from .aligners import (
    PairwiseAligner,
    smith_waterman,
    needleman_wunsch,
    pairwise_overlap,
    align_with_policy,
    align_local,
    align_global,
    align_overlap,
)

from .dp_core import (
    AlignedPair,
    AlignInput,
    AlignmentData,
    AlignmentPolicy,
    Direction,
    ScoreCell,
    LOCAL,
    GLOBAL,
    OVERLAP,
    LinearGapModel,
    AffineGapModel,
    LINEAR_GAPS,
    AFFINE_GAPS,
    run_alignment,
)

from .reconstruct import traceback_alignment, format_score_table


# =============================================================================
# SCORING, ALPHABETS AND CONSENSUS
# =============================================================================

from .matrices import (
    SimilarityMatrix,
    DiagonalSimilarityMatrix,
    StandardSimilarityMatrix,
)

from .alphabets import (
    Alphabet,
    AMBIGUOUS_DNA,
    AMBIGUOUS_RNA,
    AMBIGUOUS_PROTEIN,
)

from .consensus import ConsensusResolver, SimpleConsensusResolver


# =============================================================================
# ERRORS
# =============================================================================

from .errors import (
    AlignmentError,
    InvalidInputError,
    AlphabetMismatchError,
    InvalidGapModelError,
    SequenceTooLargeError,
)


# =============================================================================
# VALIDATION AND TESTING
# =============================================================================

from .default import align_params, get_default_scoring

from .validation import (
    sw_score_naive,
    nw_score_naive,
    rescore_alignment,
    check_alignment_validity,
    random_sequence,
    mutate_sequence,
)


__all__ = [
    # Core alignment
    "PairwiseAligner",
    "smith_waterman",
    "needleman_wunsch",
    "pairwise_overlap",
    "align_with_policy",
    "align_local",
    "align_global",
    "align_overlap",
    "AlignedPair",
    "AlignInput",
    "AlignmentData",
    "AlignmentPolicy",
    "Direction",
    "ScoreCell",
    "LOCAL",
    "GLOBAL",
    "OVERLAP",
    "LinearGapModel",
    "AffineGapModel",
    "LINEAR_GAPS",
    "AFFINE_GAPS",
    "run_alignment",
    "traceback_alignment",
    "format_score_table",
    # Scoring, alphabets and consensus
    "SimilarityMatrix",
    "DiagonalSimilarityMatrix",
    "StandardSimilarityMatrix",
    "Alphabet",
    "AMBIGUOUS_DNA",
    "AMBIGUOUS_RNA",
    "AMBIGUOUS_PROTEIN",
    "ConsensusResolver",
    "SimpleConsensusResolver",
    # Errors
    "AlignmentError",
    "InvalidInputError",
    "AlphabetMismatchError",
    "InvalidGapModelError",
    "SequenceTooLargeError",
    # Validation
    "align_params",
    "get_default_scoring",
    "sw_score_naive",
    "nw_score_naive",
    "rescore_alignment",
    "check_alignment_validity",
    "random_sequence",
    "mutate_sequence",
]
