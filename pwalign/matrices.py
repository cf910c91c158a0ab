"""
matrices.py — Similarity matrices consumed by the alignment engine

Two families share one interface:

  - SimilarityMatrix         : full (K, K) substitution table over a symbol
                               string, O(1) lookup through a symbol -> index map.
  - DiagonalSimilarityMatrix : constant match / mismatch scores, no table.

Both expose

    score(a, b)               -> float
    is_symbol_supported(s)    -> bool
    validate_sequence(seq)    -> bool
    profile(symbol, seq)      -> list of score(symbol, seq[j]) for all j

profile() is what the DP fill calls once per row, so the inner loop
never does more than a list index per cell.

Standard tables (BLOSUM62, PAM250, ambiguous DNA/RNA) are built lazily
via SimilarityMatrix.standard().
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .alphabets import AMBIGUOUS_DNA, AMBIGUOUS_PROTEIN, AMBIGUOUS_RNA, Alphabet


class StandardSimilarityMatrix(Enum):
    """Names of the built-in similarity matrices."""
    BLOSUM62 = "BLOSUM62"
    PAM250 = "PAM250"
    AMBIGUOUS_DNA = "AmbiguousDna"
    AMBIGUOUS_RNA = "AmbiguousRna"
    DIAGONAL = "Diagonal"


class SimilarityMatrix:
    """
    Substitution scores for every ordered pair of symbols.

    Parameters
    ----------
    symbols : str
        Row/column labels of `table`, one character each.
    table : (K, K) array-like
        table[a, b] is the score of aligning symbols[a] against symbols[b].
    name : str, optional
        Descriptive name.
    alphabet : Alphabet, optional
        Alphabet the matrix scores; used to pick a consensus resolver.
    symmetric : bool, default True
        If True, reject tables that are not symmetric.
    """

    def __init__(
        self,
        symbols: str,
        table: Union[NDArray[np.floating], Sequence[Sequence[float]]],
        name: str = "",
        alphabet: Optional[Alphabet] = None,
        symmetric: bool = True,
    ):
        data = np.array(table, dtype=float)
        k = len(symbols)
        if data.shape != (k, k):
            raise ValueError(
                f"Similarity table must be {k}x{k} for symbols {symbols!r}, got shape {data.shape}"
            )
        if len(set(symbols)) != k:
            raise ValueError(f"Duplicate symbols in {symbols!r}")
        if symmetric and not np.array_equal(data, data.T):
            bad = np.argwhere(data != data.T)[0]
            raise ValueError(
                f"Similarity table is not symmetric at ({symbols[bad[0]]}, {symbols[bad[1]]})"
            )
        data.flags.writeable = False
        self._table = data
        self._symbols = symbols
        self._index = {s: i for i, s in enumerate(symbols)}
        self.name = name
        self.alphabet = alphabet

    def __repr__(self):
        return f"SimilarityMatrix({self.name or self._symbols!r})"

    @property
    def symbols(self) -> str:
        return self._symbols

    @property
    def table(self) -> NDArray[np.floating]:
        """Read-only (K, K) score table."""
        return self._table

    def score(self, a: str, b: str) -> float:
        return float(self._table[self._index[a], self._index[b]])

    def is_symbol_supported(self, symbol: str) -> bool:
        return symbol in self._index

    def validate_sequence(self, sequence: Iterable[str]) -> bool:
        """True if every symbol of `sequence` has a row in the table."""
        return all(s in self._index for s in sequence)

    def profile(self, symbol: str, sequence: str) -> List[float]:
        """Scores of `symbol` against every symbol of `sequence`."""
        codes = [self._index[s] for s in sequence]
        return self._table[self._index[symbol], codes].tolist()

    @classmethod
    def standard(cls, which: Union[str, StandardSimilarityMatrix]) -> "SimilarityMatrix":
        """
        Return one of the built-in matrices, by enum member or name
        (case-insensitive), e.g. SimilarityMatrix.standard("pam250").
        """
        if not isinstance(which, StandardSimilarityMatrix):
            lookup = {m.name.lower(): m for m in StandardSimilarityMatrix}
            lookup.update({m.value.lower(): m for m in StandardSimilarityMatrix})
            try:
                which = lookup[str(which).lower()]
            except KeyError:
                raise ValueError(
                    f"Unknown similarity matrix {which!r}; expected one of "
                    f"{[m.name for m in StandardSimilarityMatrix]}"
                ) from None
        return _build_standard(which)


class DiagonalSimilarityMatrix:
    """
    Match / mismatch scoring without a table.

    score(a, a) = diagonal_value and score(a, b) = off_diagonal_value
    for a != b.  Supports the letters A-Z, a-z and the symbols '*' and '-'.
    Comparison is case-sensitive.
    """

    SUPPORTED_SYMBOLS = frozenset(
        "ABCDEFGHIJKLMNOPQRSTUVWXYZ*-abcdefghijklmnopqrstuvwxyz"
    )

    def __init__(self, match_value: float, mismatch_value: float):
        self.diagonal_value = float(match_value)
        self.off_diagonal_value = float(mismatch_value)
        self.name = (
            f"Diagonal: match value {self.diagonal_value:g}, "
            f"non-match value {self.off_diagonal_value:g}"
        )
        # Diagonal scoring says nothing about the symbols' alphabet.
        self.alphabet = None

    def __repr__(self):
        return f"DiagonalSimilarityMatrix({self.diagonal_value:g}, {self.off_diagonal_value:g})"

    def score(self, a: str, b: str) -> float:
        return self.diagonal_value if a == b else self.off_diagonal_value

    def is_symbol_supported(self, symbol: str) -> bool:
        return symbol in self.SUPPORTED_SYMBOLS

    def validate_sequence(self, sequence: Iterable[str]) -> bool:
        return all(s in self.SUPPORTED_SYMBOLS for s in sequence)

    def profile(self, symbol: str, sequence: str) -> List[float]:
        match, mismatch = self.diagonal_value, self.off_diagonal_value
        return [match if s == symbol else mismatch for s in sequence]


# ---------------------------------------------------------------------------
# Standard matrix data
# ---------------------------------------------------------------------------

_BLOSUM62 = """
   A  R  N  D  C  Q  E  G  H  I  L  K  M  F  P  S  T  W  Y  V  B  Z  X  *
A  4 -1 -2 -2  0 -1 -1  0 -2 -1 -1 -1 -1 -2 -1  1  0 -3 -2  0 -2 -1  0 -4
R -1  5  0 -2 -3  1  0 -2  0 -3 -2  2 -1 -3 -2 -1 -1 -3 -2 -3 -1  0 -1 -4
N -2  0  6  1 -3  0  0  0  1 -3 -3  0 -2 -3 -2  1  0 -4 -2 -3  3  0 -1 -4
D -2 -2  1  6 -3  0  2 -1 -1 -3 -4 -1 -3 -3 -1  0 -1 -4 -3 -3  4  1 -1 -4
C  0 -3 -3 -3  9 -3 -4 -3 -3 -1 -1 -3 -1 -2 -3 -1 -1 -2 -2 -1 -3 -3 -2 -4
Q -1  1  0  0 -3  5  2 -2  0 -3 -2  1  0 -3 -1  0 -1 -2 -1 -2  0  3 -1 -4
E -1  0  0  2 -4  2  5 -2  0 -3 -3  1 -2 -3 -1  0 -1 -3 -2 -2  1  4 -1 -4
G  0 -2  0 -1 -3 -2 -2  6 -2 -4 -4 -2 -3 -3 -2  0 -2 -2 -3 -3 -1 -2 -1 -4
H -2  0  1 -1 -3  0  0 -2  8 -3 -3 -1 -2 -1 -2 -1 -2 -2  2 -3  0  0 -1 -4
I -1 -3 -3 -3 -1 -3 -3 -4 -3  4  2 -3  1  0 -3 -2 -1 -3 -1  3 -3 -3 -1 -4
L -1 -2 -3 -4 -1 -2 -3 -4 -3  2  4 -2  2  0 -3 -2 -1 -2 -1  1 -4 -3 -1 -4
K -1  2  0 -1 -3  1  1 -2 -1 -3 -2  5 -1 -3 -1  0 -1 -3 -2 -2  0  1 -1 -4
M -1 -1 -2 -3 -1  0 -2 -3 -2  1  2 -1  5  0 -2 -1 -1 -1 -1  1 -3 -1 -1 -4
F -2 -3 -3 -3 -2 -3 -3 -3 -1  0  0 -3  0  6 -4 -2 -2  1  3 -1 -3 -3 -1 -4
P -1 -2 -2 -1 -3 -1 -1 -2 -2 -3 -3 -1 -2 -4  7 -1 -1 -4 -3 -2 -2 -1 -2 -4
S  1 -1  1  0 -1  0  0  0 -1 -2 -2  0 -1 -2 -1  4  1 -3 -2 -2  0  0  0 -4
T  0 -1  0 -1 -1 -1 -1 -2 -2 -1 -1 -1 -1 -2 -1  1  5 -2 -2  0 -1 -1  0 -4
W -3 -3 -4 -4 -2 -2 -3 -2 -2 -3 -2 -3 -1  1 -4 -3 -2 11  2 -3 -4 -3 -2 -4
Y -2 -2 -2 -3 -2 -1 -2 -3  2 -1 -1 -2 -1  3 -3 -2 -2  2  7 -1 -3 -2 -1 -4
V  0 -3 -3 -3 -1 -2 -2 -3 -3  3  1 -2  1 -1 -2 -2  0 -3 -1  4 -3 -2 -1 -4
B -2 -1  3  4 -3  0  1 -1  0 -3 -4  0 -3 -3 -2  0 -1 -4 -3 -3  4  1 -1 -4
Z -1  0  0  1 -3  3  4 -2  0 -3 -3  1 -1 -3 -1  0 -1 -3 -2 -2  1  4 -1 -4
X  0 -1 -1 -1 -2 -1 -1 -1 -1 -1 -1 -1 -1 -1 -2  0  0 -2 -1 -1 -1 -1 -1 -4
* -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4  1
"""

_PAM250 = """
   A  R  N  D  C  Q  E  G  H  I  L  K  M  F  P  S  T  W  Y  V  B  Z  X  *
A  2 -2  0  0 -2  0  0  1 -1 -1 -2 -1 -1 -3  1  1  1 -6 -3  0  0  0  0 -8
R -2  6  0 -1 -4  1 -1 -3  2 -2 -3  3  0 -4  0  0 -1  2 -4 -2 -1  0 -1 -8
N  0  0  2  2 -4  1  1  0  2 -2 -3  1 -2 -3  0  1  0 -4 -2 -2  2  1  0 -8
D  0 -1  2  4 -5  2  3  1  1 -2 -4  0 -3 -6 -1  0  0 -7 -4 -2  3  3 -1 -8
C -2 -4 -4 -5 12 -5 -5 -3 -3 -2 -6 -5 -5 -4 -3  0 -2 -8  0 -2 -4 -5 -3 -8
Q  0  1  1  2 -5  4  2 -1  3 -2 -2  1 -1 -5  0 -1 -1 -5 -4 -2  1  3 -1 -8
E  0 -1  1  3 -5  2  4  0  1 -2 -3  0 -2 -5 -1  0  0 -7 -4 -2  3  3 -1 -8
G  1 -3  0  1 -3 -1  0  5 -2 -3 -4 -2 -3 -5  0  1  0 -7 -5 -1  0  0 -1 -8
H -1  2  2  1 -3  3  1 -2  6 -2 -2  0 -2 -2  0 -1 -1 -3  0 -2  1  2 -1 -8
I -1 -2 -2 -2 -2 -2 -2 -3 -2  5  2 -2  2  1 -2 -1  0 -5 -1  4 -2 -2 -1 -8
L -2 -3 -3 -4 -6 -2 -3 -4 -2  2  6 -3  4  2 -3 -3 -2 -2 -1  2 -3 -3 -1 -8
K -1  3  1  0 -5  1  0 -2  0 -2 -3  5  0 -5 -1  0  0 -3 -4 -2  1  0 -1 -8
M -1  0 -2 -3 -5 -1 -2 -3 -2  2  4  0  6  0 -2 -2 -1 -4 -2  2 -2 -2 -1 -8
F -3 -4 -3 -6 -4 -5 -5 -5 -2  1  2 -5  0  9 -5 -3 -3  0  7 -1 -4 -5 -2 -8
P  1  0  0 -1 -3  0 -1  0  0 -2 -3 -1 -2 -5  6  1  0 -6 -5 -1 -1  0 -1 -8
S  1  0  1  0  0 -1  0  1 -1 -1 -3  0 -2 -3  1  2  1 -2 -3 -1  0  0  0 -8
T  1 -1  0  0 -2 -1  0  0 -1  0 -2  0 -1 -3  0  1  3 -5 -3  0  0 -1  0 -8
W -6  2 -4 -7 -8 -5 -7 -7 -3 -5 -2 -3 -4  0 -6 -2 -5 17  0 -6 -5 -6 -4 -8
Y -3 -4 -2 -4  0 -4 -4 -5  0 -1 -1 -4 -2  7 -5 -3 -3  0 10 -2 -3 -4 -2 -8
V  0 -2 -2 -2 -2 -2 -2 -1 -2  4  2 -2  2 -1 -1 -1  0 -6 -2  4 -2 -2 -1 -8
B  0 -1  2  3 -4  1  3  0  1 -2 -3  1 -2 -4 -1  0  0 -5 -3 -2  3  2 -1 -8
Z  0  0  1  3 -5  3  3  0  2 -2 -3  0 -2 -5  0  0 -1 -6 -4 -2  2  3 -1 -8
X  0 -1  0 -1 -3 -1 -1 -1 -1 -1 -1 -1 -1 -2 -1  0  0 -4 -2 -1 -1 -1 -1 -8
* -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8 -8  1
"""


def parse_matrix_text(text: str):
    """
    Parse a whitespace-separated matrix in NCBI layout: a header line of
    column symbols, then one line per row symbol followed by its scores.

    Returns
    -------
    symbols : str
    table : (K, K) array of float
    """
    lines = [line.split() for line in text.strip().splitlines() if line.strip()]
    header = lines[0]
    rows = lines[1:]
    row_symbols = [r[0] for r in rows]
    if row_symbols != header:
        raise ValueError("Row symbols do not match the header symbols")
    table = np.array([[float(v) for v in r[1:]] for r in rows], dtype=float)
    return "".join(header), table


def nucleotide_table(alphabet: Alphabet, match: float = 5.0, mismatch: float = -4.0):
    """
    Build a nucleotide table over basic and ambiguous symbols.

    For symbols a, b with basic sets A, B, the score is the expected
    match/mismatch score of drawing one basic symbol from each set,

        p = |A ∩ B| / (|A| |B|),   score = round(p * match + (1 - p) * mismatch)

    rounded half up, so basic symbols score `match`/`mismatch` exactly.
    """
    symbols = alphabet.basic_symbols + "".join(alphabet.ambiguous_symbols)
    sets = [alphabet.basic_symbols_of(s) for s in symbols]
    k = len(symbols)
    table = np.empty((k, k), dtype=float)
    for a in range(k):
        for b in range(k):
            p = len(sets[a] & sets[b]) / (len(sets[a]) * len(sets[b]))
            table[a, b] = np.floor(p * match + (1.0 - p) * mismatch + 0.5)
    return symbols, table


@lru_cache(maxsize=None)
def _build_standard(which: StandardSimilarityMatrix):
    if which is StandardSimilarityMatrix.BLOSUM62:
        symbols, table = parse_matrix_text(_BLOSUM62)
        return SimilarityMatrix(symbols, table, name="BLOSUM62", alphabet=AMBIGUOUS_PROTEIN)
    if which is StandardSimilarityMatrix.PAM250:
        symbols, table = parse_matrix_text(_PAM250)
        return SimilarityMatrix(symbols, table, name="PAM250", alphabet=AMBIGUOUS_PROTEIN)
    if which is StandardSimilarityMatrix.AMBIGUOUS_DNA:
        symbols, table = nucleotide_table(AMBIGUOUS_DNA)
        return SimilarityMatrix(symbols, table, name="AmbiguousDna", alphabet=AMBIGUOUS_DNA)
    if which is StandardSimilarityMatrix.AMBIGUOUS_RNA:
        symbols, table = nucleotide_table(AMBIGUOUS_RNA)
        return SimilarityMatrix(symbols, table, name="AmbiguousRna", alphabet=AMBIGUOUS_RNA)
    return DiagonalSimilarityMatrix(2.0, -2.0)
