"""
alphabets.py — Symbol sets, gap symbols and ambiguity codes

The alignment engine itself only ever sees strings; alphabets are
consulted when a column of aligned symbols has to be summarized into a
single consensus symbol (see consensus.py), and when building the
standard similarity matrices over ambiguous nucleotide codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping


@dataclass(frozen=True)
class Alphabet:
    """
    A fixed symbol set with gap and ambiguity information.

    Attributes
    ----------
    name : str
        Descriptive name, e.g. "AmbiguousDna".

    basic_symbols : str
        Unambiguous symbols, one character each.

    ambiguous_symbols : mapping str -> frozenset of str
        Ambiguity code -> the basic symbols it stands for.

    any_symbol : str
        Symbol used when no ambiguity code covers a set of symbols.

    gap_symbols : frozenset of str
        Symbols treated as gaps.  default_gap must be one of them.
    """
    name: str
    basic_symbols: str
    ambiguous_symbols: Mapping[str, FrozenSet[str]]
    any_symbol: str
    gap_symbols: FrozenSet[str] = frozenset("-")
    default_gap: str = "-"
    _code_for_set: Dict[FrozenSet[str], str] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        codes = {frozenset(s): s for s in self.basic_symbols}
        for code, basics in self.ambiguous_symbols.items():
            codes.setdefault(frozenset(basics), code)
        object.__setattr__(self, "_code_for_set", codes)

    @property
    def symbols(self) -> str:
        """All symbols: basic, ambiguous and gap."""
        return self.basic_symbols + "".join(self.ambiguous_symbols) + "".join(sorted(self.gap_symbols))

    def is_gap(self, symbol: str) -> bool:
        return symbol in self.gap_symbols

    def is_ambiguous(self, symbol: str) -> bool:
        return symbol in self.ambiguous_symbols

    def basic_symbols_of(self, symbol: str) -> FrozenSet[str]:
        """
        Basic symbols represented by `symbol`.  Symbols foreign to the
        alphabet are treated as basic and represent themselves.
        """
        return self.ambiguous_symbols.get(symbol, frozenset(symbol))

    def consensus_symbol(self, symbols: Iterable[str]) -> str:
        """
        Single symbol representing the union of `symbols`.

        Gaps are ignored; an empty (or all-gap) input gives default_gap.
        A singleton gives itself, a set covered by an ambiguity code gives
        that code, anything else gives any_symbol.
        """
        basics: set = set()
        for s in symbols:
            if self.is_gap(s):
                continue
            basics |= self.basic_symbols_of(s)
        if not basics:
            return self.default_gap
        if len(basics) == 1:
            return next(iter(basics))
        return self._code_for_set.get(frozenset(basics), self.any_symbol)


# ---------------------------------------------------------------------------
# Standard alphabets
# ---------------------------------------------------------------------------

def _nucleotide_codes(t: str) -> Dict[str, FrozenSet[str]]:
    """IUPAC nucleotide ambiguity codes, with `t` for T (DNA) or U (RNA)."""
    return {
        "M": frozenset("AC"),
        "R": frozenset("AG"),
        "W": frozenset("A" + t),
        "S": frozenset("CG"),
        "Y": frozenset("C" + t),
        "K": frozenset("G" + t),
        "V": frozenset("ACG"),
        "H": frozenset("AC" + t),
        "D": frozenset("AG" + t),
        "B": frozenset("CG" + t),
        "N": frozenset("ACG" + t),
    }


AMBIGUOUS_DNA = Alphabet(
    name="AmbiguousDna",
    basic_symbols="ACGT",
    ambiguous_symbols=_nucleotide_codes("T"),
    any_symbol="N",
)

AMBIGUOUS_RNA = Alphabet(
    name="AmbiguousRna",
    basic_symbols="ACGU",
    ambiguous_symbols=_nucleotide_codes("U"),
    any_symbol="N",
)

_AMINO_ACIDS = "ACDEFGHIKLMNPQRSTVWY"

AMBIGUOUS_PROTEIN = Alphabet(
    name="AmbiguousProtein",
    basic_symbols=_AMINO_ACIDS + "*",
    ambiguous_symbols={
        "B": frozenset("DN"),
        "Z": frozenset("EQ"),
        "J": frozenset("IL"),
        "X": frozenset(_AMINO_ACIDS),
    },
    any_symbol="X",
)
