"""
consensus.py — Consensus symbols for aligned columns

The reconstructor calls ConsensusResolver.consensus() once per aligned
column with exactly the symbols in that column (gaps included).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Optional, Sequence

from . import default
from .alphabets import Alphabet


class ConsensusResolver(ABC):
    """Maps the symbols of one alignment column to a single symbol."""

    @abstractmethod
    def consensus(self, symbols: Sequence[str], threshold: Optional[float] = None) -> str:
        """Return the consensus symbol for `symbols`."""


class SimpleConsensusResolver(ConsensusResolver):
    """
    Consensus by the simple frequency-fraction method.

    Every non-gap symbol carries a weight of 1.  An ambiguous symbol spreads
    its weight evenly over the basic symbols it stands for.  The frequency
    of a basic symbol is its summed weight, in percent of the number of
    non-gap symbols in the column.

      - if every symbol is a gap, the alphabet's default gap is returned;
      - basic symbols with frequency strictly above `threshold` are kept;
      - if none qualifies, all basic symbols present are kept;
      - the kept set is mapped to one symbol by Alphabet.consensus_symbol().

    Parameters
    ----------
    alphabet : Alphabet
        Supplies gap symbols and ambiguity codes.
    threshold : float
        Percent in [0, 100]; the default keeps every symbol present.
    """

    def __init__(
        self,
        alphabet: Alphabet = default.ALPHABET,
        threshold: float = default.CONSENSUS_THRESHOLD,
    ):
        if not 0.0 <= threshold <= 100.0:
            raise ValueError(f"Consensus threshold must be in [0, 100], got {threshold}")
        self.alphabet = alphabet
        self.threshold = float(threshold)

    def __repr__(self):
        return f"SimpleConsensusResolver({self.alphabet.name}, threshold={self.threshold:g})"

    def consensus(self, symbols: Sequence[str], threshold: Optional[float] = None) -> str:
        if not symbols:
            raise ValueError("Cannot build a consensus from an empty column")
        if threshold is None:
            threshold = self.threshold
        alphabet = self.alphabet

        weights = defaultdict(float)
        count = 0
        for symbol in symbols:
            if alphabet.is_gap(symbol):
                continue
            count += 1
            basics = alphabet.basic_symbols_of(symbol)
            share = 1.0 / len(basics)
            for b in basics:
                weights[b] += share

        if count == 0:
            return alphabet.default_gap

        above = [s for s, w in weights.items() if w * 100.0 / count > threshold]
        return alphabet.consensus_symbol(above if above else weights)
