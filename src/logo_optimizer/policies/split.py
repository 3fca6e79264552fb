"""
Split-Dimension Strategies

All strategies return a dimension of maximal side length; they differ only
in how ties are broken:

- FirstMaxSplit: lowest index
- ShuffledOrderSplit: earliest in a permutation drawn once from the seed
- UniformTieSplit: uniform draw among the tied dimensions on every call
- CachedSplit: replays earlier decisions for the same rectangle

Random strategies own their generator; drawing from it is an explicit state
change of the strategy, so two strategies built from the same seed make the
same sequence of decisions.
"""

from typing import Dict, List, Optional

import numpy as np

from ..contract import Node, Options, SplitRule
from ..errors import ConfigurationError
from .base import SplitDimensionStrategy


class FirstMaxSplit(SplitDimensionStrategy):
    """Lowest index among the longest sides."""

    def choose(self, node: Node) -> int:
        return node.longest_dimensions()[0]


class ShuffledOrderSplit(SplitDimensionStrategy):
    """
    Ties resolved by a fixed random priority order.

    The permutation is drawn once at construction, so the choice for a given
    set of tied dimensions is the same on every call.
    """

    def __init__(self, dim: int, seed: int = 0):
        self.rng = np.random.default_rng(seed)
        self.order: List[int] = [int(d) for d in self.rng.permutation(dim)]
        self._rank = {d: i for i, d in enumerate(self.order)}

    def choose(self, node: Node) -> int:
        tied = node.longest_dimensions()
        if len(tied) == 1:
            return tied[0]
        return min(tied, key=self._rank.__getitem__)


class UniformTieSplit(SplitDimensionStrategy):
    """Uniform random choice among the longest sides, redrawn on every call."""

    def __init__(self, seed: int = 0):
        self.rng = np.random.default_rng(seed)

    def choose(self, node: Node) -> int:
        tied = node.longest_dimensions()
        if len(tied) == 1:
            return tied[0]
        return tied[int(self.rng.integers(len(tied)))]


class CachedSplit(SplitDimensionStrategy):
    """
    Remembers the dimension chosen for every rectangle it has seen.

    Simulated expansions (IMGPO lookahead) and real expansions of the same
    rectangle must cut the same way, otherwise the simulated subtree does not
    match the tree that is later built. Rectangles are keyed by their exact
    fingerprint; the wrapped strategy is only consulted for new ones.
    """

    def __init__(self, inner: SplitDimensionStrategy):
        self.inner = inner
        self._decisions: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._decisions)

    def lookup(self, node: Node) -> Optional[int]:
        return self._decisions.get(node.fingerprint())

    def choose(self, node: Node) -> int:
        key = node.fingerprint()
        dim = self._decisions.get(key)
        if dim is None:
            dim = self.inner.choose(node)
            self._decisions[key] = dim
        return dim


def build_split_strategy(options: Options, default: SplitRule) -> SplitDimensionStrategy:
    """
    Create the split strategy a variant runs with.

    Args:
        options: Run options (``split_rule`` overrides ``default``)
        default: Rule used when the options do not name one

    Returns:
        The strategy instance, seeded from the options
    """
    rule = options.split_rule or default
    if rule == SplitRule.FIRST:
        return FirstMaxSplit()
    if rule == SplitRule.SHUFFLED:
        return ShuffledOrderSplit(options.dim, options.seed)
    if rule == SplitRule.UNIFORM:
        return UniformTieSplit(options.seed)
    raise ConfigurationError(f"Unknown split rule {rule!r}")
