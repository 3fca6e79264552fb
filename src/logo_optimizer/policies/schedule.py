"""
Expansion Schedules

Which nodes a step offers for expansion:

- DepthSchedule (SOO): the best node of every depth up to
  floor(sqrt(num_expansions)), shallowest first
- DepthSetSchedule (LOGO): the best node of every band of ``w`` consecutive
  depths, with ``w`` adapted after each step
- FullDepthSchedule (IMGPO): the best node of every populated depth
- UpperBoundSchedule (DOO): the single node with the largest slope bound
"""

import math
from typing import TYPE_CHECKING, Iterator, Optional, Sequence

from ..contract import Node
from ..errors import ConfigurationError
from ..tie_safe import TieSafeChoice
from .base import ExpansionSchedule

if TYPE_CHECKING:
    from ..solver.engine import Engine


class DepthSchedule(ExpansionSchedule):
    """Best node at each depth, depth-bounded by the expansion count."""

    def max_depth(self, engine: 'Engine') -> int:
        return min(math.isqrt(engine.num_expansions), engine.space.num_levels)

    def best_at(self, engine: 'Engine', index: int) -> Optional[Node]:
        return engine.space.best_at_depth(index)

    def candidates(self, engine: 'Engine') -> Iterator[Node]:
        dmax = self.max_depth(engine)
        for index in range(dmax + 1):
            node = self.best_at(engine, index)
            if node is None:
                continue
            yield node


class FullDepthSchedule(DepthSchedule):
    """Every populated depth is scanned on every step."""

    def max_depth(self, engine: 'Engine') -> int:
        return engine.space.num_levels


class DepthSetSchedule(DepthSchedule):
    """
    LOGO depth sets.

    Depth set ``i`` covers the true depths ``[i*w, i*w + w - 1]``. After each
    step the width moves one position forward in the schedule if the best
    value observed during the step beat the previous step's best, and one
    position back otherwise.
    """

    def __init__(self, w_schedule: Sequence[int]):
        if not w_schedule:
            raise ConfigurationError("w_schedule must not be empty")
        self.w_schedule = tuple(int(w) for w in w_schedule)
        self.width_index = 0
        self.last_best_obs = float('-inf')

    @property
    def width(self) -> int:
        return self.w_schedule[self.width_index]

    def max_depth(self, engine: 'Engine') -> int:
        return super().max_depth(engine) // self.width

    def best_at(self, engine: 'Engine', index: int) -> Optional[Node]:
        min_depth = index * self.width
        return engine.space.best_in_depths(min_depth, min_depth + self.width - 1)

    def end_step(self, engine: 'Engine'):
        observed = [n.value for n in engine.step_observed_nodes]
        if not observed:
            self._move(-1)
            return

        step_best = max(observed)
        self._move(1 if step_best > self.last_best_obs else -1)
        self.last_best_obs = step_best

    def _move(self, offset: int):
        self.width_index = min(max(self.width_index + offset, 0), len(self.w_schedule) - 1)


class UpperBoundSchedule(ExpansionSchedule):
    """
    DOO: the node whose optimistic bound is largest, over every depth.

    bound = value + max_slope * half_diagonal
    """

    def __init__(self, max_slope: float):
        self.max_slope = max_slope

    def upper_bound(self, node: Node) -> float:
        return node.value + self.max_slope * node.half_diagonal

    def candidates(self, engine: 'Engine') -> Iterator[Node]:
        valued = (n for n in engine.space if n.has_value)
        best = TieSafeChoice.select_best(valued, self.upper_bound)
        if best is not None:
            yield best
