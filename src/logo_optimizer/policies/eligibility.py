"""
Expansion Eligibility

- AlwaysExpand: every candidate is expanded (DOO)
- VmaxEligibility: SOO rule, expand only if the candidate beats every node
  already expanded during this step
- LookaheadEligibility: IMGPO rule, the SOO rule followed by a comparison
  against a simulated subtree scored with the surrogate's upper bound
"""

import math
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from ..contract import Node
from ..errors import ConfigurationError, SurrogateUnavailable
from .base import ExpansionEligibility, SplitDimensionStrategy

if TYPE_CHECKING:
    from ..solver.engine import Engine
    from .evaluation import SurrogateGate


class AlwaysExpand(ExpansionEligibility):

    def should_expand(self, engine: 'Engine', node: Node) -> bool:
        return True


class VmaxEligibility(ExpansionEligibility):
    """
    Expand a node iff its value strictly exceeds ``vmax``.

    ``vmax`` is the largest value that triggered an expansion in the current
    step; candidates arrive shallowest first, so triggering values are
    non-decreasing in depth within a step.
    """

    def __init__(self):
        self.vmax = float('-inf')
        self.triggers: List[Tuple[int, float]] = []

    def begin_step(self, engine: 'Engine'):
        self.vmax = float('-inf')
        self.triggers = []

    def should_expand(self, engine: 'Engine', node: Node) -> bool:
        if node.value > self.vmax:
            self.vmax = node.value
            self.triggers.append((node.depth, node.value))
            return True
        return False


class LookaheadEligibility(VmaxEligibility):
    """
    IMGPO expansion test.

    A candidate that passes the SOO rule is still skipped when some deeper
    node, at most ``e`` levels below it, already holds a real value
    ``>= vmax`` and no node of the candidate's simulated ``e``-level subtree
    has an upper confidence bound reaching that value.

    The lookahead depth grows by 4 after a step that improved the best node
    and shrinks by 0.5 (floored at 4) otherwise; it never exceeds
    ``subtree_max_depth``.
    """

    def __init__(
        self,
        gate: 'SurrogateGate',
        splitter: SplitDimensionStrategy,
        num_children: int,
        subtree_max_depth: int,
    ):
        super().__init__()
        if subtree_max_depth < 1:
            raise ConfigurationError(
                f"subtree_max_depth must be positive, got {subtree_max_depth}"
            )
        self.gate = gate
        self.splitter = splitter
        self.num_children = num_children
        self.subtree_max_depth = subtree_max_depth

        self.current_subtree_depth = 1.0
        self.prev_best: Optional[float] = None
        self.num_skipped = 0
        self._accepted = 0
        self._force_next = False

    def begin_step(self, engine: 'Engine'):
        super().begin_step(engine)
        best = engine.space.best_node()
        self.prev_best = best.value if best is not None else None
        self._accepted = 0

    def end_step(self, engine: 'Engine'):
        best = engine.space.best_node()
        improved = self.prev_best is None or (best is not None and best.value > self.prev_best)
        if improved:
            self.current_subtree_depth += 4
        else:
            self.current_subtree_depth = max(self.current_subtree_depth - 0.5, 4.0)

        # A step that expands nothing would leave the tree unchanged forever;
        # the next step then trusts the SOO rule alone for one expansion.
        self._force_next = self._accepted == 0

    def lookahead_depth(self) -> int:
        return min(self.subtree_max_depth, int(math.ceil(self.current_subtree_depth)))

    def should_expand(self, engine: 'Engine', node: Node) -> bool:
        if not super().should_expand(engine, node):
            return False

        if self._force_next:
            self._force_next = False
            self._accepted += 1
            return True

        e, best_smaller = self._find_smaller(engine, node)
        if best_smaller is None:
            self._accepted += 1
            return True

        try:
            best_ucb = self.best_subtree_ucb(engine, node, e)
        except SurrogateUnavailable:
            self._accepted += 1
            return True

        if best_ucb < best_smaller.value:
            self.num_skipped += 1
            return False

        self._accepted += 1
        return True

    def _find_smaller(self, engine: 'Engine', node: Node) -> Tuple[int, Optional[Node]]:
        """First deeper level whose best node holds a real value >= vmax."""
        for e in range(1, self.lookahead_depth() + 1):
            best = engine.space.best_at_depth(node.depth + e)
            if best is not None and best.value >= self.vmax and not best.is_fake_value:
                return e, best
        return 0, None

    def build_subtree(self, node: Node, depth: int) -> List[Node]:
        """
        Simulate ``depth`` levels of expansion below a node.

        Nothing is evaluated or inserted into the space.

        Returns:
            All simulated descendants, level by level
        """
        subtree: List[Node] = []
        level = [node]
        for _ in range(depth):
            next_level = []
            for n in level:
                next_level.extend(n.split(self.splitter.choose(n), self.num_children))
            subtree.extend(next_level)
            level = next_level
        return subtree

    def best_subtree_ucb(self, engine: 'Engine', node: Node, depth: int) -> float:
        """Largest surrogate upper confidence bound over a simulated subtree."""
        subtree = self.build_subtree(node, depth)
        centers = np.array([n.center for n in subtree])
        _, ucb = self.gate.confidence_bounds(engine, centers)
        return float(np.max(ucb))
