"""
Policy Interfaces

An algorithm variant is a bundle of four independent policies injected into
one Engine:

- SplitDimensionStrategy: which dimension to cut when a node is expanded
- ExpansionSchedule: which nodes are offered for expansion during a step
- ExpansionEligibility: whether an offered node is actually expanded
- EvaluationGate: how new children receive their values

Schedules, eligibility rules and gates get ``begin_step``/``end_step``
callbacks so they can keep per-step state and adapt between steps.
"""

from typing import TYPE_CHECKING, Iterator

import numpy as np

from ..contract import Node

if TYPE_CHECKING:
    from ..solver.engine import Engine


class StepPolicy:
    """Base for policies with per-step state."""

    def begin_step(self, engine: 'Engine'):
        pass

    def end_step(self, engine: 'Engine'):
        pass


class SplitDimensionStrategy:
    """Chooses a dimension of maximal side length to cut."""

    def choose(self, node: Node) -> int:
        raise NotImplementedError


class ExpansionSchedule(StepPolicy):
    """Yields the nodes considered for expansion, one at a time."""

    def candidates(self, engine: 'Engine') -> Iterator[Node]:
        """
        Generate candidates lazily.

        The engine expands (or skips) each candidate before asking for the
        next one, so the generator always sees the space as modified by the
        previous expansions.
        """
        raise NotImplementedError


class ExpansionEligibility(StepPolicy):
    """Decides whether a candidate node is expanded."""

    def should_expand(self, engine: 'Engine', node: Node) -> bool:
        raise NotImplementedError


class EvaluationGate(StepPolicy):
    """Assigns values to nodes; the default gate always evaluates for real."""

    def attach(self, engine: 'Engine'):
        """Called once, after the root node has been evaluated."""

    def prepare(self, engine: 'Engine'):
        """Called before a batch of children is observed."""

    def record(self, point: np.ndarray, value: float):
        """Called after every real objective evaluation."""

    def observe(self, engine: 'Engine', node: Node):
        engine.evaluate(node)

    def before_expand(self, engine: 'Engine', node: Node):
        """Called on a node right before it is split."""
