"""
Evaluation Gates

How a freshly created child receives its value:

- EvaluationGate (base): always a real objective evaluation
- SurrogateGate (BaMSOO / IMGPO): a real evaluation only when the
  surrogate's upper confidence bound at the child's center beats the best
  real value in the space; otherwise the child gets the lower confidence
  bound as a fake value, at no budget cost

Bound half-width at ``n = num_node_evals``:

    sqrt(2 * ln(pi^2 * n^2 / (c * delta))) * sigma

with ``c = 6`` for BaMSOO and ``c = 12`` for IMGPO.
"""

import math
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from ..contract import Node
from ..errors import ConfigurationError, SurrogateUnavailable
from ..surrogate.gp import GaussianProcessSurrogate
from ..surrogate.initial_design import SobolDesign
from .base import EvaluationGate

if TYPE_CHECKING:
    from ..solver.engine import Engine


BAMSOO_BOUND_CONSTANT = 6.0
IMGPO_BOUND_CONSTANT = 12.0


class SurrogateGate(EvaluationGate):
    """
    Surrogate-gated evaluation.

    Every real observation becomes a training sample. The model is refit at
    most once per batch of children, from all samples gathered so far.
    """

    def __init__(
        self,
        surrogate: GaussianProcessSurrogate,
        bound_constant: float = BAMSOO_BOUND_CONSTANT,
        delta: float = 0.5,
        initial_design: Optional[SobolDesign] = None,
    ):
        if bound_constant <= 0:
            raise ConfigurationError(f"bound_constant must be positive, got {bound_constant}")
        if delta <= 0:
            raise ConfigurationError(f"delta must be positive, got {delta}")

        self.surrogate = surrogate
        self.bound_constant = bound_constant
        self.delta = delta
        self.initial_design = initial_design

        self.num_fake = 0

    def attach(self, engine: 'Engine'):
        """Warm-start the surrogate with the initial design, if any."""
        if self.initial_design is None:
            return
        for point in self.initial_design.generate():
            if engine.evaluate_point(point) is None:
                break

    def record(self, point: np.ndarray, value: float):
        self.surrogate.add_sample(point, value)

    def prepare(self, engine: 'Engine'):
        if self.surrogate.is_valid() and self.surrogate.is_stale():
            self.surrogate.fit()

    def bound_multiplier(self, engine: 'Engine') -> float:
        n = engine.num_node_evals
        arg = math.pi ** 2 * n ** 2 / (self.bound_constant * self.delta)
        return math.sqrt(2.0 * max(math.log(arg), 0.0))

    def confidence_bounds(self, engine: 'Engine', points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Lower and upper confidence bounds at one or more points.

        Raises:
            SurrogateUnavailable: The model has not been fit yet
        """
        mean, std = self.surrogate.predict_batch(np.atleast_2d(points))
        width = self.bound_multiplier(engine) * std
        return mean - width, mean + width

    def observe(self, engine: 'Engine', node: Node):
        if node.has_real_value:
            return

        try:
            lcb, ucb = self.confidence_bounds(engine, node.center)
        except SurrogateUnavailable:
            engine.evaluate(node)
            return

        best = engine.space.best_node(real_only=True)
        if best is None or ucb[0] > best.value:
            engine.evaluate(node)
        else:
            node.set_fake_value(float(lcb[0]))
            self.num_fake += 1

    def before_expand(self, engine: 'Engine', node: Node):
        if node.is_fake_value:
            engine.evaluate(node)
