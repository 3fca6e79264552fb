"""
Engine: Generic Stepwise Partition / Evaluate / Select Loop

Every algorithm in the package is this engine with a different bundle of
policies. One step is:

    begin_step -> for each candidate: eligibility check -> expand -> end_step

Expanding a node cuts it into equal slices along one dimension, gives every
child a value (real evaluation, inherited parent value or surrogate bound),
inserts the children one level deeper and removes the parent.

Budget rule: the objective is never called once ``max_observations`` real
evaluations have been made. Children that would need an evaluation after
that point are inserted without a value, and the step stops.
"""

import math
import time
from typing import Any, Dict, List, Optional

import numpy as np

from ..contract import Node, Options
from ..core.result import OptimizationResult, StopReason
from ..errors import InvariantViolation, ObjectiveError
from ..policies.base import (
    EvaluationGate,
    ExpansionEligibility,
    ExpansionSchedule,
    SplitDimensionStrategy,
)
from ..policies.eligibility import VmaxEligibility
from ..policies.schedule import DepthSchedule
from ..policies.split import FirstMaxSplit
from .node_space import NodeSpace


class Engine:
    """
    Tree-partitioning maximizer over [0, 1]^dim.

    The root node is created and evaluated at construction.
    """

    def __init__(
        self,
        options: Options,
        splitter: Optional[SplitDimensionStrategy] = None,
        schedule: Optional[ExpansionSchedule] = None,
        eligibility: Optional[ExpansionEligibility] = None,
        gate: Optional[EvaluationGate] = None,
        name: str = "soo",
    ):
        self.options = options
        self.name = name
        self.objective = options.objective
        self.dim = options.dim
        self.max_observations = options.max_observations
        self.num_children = options.num_children

        self.splitter = splitter or FirstMaxSplit()
        self.schedule = schedule or DepthSchedule()
        self.eligibility = eligibility or VmaxEligibility()
        self.gate = gate or EvaluationGate()

        self.space = NodeSpace(self.dim)

        self.num_observations = 0
        self.num_expansions = 1
        self.num_node_evals = 1
        self.num_steps = 0
        self.best_observation: Optional[float] = None
        self.step_observed_nodes: List[Node] = []
        self.start_time = time.time()

        root = options.root_node()
        self.evaluate(root)
        self.space.insert(root)

        self.gate.attach(self)

    def is_finished(self) -> bool:
        """True once the real evaluation budget is spent."""
        return self.num_observations >= self.max_observations

    def optimize(self) -> OptimizationResult:
        """Step until the evaluation budget is spent."""
        while not self.is_finished():
            self.step()
        return self.result(StopReason.BUDGET)

    def step(self):
        """Execute exactly one optimization step."""
        self._begin_step()

        for node in self.schedule.candidates(self):
            if self.is_finished():
                break
            if self.eligibility.should_expand(self, node):
                self.expand(node.node_id)
            self.num_node_evals += 1

        self._end_step()

        if self.options.log_frequency and self.num_steps % self.options.log_frequency == 0:
            self._log_progress()

    def _begin_step(self):
        self.step_observed_nodes = []
        self.schedule.begin_step(self)
        self.eligibility.begin_step(self)
        self.gate.begin_step(self)

    def _end_step(self):
        self.num_steps += 1
        self.schedule.end_step(self)
        self.eligibility.end_step(self)
        self.gate.end_step(self)

    def expand(self, node_id: int) -> List[Node]:
        """
        Split a node held in the space and give its children values.

        Args:
            node_id: Handle of the node to expand

        Returns:
            The inserted children (empty if the node could not be split)
        """
        node = self.space.get(node_id)

        self.gate.before_expand(self, node)
        if not node.has_real_value:
            # A surrogate bound is only split once it is verified,
            # which can no longer happen once the budget is spent.
            return []

        split_dim = self.splitter.choose(node)
        children = node.split(split_dim, self.num_children)
        self.num_expansions += 1

        self.gate.prepare(self)
        for child in children:
            self.gate.observe(self, child)

        for child in children:
            self.space.insert(child)
        self.space.remove(node_id)

        return children

    def evaluate(self, node: Node) -> bool:
        """
        Really evaluate the objective at a node's center.

        Returns:
            True if the objective was called
        """
        if node.has_real_value:
            return False

        value = self.evaluate_point(node.center)
        if value is None:
            return False

        node.set_value(value)
        self.step_observed_nodes.append(node)
        return True

    def evaluate_point(self, x: np.ndarray) -> Optional[float]:
        """
        Call the objective at a point, within the budget.

        Returns:
            The observed value, or None if the budget is spent
        """
        if self.is_finished():
            return None

        x = np.asarray(x, dtype=np.float64)
        if x.shape != (self.dim,):
            raise InvariantViolation(f"Point of shape {x.shape} in a {self.dim}-d domain")

        value = float(self.objective(x.copy()))
        if not math.isfinite(value):
            raise ObjectiveError(f"Objective returned {value} at {x.tolist()}")

        self.num_observations += 1
        if self.best_observation is None or value > self.best_observation:
            self.best_observation = value

        self.gate.record(x, value)
        return value

    def best_node(self) -> Node:
        """Node with the largest value in the space."""
        best = self.space.best_node()
        if best is None:
            raise InvariantViolation("Node space holds no valued node")
        return best

    def result(self, stop_reason: StopReason) -> OptimizationResult:
        best = self.best_node()
        return OptimizationResult(
            algorithm=self.name,
            x_best=best.center,
            value=best.value,
            is_fake_value=best.is_fake_value,
            num_observations=self.num_observations,
            num_expansions=self.num_expansions,
            num_steps=self.num_steps,
            stop_reason=stop_reason,
        )

    def _log_progress(self):
        """Log progress."""
        best = self.space.best_node()
        best_value = best.value if best is not None else float('-inf')
        elapsed = time.time() - self.start_time
        print(
            f"[{self.name}] "
            f"Step: {self.num_steps:,} | "
            f"Evals: {self.num_observations:,}/{self.max_observations:,} | "
            f"Nodes: {len(self.space):,} | "
            f"Depth: {self.space.num_levels} | "
            f"Best: {best_value:.6g} | "
            f"Time: {elapsed:.2f}s"
        )

    def get_statistics(self) -> Dict[str, Any]:
        """Get solver statistics."""
        best = self.space.best_node()
        return {
            "algorithm": self.name,
            "num_observations": self.num_observations,
            "num_expansions": self.num_expansions,
            "num_node_evals": self.num_node_evals,
            "num_steps": self.num_steps,
            "active_nodes": len(self.space),
            "depth_levels": self.space.num_levels,
            "best_value": best.value if best is not None else None,
            "best_observation": self.best_observation,
            "elapsed_time": time.time() - self.start_time,
        }
