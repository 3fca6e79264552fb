"""
Optimization Result

The record handed back to callers once a run stops. It only observes the
engine's query surface: best node, counters, and why the run stopped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

import numpy as np


class StopReason(Enum):
    """Why the optimizer stopped stepping."""
    BUDGET = "budget"  # max_observations real evaluations made
    TARGET = "target"  # caller-defined error target reached


@dataclass
class OptimizationResult:
    """Best point found and the cost of finding it."""
    algorithm: str
    x_best: np.ndarray
    value: float
    is_fake_value: bool
    num_observations: int
    num_expansions: int
    num_steps: int
    stop_reason: StopReason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "x_best": np.asarray(self.x_best).tolist(),
            "value": self.value,
            "is_fake_value": self.is_fake_value,
            "num_observations": self.num_observations,
            "num_expansions": self.num_expansions,
            "num_steps": self.num_steps,
            "stop_reason": self.stop_reason.value,
        }
