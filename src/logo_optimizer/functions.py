"""
Benchmark Objectives

Maximization versions of standard test functions on the normalized domain
[0, 1]^dim. Each one rescales its input to the function's usual box and
negates the classical (minimization) form, so the known maximum is 0.

- quadratic: -(x - 0.5)^2 summed over dimensions
- sphere: on [-5.12, 5.12]
- rosenbrock: on [-5, 10], dim >= 2
- rastrigin: on [-5.12, 5.12]
"""

from dataclasses import dataclass
from typing import Callable, Dict, List

import numpy as np

from .errors import ConfigurationError


@dataclass
class BenchmarkFunction:
    """An objective with its dimensionality and known maximum."""
    name: str
    fn: Callable[[np.ndarray], float]
    dim: int
    max_value: float = 0.0

    def __call__(self, x: np.ndarray) -> float:
        return self.fn(x)

    def relative_error(self, best: float) -> float:
        """Absolute error when the maximum is 0, relative error otherwise."""
        diff = self.max_value - best
        if self.max_value == 0.0:
            return abs(diff)
        return abs(diff / self.max_value)


def _rescale(x: np.ndarray, lower: float, upper: float) -> np.ndarray:
    return lower + np.asarray(x, dtype=np.float64) * (upper - lower)


def quadratic(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=np.float64)
    return -float(np.sum((x - 0.5) ** 2))


def sphere(x: np.ndarray) -> float:
    z = _rescale(x, -5.12, 5.12)
    return -float(np.sum(z ** 2))


def rosenbrock(x: np.ndarray) -> float:
    z = _rescale(x, -5.0, 10.0)
    return -float(np.sum(100.0 * (z[1:] - z[:-1] ** 2) ** 2 + (1.0 - z[:-1]) ** 2))


def rastrigin(x: np.ndarray) -> float:
    z = _rescale(x, -5.12, 5.12)
    return -float(10.0 * len(z) + np.sum(z ** 2 - 10.0 * np.cos(2.0 * np.pi * z)))


FUNCTIONS: Dict[str, Callable[[np.ndarray], float]] = {
    'quadratic': quadratic,
    'sphere': sphere,
    'rosenbrock': rosenbrock,
    'rastrigin': rastrigin,
}

MIN_DIM = {
    'rosenbrock': 2,
}


def available_functions() -> List[str]:
    return list(FUNCTIONS)


def get_function(name: str, dim: int) -> BenchmarkFunction:
    """
    Look up a benchmark by name.

    Raises:
        ConfigurationError: Unknown name or unsupported dimension
    """
    if name not in FUNCTIONS:
        raise ConfigurationError(
            f"Unknown function '{name}', available: {available_functions()}"
        )
    if dim < MIN_DIM.get(name, 1):
        raise ConfigurationError(f"{name} needs dim >= {MIN_DIM[name]}, got {dim}")
    return BenchmarkFunction(name=name, fn=FUNCTIONS[name], dim=dim)
