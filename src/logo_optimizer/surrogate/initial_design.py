"""
Sobol Initial Design

Deterministic low-discrepancy points in [0, 1]^dim used to warm-start the
surrogate before the tree search begins (InitBaMSOO).
"""

import warnings
from typing import List

import numpy as np
from scipy.stats import qmc


class SobolDesign:
    """
    Scrambled Sobol points.

    The sequence is reproducible given the same dimension and seed.
    """

    def __init__(self, dimension: int, n_points: int, seed: int = 0):
        """
        Args:
            dimension: Number of dimensions
            n_points: Number of points in the design
            seed: Seed for scrambling
        """
        self.dimension = dimension
        self.n_points = n_points
        self.seed = seed

    def generate(self) -> List[np.ndarray]:
        """Generate the design points."""
        if self.n_points <= 0:
            return []

        engine = qmc.Sobol(d=self.dimension, scramble=True, seed=self.seed)
        with warnings.catch_warnings():
            # Balance warning for sample sizes that are not powers of two
            warnings.simplefilter("ignore", UserWarning)
            samples = engine.random(self.n_points)
        return [np.asarray(s, dtype=np.float64) for s in samples]
