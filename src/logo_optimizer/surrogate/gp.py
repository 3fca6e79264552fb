"""
Gaussian-Process Surrogate

Thin binding of scikit-learn's GaussianProcessRegressor to the contract the
optimizer needs:

- add_sample(point, value)
- fit()              (required before predicting once >= 2 samples exist)
- predict(point)     -> (mean, std)
- is_valid()         -> enough samples to fit

Kernel: constant * isotropic squared exponential, near-noiseless, with the
hyperparameters learned by marginal likelihood on every fit.
"""

import warnings
from typing import List, Tuple

import numpy as np
from sklearn.exceptions import ConvergenceWarning
from sklearn.gaussian_process import GaussianProcessRegressor
from sklearn.gaussian_process.kernels import RBF, ConstantKernel

from ..errors import SurrogateUnavailable


MIN_SAMPLES = 2


class GaussianProcessSurrogate:
    """
    GP regression over real observations.

    Args:
        dim: Dimensionality of the inputs
        noise: Value added to the kernel diagonal
        seed: Random state of the hyperparameter optimizer
    """

    def __init__(self, dim: int, noise: float = 1e-10, seed: int = 0):
        self.dim = dim
        self.noise = noise
        self.seed = seed
        self._xs: List[np.ndarray] = []
        self._ys: List[float] = []
        self._model = None
        self._fitted_samples = 0

    @property
    def num_samples(self) -> int:
        return len(self._ys)

    def add_sample(self, point: np.ndarray, value: float):
        point = np.asarray(point, dtype=np.float64)
        if point.shape != (self.dim,):
            raise ValueError(f"Sample of shape {point.shape} for a {self.dim}-d surrogate")
        self._xs.append(point.copy())
        self._ys.append(float(value))

    def is_valid(self) -> bool:
        return self.num_samples >= MIN_SAMPLES

    def is_stale(self) -> bool:
        """True if samples were added since the last fit."""
        return self._fitted_samples != self.num_samples

    def fit(self):
        """Fit the model on every sample added so far."""
        if not self.is_valid():
            raise SurrogateUnavailable(
                f"{self.num_samples} samples, at least {MIN_SAMPLES} needed"
            )

        kernel = ConstantKernel(1.0, (1e-3, 1e3)) * RBF(
            length_scale=1.0, length_scale_bounds=(1e-3, 1e2)
        )
        model = GaussianProcessRegressor(
            kernel=kernel,
            alpha=self.noise,
            normalize_y=True,
            n_restarts_optimizer=0,
            random_state=self.seed,
        )
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            model.fit(np.array(self._xs), np.array(self._ys))

        self._model = model
        self._fitted_samples = self.num_samples

    def predict(self, point: np.ndarray) -> Tuple[float, float]:
        mean, std = self.predict_batch(np.atleast_2d(point))
        return float(mean[0]), float(std[0])

    def predict_batch(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Predictive mean and standard deviation at each row of ``points``."""
        if self._model is None:
            raise SurrogateUnavailable("Surrogate has not been fit")
        mean, std = self._model.predict(np.asarray(points, dtype=np.float64), return_std=True)
        return np.asarray(mean, dtype=np.float64), np.asarray(std, dtype=np.float64)
