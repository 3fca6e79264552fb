"""
Surrogate Module - Probabilistic models that gate costly evaluations

Provides:
- GaussianProcessSurrogate: scikit-learn GP behind the add/fit/predict contract
- SobolDesign: scrambled Sobol warm-start points
"""

from .gp import GaussianProcessSurrogate, MIN_SAMPLES
from .initial_design import SobolDesign

__all__ = [
    'GaussianProcessSurrogate',
    'MIN_SAMPLES',
    'SobolDesign',
]
