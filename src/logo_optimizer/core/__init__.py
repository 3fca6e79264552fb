"""
Core Module - Results handed back to callers
"""

from .result import OptimizationResult, StopReason

__all__ = [
    'OptimizationResult',
    'StopReason',
]
