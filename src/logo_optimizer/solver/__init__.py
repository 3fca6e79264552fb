"""
Solver Module - Engine and Node Space

Provides:
- Engine: the stepwise partition / evaluate / select loop
- NodeSpace: per-depth node storage addressed by stable handles
"""

from .node_space import NodeSpace
from .engine import Engine

__all__ = [
    'Engine',
    'NodeSpace',
]
