"""
Policies Module - Pluggable pieces an algorithm variant is assembled from

Provides:
- Split strategies: FirstMaxSplit, ShuffledOrderSplit, UniformTieSplit, CachedSplit
- Schedules: DepthSchedule (SOO), DepthSetSchedule (LOGO),
  FullDepthSchedule (IMGPO), UpperBoundSchedule (DOO)
- Eligibility: VmaxEligibility, LookaheadEligibility, AlwaysExpand
- Evaluation gates: EvaluationGate, SurrogateGate
"""

from .base import (
    StepPolicy,
    SplitDimensionStrategy,
    ExpansionSchedule,
    ExpansionEligibility,
    EvaluationGate,
)
from .split import (
    FirstMaxSplit,
    ShuffledOrderSplit,
    UniformTieSplit,
    CachedSplit,
    build_split_strategy,
)
from .schedule import (
    DepthSchedule,
    DepthSetSchedule,
    FullDepthSchedule,
    UpperBoundSchedule,
)
from .eligibility import (
    AlwaysExpand,
    VmaxEligibility,
    LookaheadEligibility,
)
from .evaluation import (
    SurrogateGate,
    BAMSOO_BOUND_CONSTANT,
    IMGPO_BOUND_CONSTANT,
)

__all__ = [
    'StepPolicy',
    'SplitDimensionStrategy',
    'ExpansionSchedule',
    'ExpansionEligibility',
    'EvaluationGate',
    'FirstMaxSplit',
    'ShuffledOrderSplit',
    'UniformTieSplit',
    'CachedSplit',
    'build_split_strategy',
    'DepthSchedule',
    'DepthSetSchedule',
    'FullDepthSchedule',
    'UpperBoundSchedule',
    'AlwaysExpand',
    'VmaxEligibility',
    'LookaheadEligibility',
    'SurrogateGate',
    'BAMSOO_BOUND_CONSTANT',
    'IMGPO_BOUND_CONSTANT',
]
