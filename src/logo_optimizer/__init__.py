"""
LOGO Optimizer - Tree-Partitioning Global Optimization of Black-Box Functions

Finds the maximum of an expensive function over [0, 1]^dim by recursively
splitting the domain into a tree of boxes and choosing, step by step, which
boxes to refine.

Algorithm variants (all built on one Engine):
- SOO: expand the best box at each depth if it beats shallower expansions
- LOGO: SOO over adaptive bands of depths
- DOO: expand the box with the largest Lipschitz upper bound
- BaMSOO / BaMLOGO: GP surrogate replaces evaluations of unpromising boxes
- IMGPO: BaMSOO plus a simulated-subtree lookahead before each expansion

Randomized variants break ties between equally long sides with a seeded
generator; every run is reproducible from its options.
"""

from .errors import (
    ConfigurationError,
    InvariantViolation,
    SurrogateUnavailable,
    ObjectiveError,
)
from .contract import (
    Node,
    Options,
    SplitRule,
)
from .tie_safe import (
    TieSafeChoice,
    canonical_fingerprint,
    rectangle_fingerprint,
)
from .core.result import (
    OptimizationResult,
    StopReason,
)
from .policies import (
    SplitDimensionStrategy,
    ExpansionSchedule,
    ExpansionEligibility,
    EvaluationGate,
    FirstMaxSplit,
    ShuffledOrderSplit,
    UniformTieSplit,
    CachedSplit,
    DepthSchedule,
    DepthSetSchedule,
    FullDepthSchedule,
    UpperBoundSchedule,
    AlwaysExpand,
    VmaxEligibility,
    LookaheadEligibility,
    SurrogateGate,
)
from .surrogate import GaussianProcessSurrogate, SobolDesign
from .solver import Engine, NodeSpace
from .algorithms import (
    ALGORITHMS,
    available_algorithms,
    create_optimizer,
    soo,
    random_soo,
    logo,
    random_logo,
    doo,
    bamsoo,
    random_bamsoo,
    bamlogo,
    random_bamlogo,
    imgpo,
    random_imgpo,
    init_bamsoo,
)

__version__ = "0.1.0"
__author__ = "LOGO Optimizer Team"

__all__ = [
    # Errors
    "ConfigurationError",
    "InvariantViolation",
    "SurrogateUnavailable",
    "ObjectiveError",
    # Contract
    "Node",
    "Options",
    "SplitRule",
    # Tie-safe
    "TieSafeChoice",
    "canonical_fingerprint",
    "rectangle_fingerprint",
    # Results
    "OptimizationResult",
    "StopReason",
    # Policies
    "SplitDimensionStrategy",
    "ExpansionSchedule",
    "ExpansionEligibility",
    "EvaluationGate",
    "FirstMaxSplit",
    "ShuffledOrderSplit",
    "UniformTieSplit",
    "CachedSplit",
    "DepthSchedule",
    "DepthSetSchedule",
    "FullDepthSchedule",
    "UpperBoundSchedule",
    "AlwaysExpand",
    "VmaxEligibility",
    "LookaheadEligibility",
    "SurrogateGate",
    # Surrogate
    "GaussianProcessSurrogate",
    "SobolDesign",
    # Solver
    "Engine",
    "NodeSpace",
    # Variants
    "ALGORITHMS",
    "available_algorithms",
    "create_optimizer",
    "soo",
    "random_soo",
    "logo",
    "random_logo",
    "doo",
    "bamsoo",
    "random_bamsoo",
    "bamlogo",
    "random_bamlogo",
    "imgpo",
    "random_imgpo",
    "init_bamsoo",
]
