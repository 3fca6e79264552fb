"""
Algorithm Variants

Each variant is a named bundle of policies plugged into the same Engine:

    variant         schedule          eligibility   gate             split
    soo             depth             vmax          real             first
    random_soo      depth             vmax          real             shuffled
    logo            depth sets        vmax          real             first
    random_logo     depth sets        vmax          real             shuffled
    doo             upper bound       always        real             first
    bamsoo          depth             vmax          surrogate (c=6)  first
    random_bamsoo   depth             vmax          surrogate (c=6)  shuffled
    bamlogo         depth sets        vmax          surrogate (c=6)  first
    random_bamlogo  depth sets        vmax          surrogate (c=6)  shuffled
    imgpo           all depths        lookahead     surrogate (c=12) first, cached
    random_imgpo    all depths        lookahead     surrogate (c=12) shuffled, cached
    init_bamsoo     depth             vmax          surrogate + Sobol warm start  shuffled

``Options.split_rule`` overrides the split column.
"""

from typing import Callable, Dict, List

from .contract import Options, SplitRule
from .errors import ConfigurationError
from .policies.eligibility import AlwaysExpand, LookaheadEligibility, VmaxEligibility
from .policies.evaluation import (
    BAMSOO_BOUND_CONSTANT,
    IMGPO_BOUND_CONSTANT,
    SurrogateGate,
)
from .policies.schedule import (
    DepthSchedule,
    DepthSetSchedule,
    FullDepthSchedule,
    UpperBoundSchedule,
)
from .policies.split import CachedSplit, build_split_strategy
from .solver.engine import Engine
from .surrogate.gp import GaussianProcessSurrogate
from .surrogate.initial_design import SobolDesign


def _surrogate_gate(options: Options, bound_constant: float, warm_start: bool = False) -> SurrogateGate:
    design = None
    if warm_start:
        design = SobolDesign(options.dim, options.init_observations, options.seed)
    return SurrogateGate(
        GaussianProcessSurrogate(options.dim, seed=options.seed),
        bound_constant=bound_constant,
        delta=options.delta,
        initial_design=design,
    )


def soo(options: Options) -> Engine:
    """Simultaneous Optimistic Optimization."""
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.FIRST),
        name="soo",
    )


def random_soo(options: Options) -> Engine:
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.SHUFFLED),
        name="random_soo",
    )


def logo(options: Options) -> Engine:
    """Locally Oriented Global Optimization: SOO over adaptive depth sets."""
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.FIRST),
        schedule=DepthSetSchedule(options.w_schedule),
        name="logo",
    )


def random_logo(options: Options) -> Engine:
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.SHUFFLED),
        schedule=DepthSetSchedule(options.w_schedule),
        name="random_logo",
    )


def doo(options: Options) -> Engine:
    """Deterministic Optimistic Optimization with a known slope bound."""
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.FIRST),
        schedule=UpperBoundSchedule(options.max_slope),
        eligibility=AlwaysExpand(),
        name="doo",
    )


def bamsoo(options: Options) -> Engine:
    """Bayesian Multi-Scale Optimistic Optimization."""
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.FIRST),
        gate=_surrogate_gate(options, BAMSOO_BOUND_CONSTANT),
        name="bamsoo",
    )


def random_bamsoo(options: Options) -> Engine:
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.SHUFFLED),
        gate=_surrogate_gate(options, BAMSOO_BOUND_CONSTANT),
        name="random_bamsoo",
    )


def bamlogo(options: Options) -> Engine:
    """LOGO with BaMSOO's surrogate-gated evaluation."""
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.FIRST),
        schedule=DepthSetSchedule(options.w_schedule),
        gate=_surrogate_gate(options, BAMSOO_BOUND_CONSTANT),
        name="bamlogo",
    )


def random_bamlogo(options: Options) -> Engine:
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.SHUFFLED),
        schedule=DepthSetSchedule(options.w_schedule),
        gate=_surrogate_gate(options, BAMSOO_BOUND_CONSTANT),
        name="random_bamlogo",
    )


def _imgpo(options: Options, default_rule: SplitRule, name: str) -> Engine:
    splitter = CachedSplit(build_split_strategy(options, default_rule))
    gate = _surrogate_gate(options, IMGPO_BOUND_CONSTANT)
    eligibility = LookaheadEligibility(
        gate=gate,
        splitter=splitter,
        num_children=options.num_children,
        subtree_max_depth=options.subtree_max_depth,
    )
    return Engine(
        options,
        splitter=splitter,
        schedule=FullDepthSchedule(),
        eligibility=eligibility,
        gate=gate,
        name=name,
    )


def imgpo(options: Options) -> Engine:
    """Infinite-Metric GP Optimization: BaMSOO plus subtree lookahead."""
    return _imgpo(options, SplitRule.FIRST, "imgpo")


def random_imgpo(options: Options) -> Engine:
    return _imgpo(options, SplitRule.SHUFFLED, "random_imgpo")


def init_bamsoo(options: Options) -> Engine:
    """
    BaMSOO whose surrogate starts from a Sobol design.

    The warm-start points are real evaluations and count against the budget.
    """
    return Engine(
        options,
        splitter=build_split_strategy(options, SplitRule.SHUFFLED),
        gate=_surrogate_gate(options, BAMSOO_BOUND_CONSTANT, warm_start=True),
        name="init_bamsoo",
    )


ALGORITHMS: Dict[str, Callable[[Options], Engine]] = {
    'soo': soo,
    'random_soo': random_soo,
    'logo': logo,
    'random_logo': random_logo,
    'doo': doo,
    'bamsoo': bamsoo,
    'random_bamsoo': random_bamsoo,
    'bamlogo': bamlogo,
    'random_bamlogo': random_bamlogo,
    'imgpo': imgpo,
    'random_imgpo': random_imgpo,
    'init_bamsoo': init_bamsoo,
}


def available_algorithms() -> List[str]:
    return list(ALGORITHMS)


def create_optimizer(name: str, options: Options) -> Engine:
    """
    Build a variant by name.

    Raises:
        ConfigurationError: Unknown variant name
    """
    try:
        factory = ALGORITHMS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown algorithm '{name}', available: {available_algorithms()}"
        )
    return factory(options)
