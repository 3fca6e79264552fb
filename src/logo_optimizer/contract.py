"""
Optimization Contract Definition

Defines the objects every algorithm variant shares:
- Node: a hyper-rectangle of the unit cube with an optional observed value
- Options: the immutable per-run configuration
- SplitRule: how ties between equally long sides are broken

All coordinates live in the normalized domain [0, 1]^dim. The objective is
maximized and is always queried at a node's center.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple
import math
import numpy as np

from .errors import ConfigurationError, InvariantViolation
from .tie_safe import rectangle_fingerprint


ObjectiveFn = Callable[[np.ndarray], float]


class SplitRule(Enum):
    """Tie-breaking rule among dimensions of maximal side length."""
    FIRST = "first"        # Lowest index
    SHUFFLED = "shuffled"  # Earliest in a permutation drawn once from the seed
    UNIFORM = "uniform"    # Uniform random choice on every call


@dataclass
class Node:
    """
    A region (box) of the search domain.

    The geometry (edges, sizes, depth) is fixed at creation; only the value
    slot changes over the node's life.

    Attributes:
        edges: Lower corner of the box in each dimension
        sizes: Side length of the box in each dimension
        depth: Number of splits from the root
        node_id: Handle assigned by the node space (-1 until inserted)
        parent_id: Handle of the node this one was split from
        value: Observed value at the center, or a surrogate lower bound
        is_fake_value: True when value is a surrogate bound
    """
    edges: np.ndarray
    sizes: np.ndarray
    depth: int = 0
    node_id: int = -1
    parent_id: Optional[int] = None
    value: Optional[float] = None
    is_fake_value: bool = False

    def __post_init__(self):
        self.edges = np.array(self.edges, dtype=np.float64)
        self.sizes = np.array(self.sizes, dtype=np.float64)

        if self.edges.ndim != 1 or self.edges.shape != self.sizes.shape:
            raise InvariantViolation(
                f"Node edges {self.edges.shape} and sizes {self.sizes.shape} disagree"
            )
        if self.depth < 0:
            raise InvariantViolation(f"Negative node depth {self.depth}")

        self.edges.setflags(write=False)
        self.sizes.setflags(write=False)

    @property
    def n_vars(self) -> int:
        return len(self.edges)

    @property
    def has_value(self) -> bool:
        return self.value is not None

    @property
    def has_real_value(self) -> bool:
        return self.value is not None and not self.is_fake_value

    @property
    def center(self) -> np.ndarray:
        return self.edges + self.sizes / 2.0

    @property
    def volume(self) -> float:
        return float(np.prod(self.sizes))

    @property
    def half_diagonal(self) -> float:
        """Distance from the center to any corner."""
        return float(np.sqrt(np.sum((self.sizes / 2.0) ** 2)))

    def set_value(self, value: float):
        """Record a real observation."""
        self.value = float(value)
        self.is_fake_value = False

    def set_fake_value(self, value: float):
        """Record a surrogate-derived bound in place of an observation."""
        self.value = float(value)
        self.is_fake_value = True

    def longest_dimensions(self) -> List[int]:
        """Indices of all dimensions with maximal side length, ascending."""
        max_size = float(np.max(self.sizes))
        return [d for d, s in enumerate(self.sizes) if s == max_size]

    def split(self, dimension: int, num_children: int) -> List['Node']:
        """
        Split the node into equal slices along one dimension.

        The middle child shares the parent's center, so it inherits the
        parent's value when that value is a real observation.

        Args:
            dimension: Dimension to cut
            num_children: Number of slices (odd)

        Returns:
            Children ordered by increasing edge along ``dimension``
        """
        if not 0 <= dimension < self.n_vars:
            raise InvariantViolation(
                f"Split dimension {dimension} outside [0, {self.n_vars})"
            )

        child_size = self.sizes[dimension] / num_children
        sizes = self.sizes.copy()
        sizes[dimension] = child_size

        children = []
        for i in range(num_children):
            edges = self.edges.copy()
            edges[dimension] = self.edges[dimension] + i * child_size
            child = Node(
                edges=edges,
                sizes=sizes,
                depth=self.depth + 1,
                parent_id=self.node_id,
            )
            if i == num_children // 2 and self.has_real_value:
                child.set_value(self.value)
            children.append(child)

        return children

    def contains(self, x: np.ndarray, tol: float = 0.0) -> bool:
        """Check if a point is within the node's box."""
        x = np.asarray(x, dtype=np.float64)
        return bool(
            np.all(x >= self.edges - tol) and
            np.all(x <= self.edges + self.sizes + tol)
        )

    def fingerprint(self) -> str:
        """Exact identity of the rectangle, independent of the handle."""
        return rectangle_fingerprint(self.edges, self.sizes, self.depth)

    def __str__(self) -> str:
        center = np.array2string(self.center, precision=6)
        if self.has_value:
            tag = "~" if self.is_fake_value else ""
            return f"Node({center}, depth={self.depth}, value={tag}{self.value:.6g})"
        return f"Node({center}, depth={self.depth})"


@dataclass(frozen=True)
class Options:
    """
    Per-run configuration shared by every algorithm variant.

    Parameters that a variant does not use are ignored by it.

    Attributes:
        objective: Function to maximize, called with a point in [0, 1]^dim
        dim: Dimensionality of the domain
        max_observations: Budget of real objective evaluations
        num_children: Children per split (odd, at least 3)
        seed: Seed for randomized split rules and the warm-start design
        split_rule: Tie-breaking rule (None: the variant's default)
        w_schedule: LOGO depth-set widths, in order
        max_slope: DOO slope (Lipschitz) constant
        subtree_max_depth: IMGPO lookahead depth limit
        delta: Confidence parameter of the surrogate bounds
        init_observations: InitBaMSOO warm-start sample count
        log_frequency: Print progress every N steps (0: silent)
    """
    objective: ObjectiveFn
    dim: int
    max_observations: int
    num_children: int = 3
    seed: int = 0
    split_rule: Optional[SplitRule] = None
    w_schedule: Tuple[int, ...] = (3, 4, 5, 6, 8, 30)
    max_slope: float = 1.0
    subtree_max_depth: int = 5
    delta: float = 0.5
    init_observations: int = 10
    log_frequency: int = 0

    def __post_init__(self):
        if not callable(self.objective):
            raise ConfigurationError("objective must be callable")
        if self.dim < 1:
            raise ConfigurationError(f"dim must be positive, got {self.dim}")
        if self.max_observations < 1:
            raise ConfigurationError(
                f"max_observations must be positive, got {self.max_observations}"
            )
        # A single child copies its parent and its value, so nothing is ever evaluated
        if self.num_children < 3 or self.num_children % 2 == 0:
            raise ConfigurationError(
                f"num_children must be odd and >= 3, got {self.num_children}"
            )

        if self.split_rule is not None and not isinstance(self.split_rule, SplitRule):
            try:
                object.__setattr__(self, 'split_rule', SplitRule(self.split_rule))
            except ValueError:
                raise ConfigurationError(f"Unknown split rule {self.split_rule!r}")

        schedule = tuple(int(w) for w in self.w_schedule)
        if not schedule:
            raise ConfigurationError("w_schedule must not be empty")
        if any(w < 1 for w in schedule):
            raise ConfigurationError(f"w_schedule widths must be positive, got {schedule}")
        object.__setattr__(self, 'w_schedule', schedule)

        if not math.isfinite(self.max_slope) or self.max_slope < 0:
            raise ConfigurationError(f"max_slope must be finite and >= 0, got {self.max_slope}")
        if self.subtree_max_depth < 1:
            raise ConfigurationError(
                f"subtree_max_depth must be positive, got {self.subtree_max_depth}"
            )
        if not 0 < self.delta:
            raise ConfigurationError(f"delta must be positive, got {self.delta}")
        if self.init_observations < 0:
            raise ConfigurationError(
                f"init_observations must be >= 0, got {self.init_observations}"
            )
        if self.log_frequency < 0:
            raise ConfigurationError(f"log_frequency must be >= 0, got {self.log_frequency}")

    def root_node(self) -> Node:
        """Create the node covering the entire domain."""
        return Node(edges=np.zeros(self.dim), sizes=np.ones(self.dim), depth=0)

    def replace(self, **changes) -> 'Options':
        """Copy with some fields changed."""
        values = {f: getattr(self, f) for f in self.__dataclass_fields__}
        values.update(changes)
        return Options(**values)
