"""
Node Space

Owns every live node of a run, grouped by depth. Nodes are addressed by
integer handles that are never reused, so a handle held across insertions
and removals either still resolves to the same node or fails loudly.

Iteration order is depth by depth, insertion order within a depth; all
"best" queries break ties by that order.
"""

from typing import Dict, Iterator, List, Optional

from ..contract import Node
from ..errors import InvariantViolation
from ..tie_safe import TieSafeChoice


def _node_value(node: Node) -> float:
    return node.value


class NodeSpace:
    """Per-depth collection of nodes addressed by stable handles."""

    def __init__(self, dim: int):
        self.dim = dim
        self._nodes: Dict[int, Node] = {}
        # Dicts keep insertion order and give O(1) removal
        self._levels: List[Dict[int, None]] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        for level in self._levels:
            for node_id in level:
                yield self._nodes[node_id]

    @property
    def num_levels(self) -> int:
        """Number of depth levels ever populated."""
        return len(self._levels)

    def insert(self, node: Node) -> int:
        """
        Take ownership of a node and assign its handle.

        Returns:
            The node's handle
        """
        if node.n_vars != self.dim:
            raise InvariantViolation(
                f"Node has {node.n_vars} dimensions, space has {self.dim}"
            )
        if node.node_id in self._nodes:
            raise InvariantViolation(f"Node {node.node_id} already in the space")

        node.node_id = self._next_id
        self._next_id += 1

        while len(self._levels) <= node.depth:
            self._levels.append({})

        self._nodes[node.node_id] = node
        self._levels[node.depth][node.node_id] = None
        return node.node_id

    def get(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise InvariantViolation(f"Node {node_id} is not in the space")

    def remove(self, node_id: int) -> Node:
        """Remove a node and return it."""
        node = self.get(node_id)
        level = self._levels[node.depth]
        if node_id not in level:
            raise InvariantViolation(
                f"Node {node_id} missing from its depth level {node.depth}"
            )
        del level[node_id]
        del self._nodes[node_id]
        return node

    def nodes_at(self, depth: int) -> List[Node]:
        if depth < 0 or depth >= len(self._levels):
            return []
        return [self._nodes[i] for i in self._levels[depth]]

    def best_at_depth(self, depth: int, real_only: bool = False) -> Optional[Node]:
        """
        Node with the largest value at a depth.

        Nodes without a value are never returned.

        Args:
            depth: Depth level to search
            real_only: Ignore nodes holding surrogate bounds

        Returns:
            The best node, or None if the depth holds no candidate
        """
        return TieSafeChoice.select_best(
            self._valued(self.nodes_at(depth), real_only), _node_value
        )

    def best_in_depths(self, min_depth: int, max_depth: int) -> Optional[Node]:
        """Best valued node over an inclusive band of depths."""
        candidates = []
        for d in range(min_depth, max_depth + 1):
            best = self.best_at_depth(d)
            if best is not None:
                candidates.append(best)
        return TieSafeChoice.select_best(candidates, _node_value)

    def best_node(self, real_only: bool = False) -> Optional[Node]:
        """Best valued node over the whole space."""
        return TieSafeChoice.select_best(self._valued(self, real_only), _node_value)

    @staticmethod
    def _valued(nodes, real_only: bool):
        for n in nodes:
            if real_only and not n.has_real_value:
                continue
            if n.has_value:
                yield n
