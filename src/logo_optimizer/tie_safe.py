"""
Tie-Safe Deterministic Ordering

Every "pick the best" decision in the optimizer goes through this module so
that ties are always broken the same way: the first candidate in iteration
order wins. Node spaces iterate depth by depth and, within a depth, in
insertion order, which makes runs reproducible bit for bit.

Also provides canonical fingerprints that identify a rectangle exactly.
"""

import hashlib
import json
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar


T = TypeVar('T')


def canonical_dumps(obj: Any) -> str:
    """Canonical JSON serialization with sorted keys."""
    return json.dumps(obj, sort_keys=True, separators=(',', ':'))


def canonical_fingerprint(obj: Any) -> str:
    """
    Compute a deterministic fingerprint for any JSON-serializable object.

    Floats are serialized with their shortest round-trip representation,
    so two objects share a fingerprint only if every float is identical.
    """
    return hashlib.sha256(canonical_dumps(obj).encode()).hexdigest()


def rectangle_fingerprint(edges: Sequence[float], sizes: Sequence[float], depth: int) -> str:
    """Exact identity of a rectangle at a given depth."""
    return canonical_fingerprint({
        "depth": int(depth),
        "edges": [float(e) for e in edges],
        "sizes": [float(s) for s in sizes],
    })


class TieSafeChoice:
    """
    Deterministic selection when scores are equal.

    Scores are compared with strict ``>`` so the earliest candidate holding
    the maximum is kept.
    """

    @staticmethod
    def select_best(
        candidates: Iterable[T],
        score_fn: Callable[[T], float],
    ) -> Optional[T]:
        """
        Select the candidate with the largest score.

        Args:
            candidates: Candidates in tie-breaking order
            score_fn: Function computing each candidate's score

        Returns:
            The first candidate with the maximal score, or None when empty
        """
        best = None
        best_score = float('-inf')
        for c in candidates:
            score = score_fn(c)
            if best is None or score > best_score:
                best = c
                best_score = score
        return best

