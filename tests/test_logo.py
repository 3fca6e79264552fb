"""
Tests for LOGO depth sets and DOO upper bounds
"""

from types import SimpleNamespace

import numpy as np
import pytest
from logo_optimizer import (
    Node,
    NodeSpace,
    Options,
    DepthSetSchedule,
    UpperBoundSchedule,
    ConfigurationError,
    logo,
    random_logo,
    doo,
)


def shifted_quadratic(x):
    return -float(np.sum((x - 0.3) ** 2))


def observed(*values):
    nodes = []
    for v in values:
        node = Node(edges=[0.0], sizes=[1.0])
        node.set_value(v)
        nodes.append(node)
    return SimpleNamespace(step_observed_nodes=nodes)


class TestDepthSetSchedule:
    """Test the adaptive width schedule."""

    def test_starts_at_first_width(self):
        """Width index starts at zero."""
        schedule = DepthSetSchedule([1, 2, 3])
        assert schedule.width_index == 0
        assert schedule.width == 1

    def test_improvement_moves_forward(self):
        """An improving step widens the depth sets."""
        schedule = DepthSetSchedule([1, 2, 3])
        schedule.end_step(observed(1.0))
        assert schedule.width == 2
        assert schedule.last_best_obs == 1.0

    def test_no_improvement_moves_back(self):
        """A worse step narrows the depth sets again."""
        schedule = DepthSetSchedule([1, 2, 3])
        schedule.end_step(observed(1.0))
        schedule.end_step(observed(0.5, 0.2))
        assert schedule.width == 1
        assert schedule.last_best_obs == 0.5

    def test_clamped(self):
        """Width index stays within the schedule."""
        schedule = DepthSetSchedule([1, 2, 3])
        for v in (1.0, 2.0, 3.0, 4.0):
            schedule.end_step(observed(v))
        assert schedule.width == 3

        for _ in range(5):
            schedule.end_step(observed(-1.0))
        assert schedule.width == 1

    def test_empty_step(self):
        """A step without observations counts as not improving."""
        schedule = DepthSetSchedule([1, 2, 3])
        schedule.end_step(observed(1.0))
        schedule.end_step(observed())
        assert schedule.width == 1
        assert schedule.last_best_obs == 1.0

    def test_empty_schedule(self):
        """Schedule must not be empty."""
        with pytest.raises(ConfigurationError):
            DepthSetSchedule([])

    def test_band_query(self):
        """Depth set i covers depths [i*w, i*w + w - 1]."""
        space = NodeSpace(1)
        nodes = []
        for d in range(6):
            node = Node(edges=[0.0], sizes=[1.0], depth=d)
            node.set_value(float(d % 3))
            space.insert(node)
            nodes.append(node)
        engine = SimpleNamespace(space=space)

        schedule = DepthSetSchedule([3])
        assert schedule.best_at(engine, 0) is nodes[2]
        assert schedule.best_at(engine, 1) is nodes[5]


class TestLOGORun:
    """Test complete LOGO runs."""

    def test_shifted_quadratic(self):
        """LOGO finds the maximum of a smooth function."""
        result = logo(Options(objective=shifted_quadratic, dim=2, max_observations=300)).optimize()
        assert result.value > -1e-2
        assert result.num_observations <= 300
        assert result.algorithm == "logo"

    def test_custom_schedule(self):
        """Width schedule comes from the options."""
        engine = logo(Options(
            objective=shifted_quadratic, dim=2, max_observations=50, w_schedule=(1, 2, 3)
        ))
        assert engine.schedule.w_schedule == (1, 2, 3)
        engine.optimize()
        assert engine.num_observations <= 50

    def test_width_one_matches_soo_depths(self):
        """With a single width of one, depth sets are single depths."""
        engine = logo(Options(
            objective=shifted_quadratic, dim=1, max_observations=40, w_schedule=(1,)
        ))
        while not engine.is_finished():
            engine.step()
            depths = [d for d, _ in engine.eligibility.triggers]
            assert depths == sorted(set(depths))

    def test_random_logo_reproducible(self):
        """Same seed, same best node and width after every step."""
        runs = []
        for _ in range(2):
            options = Options(objective=shifted_quadratic, dim=3, max_observations=80, seed=2)
            engine = random_logo(options)
            history = []
            while not engine.is_finished():
                engine.step()
                best = engine.best_node()
                history.append((best.value, tuple(best.center), engine.schedule.width))
            runs.append(history)
        assert runs[0] == runs[1]


class TestUpperBoundSchedule:
    """Test the DOO bound."""

    def test_bound(self):
        """bound = value + L * half diagonal."""
        node = Node(edges=[0.0, 0.0], sizes=[1.0, 1.0])
        node.set_value(-1.0)
        assert UpperBoundSchedule(2.0).upper_bound(node) == pytest.approx(-1.0 + 2.0 * np.sqrt(0.5))

    def test_single_candidate(self):
        """Only the node with the largest bound is offered."""
        space = NodeSpace(1)
        big = Node(edges=[0.0], sizes=[0.9])
        big.set_value(0.0)
        small = Node(edges=[0.9], sizes=[0.1])
        small.set_value(0.2)
        space.insert(big)
        space.insert(small)
        engine = SimpleNamespace(space=space)

        assert list(UpperBoundSchedule(1.0).candidates(engine)) == [big]
        assert list(UpperBoundSchedule(0.0).candidates(engine)) == [small]


class TestDOORun:
    """Test complete DOO runs."""

    def test_one_expansion_per_step(self):
        """DOO splits exactly one node per step."""
        engine = doo(Options(objective=shifted_quadratic, dim=2, max_observations=500))
        for i in range(10):
            engine.step()
            assert engine.num_expansions == 2 + i

    def test_shifted_quadratic(self):
        """DOO converges with a valid slope bound."""
        options = Options(objective=shifted_quadratic, dim=1, max_observations=300, max_slope=2.0)
        result = doo(options).optimize()
        assert result.value > -1e-3
        assert result.num_observations <= 300

    def test_budget(self):
        """DOO respects the budget."""
        result = doo(Options(objective=shifted_quadratic, dim=3, max_observations=25)).optimize()
        assert result.num_observations <= 25


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
