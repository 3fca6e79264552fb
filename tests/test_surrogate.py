"""
Tests for Surrogate-Gated Variants (BaMSOO, IMGPO, InitBaMSOO)
"""

import math
from types import SimpleNamespace

import numpy as np
import pytest
from logo_optimizer import (
    Node,
    NodeSpace,
    Options,
    FirstMaxSplit,
    GaussianProcessSurrogate,
    LookaheadEligibility,
    SobolDesign,
    SurrogateGate,
    SurrogateUnavailable,
    bamsoo,
    bamlogo,
    imgpo,
    random_imgpo,
    init_bamsoo,
)


def centered_quadratic(x):
    return -float(np.sum((x - 0.5) ** 2))


def shifted_quadratic(x):
    return -float(np.sum((x - 0.3) ** 2))


class CountingObjective:

    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self, x):
        self.calls += 1
        return self.fn(x)


class TestGaussianProcessSurrogate:
    """Test the GP binding."""

    def test_not_valid_below_two_samples(self):
        """Fewer than two samples cannot be fit."""
        gp = GaussianProcessSurrogate(1)
        gp.add_sample([0.5], 1.0)
        assert not gp.is_valid()
        with pytest.raises(SurrogateUnavailable):
            gp.fit()

    def test_predict_before_fit(self):
        """Predictions need a fitted model."""
        gp = GaussianProcessSurrogate(1)
        with pytest.raises(SurrogateUnavailable):
            gp.predict([0.5])

    def test_bad_sample_shape(self):
        """Samples must match the dimension."""
        gp = GaussianProcessSurrogate(2)
        with pytest.raises(ValueError):
            gp.add_sample([0.5], 1.0)

    def test_interpolates(self):
        """Noiseless GP reproduces its training data."""
        gp = GaussianProcessSurrogate(1)
        xs = [0.1, 0.3, 0.5, 0.7, 0.9]
        for x in xs:
            gp.add_sample([x], shifted_quadratic(np.array([x])))
        gp.fit()

        mean, std = gp.predict([0.5])
        assert mean == pytest.approx(shifted_quadratic(np.array([0.5])), abs=1e-3)
        assert std < 1e-2

    def test_stale_after_new_sample(self):
        """Adding a sample invalidates the fit."""
        gp = GaussianProcessSurrogate(1)
        gp.add_sample([0.2], 0.0)
        gp.add_sample([0.8], 1.0)
        assert gp.is_stale()
        gp.fit()
        assert not gp.is_stale()
        gp.add_sample([0.5], 0.5)
        assert gp.is_stale()

    def test_batch_shapes(self):
        """Batch prediction returns one mean and std per row."""
        gp = GaussianProcessSurrogate(2)
        gp.add_sample([0.2, 0.2], 0.0)
        gp.add_sample([0.8, 0.8], 1.0)
        gp.fit()
        mean, std = gp.predict_batch(np.array([[0.1, 0.1], [0.5, 0.5], [0.9, 0.9]]))
        assert mean.shape == (3,)
        assert std.shape == (3,)
        assert np.all(std >= 0)


class TestBoundMultiplier:
    """Test the confidence bound width."""

    def test_bamsoo_constant(self):
        """Half-width multiplier with c = 6."""
        gate = SurrogateGate(GaussianProcessSurrogate(1), bound_constant=6.0, delta=0.5)
        engine = SimpleNamespace(num_node_evals=4)
        expected = math.sqrt(2 * math.log(math.pi ** 2 * 16 / (6.0 * 0.5)))
        assert gate.bound_multiplier(engine) == pytest.approx(expected)

    def test_grows_with_evals(self):
        """More node evaluations widen the bound."""
        gate = SurrogateGate(GaussianProcessSurrogate(1), bound_constant=12.0)
        narrow = gate.bound_multiplier(SimpleNamespace(num_node_evals=2))
        wide = gate.bound_multiplier(SimpleNamespace(num_node_evals=200))
        assert wide > narrow

    def test_clamped_at_zero(self):
        """A negative logarithm gives a zero-width bound."""
        gate = SurrogateGate(GaussianProcessSurrogate(1), bound_constant=100.0, delta=1.0)
        assert gate.bound_multiplier(SimpleNamespace(num_node_evals=1)) == 0.0


class TestBaMSOO:
    """Test surrogate-gated SOO."""

    def test_first_step_real(self):
        """With one sample the surrogate is unavailable and children are evaluated."""
        # Centered optimum: no depth-1 node beats the root, so only the root is split
        engine = bamsoo(Options(objective=centered_quadratic, dim=1, max_observations=50))
        engine.step()
        assert engine.num_observations == 3
        assert engine.gate.num_fake == 0
        assert engine.gate.surrogate.num_samples == 3

    def test_budget(self):
        """Fake values cost nothing; real ones never exceed the budget."""
        objective = CountingObjective(shifted_quadratic)
        engine = bamsoo(Options(objective=objective, dim=2, max_observations=40))
        result = engine.optimize()
        assert objective.calls == result.num_observations
        assert result.num_observations <= 40

    def test_fake_values_below_best_real(self):
        """A fake value is only assigned when the bound cannot beat the best real value."""
        engine = bamsoo(Options(objective=shifted_quadratic, dim=2, max_observations=40))
        engine.optimize()
        best_real = engine.space.best_node(real_only=True).value
        for node in engine.space:
            if node.is_fake_value:
                assert node.value <= best_real

    def test_fake_node_verified_before_split(self):
        """Expanding a fake node evaluates it for real first."""
        engine = bamsoo(Options(objective=shifted_quadratic, dim=1, max_observations=50))
        engine.step()
        node = engine.space.nodes_at(1)[0]
        node.set_fake_value(10.0)
        before = engine.num_observations

        children = engine.expand(node.node_id)
        assert engine.num_observations > before
        assert len(children) == 3
        assert children[1].has_real_value
        assert children[1].value == pytest.approx(shifted_quadratic(node.center))

    def test_bamlogo_budget(self):
        """BaMLOGO respects the budget."""
        result = bamlogo(Options(objective=shifted_quadratic, dim=2, max_observations=30)).optimize()
        assert result.num_observations <= 30


class TestLookahead:
    """Test IMGPO lookahead bookkeeping."""

    def _eligibility(self, max_depth=5):
        return LookaheadEligibility(
            gate=None,
            splitter=FirstMaxSplit(),
            num_children=3,
            subtree_max_depth=max_depth,
        )

    def _engine(self, value):
        space = NodeSpace(1)
        node = Node(edges=[0.0], sizes=[1.0])
        node.set_value(value)
        space.insert(node)
        return SimpleNamespace(space=space)

    def test_initial_depth(self):
        """Lookahead starts one level deep."""
        assert self._eligibility().lookahead_depth() == 1

    def test_depth_adapts(self):
        """Depth grows after improvement and shrinks to at least four."""
        eligibility = self._eligibility()
        engine = self._engine(1.0)

        eligibility.begin_step(engine)
        eligibility.end_step(engine)
        assert eligibility.current_subtree_depth == 4.0

        eligibility.begin_step(engine)
        better = Node(edges=[0.0], sizes=[1.0])
        better.set_value(2.0)
        engine.space.insert(better)
        eligibility.end_step(engine)
        assert eligibility.current_subtree_depth == 8.0
        assert eligibility.lookahead_depth() == 5

    def test_force_after_empty_step(self):
        """A step accepting nothing forces the next expansion."""
        eligibility = self._eligibility()
        engine = self._engine(1.0)
        eligibility.begin_step(engine)
        eligibility.end_step(engine)
        assert eligibility._force_next

    def test_build_subtree(self):
        """Simulated subtree has k + k^2 nodes for two levels."""
        eligibility = self._eligibility()
        root = Node(edges=[0.0], sizes=[1.0])
        subtree = eligibility.build_subtree(root, 2)
        assert len(subtree) == 3 + 9
        assert {n.depth for n in subtree} == {1, 2}
        assert all(not n.has_value for n in subtree)


class TestLookaheadDecision:
    """Test the subtree comparison against a deeper real node."""

    def _gate(self, level=None):
        """Gate whose surrogate predicts close to ``level`` with zero-width bounds."""
        gp = GaussianProcessSurrogate(1)
        if level is not None:
            for x in (0.1, 0.3, 0.5, 0.7, 0.9):
                gp.add_sample([x], level + 0.01 * x)
            gp.fit()
        # pi^2 / 100 < 1, so the bound multiplier is clamped to zero at n = 1
        return SurrogateGate(gp, bound_constant=100.0, delta=1.0)

    def _setup(self, level=None, deeper=True):
        space = NodeSpace(1)
        candidate = Node(edges=[0.0], sizes=[1.0 / 3], depth=1)
        candidate.set_value(-1.0)
        space.insert(candidate)
        if deeper:
            node = Node(edges=[2.0 / 3], sizes=[1.0 / 9], depth=2)
            node.set_value(0.5)
            space.insert(node)

        eligibility = LookaheadEligibility(
            gate=self._gate(level),
            splitter=FirstMaxSplit(),
            num_children=3,
            subtree_max_depth=5,
        )
        engine = SimpleNamespace(space=space, num_node_evals=1)
        return eligibility, engine, candidate

    def test_skipped_when_subtree_bound_lower(self):
        """Subtree UCB below the deeper node's value skips the candidate."""
        eligibility, engine, candidate = self._setup(level=-1.0)
        assert not eligibility.should_expand(engine, candidate)
        assert eligibility.num_skipped == 1

    def test_expanded_when_subtree_bound_higher(self):
        """Subtree UCB reaching past the deeper node's value expands the candidate."""
        eligibility, engine, candidate = self._setup(level=2.0)
        assert eligibility.should_expand(engine, candidate)
        assert eligibility.num_skipped == 0

    def test_expanded_without_deeper_node(self):
        """No deeper node at or above vmax means no lookahead."""
        eligibility, engine, candidate = self._setup(deeper=False)
        assert eligibility.should_expand(engine, candidate)

    def test_expanded_when_surrogate_unavailable(self):
        """An unfit surrogate cannot veto an expansion."""
        eligibility, engine, candidate = self._setup(level=None)
        assert eligibility.should_expand(engine, candidate)
        assert eligibility.num_skipped == 0

    def test_vmax_checked_first(self):
        """A candidate not beating vmax is rejected before any lookahead."""
        eligibility, engine, candidate = self._setup(level=2.0)
        eligibility.vmax = 0.0
        assert not eligibility.should_expand(engine, candidate)
        assert eligibility.num_skipped == 0


class TestIMGPO:
    """Test complete IMGPO runs."""

    def test_budget(self):
        """IMGPO respects the budget."""
        objective = CountingObjective(shifted_quadratic)
        result = imgpo(Options(objective=objective, dim=1, max_observations=30)).optimize()
        assert objective.calls == result.num_observations
        assert result.num_observations <= 30

    def test_split_decisions_cached(self):
        """Every real expansion is recorded in the split cache."""
        engine = random_imgpo(Options(objective=shifted_quadratic, dim=2, max_observations=25))
        engine.optimize()
        assert len(engine.splitter) >= engine.num_expansions - 1

    def test_finds_maximum(self):
        """IMGPO gets close to the maximum of a smooth function."""
        result = imgpo(Options(objective=shifted_quadratic, dim=1, max_observations=40)).optimize()
        assert result.value > -1e-2


class TestInitBaMSOO:
    """Test the Sobol warm start."""

    def test_design_reproducible(self):
        """Same seed, same points."""
        a = SobolDesign(3, 8, seed=1).generate()
        b = SobolDesign(3, 8, seed=1).generate()
        assert len(a) == 8
        for p, q in zip(a, b):
            np.testing.assert_array_equal(p, q)
            assert np.all((p >= 0) & (p < 1))

    def test_empty_design(self):
        """Zero points gives an empty design."""
        assert SobolDesign(2, 0).generate() == []

    def test_warm_start_counts(self):
        """Warm-start points are real evaluations."""
        engine = init_bamsoo(Options(
            objective=shifted_quadratic, dim=2, max_observations=50, init_observations=6
        ))
        assert engine.num_observations == 7
        assert engine.gate.surrogate.num_samples == 7

    def test_warm_start_within_budget(self):
        """Warm start stops when the budget is spent."""
        objective = CountingObjective(shifted_quadratic)
        engine = init_bamsoo(Options(
            objective=objective, dim=2, max_observations=5, init_observations=10
        ))
        assert engine.num_observations == 5
        assert objective.calls == 5
        assert engine.is_finished()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
