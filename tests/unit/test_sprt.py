"""
Sequential Probability Ratio Test Tests

Boundary crossings, the frequency fallback and the Uncertain entry points.
"""

import pytest

from src.uncertain import (
    SPRTDecision,
    bernoulli,
    point,
    sequential_test,
    uniform,
)


def alternating():
    """Sampler yielding True, False, True, False, ..."""
    state = {"next": True}

    def _draw():
        value = state["next"]
        state["next"] = not value
        return value

    return _draw


class TestSequentialTest:

    def test_accepts_after_two_successes(self):
        # exceeds=0.9: each success multiplies by 9, boundary A = 0.95 / 0.05 = 19
        result = sequential_test(lambda: True, exceeds=0.9, alpha=0.05, beta=0.05)
        assert result.decision == SPRTDecision.ACCEPT
        assert result.accepted is True
        assert result.trials == 2
        assert result.successes == 2
        assert result.likelihood_ratio == pytest.approx(81.0)

    def test_rejects_after_two_failures(self):
        result = sequential_test(lambda: False, exceeds=0.9, alpha=0.05, beta=0.05)
        assert result.decision == SPRTDecision.REJECT
        assert result.accepted is False
        assert result.trials == 2
        assert result.successes == 0

    def test_even_odds_always_fall_back(self):
        # exceeds=0.5 leaves the likelihood ratio at 1
        result = sequential_test(lambda: True, exceeds=0.5, max_samples=3)
        assert result.decision == SPRTDecision.FALLBACK
        assert result.accepted is True
        assert result.trials == 3
        assert result.likelihood_ratio == 1.0

    def test_fallback_comparison_is_strict(self):
        result = sequential_test(alternating(), exceeds=0.5, max_samples=4)
        assert result.decision == SPRTDecision.FALLBACK
        assert result.observed_rate == 0.5
        assert result.accepted is False

    def test_trials_bounded_by_max_samples(self):
        result = sequential_test(alternating(), exceeds=0.7, max_samples=25)
        assert result.trials <= 25

    def test_to_dict(self):
        result = sequential_test(lambda: True, exceeds=0.9)
        data = result.to_dict()
        assert data["decision"] == "accept"
        assert data["accepted"] is True
        assert data["trials"] == 2
        assert result.observed_rate == 1.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"exceeds": 0.0},
            {"exceeds": 1.0},
            {"exceeds": 0.5, "alpha": 0.0},
            {"exceeds": 0.5, "beta": 1.0},
            {"exceeds": 0.5, "max_samples": 0},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            sequential_test(lambda: True, **kwargs)


class TestProbability:

    def test_likely_event(self):
        assert bernoulli(0.8).probability(exceeds=0.5) is True

    def test_unlikely_event(self):
        assert bernoulli(0.2).probability(exceeds=0.5) is False

    def test_high_rate_passes_stricter_threshold(self):
        assert bernoulli(0.95).probability(exceeds=0.6) is True

    def test_certain_and_impossible_events(self):
        assert point(True).probability(exceeds=0.99) is True
        assert point(False).probability(exceeds=0.9) is False

    def test_implicit_conditional(self):
        assert (uniform(0.0, 1.0) > 0.2).implicit_conditional() is True
        assert (uniform(0.0, 1.0) > 0.8).implicit_conditional() is False

    def test_correlated_tautology(self):
        x = uniform(0.0, 1.0)
        assert ((x > 0.5) | (x <= 0.5)).probability(exceeds=0.95) is True

    def test_bounded_by_max_samples(self):
        assert point(True).probability(exceeds=0.5, max_samples=10) is True
