"""
Statistical Estimators

Monte Carlo reductions over an Uncertain value's sample stream.

Every call draws its own fresh batch of `sample_count` i.i.d. values
(default: config.sampling.sample_count, 1000) and reduces it; nothing is
cached between calls and results converge only as sample_count grows.

The functions accept anything exposing `take(n)`, so they also work on
plain sampler wrappers in tests.
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from src.config import config
from src.uncertain.params import EstimatorParams


# =============================================================================
# Result types
# =============================================================================

@dataclass(frozen=True)
class ConfidenceInterval:
    """Empirical interval [lower, upper] at the given confidence level."""
    lower: Any
    upper: Any
    confidence: float

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: Any) -> bool:
        return self.lower <= value <= self.upper

    def to_dict(self) -> dict:
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


@dataclass(frozen=True)
class DistributionSummary:
    """
    Realised scalars from one sample batch.

    Collaborators persist these instead of the distribution itself.
    """
    mean: float
    std: float
    ci_low: float
    ci_high: float
    confidence: float
    n_samples: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "ci": [float(self.ci_low), float(self.ci_high)],
            "confidence": self.confidence,
            "n_samples": self.n_samples,
        }


# =============================================================================
# Sampling helpers
# =============================================================================

def _resolve(sample_count: Optional[int], confidence: Optional[float] = None) -> EstimatorParams:
    return EstimatorParams(
        sample_count=sample_count if sample_count is not None else config.sampling.sample_count,
        confidence=confidence,
    )


def _draw(uncertain, sample_count: Optional[int]) -> List[Any]:
    return uncertain.take(_resolve(sample_count).sample_count)


def _draw_numeric(uncertain, sample_count: Optional[int]) -> np.ndarray:
    return np.asarray(_draw(uncertain, sample_count), dtype=float)


def _central_moments(samples: np.ndarray):
    """Population mean and standard deviation, two-pass."""
    mean = float(np.mean(samples))
    deviations = samples - mean
    std = math.sqrt(float(np.mean(deviations ** 2)))
    return mean, std, deviations


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# =============================================================================
# Numeric moments
# =============================================================================

def expected_value(uncertain, sample_count: Optional[int] = None) -> float:
    """Arithmetic mean of one batch."""
    return float(np.mean(_draw_numeric(uncertain, sample_count)))


def variance(uncertain, sample_count: Optional[int] = None) -> float:
    """Population variance (divides by n)."""
    _, std, _ = _central_moments(_draw_numeric(uncertain, sample_count))
    return std ** 2


def standard_deviation(uncertain, sample_count: Optional[int] = None) -> float:
    _, std, _ = _central_moments(_draw_numeric(uncertain, sample_count))
    return std


def skewness(uncertain, sample_count: Optional[int] = None) -> float:
    """Third standardised moment. Zero spread gives 0.0."""
    _, std, deviations = _central_moments(_draw_numeric(uncertain, sample_count))
    if std == 0:
        return 0.0
    return float(np.mean(deviations ** 3)) / std ** 3


def kurtosis(uncertain, sample_count: Optional[int] = None) -> float:
    """Excess kurtosis (fourth standardised moment minus 3). Zero spread gives 0.0."""
    _, std, deviations = _central_moments(_draw_numeric(uncertain, sample_count))
    if std == 0:
        return 0.0
    return float(np.mean(deviations ** 4)) / std ** 4 - 3.0


def log_likelihood(uncertain, value: float, sample_count: Optional[int] = None, bandwidth: float = 1.0) -> float:
    """
    Gaussian kernel density estimate of log p(value).

    Returns -inf when every kernel underflows to zero.
    """
    if bandwidth <= 0:
        raise ValueError(f"bandwidth must be positive, got {bandwidth}")
    samples = _draw_numeric(uncertain, sample_count)
    z = (value - samples) / bandwidth
    kernels = np.exp(-0.5 * z ** 2) / (bandwidth * math.sqrt(2.0 * math.pi))
    density = float(np.mean(kernels))
    if density <= 0:
        return float("-inf")
    return math.log(density)


# =============================================================================
# Frequency-based (hashable values)
# =============================================================================

def histogram(uncertain, sample_count: Optional[int] = None) -> Dict[Any, int]:
    """Value -> occurrence count, keyed in first-seen order."""
    return dict(Counter(_draw(uncertain, sample_count)))


def mode(uncertain, sample_count: Optional[int] = None) -> Optional[Any]:
    """Most frequent value; ties go to the value seen first."""
    counts = histogram(uncertain, sample_count)
    best_value = None
    best_count = 0
    for value, count in counts.items():
        if count > best_count:
            best_value, best_count = value, count
    return best_value


def entropy(uncertain, sample_count: Optional[int] = None) -> float:
    """Empirical Shannon entropy in bits."""
    counts = histogram(uncertain, sample_count)
    total = float(sum(counts.values()))
    bits = 0.0
    for count in counts.values():
        p = count / total
        if p > 0:
            bits -= p * math.log2(p)
    return bits


# =============================================================================
# Order-based (comparable values)
# =============================================================================

def quantile(uncertain, q: float, sample_count: Optional[int] = None) -> Any:
    """Sorted-sample quantile at index round(q * (n - 1)), clamped to the sample range."""
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"Quantile must be between 0 and 1, got {q}")
    samples = sorted(_draw(uncertain, sample_count))
    index = _round_half_up(q * (len(samples) - 1))
    return samples[min(max(index, 0), len(samples) - 1)]


def median(uncertain, sample_count: Optional[int] = None) -> Any:
    return quantile(uncertain, 0.5, sample_count)


def cdf(uncertain, value: Any, sample_count: Optional[int] = None) -> float:
    """Fraction of draws <= value."""
    samples = _draw(uncertain, sample_count)
    return sum(1 for s in samples if s <= value) / len(samples)


def _interval_from_sorted(samples: List[Any], confidence: float) -> ConfidenceInterval:
    n = len(samples)
    alpha = 1.0 - confidence
    lower_index = math.floor(alpha / 2.0 * n)
    upper_index = math.floor((1.0 - alpha / 2.0) * n) - 1
    lower_index = min(max(lower_index, 0), n - 1)
    upper_index = min(max(upper_index, 0), n - 1)
    return ConfidenceInterval(lower=samples[lower_index], upper=samples[upper_index], confidence=confidence)


def confidence_interval(
    uncertain, confidence: Optional[float] = None, sample_count: Optional[int] = None
) -> ConfidenceInterval:
    """
    Percentile interval from one sorted batch.

    Lower index floor(alpha/2 * n), upper index floor((1 - alpha/2) * n) - 1,
    both clamped into the sample range.
    """
    params = _resolve(sample_count, confidence if confidence is not None else config.sampling.confidence)
    samples = sorted(uncertain.take(params.sample_count))
    return _interval_from_sorted(samples, params.confidence)


def summarize(
    uncertain, confidence: Optional[float] = None, sample_count: Optional[int] = None
) -> DistributionSummary:
    """Mean, std and confidence interval, all from the same batch."""
    params = _resolve(sample_count, confidence if confidence is not None else config.sampling.confidence)
    samples = np.sort(np.asarray(uncertain.take(params.sample_count), dtype=float))
    mean, std, _ = _central_moments(samples)
    interval = _interval_from_sorted(samples.tolist(), params.confidence)
    return DistributionSummary(
        mean=mean,
        std=std,
        ci_low=interval.lower,
        ci_high=interval.upper,
        confidence=params.confidence,
        n_samples=params.sample_count,
    )
