"""
Random-Draw Primitives

Per-distribution sampling algorithms over a numpy Generator.
Every function draws exactly one value; callers own the generator.

numpy Generators are not thread-safe. Threads sampling concurrently
should each pass their own generator to the distribution factories.
"""

import bisect
import math
from typing import List, Optional, Sequence

import numpy as np

from src.config import config

# Uniform draws feeding log() are kept inside [UNIT_EPSILON, 1 - UNIT_EPSILON]
UNIT_EPSILON = 1e-12

_shared_rng: Optional[np.random.Generator] = None


def default_rng() -> np.random.Generator:
    """Return the process-wide generator, seeded from config when a seed is set."""
    global _shared_rng
    if _shared_rng is None:
        _shared_rng = np.random.default_rng(config.sampling.seed)
    return _shared_rng


def reseed(seed: Optional[int]) -> np.random.Generator:
    """Replace the process-wide generator (used by the CLI --seed option and tests)."""
    global _shared_rng
    _shared_rng = np.random.default_rng(seed)
    return _shared_rng


# =============================================================================
# Continuous
# =============================================================================

def draw_unit(rng: np.random.Generator) -> float:
    """U(0, 1) on the half-open interval [0, 1)."""
    return float(rng.random())


def _clamped_unit(rng: np.random.Generator) -> float:
    return min(max(draw_unit(rng), UNIT_EPSILON), 1.0 - UNIT_EPSILON)


def draw_uniform(rng: np.random.Generator, low: float, high: float) -> float:
    return low + draw_unit(rng) * (high - low)


def draw_normal(rng: np.random.Generator, mean: float, standard_deviation: float) -> float:
    """
    Box-Muller transform.

    Both uniforms are clamped away from 0 and 1 so log() never sees 0.
    Only the cosine branch is used; the sine partner is discarded.
    """
    u1 = _clamped_unit(rng)
    u2 = _clamped_unit(rng)
    z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return mean + standard_deviation * z0


def draw_exponential(rng: np.random.Generator, rate: float) -> float:
    """Inverse CDF: -ln(u) / rate, with u taken from (0, 1] so log() is finite."""
    return -math.log(1.0 - draw_unit(rng)) / rate


def draw_kumaraswamy(rng: np.random.Generator, a: float, b: float) -> float:
    """Inverse CDF: (1 - (1 - u)^(1/b))^(1/a)."""
    u = draw_unit(rng)
    return (1.0 - (1.0 - u) ** (1.0 / b)) ** (1.0 / a)


def draw_rayleigh(rng: np.random.Generator, scale: float) -> float:
    """Inverse CDF: scale * sqrt(-2 ln(1 - u))."""
    u = draw_unit(rng)
    return scale * math.sqrt(-2.0 * math.log(1.0 - u))


# =============================================================================
# Discrete
# =============================================================================

def draw_bernoulli(rng: np.random.Generator, probability: float) -> bool:
    return draw_unit(rng) < probability


def draw_binomial(rng: np.random.Generator, trials: int, probability: float) -> int:
    """Sum of `trials` independent Bernoulli draws."""
    count = 0
    for _ in range(trials):
        if draw_unit(rng) < probability:
            count += 1
    return count


def draw_poisson(rng: np.random.Generator, lam: float) -> int:
    """
    Knuth's multiplicative algorithm.

    Multiplies uniforms until the running product drops to e^-lam or below.
    Cost grows linearly with lam. PoissonParams caps lam at 700, below the
    point where e^-lam underflows.
    """
    limit = math.exp(-lam)
    k = 0
    product = 1.0
    while True:
        k += 1
        product *= draw_unit(rng)
        if product <= limit:
            return k - 1


# =============================================================================
# Table lookups
# =============================================================================

def build_cumulative(weights: Sequence[float]) -> List[float]:
    """Normalise weights and return their running sums (last entry ~1.0)."""
    total = float(sum(weights))
    if total <= 0:
        raise ValueError("Weights must sum to a positive value")
    cumulative = []
    running = 0.0
    for weight in weights:
        running += weight / total
        cumulative.append(running)
    return cumulative


def draw_index(rng: np.random.Generator, cumulative: Sequence[float]) -> int:
    """
    Inverse-CDF lookup: first index whose cumulative weight exceeds u.

    Rounding can leave the last entry fractionally below 1.0; draws past it
    fall back to the last index.
    """
    idx = bisect.bisect_right(cumulative, draw_unit(rng))
    return min(idx, len(cumulative) - 1)


def draw_choice_index(rng: np.random.Generator, size: int) -> int:
    """Uniform index in [0, size)."""
    return int(rng.integers(0, size))
