"""
Distribution Factory

One constructor per distribution family, each returning an Uncertain whose
sampler calls the matching random-draw primitive.

All factories accept an optional numpy Generator (`rng`) and leaf-id
allocator (`allocator`). Without them the process-wide generator and
allocator are used. Numeric parameters are validated by the models in
src.uncertain.params and raise pydantic.ValidationError on bad input.
"""

import logging
from typing import Dict, Hashable, List, Optional, Sequence, TypeVar

import numpy as np

from src.uncertain import primitives
from src.uncertain.core import Uncertain
from src.uncertain.graph import IdAllocator
from src.uncertain.params import (
    BernoulliParams,
    BinomialParams,
    ExponentialParams,
    KumaraswamyParams,
    NormalParams,
    PoissonParams,
    RayleighParams,
    UniformParams,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else primitives.default_rng()


# =============================================================================
# Generic
# =============================================================================

def point(value: T, allocator: Optional[IdAllocator] = None) -> Uncertain[T]:
    """Point mass: every draw returns `value`."""
    return Uncertain(lambda: value, allocator)


def categorical(
    weights: Dict[K, float],
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Optional[Uncertain[K]]:
    """
    Draw keys of `weights` in proportion to their (unnormalised) weights.

    Returns None for an empty mapping; callers must check before use.
    """
    if not weights:
        return None
    generator = _rng(rng)
    # Ascending by weight, ties keep insertion order
    ordered = sorted(weights.items(), key=lambda item: item[1])
    values = [value for value, _ in ordered]
    cumulative = primitives.build_cumulative([weight for _, weight in ordered])
    return Uncertain(lambda: values[primitives.draw_index(generator, cumulative)], allocator)


def empirical(
    data: Sequence[T],
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Optional[Uncertain[T]]:
    """Uniform resampling from observed data. Returns None for empty data."""
    if not data:
        return None
    generator = _rng(rng)
    observations = list(data)
    size = len(observations)
    return Uncertain(lambda: observations[primitives.draw_choice_index(generator, size)], allocator)


def mixture(
    components: Sequence[Uncertain[T]],
    weights: Optional[Sequence[float]] = None,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[T]:
    """
    Per draw, pick a component by weight (uniform when weights is None) and
    sample it. A single component is returned unchanged.
    """
    if not components:
        raise ValueError("At least one component required")
    if len(components) == 1:
        return components[0]

    w = list(weights) if weights is not None else [1.0] * len(components)
    if len(w) != len(components):
        raise ValueError(
            f"Weights count ({len(w)}) must match components count ({len(components)})"
        )
    if any(weight < 0 for weight in w):
        raise ValueError("Mixture weights must be non-negative")

    generator = _rng(rng)
    members: List[Uncertain[T]] = list(components)
    cumulative = primitives.build_cumulative(w)
    return Uncertain(lambda: members[primitives.draw_index(generator, cumulative)].sample(), allocator)


# =============================================================================
# Continuous
# =============================================================================

def uniform(
    min: float,
    max: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[float]:
    params = UniformParams(min=min, max=max)
    generator = _rng(rng)
    return Uncertain(lambda: primitives.draw_uniform(generator, params.min, params.max), allocator)


def normal(
    mean: float,
    standard_deviation: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[float]:
    """Gaussian via Box-Muller."""
    params = NormalParams(mean=mean, standard_deviation=standard_deviation)
    generator = _rng(rng)
    return Uncertain(
        lambda: primitives.draw_normal(generator, params.mean, params.standard_deviation), allocator
    )


def exponential(
    rate: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[float]:
    params = ExponentialParams(rate=rate)
    generator = _rng(rng)
    return Uncertain(lambda: primitives.draw_exponential(generator, params.rate), allocator)


def kumaraswamy(
    a: float,
    b: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[float]:
    """Kumaraswamy(a, b) on [0, 1]. Both shapes must be > 0."""
    params = KumaraswamyParams(a=a, b=b)
    generator = _rng(rng)
    return Uncertain(lambda: primitives.draw_kumaraswamy(generator, params.a, params.b), allocator)


def rayleigh(
    scale: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[float]:
    """
    Rayleigh(scale): magnitude of a 2D vector with independent N(0, scale^2)
    components, e.g. radial distance from a target point.
    """
    params = RayleighParams(scale=scale)
    generator = _rng(rng)
    return Uncertain(lambda: primitives.draw_rayleigh(generator, params.scale), allocator)


# =============================================================================
# Discrete
# =============================================================================

def bernoulli(
    probability: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[bool]:
    params = BernoulliParams(probability=probability)
    generator = _rng(rng)
    return Uncertain(lambda: primitives.draw_bernoulli(generator, params.probability), allocator)


def binomial(
    trials: int,
    probability: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[int]:
    params = BinomialParams(trials=trials, probability=probability)
    generator = _rng(rng)
    return Uncertain(
        lambda: primitives.draw_binomial(generator, params.trials, params.probability), allocator
    )


def poisson(
    lam: float,
    rng: Optional[np.random.Generator] = None,
    allocator: Optional[IdAllocator] = None,
) -> Uncertain[int]:
    """Poisson(lam) via Knuth's algorithm. lam above 700 is rejected."""
    params = PoissonParams(lam=lam)
    if params.lam > 500:
        logger.debug(f"poisson(lam={params.lam}) uses a linear-time sampler")
    generator = _rng(rng)
    return Uncertain(lambda: primitives.draw_poisson(generator, params.lam), allocator)
