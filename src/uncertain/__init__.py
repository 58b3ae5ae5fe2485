"""
Uncertain Module

Probabilistic values as lazily sampled computation graphs, with Monte Carlo
estimators and SPRT-based conditionals.

    from src.uncertain import normal

    speed = normal(mean=5.0, standard_deviation=2.0)
    if (speed > 4.0).probability(exceeds=0.9):
        ...
"""

from .core import Uncertain
from .distributions import (
    bernoulli,
    binomial,
    categorical,
    empirical,
    exponential,
    kumaraswamy,
    mixture,
    normal,
    point,
    poisson,
    rayleigh,
    uniform,
)
from .errors import RejectionSamplingExhausted, UncertainError
from .estimators import ConfidenceInterval, DistributionSummary
from .graph import IdAllocator, SampleContext, default_allocator
from .sprt import SPRTDecision, SPRTResult, sequential_test

__all__ = [
    "Uncertain",
    "point",
    "uniform",
    "normal",
    "exponential",
    "bernoulli",
    "binomial",
    "poisson",
    "kumaraswamy",
    "rayleigh",
    "categorical",
    "empirical",
    "mixture",
    "ConfidenceInterval",
    "DistributionSummary",
    "SPRTDecision",
    "SPRTResult",
    "sequential_test",
    "IdAllocator",
    "SampleContext",
    "default_allocator",
    "UncertainError",
    "RejectionSamplingExhausted",
]
