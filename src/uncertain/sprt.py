"""
Sequential Probability Ratio Test

Decides whether a boolean-valued random quantity is True with probability
at least `exceeds`, drawing only as many samples as the evidence needs.

Hypotheses (simple vs. simple):
    H1: p = exceeds         (accept -> True)
    H0: p = 1 - exceeds     (reject -> False)

Each success multiplies the likelihood ratio by exceeds / (1 - exceeds),
each failure by (1 - exceeds) / exceeds. Sampling stops as soon as the
ratio crosses A = (1 - beta) / alpha (accept) or B = beta / (1 - alpha)
(reject), which bounds Type I error by alpha and Type II error by beta.

If `max_samples` draws pass without crossing either boundary, the test
falls back to a plain frequency comparison (observed rate > exceeds).
The fallback carries NO formal error guarantee; it exists so the call
always returns a boolean with bounded work.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from src.config import config
from src.uncertain.params import SPRTParams

logger = logging.getLogger(__name__)


class SPRTDecision(str, Enum):
    """How the sequential test terminated."""
    ACCEPT = "accept"
    REJECT = "reject"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SPRTResult:
    """Outcome of one sequential test run."""
    decision: SPRTDecision
    accepted: bool
    trials: int
    successes: int
    likelihood_ratio: float

    @property
    def observed_rate(self) -> float:
        return self.successes / self.trials if self.trials else 0.0

    def to_dict(self) -> dict:
        return {
            "decision": self.decision.value,
            "accepted": self.accepted,
            "trials": self.trials,
            "successes": self.successes,
            "likelihood_ratio": self.likelihood_ratio,
        }


def resolve_params(
    exceeds: float,
    alpha: Optional[float] = None,
    beta: Optional[float] = None,
    max_samples: Optional[int] = None,
) -> SPRTParams:
    """Fill unset error rates and sample ceiling from config, then validate."""
    return SPRTParams(
        exceeds=exceeds,
        alpha=alpha if alpha is not None else config.sampling.alpha,
        beta=beta if beta is not None else config.sampling.beta,
        max_samples=max_samples if max_samples is not None else config.sampling.max_samples,
    )


def sequential_test(
    draw: Callable[[], bool],
    exceeds: float,
    alpha: Optional[float] = None,
    beta: Optional[float] = None,
    max_samples: Optional[int] = None,
) -> SPRTResult:
    """
    Run the SPRT against `draw`, a zero-argument boolean sampler.

    Raises pydantic.ValidationError when exceeds/alpha/beta fall outside
    (0, 1) or max_samples < 1.
    """
    params = resolve_params(exceeds, alpha, beta, max_samples)

    upper_bound = (1.0 - params.beta) / params.alpha
    lower_bound = params.beta / (1.0 - params.alpha)
    success_step = params.exceeds / (1.0 - params.exceeds)
    failure_step = (1.0 - params.exceeds) / params.exceeds

    successes = 0
    trials = 0
    ratio = 1.0

    while trials < params.max_samples:
        trials += 1
        if draw():
            successes += 1
            ratio *= success_step
        else:
            ratio *= failure_step

        if ratio >= upper_bound:
            logger.debug(f"SPRT accept after {trials} trials (ratio={ratio:.4g})")
            return SPRTResult(SPRTDecision.ACCEPT, True, trials, successes, ratio)
        if ratio <= lower_bound:
            logger.debug(f"SPRT reject after {trials} trials (ratio={ratio:.4g})")
            return SPRTResult(SPRTDecision.REJECT, False, trials, successes, ratio)

    accepted = successes / trials > params.exceeds
    logger.debug(
        f"SPRT did not converge in {trials} trials; "
        f"frequency fallback {successes}/{trials} vs {params.exceeds} -> {accepted}"
    )
    return SPRTResult(SPRTDecision.FALLBACK, accepted, trials, successes, ratio)


def evaluate_probability(
    draw: Callable[[], bool],
    exceeds: float,
    alpha: Optional[float] = None,
    beta: Optional[float] = None,
    max_samples: Optional[int] = None,
) -> bool:
    """Boolean form of sequential_test()."""
    return sequential_test(draw, exceeds, alpha, beta, max_samples).accepted
