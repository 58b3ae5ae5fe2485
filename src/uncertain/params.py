"""
Distribution Parameter Models

Pydantic models with bounds. Factories validate their arguments through
these before building a sampler, so bad input fails at construction time
with a ValidationError instead of producing a degenerate distribution.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

POISSON_MAX_LAMBDA = 700.0


class UniformParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    min: float
    max: float

    @model_validator(mode="after")
    def _ordered(self) -> "UniformParams":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self


class NormalParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    mean: float
    standard_deviation: float = Field(..., ge=0)


class ExponentialParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    rate: float = Field(..., gt=0)


class BernoulliParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    probability: float = Field(..., ge=0, le=1)


class BinomialParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    trials: int = Field(..., ge=0)
    probability: float = Field(..., ge=0, le=1)


class PoissonParams(BaseModel):
    """Knuth's sampler compares against e^-lam, which loses precision past 700."""
    model_config = ConfigDict(extra="forbid")
    lam: float = Field(..., ge=0, le=POISSON_MAX_LAMBDA)


class KumaraswamyParams(BaseModel):
    """Both shape parameters must be strictly positive."""
    model_config = ConfigDict(extra="forbid")
    a: float = Field(..., gt=0)
    b: float = Field(..., gt=0)


class RayleighParams(BaseModel):
    model_config = ConfigDict(extra="forbid")
    scale: float = Field(..., gt=0)


class SPRTParams(BaseModel):
    """
    Sequential test configuration.

    `exceeds` is the split point between the two simple hypotheses; it must
    lie strictly inside (0, 1) or the likelihood-ratio steps divide by zero.
    """
    model_config = ConfigDict(extra="forbid")
    exceeds: float = Field(..., gt=0, lt=1)
    alpha: float = Field(default=0.05, gt=0, lt=1)
    beta: float = Field(default=0.05, gt=0, lt=1)
    max_samples: int = Field(default=10000, ge=1)


class EstimatorParams(BaseModel):
    """Shared knobs for Monte Carlo estimators."""
    model_config = ConfigDict(extra="forbid")
    sample_count: int = Field(default=1000, ge=1)
    confidence: Optional[float] = Field(default=None, gt=0, lt=1)
