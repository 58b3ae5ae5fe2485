"""
Uncertain Configuration

Environment configuration for sampling defaults, SPRT error rates,
and the household bill model.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass
class SamplingConfig:
    """Monte Carlo and SPRT defaults."""
    sample_count: int = int(os.getenv("UNCERTAIN_SAMPLE_COUNT", "1000"))
    confidence: float = float(os.getenv("UNCERTAIN_CONFIDENCE", "0.95"))
    alpha: float = float(os.getenv("UNCERTAIN_SPRT_ALPHA", "0.05"))
    beta: float = float(os.getenv("UNCERTAIN_SPRT_BETA", "0.05"))
    max_samples: int = int(os.getenv("UNCERTAIN_SPRT_MAX_SAMPLES", "10000"))

    # Rejection sampling budget for filter(); None means unbounded
    filter_max_attempts: Optional[int] = _optional_int("UNCERTAIN_FILTER_MAX_ATTEMPTS")

    # Seed for the shared generator; None draws entropy from the OS
    seed: Optional[int] = _optional_int("UNCERTAIN_SEED")


@dataclass
class BillingConfig:
    """Household bill model configuration."""
    price_per_kwh: float = float(os.getenv("BILLING_PRICE_PER_KWH", "0.20"))
    sample_count: int = int(os.getenv("BILLING_SAMPLE_COUNT", "2000"))
    confidence: float = float(os.getenv("BILLING_CONFIDENCE", "0.90"))


@dataclass
class Config:
    """Main configuration container."""
    sampling: SamplingConfig
    billing: BillingConfig

    log_level: str = os.getenv("UNCERTAIN_LOG_LEVEL", "INFO")

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            sampling=SamplingConfig(),
            billing=BillingConfig(),
        )


# Global config instance
config = Config.from_env()
