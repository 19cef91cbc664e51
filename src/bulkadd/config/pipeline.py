"""Pipeline tuning values: retry budget, concurrency, fallback locality."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ConfigurationError

DEFAULT_CITY = "New York"
DEFAULT_STATE = "NY"
DEFAULT_CONCURRENCY = 4


@dataclass(slots=True, frozen=True)
class RetryBudget:
    """Upper bound on upstream calls per lookup, with a fixed wait between attempts."""

    attempts: int = 3
    delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ConfigurationError("Retry budget needs at least one attempt")
        if self.delay_seconds < 0:
            raise ConfigurationError("Retry delay must be non-negative")


@dataclass(slots=True, frozen=True)
class PipelineConfig:
    retry_budget: RetryBudget = field(default_factory=RetryBudget)
    concurrency: int = DEFAULT_CONCURRENCY
    default_city: str = DEFAULT_CITY
    default_state: str = DEFAULT_STATE
    deadline_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ConfigurationError("Pipeline concurrency must be at least 1")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ConfigurationError("Pipeline deadline must be positive when set")
