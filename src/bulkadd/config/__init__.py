"""Service endpoints and pipeline tuning, loaded from the environment."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import (
    NO_TRANSPORT_RETRY,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from .pipeline import PipelineConfig, RetryBudget
from .services import ServiceConfig, get_pipeline_config, get_service_config

__all__ = [
    "NO_TRANSPORT_RETRY",
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "PipelineConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryBudget",
    "RetryPolicy",
    "ServiceConfig",
    "get_pipeline_config",
    "get_service_config",
    "require_env_vars",
]
