"""Endpoint configuration for the places, neighborhood and submission services."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_float, env_int, optional_env_var, require_env_vars
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ShouldCacheHook,
)
from .pipeline import (
    DEFAULT_CITY,
    DEFAULT_CONCURRENCY,
    DEFAULT_STATE,
    PipelineConfig,
    RetryBudget,
)

LOOKUP_TIMEOUT_SECONDS = 10.0
SUBMISSION_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    places: ResilienceConfig
    neighborhoods: ResilienceConfig
    submission: ResilienceConfig
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)


def _normalize_base_url(value: str) -> str:
    # httpx joins relative paths onto base_url only when it ends with a slash
    return value if value.endswith("/") else f"{value}/"


def lookup_resilience(
    name: str,
    *,
    base_url: str,
    headers: dict[str, str] | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> ResilienceConfig:
    return ResilienceConfig(
        name=name,
        base_url=_normalize_base_url(base_url),
        timeout_seconds=LOOKUP_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=CacheConfig(should_cache=cache_predicate),
        default_headers=headers,
    )


def submission_resilience(
    *,
    base_url: str,
    headers: dict[str, str] | None = None,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="submission",
        base_url=_normalize_base_url(base_url),
        timeout_seconds=SUBMISSION_TIMEOUT_SECONDS,
        cache=None,
        default_headers=headers,
    )


def get_pipeline_config() -> PipelineConfig:
    budget = RetryBudget(
        attempts=env_int("BULKADD_RETRY_ATTEMPTS", RetryBudget().attempts),
        delay_seconds=env_float("BULKADD_RETRY_DELAY_SECONDS", RetryBudget().delay_seconds)
        or 0.0,
    )
    return PipelineConfig(
        retry_budget=budget,
        concurrency=env_int("BULKADD_CONCURRENCY", DEFAULT_CONCURRENCY),
        default_city=optional_env_var("BULKADD_DEFAULT_CITY") or DEFAULT_CITY,
        default_state=optional_env_var("BULKADD_DEFAULT_STATE") or DEFAULT_STATE,
        deadline_seconds=env_float("BULKADD_DEADLINE_SECONDS", None),
    )


def get_service_config(
    *,
    places_cache_predicate: ShouldCacheHook | None = None,
    neighborhoods_cache_predicate: ShouldCacheHook | None = None,
) -> ServiceConfig:
    values = require_env_vars(("BULKADD_API_BASE_URL",))
    base_url = values["BULKADD_API_BASE_URL"]
    token = optional_env_var("BULKADD_API_TOKEN")
    headers = {"Authorization": f"Bearer {token}"} if token else None

    return ServiceConfig(
        places=lookup_resilience(
            "places",
            base_url=base_url,
            headers=headers,
            cache_predicate=places_cache_predicate,
        ),
        neighborhoods=lookup_resilience(
            "neighborhoods",
            base_url=base_url,
            headers=headers,
            cache_predicate=neighborhoods_cache_predicate,
        ),
        submission=submission_resilience(base_url=base_url, headers=headers),
        pipeline=get_pipeline_config(),
    )
