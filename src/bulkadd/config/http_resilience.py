"""Per-service HTTP settings: timeout, transport retries, rate limit, response cache."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

# Receives the decoded JSON body; True keeps the response in the cache
ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retries applied by ``httpx_retries.RetryTransport``.

    Off unless ``total`` is raised. Lookups already run under a per-item retry
    budget, and the bulk submission is a POST that must reach the endpoint
    exactly once, so only GET is ever eligible.
    """

    total: int = 0
    backoff_factor: float = 0.5
    max_backoff_wait: float = 10.0
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 502, 503, 504})
    )
    allowed_methods: frozenset[str] = field(default_factory=lambda: frozenset({"GET"}))


NO_TRANSPORT_RETRY = RetryPolicy()


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """In-memory response cache that lives as long as one client (one run)."""

    enabled: bool = True
    ttl_seconds: float | None = None
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = NO_TRANSPORT_RETRY
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None

    @property
    def caching(self) -> bool:
        return self.cache is not None and self.cache.enabled
