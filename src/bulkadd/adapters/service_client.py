"""Shared lifecycle for the service adapters built on ``ResilientClient``."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Self

from bulkadd.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from bulkadd.config.http_resilience import ResilienceConfig

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


class ServiceClient:
    """Holds one ``ResilientClient`` while used as an async context manager.

    Inside ``async with`` every call reuses the open client so the rate limiter
    and response cache span the whole run. The synchronous helpers open a
    short-lived client for a single call instead.
    """

    def __init__(
        self,
        *,
        resilience: ResilienceConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._resilience = resilience
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    @property
    def resilience(self) -> ResilienceConfig:
        return self._resilience

    async def __aenter__(self) -> Self:
        if self._client is not None:
            raise RuntimeError(f"{self._resilience.name} client is already open")
        self._client = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def _call[T](self, operation: Callable[[ResilientClient], Awaitable[T]]) -> T:
        if self._client is not None:
            return await operation(self._client)
        async with self._client_factory(self._resilience) as client:
            return await operation(client)

    def _run[T](self, operation: Callable[[ResilientClient], Awaitable[T]]) -> T:
        return asyncio.run(self._call(operation))
