"""Postal code to neighborhood resolution with a deterministic fallback."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from bulkadd.config import PipelineConfig
from bulkadd.domain.errors import LookupNotFoundError, RetryExhaustedError
from bulkadd.domain.ingest_pipeline.retry import retry_lookup
from bulkadd.domain.model import SYNTHESIZED_ID_PREFIX, NeighborhoodInfo

if TYPE_CHECKING:
    from bulkadd.domain.ingest_pipeline.retry import Sleep
    from bulkadd.domain.ports import NeighborhoodDirectory

log = getLogger(__name__)


def synthesize_neighborhood(code: str, *, city: str, state: str) -> NeighborhoodInfo:
    """Stand-in record derived only from ``code``, so reruns produce the same id."""

    return NeighborhoodInfo(
        id=f"{SYNTHESIZED_ID_PREFIX}{code}",
        name=f"{code} Area",
        city=city,
        state=state,
    )


class NeighborhoodResolver:
    """Resolve neighborhoods by postal code; never fails on lookup errors.

    A definitive not-found (or an empty answer) falls back immediately. Lookup
    failures are retried within the budget and then fall back as well. Each
    distinct code is looked up once per resolver; concurrent callers asking for
    the same code share the in-flight lookup.
    """

    def __init__(
        self,
        directory: NeighborhoodDirectory,
        *,
        config: PipelineConfig | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._directory = directory
        self._config = config or PipelineConfig()
        self._sleep = sleep
        self._memo: dict[str, asyncio.Task[NeighborhoodInfo]] = {}

    async def resolve_by_postal_code(self, code: str) -> NeighborhoodInfo:
        key = code.strip()
        task = self._memo.get(key)
        if task is None:
            task = asyncio.ensure_future(self._lookup(key))
            self._memo[key] = task
        # Cancelling one waiting item must not cancel the shared lookup
        return await asyncio.shield(task)

    async def aclose(self) -> None:
        """Cancel lookups nobody is waiting on any more and wait for them to stop."""

        pending = [task for task in self._memo.values() if not task.done()]
        if not pending:
            return
        log.debug("Cancelling %d unfinished neighborhood lookups", len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    def fallback(self, code: str) -> NeighborhoodInfo:
        return synthesize_neighborhood(
            code,
            city=self._config.default_city,
            state=self._config.default_state,
        )

    async def _lookup(self, code: str) -> NeighborhoodInfo:
        async def lookup() -> list[NeighborhoodInfo]:
            return await self._directory.by_postal_code(code)

        try:
            found = await retry_lookup(
                lookup,
                budget=self._config.retry_budget,
                label=f"Neighborhood lookup for {code}",
                give_up_on=(LookupNotFoundError,),
                sleep=self._sleep,
            )
        except LookupNotFoundError:
            log.warning("No neighborhood for postal code %s; using fallback", code)
            return self.fallback(code)
        except RetryExhaustedError:
            log.warning("Neighborhood lookup for %s exhausted; using fallback", code)
            return self.fallback(code)

        if not found:
            log.warning("Empty neighborhood list for postal code %s; using fallback", code)
            return self.fallback(code)
        return self._with_defaults(found[0])

    def _with_defaults(self, info: NeighborhoodInfo) -> NeighborhoodInfo:
        if info.city and info.state:
            return info
        return replace(
            info,
            city=info.city or self._config.default_city,
            state=info.state or self._config.default_state,
        )
