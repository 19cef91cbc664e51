"""Match candidates against the external places directory."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final

from bulkadd.config import RetryBudget
from bulkadd.domain.errors import RetryExhaustedError
from bulkadd.domain.ingest_pipeline.retry import retry_lookup
from bulkadd.domain.model import ResolvedPlace

if TYPE_CHECKING:
    from bulkadd.domain.ingest_pipeline.retry import Sleep
    from bulkadd.domain.model import CandidateRecord, PlaceCandidate, RawPlaceDetails
    from bulkadd.domain.ports import PlaceDirectory

log = getLogger(__name__)

NO_MATCHES: Final[str] = "no matching places"
NO_DETAILS: Final[str] = "empty place details"


def build_query(candidate: CandidateRecord) -> str:
    # Always joined, even when the hint is blank
    return f"{candidate.name}, {candidate.location_hint}"


class PlaceResolver:
    """Autocomplete a candidate and load the chosen place's details.

    Both lookups share the same fixed retry budget. An empty match list is
    treated like a transport failure: it is retried, and once the budget is
    spent the result carries the last failure's message.
    """

    def __init__(
        self,
        directory: PlaceDirectory,
        *,
        budget: RetryBudget | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._directory = directory
        self._budget = budget or RetryBudget()
        self._sleep = sleep

    async def resolve(self, candidate: CandidateRecord) -> ResolvedPlace:
        query = build_query(candidate)

        async def lookup() -> list[PlaceCandidate]:
            return await self._directory.autocomplete(query)

        try:
            matches = await retry_lookup(
                lookup,
                budget=self._budget,
                label=f"Place lookup for line {candidate.line_number} ({query!r})",
                accept=bool,
                empty_reason=NO_MATCHES,
                sleep=self._sleep,
            )
        except RetryExhaustedError as exc:
            return ResolvedPlace.failed(exc.last_error)

        resolved = ResolvedPlace.from_matches(tuple(matches))
        if len(matches) > 1:
            log.debug(
                "Line %d matched %d places; using %s",
                candidate.line_number,
                len(matches),
                resolved.place_id,
            )
        return resolved

    async def load_details(self, place_id: str) -> RawPlaceDetails:
        """Fetch the raw details for ``place_id``.

        Raises:
            RetryExhaustedError: the budget was spent without a usable payload.
        """

        async def lookup() -> RawPlaceDetails:
            return await self._directory.details(place_id)

        return await retry_lookup(
            lookup,
            budget=self._budget,
            label=f"Place details for {place_id}",
            accept=bool,
            empty_reason=NO_DETAILS,
            sleep=self._sleep,
        )
