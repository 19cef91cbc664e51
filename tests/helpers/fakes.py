"""In-memory fakes of the pipeline ports for tests."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bulkadd.domain.errors import LookupFailedError
from bulkadd.domain.model import (
    NeighborhoodInfo,
    PlaceCandidate,
    SubmissionRecord,
    SubmissionReply,
    SubmissionReplyItem,
)
from bulkadd.domain.ports import NeighborhoodDirectory, PlaceDirectory, SubmissionEndpoint

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from bulkadd.domain.model import RawPlaceDetails

# A scripted answer is either a value or an exception to raise; the last one repeats.
type Script[T] = Sequence[T | Exception]


def _next_answer[T](script: Script[T], call_index: int) -> T:
    answer = script[min(call_index, len(script) - 1)]
    if isinstance(answer, Exception):
        raise answer
    return answer


def joes_pizza_details() -> dict[str, object]:
    return {
        "name": "Joe's Pizza",
        "formatted_address": "7 Carmine St, New York, NY 10014, USA",
        "address_components": [
            {"long_name": "7", "short_name": "7", "types": ["street_number"]},
            {"long_name": "Carmine Street", "short_name": "Carmine St", "types": ["route"]},
            {"long_name": "New York", "short_name": "New York", "types": ["locality", "political"]},
            {
                "long_name": "New York",
                "short_name": "NY",
                "types": ["administrative_area_level_1", "political"],
            },
            {"long_name": "10014", "short_name": "10014", "types": ["postal_code"]},
            {"long_name": "United States", "short_name": "US", "types": ["country", "political"]},
        ],
    }


@dataclass
class FakePlaceDirectory(PlaceDirectory):
    """Answers autocomplete by query and details by place id.

    Unknown queries return no matches; unknown place ids raise a lookup failure.
    """

    matches: Mapping[str, Script[list[PlaceCandidate]]] = field(default_factory=dict)
    details_by_id: Mapping[str, Script[RawPlaceDetails]] = field(default_factory=dict)
    autocomplete_calls: list[str] = field(default_factory=list)
    details_calls: list[str] = field(default_factory=list)

    async def autocomplete(self, query: str) -> list[PlaceCandidate]:
        index = self.autocomplete_calls.count(query)
        self.autocomplete_calls.append(query)
        script = self.matches.get(query)
        if script is None:
            return []
        return list(_next_answer(script, index))

    async def details(self, place_id: str) -> RawPlaceDetails:
        index = self.details_calls.count(place_id)
        self.details_calls.append(place_id)
        script = self.details_by_id.get(place_id)
        if script is None:
            raise LookupFailedError(f"unknown place {place_id}")
        return _next_answer(script, index)


@dataclass
class FakeNeighborhoodDirectory(NeighborhoodDirectory):
    by_code: Mapping[str, Script[list[NeighborhoodInfo]]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def by_postal_code(self, code: str) -> list[NeighborhoodInfo]:
        index = self.calls.count(code)
        self.calls.append(code)
        script = self.by_code.get(code)
        if script is None:
            return []
        return list(_next_answer(script, index))


@dataclass
class FakeSubmissionEndpoint(SubmissionEndpoint):
    """Accepts every record unless a reply or an error is scripted."""

    reply: SubmissionReply | None = None
    error: Exception | None = None
    batches: list[list[SubmissionRecord]] = field(default_factory=list)

    async def submit(self, records: Sequence[SubmissionRecord]) -> SubmissionReply:
        self.batches.append(list(records))
        if self.error is not None:
            raise self.error
        if self.reply is not None:
            return self.reply
        return SubmissionReply(
            success=True,
            added=len(records),
            errors=0,
            items=tuple(
                SubmissionReplyItem(line_number=record.line_number, id=f"r{record.line_number}")
                for record in records
            ),
        )


@dataclass
class RecordingSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def call_counts(calls: Sequence[str]) -> dict[str, int]:
    counts: dict[str, int] = defaultdict(int)
    for call in calls:
        counts[call] += 1
    return dict(counts)
