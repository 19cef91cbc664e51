"""Per-line records flowing through the bulk-add pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Final

from bulkadd.domain.model.enums import DuplicateSource, ResolutionStatus

DEFAULT_ENTITY_TYPE: Final[str] = "restaurant"
SYNTHESIZED_ID_PREFIX: Final[str] = "mock-"

# Place-detail payloads arrive in several shapes; the normalizer sniffs them.
type RawPlaceDetails = Mapping[str, object]


def split_tags(tags_raw: str) -> tuple[str, ...]:
    """Split a comma-separated tag string, trimming and dropping empties."""

    return tuple(tag for tag in (part.strip() for part in tags_raw.split(",")) if tag)


@dataclass(slots=True, frozen=True)
class ReferenceItem:
    """An already-known entity the batch is checked against for duplicates."""

    name: str
    location_hint: str = ""


@dataclass(slots=True, frozen=True)
class DuplicateRef:
    """Points at the record a candidate duplicates: an earlier line or a reference item."""

    source: DuplicateSource
    name: str
    line_number: int | None = None
    reference_index: int | None = None

    def describe(self) -> str:
        if self.source is DuplicateSource.BATCH:
            return f"duplicate of line {self.line_number} ({self.name})"
        return f"duplicate of existing entry #{self.reference_index} ({self.name})"


@dataclass(slots=True, frozen=True)
class CandidateRecord:
    line_number: int
    raw_text: str
    name: str
    entity_type: str = DEFAULT_ENTITY_TYPE
    location_hint: str = ""
    tags_raw: str = ""
    duplicate_of: DuplicateRef | None = None

    @property
    def tags(self) -> tuple[str, ...]:
        return split_tags(self.tags_raw)

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate_of is not None

    def with_duplicate(self, ref: DuplicateRef | None) -> CandidateRecord:
        return replace(self, duplicate_of=ref)


@dataclass(slots=True, frozen=True)
class ParseError:
    line_number: int
    raw_text: str
    reason: str


@dataclass(slots=True, frozen=True)
class PlaceCandidate:
    place_id: str
    description: str = ""


@dataclass(slots=True, frozen=True)
class ResolvedPlace:
    """Result of matching one candidate against the places directory.

    ``candidates`` keeps every returned match in ranked order so a later manual
    override can pick a different one; unattended runs use ``candidates[0]``.
    """

    status: ResolutionStatus
    place_id: str | None = None
    candidates: tuple[PlaceCandidate, ...] = ()
    error_detail: str | None = None

    @classmethod
    def from_matches(cls, matches: tuple[PlaceCandidate, ...]) -> ResolvedPlace:
        if not matches:
            raise ValueError("A resolved place needs at least one match")
        status = ResolutionStatus.SINGLE if len(matches) == 1 else ResolutionStatus.MULTIPLE
        return cls(status=status, place_id=matches[0].place_id, candidates=matches)

    @classmethod
    def failed(cls, detail: str) -> ResolvedPlace:
        return cls(status=ResolutionStatus.ERROR, error_detail=detail)

    @property
    def ok(self) -> bool:
        return self.status is not ResolutionStatus.ERROR


@dataclass(slots=True, frozen=True)
class NormalizedAddress:
    street_number: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None

    def compose(self) -> str:
        """Render ``"{number} {street}, {city}, {state} {postal}"`` skipping blank parts."""

        street_line = " ".join(part for part in (self.street_number, self.street) if part)
        region = " ".join(part for part in (self.state, self.postal_code) if part)
        return ", ".join(part for part in (street_line, self.city, region) if part)


@dataclass(slots=True, frozen=True)
class NeighborhoodInfo:
    id: str
    name: str
    city: str = ""
    state: str = ""

    @property
    def is_synthesized(self) -> bool:
        return self.id.startswith(SYNTHESIZED_ID_PREFIX)


@dataclass(slots=True, frozen=True)
class ProcessedItem:
    """A fully resolved line, ready to be part of the batch submission."""

    candidate: CandidateRecord
    place_id: str
    formatted_address: str
    address: NormalizedAddress
    neighborhood: NeighborhoodInfo
    tags: tuple[str, ...] = field(default=())

    @property
    def line_number(self) -> int:
        return self.candidate.line_number

    @property
    def name(self) -> str:
        return self.candidate.name
