"""Advisory duplicate flagging within a batch and against known entries."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bulkadd.domain.model import DuplicateRef, DuplicateSource

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from bulkadd.domain.model import CandidateRecord, ReferenceItem

log = getLogger(__name__)

type DuplicateKey = tuple[str, str]


def city_component(location_hint: str) -> str:
    """First comma-separated part of a location hint ("Brooklyn, NY" -> "Brooklyn")."""

    return location_hint.split(",", 1)[0].strip()


def duplicate_key(name: str, location_hint: str) -> DuplicateKey:
    return name.strip().casefold(), city_component(location_hint).casefold()


class DuplicateDetector:
    """Annotate candidates with a ``duplicate_of`` pointer.

    A match against the reference set wins over a match inside the batch;
    within the batch every later occurrence points at the first one.
    """

    def detect(
        self,
        candidates: Sequence[CandidateRecord],
        reference: Iterable[ReferenceItem] = (),
    ) -> list[CandidateRecord]:
        reference_index: dict[DuplicateKey, DuplicateRef] = {}
        for index, item in enumerate(reference):
            key = duplicate_key(item.name, item.location_hint)
            reference_index.setdefault(
                key,
                DuplicateRef(source=DuplicateSource.REFERENCE, name=item.name, reference_index=index),
            )

        first_seen: dict[DuplicateKey, DuplicateRef] = {}
        annotated: list[CandidateRecord] = []
        for candidate in candidates:
            key = duplicate_key(candidate.name, candidate.location_hint)
            ref = reference_index.get(key) or first_seen.get(key)
            if key not in first_seen:
                first_seen[key] = DuplicateRef(
                    source=DuplicateSource.BATCH,
                    name=candidate.name,
                    line_number=candidate.line_number,
                )
            annotated.append(candidate.with_duplicate(ref))

        flagged = sum(1 for candidate in annotated if candidate.is_duplicate)
        if flagged:
            log.info("Flagged %d of %d candidates as likely duplicates", flagged, len(annotated))
        return annotated


@runtime_checkable
class DuplicatePolicy(Protocol):
    """Caller decision on what happens to flagged duplicates."""

    def should_skip(self, candidate: CandidateRecord) -> bool: ...


class AdvisoryDuplicatePolicy:
    """Duplicates are reported but still processed and submitted."""

    def should_skip(self, candidate: CandidateRecord) -> bool:  # noqa: ARG002
        return False


class SkipDuplicatesPolicy:
    def should_skip(self, candidate: CandidateRecord) -> bool:
        return candidate.is_duplicate
