"""Submission payloads, per-item results and the run report."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from bulkadd.domain.model.enums import ItemOutcome, PipelineStage, SubmissionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from bulkadd.domain.model.records import (
        CandidateRecord,
        DuplicateRef,
        ParseError,
        ProcessedItem,
        ResolvedPlace,
    )


@dataclass(slots=True, frozen=True)
class SubmissionRecord:
    """Wire-neutral shape of one item inside the bulk submission."""

    line_number: int
    name: str
    entity_type: str
    place_id: str
    address: str
    neighborhood_id: str
    tags: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class SubmissionReplyItem:
    line_number: int
    id: str | None = None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class SubmissionReply:
    """Interpreted answer of the bulk endpoint.

    ``success`` is ``None`` when the endpoint omitted the indicator entirely.
    """

    success: bool | None
    added: int = 0
    errors: int = 0
    message: str | None = None
    items: tuple[SubmissionReplyItem, ...] | None = None


@dataclass(slots=True, frozen=True)
class SubmittedItemResult:
    line_number: int
    accepted: bool
    entity_id: str | None = None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class BatchSubmitResult:
    status: SubmissionStatus
    added_count: int = 0
    error_count: int = 0
    per_item_results: tuple[SubmittedItemResult, ...] = ()
    detail: str | None = None

    @property
    def attempted(self) -> bool:
        return self.status is not SubmissionStatus.NOT_ATTEMPTED

    def result_for(self, line_number: int) -> SubmittedItemResult | None:
        for result in self.per_item_results:
            if result.line_number == line_number:
                return result
        return None


@dataclass(slots=True, frozen=True)
class ItemResult:
    """Where one input line stopped, and why."""

    line_number: int
    raw_text: str
    outcome: ItemOutcome
    stage: PipelineStage
    reason: str | None = None
    candidate: CandidateRecord | None = None
    duplicate_of: DuplicateRef | None = None
    resolved_place: ResolvedPlace | None = None
    processed: ProcessedItem | None = None

    @classmethod
    def from_parse_error(cls, error: ParseError) -> ItemResult:
        return cls(
            line_number=error.line_number,
            raw_text=error.raw_text,
            outcome=ItemOutcome.PARSED_FAILED,
            stage=PipelineStage.PARSE,
            reason=error.reason,
        )


def _failure_counts(outcomes: Iterable[ItemResult]) -> Mapping[ItemOutcome, int]:
    counts = Counter(result.outcome for result in outcomes if result.outcome.is_failure)
    return MappingProxyType(dict(counts))


@dataclass(slots=True, frozen=True)
class BatchReport:
    total_lines: int
    parsed_count: int
    parse_errors: tuple[ParseError, ...]
    submission_status: SubmissionStatus
    outcomes: tuple[ItemResult, ...]
    submission: BatchSubmitResult | None = None
    failure_counts: Mapping[ItemOutcome, int] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "failure_counts", _failure_counts(self.outcomes))

    @property
    def submitted_count(self) -> int:
        return self.count(ItemOutcome.SUBMITTED)

    @property
    def duplicate_count(self) -> int:
        return sum(1 for result in self.outcomes if result.duplicate_of is not None)

    def count(self, outcome: ItemOutcome) -> int:
        return sum(1 for result in self.outcomes if result.outcome is outcome)

    def outcome_for(self, line_number: int) -> ItemResult | None:
        for result in self.outcomes:
            if result.line_number == line_number:
                return result
        return None

    def summary(self) -> dict[str, object]:
        """Plain, JSON-friendly view of the counts."""

        return {
            "total": self.total_lines,
            "parsed": self.parsed_count,
            "submitted": self.submitted_count,
            "duplicates": self.duplicate_count,
            "submission": str(self.submission_status),
            "failures": {str(outcome): count for outcome, count in self.failure_counts.items()},
            "added": self.submission.added_count if self.submission else 0,
        }
