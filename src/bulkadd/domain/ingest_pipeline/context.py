"""Per-item state tracked by the orchestrator while a run is in flight."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from bulkadd.domain.errors import InvalidTransitionError
from bulkadd.domain.model import ItemOutcome, ItemResult, PipelineStage

if TYPE_CHECKING:
    from bulkadd.domain.model import CandidateRecord, ProcessedItem, ResolvedPlace

log = getLogger(__name__)


@dataclass(slots=True)
class ItemState:
    """Mutable progress record for one candidate.

    Stages only move forward. Once ``outcome`` is set the item is terminal,
    except that ``processed`` may still advance to ``submitted`` or
    ``submit-failed``.
    """

    candidate: CandidateRecord
    stage: PipelineStage = PipelineStage.DUPLICATE_CHECK
    outcome: ItemOutcome | None = None
    reason: str | None = None
    resolved_place: ResolvedPlace | None = None
    processed: ProcessedItem | None = None

    @property
    def line_number(self) -> int:
        return self.candidate.line_number

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None and self.outcome is not ItemOutcome.PROCESSED

    def enter(self, stage: PipelineStage) -> None:
        if self.outcome is not None:
            raise InvalidTransitionError(
                f"Line {self.line_number} already ended as {self.outcome}; cannot enter {stage}"
            )
        if stage.position < self.stage.position:
            raise InvalidTransitionError(
                f"Line {self.line_number} cannot move back from {self.stage} to {stage}"
            )
        log.debug("Line %d: %s -> %s", self.line_number, self.stage, stage)
        self.stage = stage

    def fail(self, outcome: ItemOutcome, reason: str) -> None:
        if self.outcome is not None:
            raise InvalidTransitionError(
                f"Line {self.line_number} already ended as {self.outcome}"
            )
        self.outcome = outcome
        self.reason = reason
        log.debug("Line %d stopped at %s: %s (%s)", self.line_number, self.stage, outcome, reason)

    def complete(self, processed: ProcessedItem) -> None:
        if self.outcome is not None:
            raise InvalidTransitionError(
                f"Line {self.line_number} already ended as {self.outcome}"
            )
        self.processed = processed
        self.outcome = ItemOutcome.PROCESSED

    def mark_submitted(self, *, accepted: bool, reason: str | None = None) -> None:
        if self.outcome is not ItemOutcome.PROCESSED:
            raise InvalidTransitionError(
                f"Line {self.line_number} was never processed; cannot record a submission"
            )
        self.stage = PipelineStage.SUBMIT
        self.outcome = ItemOutcome.SUBMITTED if accepted else ItemOutcome.SUBMIT_FAILED
        self.reason = None if accepted else reason

    def to_result(self) -> ItemResult:
        if self.outcome is None:
            raise InvalidTransitionError(f"Line {self.line_number} has no outcome yet")
        return ItemResult(
            line_number=self.line_number,
            raw_text=self.candidate.raw_text,
            outcome=self.outcome,
            stage=self.stage,
            reason=self.reason,
            candidate=self.candidate,
            duplicate_of=self.candidate.duplicate_of,
            resolved_place=self.resolved_place,
            processed=self.processed,
        )
