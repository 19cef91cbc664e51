"""Drive every candidate through the pipeline and produce the batch report."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final

from bulkadd.config import PipelineConfig
from bulkadd.domain.errors import AddressExtractionError, RetryExhaustedError
from bulkadd.domain.ingest_pipeline.address import AddressNormalizer, formatted_address_for
from bulkadd.domain.ingest_pipeline.context import ItemState
from bulkadd.domain.ingest_pipeline.deduplication import (
    AdvisoryDuplicatePolicy,
    DuplicateDetector,
    DuplicatePolicy,
)
from bulkadd.domain.ingest_pipeline.neighborhoods import NeighborhoodResolver
from bulkadd.domain.ingest_pipeline.parsing import LineParser
from bulkadd.domain.ingest_pipeline.place_resolution import PlaceResolver
from bulkadd.domain.ingest_pipeline.submission import BatchSubmitter
from bulkadd.domain.model import (
    BatchReport,
    ItemOutcome,
    ItemResult,
    PipelineStage,
    ProcessedItem,
    ResolutionStatus,
    ResolvedPlace,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from bulkadd.domain.ingest_pipeline.retry import Sleep
    from bulkadd.domain.model import ReferenceItem
    from bulkadd.domain.ports import NeighborhoodDirectory, PlaceDirectory, SubmissionEndpoint

log = getLogger(__name__)

DEADLINE_EXCEEDED: Final[str] = "deadline exceeded"

# Outcome recorded when an unexpected error escapes a stage
_STAGE_FAILURES: Final[Mapping[PipelineStage, ItemOutcome]] = {
    PipelineStage.RESOLVE: ItemOutcome.RESOLVE_FAILED,
    PipelineStage.PLACE_DETAILS: ItemOutcome.RESOLVE_FAILED,
    PipelineStage.NORMALIZE_ADDRESS: ItemOutcome.ADDRESS_FAILED,
    PipelineStage.RESOLVE_NEIGHBORHOOD: ItemOutcome.NEIGHBORHOOD_FAILED,
}


@dataclass(slots=True)
class _RunScope:
    """Collaborators that live for exactly one run (the neighborhood memo included)."""

    places: PlaceResolver
    neighborhoods: NeighborhoodResolver
    place_overrides: Mapping[int, str]


@dataclass(slots=True)
class PipelineOrchestrator:
    """Parse, check, resolve and submit one bulk-add batch.

    A failing item never stops its siblings: every per-item failure becomes an
    ``ItemResult`` in the report. The only error that escapes ``run`` is a
    ``SubmissionContractError`` from a submission reply that cannot be read.
    """

    places: PlaceDirectory
    neighborhoods: NeighborhoodDirectory
    submission: SubmissionEndpoint
    config: PipelineConfig = field(default_factory=PipelineConfig)
    duplicate_policy: DuplicatePolicy = field(default_factory=AdvisoryDuplicatePolicy)
    parser: LineParser = field(default_factory=LineParser)
    detector: DuplicateDetector = field(default_factory=DuplicateDetector)
    normalizer: AddressNormalizer = field(default_factory=AddressNormalizer)
    sleep: Sleep = asyncio.sleep

    def run(
        self,
        raw_text: str,
        reference_set: Iterable[ReferenceItem] = (),
        *,
        place_overrides: Mapping[int, str] | None = None,
    ) -> BatchReport:
        return asyncio.run(
            self.run_async(raw_text, reference_set, place_overrides=place_overrides)
        )

    async def run_async(
        self,
        raw_text: str,
        reference_set: Iterable[ReferenceItem] = (),
        *,
        place_overrides: Mapping[int, str] | None = None,
    ) -> BatchReport:
        parsed = self.parser.parse_text(raw_text)
        log.info(
            "Bulk add started: %d lines, %d parsed, %d parse errors",
            parsed.line_count,
            len(parsed.candidates),
            len(parsed.errors),
        )

        candidates = self.detector.detect(parsed.candidates, tuple(reference_set))
        states = [ItemState(candidate) for candidate in candidates]
        for state in states:
            if state.candidate.duplicate_of is not None and self.duplicate_policy.should_skip(
                state.candidate
            ):
                state.fail(ItemOutcome.SKIPPED_DUPLICATE, state.candidate.duplicate_of.describe())

        scope = _RunScope(
            places=PlaceResolver(
                self.places, budget=self.config.retry_budget, sleep=self.sleep
            ),
            neighborhoods=NeighborhoodResolver(
                self.neighborhoods, config=self.config, sleep=self.sleep
            ),
            place_overrides=dict(place_overrides or {}),
        )
        try:
            await self._process_all([state for state in states if state.outcome is None], scope)
        finally:
            await scope.neighborhoods.aclose()

        ready = [state for state in states if state.outcome is ItemOutcome.PROCESSED]
        submitted = await BatchSubmitter(self.submission).submit(
            [state.processed for state in ready if state.processed is not None]
        )
        for state in ready:
            item_result = submitted.result_for(state.line_number)
            if item_result is None:
                state.mark_submitted(accepted=False, reason=submitted.detail or "not submitted")
            else:
                state.mark_submitted(accepted=item_result.accepted, reason=item_result.error)

        outcomes = sorted(
            [
                *(ItemResult.from_parse_error(error) for error in parsed.errors),
                *(state.to_result() for state in states),
            ],
            key=lambda result: result.line_number,
        )
        report = BatchReport(
            total_lines=parsed.line_count,
            parsed_count=len(parsed.candidates),
            parse_errors=parsed.errors,
            submission_status=submitted.status,
            outcomes=tuple(outcomes),
            submission=submitted if submitted.attempted else None,
        )
        log.info("Bulk add finished: %s", report.summary())
        return report

    async def _process_all(self, states: list[ItemState], scope: _RunScope) -> None:
        if not states:
            return

        semaphore = asyncio.Semaphore(self.config.concurrency)

        async def worker(state: ItemState) -> None:
            async with semaphore:
                await self._process_item(state, scope)

        tasks = [asyncio.create_task(worker(state)) for state in states]
        _, pending = await asyncio.wait(tasks, timeout=self.config.deadline_seconds)
        if pending:
            log.warning("Deadline reached with %d items unfinished", len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        for state in states:
            if state.outcome is None:
                state.fail(ItemOutcome.ERROR, DEADLINE_EXCEEDED)

    async def _process_item(self, state: ItemState, scope: _RunScope) -> None:
        try:
            await self._advance(state, scope)
        except Exception as exc:  # noqa: BLE001
            log.exception("Line %d failed unexpectedly during %s", state.line_number, state.stage)
            outcome = _STAGE_FAILURES.get(state.stage, ItemOutcome.ERROR)
            state.fail(outcome, f"unexpected error: {exc}")

    async def _advance(self, state: ItemState, scope: _RunScope) -> None:
        candidate = state.candidate

        state.enter(PipelineStage.RESOLVE)
        resolved = await scope.places.resolve(candidate)
        override = scope.place_overrides.get(candidate.line_number)
        if override is not None:
            log.info("Line %d: using override place %s", candidate.line_number, override)
            resolved = _apply_override(resolved, override)
        state.resolved_place = resolved
        if not resolved.ok or resolved.place_id is None:
            state.fail(ItemOutcome.RESOLVE_FAILED, resolved.error_detail or "place lookup failed")
            return

        state.enter(PipelineStage.PLACE_DETAILS)
        try:
            details = await scope.places.load_details(resolved.place_id)
        except RetryExhaustedError as exc:
            state.fail(ItemOutcome.RESOLVE_FAILED, exc.last_error)
            return

        state.enter(PipelineStage.NORMALIZE_ADDRESS)
        try:
            address = self.normalizer.normalize(details)
        except AddressExtractionError as exc:
            state.fail(ItemOutcome.ADDRESS_FAILED, str(exc))
            return

        state.enter(PipelineStage.RESOLVE_NEIGHBORHOOD)
        # normalize() guarantees a postal code
        neighborhood = await scope.neighborhoods.resolve_by_postal_code(address.postal_code or "")

        state.enter(PipelineStage.BUILD)
        state.complete(
            ProcessedItem(
                candidate=candidate,
                place_id=resolved.place_id,
                formatted_address=formatted_address_for(details, address),
                address=address,
                neighborhood=neighborhood,
                tags=candidate.tags,
            )
        )


def _apply_override(resolved: ResolvedPlace, place_id: str) -> ResolvedPlace:
    if resolved.ok:
        return replace(resolved, place_id=place_id)
    return ResolvedPlace(status=ResolutionStatus.SINGLE, place_id=place_id)
