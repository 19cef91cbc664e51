"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class PipelineStage(StrEnum):
    PARSE = "parse"
    DUPLICATE_CHECK = "duplicate-check"
    RESOLVE = "resolve"
    PLACE_DETAILS = "place-details"
    NORMALIZE_ADDRESS = "normalize-address"
    RESOLVE_NEIGHBORHOOD = "resolve-neighborhood"
    BUILD = "build"
    SUBMIT = "submit"

    @property
    def position(self) -> int:
        return _STAGE_ORDER.index(self)


_STAGE_ORDER: tuple[PipelineStage, ...] = tuple(PipelineStage)


class ItemOutcome(StrEnum):
    """Terminal (or, for ``processed``, pre-submission) state of one input line."""

    PARSED_FAILED = "parsed-failed"
    RESOLVE_FAILED = "resolve-failed"
    ADDRESS_FAILED = "address-failed"
    NEIGHBORHOOD_FAILED = "neighborhood-failed"
    PROCESSED = "processed"
    SUBMIT_FAILED = "submit-failed"
    SUBMITTED = "submitted"
    SKIPPED_DUPLICATE = "skipped-duplicate"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self not in {ItemOutcome.PROCESSED, ItemOutcome.SUBMITTED}


class ResolutionStatus(StrEnum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    ERROR = "error"


class SubmissionStatus(StrEnum):
    NOT_ATTEMPTED = "not-attempted"
    SUCCEEDED = "succeeded"
    PARTIAL = "partial"
    FAILED = "failed"


class DuplicateSource(StrEnum):
    BATCH = "batch"
    REFERENCE = "reference"
