"""Domain model for the bulk-add pipeline."""

from __future__ import annotations

from bulkadd.domain.model.enums import (
    DuplicateSource,
    ItemOutcome,
    PipelineStage,
    ResolutionStatus,
    SubmissionStatus,
)
from bulkadd.domain.model.records import (
    DEFAULT_ENTITY_TYPE,
    SYNTHESIZED_ID_PREFIX,
    CandidateRecord,
    DuplicateRef,
    NeighborhoodInfo,
    NormalizedAddress,
    ParseError,
    PlaceCandidate,
    ProcessedItem,
    RawPlaceDetails,
    ReferenceItem,
    ResolvedPlace,
    split_tags,
)
from bulkadd.domain.model.results import (
    BatchReport,
    BatchSubmitResult,
    ItemResult,
    SubmissionRecord,
    SubmissionReply,
    SubmissionReplyItem,
    SubmittedItemResult,
)

__all__ = [
    "DEFAULT_ENTITY_TYPE",
    "SYNTHESIZED_ID_PREFIX",
    "BatchReport",
    "BatchSubmitResult",
    "CandidateRecord",
    "DuplicateRef",
    "DuplicateSource",
    "ItemOutcome",
    "ItemResult",
    "NeighborhoodInfo",
    "NormalizedAddress",
    "ParseError",
    "PipelineStage",
    "PlaceCandidate",
    "ProcessedItem",
    "RawPlaceDetails",
    "ReferenceItem",
    "ResolutionStatus",
    "ResolvedPlace",
    "SubmissionRecord",
    "SubmissionReply",
    "SubmissionReplyItem",
    "SubmissionStatus",
    "SubmittedItemResult",
    "split_tags",
]
