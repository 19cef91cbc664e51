"""Bulk-add ingestion pipeline.

Each component handles one step of a line's journey (parse, duplicate check,
place resolution, address normalization, neighborhood resolution, submission)
and the orchestrator ties them together, keeping one item's failure from
affecting any other item.
"""

from __future__ import annotations

from .address import AddressNormalizer, ShapeMatch, formatted_address_for
from .context import ItemState
from .deduplication import (
    AdvisoryDuplicatePolicy,
    DuplicateDetector,
    DuplicatePolicy,
    SkipDuplicatesPolicy,
)
from .neighborhoods import NeighborhoodResolver, synthesize_neighborhood
from .orchestrator import PipelineOrchestrator
from .parsing import LineParser, ParseOutcome
from .place_resolution import PlaceResolver, build_query
from .retry import retry_lookup
from .submission import BatchSubmitter, to_submission_record

__all__ = [
    "AddressNormalizer",
    "AdvisoryDuplicatePolicy",
    "BatchSubmitter",
    "DuplicateDetector",
    "DuplicatePolicy",
    "ItemState",
    "LineParser",
    "NeighborhoodResolver",
    "ParseOutcome",
    "PipelineOrchestrator",
    "PlaceResolver",
    "ShapeMatch",
    "SkipDuplicatesPolicy",
    "build_query",
    "formatted_address_for",
    "retry_lookup",
    "synthesize_neighborhood",
    "to_submission_record",
]
