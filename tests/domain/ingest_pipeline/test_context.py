from __future__ import annotations

import pytest

from bulkadd.domain.errors import InvalidTransitionError
from bulkadd.domain.ingest_pipeline.context import ItemState
from bulkadd.domain.model import (
    CandidateRecord,
    ItemOutcome,
    NeighborhoodInfo,
    NormalizedAddress,
    PipelineStage,
    ProcessedItem,
)

CANDIDATE = CandidateRecord(line_number=3, raw_text="Lucali", name="Lucali")


def _processed() -> ProcessedItem:
    return ProcessedItem(
        candidate=CANDIDATE,
        place_id="luc1",
        formatted_address="575 Henry St",
        address=NormalizedAddress(postal_code="11231"),
        neighborhood=NeighborhoodInfo(id="mock-11231", name="11231 Area"),
    )


def test_stages_only_move_forward() -> None:
    state = ItemState(CANDIDATE)
    state.enter(PipelineStage.RESOLVE)
    state.enter(PipelineStage.NORMALIZE_ADDRESS)

    with pytest.raises(InvalidTransitionError):
        state.enter(PipelineStage.RESOLVE)


def test_failed_items_are_terminal() -> None:
    state = ItemState(CANDIDATE)
    state.enter(PipelineStage.RESOLVE)
    state.fail(ItemOutcome.RESOLVE_FAILED, "no matching places")

    assert state.is_terminal
    with pytest.raises(InvalidTransitionError):
        state.enter(PipelineStage.PLACE_DETAILS)
    with pytest.raises(InvalidTransitionError):
        state.fail(ItemOutcome.ERROR, "again")
    with pytest.raises(InvalidTransitionError):
        state.mark_submitted(accepted=True)


def test_processed_item_advances_to_submitted() -> None:
    state = ItemState(CANDIDATE)
    state.enter(PipelineStage.BUILD)
    state.complete(_processed())
    assert not state.is_terminal

    state.mark_submitted(accepted=True)

    result = state.to_result()
    assert (result.outcome, result.stage, result.reason) == (
        ItemOutcome.SUBMITTED,
        PipelineStage.SUBMIT,
        None,
    )
    assert result.processed is not None
    assert result.processed.neighborhood.is_synthesized


def test_result_requires_an_outcome() -> None:
    with pytest.raises(InvalidTransitionError):
        ItemState(CANDIDATE).to_result()
