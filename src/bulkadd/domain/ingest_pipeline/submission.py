"""Package processed items into one bulk call and interpret the reply."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from bulkadd.domain.errors import SubmissionUnavailableError
from bulkadd.domain.model import (
    BatchSubmitResult,
    SubmissionRecord,
    SubmissionStatus,
    SubmittedItemResult,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkadd.domain.model import ProcessedItem, SubmissionReply
    from bulkadd.domain.ports import SubmissionEndpoint

log = getLogger(__name__)

MISSING_SUCCESS: Final[str] = "submission response lacks a success indicator"
NOT_CONFIRMED: Final[str] = "not confirmed by the submission endpoint"


def to_submission_record(item: ProcessedItem) -> SubmissionRecord:
    return SubmissionRecord(
        line_number=item.line_number,
        name=item.name,
        entity_type=item.candidate.entity_type,
        place_id=item.place_id,
        address=item.formatted_address,
        neighborhood_id=item.neighborhood.id,
        tags=item.tags,
    )


class BatchSubmitter:
    """Submit every processed item in exactly one call.

    The submitter never retries. An unreachable or missing endpoint, and a
    reply without an explicit ``success: true``, both come back as a
    ``FAILED`` result with every item rejected. ``SubmissionContractError``
    from the endpoint is left to propagate.
    """

    def __init__(self, endpoint: SubmissionEndpoint) -> None:
        self._endpoint = endpoint

    async def submit(self, items: Sequence[ProcessedItem]) -> BatchSubmitResult:
        if not items:
            return BatchSubmitResult(status=SubmissionStatus.NOT_ATTEMPTED)

        records = [to_submission_record(item) for item in items]
        lines = [record.line_number for record in records]
        try:
            reply = await self._endpoint.submit(records)
        except SubmissionUnavailableError as exc:
            log.error("Bulk submission of %d items failed: %s", len(records), exc)
            return _all_failed(lines, str(exc))

        if reply.success is not True:
            detail = reply.message or (
                MISSING_SUCCESS if reply.success is None else "submission rejected"
            )
            log.error("Bulk submission not accepted: %s", detail)
            return _all_failed(lines, detail, added=reply.added, errors=reply.errors)

        result = _interpret(lines, reply)
        log.info(
            "Bulk submission %s: %d added, %d errors",
            result.status,
            result.added_count,
            result.error_count,
        )
        return result


def _all_failed(
    lines: Sequence[int],
    detail: str,
    *,
    added: int = 0,
    errors: int | None = None,
) -> BatchSubmitResult:
    return BatchSubmitResult(
        status=SubmissionStatus.FAILED,
        added_count=added,
        error_count=len(lines) if errors is None else errors,
        per_item_results=tuple(
            SubmittedItemResult(line_number=line, accepted=False, error=detail) for line in lines
        ),
        detail=detail,
    )


def _interpret(lines: Sequence[int], reply: SubmissionReply) -> BatchSubmitResult:
    if reply.items is not None:
        echoed = {item.line_number: item for item in reply.items}
        results: list[SubmittedItemResult] = []
        for line in lines:
            item = echoed.get(line)
            if item is None:
                results.append(SubmittedItemResult(line, accepted=False, error=NOT_CONFIRMED))
            elif item.error:
                results.append(SubmittedItemResult(line, accepted=False, error=item.error))
            else:
                results.append(SubmittedItemResult(line, accepted=True, entity_id=item.id))
    else:
        # Without a per-item echo only an error-free reply can vouch for every item
        accepted = reply.errors == 0
        results = [
            SubmittedItemResult(line, accepted=accepted, error=None if accepted else NOT_CONFIRMED)
            for line in lines
        ]

    rejected = sum(1 for result in results if not result.accepted)
    if rejected == 0:
        status = SubmissionStatus.SUCCEEDED
    elif rejected == len(results) and reply.items is not None:
        status = SubmissionStatus.FAILED
    else:
        status = SubmissionStatus.PARTIAL
    return BatchSubmitResult(
        status=status,
        added_count=reply.added,
        error_count=reply.errors,
        per_item_results=tuple(results),
        detail=reply.message,
    )
