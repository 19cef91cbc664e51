"""HTTP client for the bulk submission endpoint."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from bulkadd.adapters.service_client import ServiceClient
from bulkadd.domain.errors import SubmissionContractError, SubmissionUnavailableError
from bulkadd.domain.model import SubmissionReply, SubmissionReplyItem
from bulkadd.domain.ports import SubmissionEndpoint

from .schema import BulkItemPayload, BulkRequest, BulkResponse

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkadd.adapters.http_resilience import ResilientClient
    from bulkadd.domain.model import SubmissionRecord

log = getLogger(__name__)

BULK_PATH: Final[str] = "restaurants/bulk"


class SubmissionAPIError(SubmissionUnavailableError):
    """Raised when the bulk endpoint cannot be reached or rejects the call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SubmissionEndpointNotFoundError(SubmissionAPIError):
    """The bulk endpoint does not exist on the configured server."""


def build_request(records: Sequence[SubmissionRecord]) -> BulkRequest:
    return BulkRequest(
        items=[
            BulkItemPayload(
                name=record.name,
                type=record.entity_type,
                place_id=record.place_id,
                address=record.address,
                neighborhood_id=record.neighborhood_id,
                tags=list(record.tags),
                line_number=record.line_number,
            )
            for record in records
        ]
    )


def to_reply(response: BulkResponse) -> SubmissionReply:
    items = None
    if response.items is not None:
        items = tuple(
            SubmissionReplyItem(line_number=item.line_number, id=item.id, error=item.error)
            for item in response.items
        )
    return SubmissionReply(
        success=response.success,
        added=response.added,
        errors=response.errors,
        message=response.message,
        items=items,
    )


class SubmissionClient(ServiceClient):
    def submit_batch(self, records: Sequence[SubmissionRecord]) -> SubmissionReply:
        return self._run(lambda client: self._submit(client, records))

    async def submit(self, records: Sequence[SubmissionRecord]) -> SubmissionReply:
        return await self._call(lambda client: self._submit(client, records))

    async def _submit(
        self, client: ResilientClient, records: Sequence[SubmissionRecord]
    ) -> SubmissionReply:
        body = build_request(records).model_dump(mode="json")
        log.info("Submitting %d items to %s", len(records), BULK_PATH)
        try:
            response = await client.post(BULK_PATH, json=body)
        except httpx.HTTPError as exc:
            raise SubmissionAPIError(f"Bulk submission request failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise SubmissionEndpointNotFoundError(
                f"Bulk submission endpoint {BULK_PATH} not found",
                status_code=response.status_code,
            )
        if response.is_error:
            raise SubmissionAPIError(
                f"Bulk submission returned HTTP {response.status_code}: {_error_text(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SubmissionContractError("Bulk submission returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise SubmissionContractError(
                f"Bulk submission returned {type(payload).__name__}, expected an object"
            )
        try:
            parsed = BulkResponse.model_validate(payload)
        except ValidationError as exc:
            raise SubmissionContractError(f"Unreadable bulk submission response: {exc}") from exc
        return to_reply(parsed)


def _error_text(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return response.text[:200]


if TYPE_CHECKING:
    from bulkadd.config.http_resilience import ResilienceConfig

    _endpoint_check: SubmissionEndpoint = SubmissionClient(
        resilience=ResilienceConfig(name="submission")
    )
