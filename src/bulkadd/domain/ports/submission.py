"""Port for the bulk submission endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkadd.domain.model import SubmissionRecord, SubmissionReply


@runtime_checkable
class SubmissionEndpoint(Protocol):
    async def submit(self, records: Sequence[SubmissionRecord]) -> SubmissionReply:
        """Send every record in one call.

        Raise ``SubmissionUnavailableError`` when the endpoint is unreachable or
        missing and ``SubmissionContractError`` when its answer is uninterpretable.
        """
        ...


__all__ = ["SubmissionEndpoint"]
