"""Public interface for the bulk submission adapter."""

from __future__ import annotations

from .client import (
    SubmissionAPIError,
    SubmissionClient,
    SubmissionEndpointNotFoundError,
    build_request,
)
from .schema import BulkRequest, BulkResponse

__all__ = [
    "BulkRequest",
    "BulkResponse",
    "SubmissionAPIError",
    "SubmissionClient",
    "SubmissionEndpointNotFoundError",
    "build_request",
]
