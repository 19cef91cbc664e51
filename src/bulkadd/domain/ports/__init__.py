"""Protocols the pipeline expects from the external directories and the submission endpoint."""

from __future__ import annotations

from .directories import NeighborhoodDirectory, PlaceDirectory
from .submission import SubmissionEndpoint

__all__ = [
    "NeighborhoodDirectory",
    "PlaceDirectory",
    "SubmissionEndpoint",
]
