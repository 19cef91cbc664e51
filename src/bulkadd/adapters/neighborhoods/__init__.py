"""Public interface for the neighborhood adapter."""

from __future__ import annotations

from .client import NeighborhoodAPIError, NeighborhoodClient, NeighborhoodNotFoundError
from .schema import NeighborhoodRecord, NeighborhoodsResponse, should_cache_neighborhoods_payload

__all__ = [
    "NeighborhoodAPIError",
    "NeighborhoodClient",
    "NeighborhoodNotFoundError",
    "NeighborhoodRecord",
    "NeighborhoodsResponse",
    "should_cache_neighborhoods_payload",
]
