"""Public interface for the places adapter."""

from __future__ import annotations

from .client import PlacesAPIError, PlacesClient
from .schema import AutocompleteResponse, PlaceDetailsResponse, Prediction, should_cache_places_payload

__all__ = [
    "AutocompleteResponse",
    "PlaceDetailsResponse",
    "PlacesAPIError",
    "PlacesClient",
    "Prediction",
    "should_cache_places_payload",
]
