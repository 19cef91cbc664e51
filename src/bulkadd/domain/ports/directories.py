"""Ports for the lookup services the pipeline resolves candidates against."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bulkadd.domain.model import NeighborhoodInfo, PlaceCandidate, RawPlaceDetails


@runtime_checkable
class PlaceDirectory(Protocol):
    """Autocomplete and detail lookups against an external places directory."""

    async def autocomplete(self, query: str) -> list[PlaceCandidate]:
        """Return ranked matches for ``query`` (possibly empty).

        Implementations raise ``LookupFailedError`` on transport failures; an
        empty list is a valid answer.
        """
        ...

    async def details(self, place_id: str) -> RawPlaceDetails:
        """Return the raw details payload for ``place_id``."""
        ...


@runtime_checkable
class NeighborhoodDirectory(Protocol):
    async def by_postal_code(self, code: str) -> list[NeighborhoodInfo]:
        """Return neighborhoods for ``code``; raise ``LookupNotFoundError`` on 404."""
        ...


__all__ = ["NeighborhoodDirectory", "PlaceDirectory"]
