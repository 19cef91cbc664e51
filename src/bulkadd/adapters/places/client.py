"""HTTP client for the places autocomplete and details endpoints."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from bulkadd.adapters.service_client import ServiceClient
from bulkadd.domain.errors import LookupFailedError
from bulkadd.domain.model import PlaceCandidate
from bulkadd.domain.ports import PlaceDirectory

from .schema import AutocompleteResponse, PlaceDetailsResponse

if TYPE_CHECKING:
    from bulkadd.adapters.http_resilience import ResilientClient
    from bulkadd.domain.model import RawPlaceDetails

log = getLogger(__name__)

AUTOCOMPLETE_PATH: Final[str] = "places/autocomplete"
DETAILS_PATH: Final[str] = "places/details"
PLACE_TYPES: Final[str] = "establishment"


class PlacesAPIError(LookupFailedError):
    """Raised when the places endpoints fail or answer with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlacesClient(ServiceClient):
    """Async ``PlaceDirectory`` with sync convenience wrappers."""

    def search(self, query: str) -> list[PlaceCandidate]:
        return self._run(lambda client: self._autocomplete(client, query))

    def fetch_details(self, place_id: str) -> RawPlaceDetails:
        return self._run(lambda client: self._details(client, place_id))

    async def autocomplete(self, query: str) -> list[PlaceCandidate]:
        return await self._call(lambda client: self._autocomplete(client, query))

    async def details(self, place_id: str) -> RawPlaceDetails:
        return await self._call(lambda client: self._details(client, place_id))

    async def _autocomplete(self, client: ResilientClient, query: str) -> list[PlaceCandidate]:
        payload = await _get_json(
            client, AUTOCOMPLETE_PATH, params={"input": query, "types": PLACE_TYPES}
        )
        try:
            response = AutocompleteResponse.model_validate(payload)
        except ValidationError as exc:
            raise PlacesAPIError(f"Unexpected autocomplete payload: {exc}") from exc
        if response.is_error:
            raise PlacesAPIError(response.describe_error())

        log.debug("Autocomplete %r returned %d predictions", query, len(response.predictions))
        return [
            PlaceCandidate(place_id=prediction.place_id, description=prediction.description)
            for prediction in response.predictions
        ]

    async def _details(self, client: ResilientClient, place_id: str) -> RawPlaceDetails:
        payload = await _get_json(client, DETAILS_PATH, params={"place_id": place_id})
        try:
            response = PlaceDetailsResponse.model_validate(payload)
        except ValidationError as exc:
            raise PlacesAPIError(f"Unexpected place details payload: {exc}") from exc
        if response.is_error:
            raise PlacesAPIError(response.describe_error())
        if not response.result:
            raise PlacesAPIError(f"No details returned for place {place_id}")
        return response.result


async def _get_json(client: ResilientClient, path: str, *, params: dict[str, str]) -> object:
    try:
        response = await client.get(path, params=params)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        raise PlacesAPIError(f"{path} returned HTTP {status_code}", status_code=status_code) from exc
    except httpx.HTTPError as exc:
        raise PlacesAPIError(f"{path} request failed: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise PlacesAPIError(f"{path} returned a non-JSON body") from exc
    if not isinstance(payload, dict):
        raise PlacesAPIError(f"Unexpected {path} response payload")
    return payload


if TYPE_CHECKING:
    from bulkadd.config.http_resilience import ResilienceConfig

    _directory_check: PlaceDirectory = PlacesClient(resilience=ResilienceConfig(name="places"))
