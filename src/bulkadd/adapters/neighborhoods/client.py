"""HTTP client for the neighborhood directory."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from bulkadd.adapters.service_client import ServiceClient
from bulkadd.domain.errors import LookupFailedError, LookupNotFoundError
from bulkadd.domain.model import NeighborhoodInfo
from bulkadd.domain.ports import NeighborhoodDirectory

from .schema import NeighborhoodsResponse

if TYPE_CHECKING:
    from bulkadd.adapters.http_resilience import ResilientClient

log = getLogger(__name__)

BY_POSTAL_CODE_PATH: Final[str] = "neighborhoods/by-zipcode/{code}"


class NeighborhoodAPIError(LookupFailedError):
    """Raised when the neighborhood lookup fails or returns an unreadable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NeighborhoodNotFoundError(NeighborhoodAPIError, LookupNotFoundError):
    """The directory has no neighborhood for the requested postal code."""


class NeighborhoodClient(ServiceClient):
    def lookup(self, code: str) -> list[NeighborhoodInfo]:
        return self._run(lambda client: self._by_postal_code(client, code))

    async def by_postal_code(self, code: str) -> list[NeighborhoodInfo]:
        return await self._call(lambda client: self._by_postal_code(client, code))

    async def _by_postal_code(self, client: ResilientClient, code: str) -> list[NeighborhoodInfo]:
        path = BY_POSTAL_CODE_PATH.format(code=quote(code, safe=""))
        try:
            response = await client.get(path)
            if response.status_code == httpx.codes.NOT_FOUND:
                raise NeighborhoodNotFoundError(
                    f"No neighborhood for postal code {code}",
                    status_code=response.status_code,
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise NeighborhoodAPIError(
                f"Neighborhood lookup for {code} returned HTTP {status_code}",
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise NeighborhoodAPIError(f"Neighborhood lookup for {code} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise NeighborhoodAPIError(f"Neighborhood lookup for {code} returned non-JSON") from exc
        if isinstance(payload, list):
            payload = {"neighborhoods": payload}
        try:
            parsed = NeighborhoodsResponse.model_validate(payload)
        except ValidationError as exc:
            raise NeighborhoodAPIError(f"Unexpected neighborhood payload: {exc}") from exc

        log.debug("Postal code %s has %d neighborhoods", code, len(parsed.neighborhoods))
        return [
            NeighborhoodInfo(
                id=record.id,
                name=record.name,
                city=record.city or "",
                state=record.state or "",
            )
            for record in parsed.neighborhoods
        ]


if TYPE_CHECKING:
    from bulkadd.config.http_resilience import ResilienceConfig

    _directory_check: NeighborhoodDirectory = NeighborhoodClient(
        resilience=ResilienceConfig(name="neighborhoods")
    )
