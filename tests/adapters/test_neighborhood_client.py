from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from bulkadd.adapters.neighborhoods import (
    NeighborhoodAPIError,
    NeighborhoodClient,
    NeighborhoodNotFoundError,
    should_cache_neighborhoods_payload,
)
from bulkadd.domain.errors import LookupNotFoundError
from bulkadd.domain.model import NeighborhoodInfo
from tests.helpers.http import make_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable

    from bulkadd.config.http_resilience import ResilienceConfig


def _client(
    resilience: ResilienceConfig,
    handler: Callable[[httpx.Request], httpx.Response],
    requests: list[httpx.Request] | None = None,
) -> NeighborhoodClient:
    return NeighborhoodClient(
        resilience=resilience, client_factory=make_client_factory(handler, requests)
    )


def test_lookup_parses_records(neighborhoods_resilience: ResilienceConfig) -> None:
    requests: list[httpx.Request] = []

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "neighborhoods": [
                    {"id": 42, "name": "Greenwich Village", "city": "New York", "state": "NY"},
                    {"id": "43", "name": "West Village", "city_name": "New York"},
                ]
            },
        )

    result = _client(neighborhoods_resilience, handler, requests).lookup("10014")

    assert result == [
        NeighborhoodInfo(id="42", name="Greenwich Village", city="New York", state="NY"),
        NeighborhoodInfo(id="43", name="West Village", city="New York", state=""),
    ]
    (request,) = requests
    assert request.method == "GET"
    assert request.url.path == "/api/neighborhoods/by-zipcode/10014"


def test_lookup_accepts_bare_list(neighborhoods_resilience: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "7", "name": "Tribeca", "city": " "}])

    (info,) = _client(neighborhoods_resilience, handler).lookup("10013")

    assert info == NeighborhoodInfo(id="7", name="Tribeca")


def test_empty_answer_is_an_empty_list(neighborhoods_resilience: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": None})

    assert _client(neighborhoods_resilience, handler).lookup("99999") == []


def test_postal_code_is_quoted_into_path(neighborhoods_resilience: ResilienceConfig) -> None:
    requests: list[httpx.Request] = []

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    _client(neighborhoods_resilience, handler, requests).lookup("SW1A 1AA")

    assert requests[0].url.raw_path.decode() == "/api/neighborhoods/by-zipcode/SW1A%201AA"


def test_missing_postal_code_is_not_found(neighborhoods_resilience: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "unknown zipcode"})

    with pytest.raises(NeighborhoodNotFoundError) as excinfo:
        _client(neighborhoods_resilience, handler).lookup("00000")

    assert isinstance(excinfo.value, LookupNotFoundError)
    assert excinfo.value.status_code == 404


def test_server_errors_are_lookup_failures(neighborhoods_resilience: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(NeighborhoodAPIError) as excinfo:
        _client(neighborhoods_resilience, handler).lookup("10014")

    assert not isinstance(excinfo.value, LookupNotFoundError)
    assert excinfo.value.status_code == 500


def test_unreadable_payload_raises(neighborhoods_resilience: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"neighborhoods": [{"name": "No id"}]})

    with pytest.raises(NeighborhoodAPIError, match="Unexpected neighborhood payload"):
        _client(neighborhoods_resilience, handler).lookup("10014")


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"neighborhoods": [{"id": 1, "name": "SoHo"}]}, True),
        ([{"id": 1, "name": "SoHo"}], True),
        ({"neighborhoods": []}, False),
        ({"neighborhoods": [{"name": "No id"}]}, False),
        ("text", False),
    ],
)
def test_cache_predicate(payload: object, expected: bool) -> None:  # noqa: FBT001
    assert should_cache_neighborhoods_payload(payload) is expected
