from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from bulkadd.adapters.submission import (
    SubmissionAPIError,
    SubmissionClient,
    SubmissionEndpointNotFoundError,
)
from bulkadd.domain.errors import SubmissionContractError, SubmissionUnavailableError
from bulkadd.domain.model import SubmissionRecord, SubmissionReply, SubmissionReplyItem
from tests.helpers.http import make_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable

    from bulkadd.config.http_resilience import ResilienceConfig

RECORDS = (
    SubmissionRecord(
        line_number=1,
        name="Joe's Pizza",
        entity_type="restaurant",
        place_id="abc123",
        address="7 Carmine St, New York, NY 10014, USA",
        neighborhood_id="42",
        tags=("pizza", "late night"),
    ),
    SubmissionRecord(
        line_number=3,
        name="Lucali",
        entity_type="restaurant",
        place_id="luc1",
        address="575 Henry St, Brooklyn, NY 11231",
        neighborhood_id="mock-11231",
    ),
)


def _submit(
    resilience: ResilienceConfig,
    handler: Callable[[httpx.Request], httpx.Response],
    requests: list[httpx.Request] | None = None,
) -> SubmissionReply:
    client = SubmissionClient(
        resilience=resilience, client_factory=make_client_factory(handler, requests)
    )
    return client.submit_batch(RECORDS)


def test_posts_every_record_in_one_body(submission_config: ResilienceConfig) -> None:
    requests: list[httpx.Request] = []

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "added": 2, "errors": 0})

    reply = _submit(submission_config, handler, requests)

    (request,) = requests
    assert request.method == "POST"
    assert request.url.path == "/api/restaurants/bulk"
    body = json.loads(request.content)
    assert body["items"][0] == {
        "name": "Joe's Pizza",
        "type": "restaurant",
        "place_id": "abc123",
        "address": "7 Carmine St, New York, NY 10014, USA",
        "neighborhood_id": "42",
        "tags": ["pizza", "late night"],
        "line_number": 1,
    }
    assert [item["line_number"] for item in body["items"]] == [1, 3]
    assert reply == SubmissionReply(success=True, added=2, errors=0)


def test_per_item_echo_is_translated(submission_config: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "success": True,
                "added": [{"id": 901}],
                "errors": [{"line": 3}],
                "items": [
                    {"_lineNumber": 1, "id": 901},
                    {"lineNumber": 3, "error": {"message": "duplicate place"}},
                ],
            },
        )

    reply = _submit(submission_config, handler)

    assert (reply.added, reply.errors) == (1, 1)
    assert reply.items == (
        SubmissionReplyItem(line_number=1, id="901"),
        SubmissionReplyItem(line_number=3, error="duplicate place"),
    )


def test_missing_success_indicator_is_kept_as_none(submission_config: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"added": 2})

    assert _submit(submission_config, handler).success is None


def test_missing_endpoint_is_unavailable(submission_config: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(SubmissionEndpointNotFoundError) as excinfo:
        _submit(submission_config, handler)

    assert isinstance(excinfo.value, SubmissionUnavailableError)


def test_server_error_carries_message(submission_config: ResilienceConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "database unavailable"})

    with pytest.raises(SubmissionAPIError, match="database unavailable") as excinfo:
        _submit(submission_config, handler)

    assert excinfo.value.status_code == 500


def test_transport_failure_is_unavailable(submission_config: ResilienceConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SubmissionAPIError, match="request failed"):
        _submit(submission_config, handler)


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="OK"),
        httpx.Response(200, json=[{"success": True}]),
        httpx.Response(200, json={"success": "maybe"}),
    ],
)
def test_contract_violations(submission_config: ResilienceConfig, response: httpx.Response) -> None:
    with pytest.raises(SubmissionContractError):
        _submit(submission_config, lambda _: response)
