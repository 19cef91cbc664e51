"""Shared fixtures for HTTP adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from bulkadd.config.services import lookup_resilience, submission_resilience
from tests.helpers.http import BASE_URL

if TYPE_CHECKING:
    from bulkadd.config.http_resilience import ResilienceConfig


@pytest.fixture
def places_resilience() -> ResilienceConfig:
    return lookup_resilience("places", base_url=BASE_URL)


@pytest.fixture
def neighborhoods_resilience() -> ResilienceConfig:
    return lookup_resilience("neighborhoods", base_url=BASE_URL)


@pytest.fixture
def submission_config() -> ResilienceConfig:
    return submission_resilience(base_url=BASE_URL)
