"""Application entry points wiring the HTTP adapters into the pipeline."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from bulkadd.adapters.neighborhoods import NeighborhoodClient, should_cache_neighborhoods_payload
from bulkadd.adapters.places import PlacesClient, should_cache_places_payload
from bulkadd.adapters.submission import SubmissionClient
from bulkadd.config import ServiceConfig, get_service_config
from bulkadd.domain.ingest_pipeline import AdvisoryDuplicatePolicy, PipelineOrchestrator

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from bulkadd.adapters.service_client import ClientFactory
    from bulkadd.domain.ingest_pipeline import DuplicatePolicy
    from bulkadd.domain.model import BatchReport, ReferenceItem

log = getLogger(__name__)


def service_config_from_environment() -> ServiceConfig:
    return get_service_config(
        places_cache_predicate=should_cache_places_payload,
        neighborhoods_cache_predicate=should_cache_neighborhoods_payload,
    )


async def run_bulk_add_async(
    raw_text: str,
    reference_set: Iterable[ReferenceItem] = (),
    *,
    services: ServiceConfig | None = None,
    duplicate_policy: DuplicatePolicy | None = None,
    place_overrides: Mapping[int, str] | None = None,
    client_factory: ClientFactory | None = None,
) -> BatchReport:
    """Run one bulk-add batch against the configured services."""

    effective = services or service_config_from_environment()
    log.info(
        "Starting bulk add against %s (concurrency=%d, retry attempts=%d)",
        effective.places.base_url,
        effective.pipeline.concurrency,
        effective.pipeline.retry_budget.attempts,
    )

    # One client per service for the whole run so rate limits and caches are shared
    async with (
        PlacesClient(resilience=effective.places, client_factory=client_factory) as places,
        NeighborhoodClient(
            resilience=effective.neighborhoods, client_factory=client_factory
        ) as neighborhoods,
        SubmissionClient(resilience=effective.submission, client_factory=client_factory) as submission,
    ):
        orchestrator = PipelineOrchestrator(
            places=places,
            neighborhoods=neighborhoods,
            submission=submission,
            config=effective.pipeline,
            duplicate_policy=duplicate_policy or AdvisoryDuplicatePolicy(),
        )
        return await orchestrator.run_async(
            raw_text, reference_set, place_overrides=place_overrides
        )


def run_bulk_add(
    raw_text: str,
    reference_set: Iterable[ReferenceItem] = (),
    *,
    services: ServiceConfig | None = None,
    duplicate_policy: DuplicatePolicy | None = None,
    place_overrides: Mapping[int, str] | None = None,
    client_factory: ClientFactory | None = None,
) -> BatchReport:
    return asyncio.run(
        run_bulk_add_async(
            raw_text,
            reference_set,
            services=services,
            duplicate_policy=duplicate_policy,
            place_overrides=place_overrides,
            client_factory=client_factory,
        )
    )
