from __future__ import annotations

import pytest

from bulkadd.domain.errors import AddressExtractionError
from bulkadd.domain.ingest_pipeline.address import (
    AddressNormalizer,
    detect_structured,
    detect_typed_components,
    formatted_address_for,
)
from bulkadd.domain.model import NormalizedAddress
from tests.helpers.fakes import joes_pizza_details

STRUCTURED = {
    "formattedAddress": "7 Carmine St, New York, NY 10014, USA",
    "addressComponents": {
        "streetNumber": "7",
        "street": "Carmine St",
        "city": "New York",
        "state": "NY",
        "postalCode": "10014",
        "country": "US",
    },
}
FORMATTED_ONLY = {"formattedAddress": "7 Carmine St, New York, NY 10014, USA", "zipcode": "10014"}


@pytest.mark.parametrize(
    "details",
    [STRUCTURED, joes_pizza_details(), FORMATTED_ONLY],
    ids=["structured", "typed-components", "formatted-with-zipcode"],
)
def test_every_shape_yields_the_same_postal_code(details: dict[str, object]) -> None:
    assert AddressNormalizer().normalize(details).postal_code == "10014"


def test_structured_shape_is_used_as_is() -> None:
    assert AddressNormalizer().normalize(STRUCTURED) == NormalizedAddress(
        street_number="7",
        street="Carmine St",
        city="New York",
        state="NY",
        postal_code="10014",
        country="US",
    )


def test_top_level_zipcode_overrides_structured_postal_code() -> None:
    details = {"addressComponents": {"city": "New York", "postalCode": "10001"}, "zipcode": 10014}

    match = detect_structured(details)

    assert match.matched
    assert match.address is not None
    assert match.address.postal_code == "10014"


def test_typed_components_map_long_names() -> None:
    address = AddressNormalizer().normalize(joes_pizza_details())

    assert address == NormalizedAddress(
        street_number="7",
        street="Carmine Street",
        city="New York",
        state="New York",
        postal_code="10014",
        country="United States",
    )


def test_typed_components_first_match_wins() -> None:
    details = {
        "address_components": [
            {"long_name": "10014", "types": ["postal_code"]},
            {"long_name": "10015", "types": ["postal_code"]},
        ]
    }

    match = detect_typed_components(details)

    assert match.address is not None
    assert match.address.postal_code == "10014"


def test_structured_without_postal_code_falls_through_to_later_shapes() -> None:
    details = {
        "addressComponents": {"city": "New York"},
        "address_components": [{"long_name": "10014", "types": ["postal_code"]}],
    }

    assert AddressNormalizer().normalize(details).postal_code == "10014"


def test_formatted_address_alone_is_not_parsed() -> None:
    with pytest.raises(AddressExtractionError, match="could not extract postal code"):
        AddressNormalizer().normalize({"formattedAddress": "7 Carmine St, New York, NY 10014"})


@pytest.mark.parametrize(
    "details",
    [
        {},
        {"addressComponents": "not an object"},
        {"address_components": "7 Carmine St"},
        {"address_components": [{"long_name": "New York", "types": ["locality"]}]},
        {"zipcode": "   "},
    ],
)
def test_unusable_payloads_raise(details: dict[str, object]) -> None:
    with pytest.raises(AddressExtractionError):
        AddressNormalizer().normalize(details)


def test_formatted_address_prefers_payload_value() -> None:
    address = AddressNormalizer().normalize(joes_pizza_details())

    assert formatted_address_for(joes_pizza_details(), address) == (
        "7 Carmine St, New York, NY 10014, USA"
    )


def test_formatted_address_is_composed_when_missing() -> None:
    details = {"addressComponents": STRUCTURED["addressComponents"]}
    address = AddressNormalizer().normalize(details)

    assert formatted_address_for(details, address) == "7 Carmine St, New York, NY 10014"


def test_compose_collapses_missing_parts() -> None:
    assert NormalizedAddress(postal_code="10014").compose() == "10014"
    assert NormalizedAddress(city="New York", state="NY").compose() == "New York, NY"
