"""Extract a canonical address from heterogeneous place-detail payloads.

Upstream details come in three shapes, tried in priority order:

1. ``addressComponents``: an object already keyed by address field.
2. ``address_components``: a list of ``{long_name, types}`` entries.
3. ``formattedAddress`` with a sibling ``zipcode``; only the postal code is taken.

Each shape has a detector returning a :class:`ShapeMatch`. The first detector
whose address carries a postal code wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from logging import getLogger
from typing import TYPE_CHECKING, Final, NamedTuple

from bulkadd.domain.errors import AddressExtractionError
from bulkadd.domain.model import NormalizedAddress

if TYPE_CHECKING:
    from collections.abc import Callable

    from bulkadd.domain.model import RawPlaceDetails

log = getLogger(__name__)

NO_POSTAL_CODE: Final[str] = "could not extract postal code"

# Google-style component types -> NormalizedAddress field
COMPONENT_FIELDS: Final[Mapping[str, str]] = {
    "street_number": "street_number",
    "route": "street",
    "locality": "city",
    "administrative_area_level_1": "state",
    "postal_code": "postal_code",
    "country": "country",
}

# Accepted keys inside a pre-structured components object, per field
STRUCTURED_KEYS: Final[Mapping[str, tuple[str, ...]]] = {
    "street_number": ("streetNumber", "street_number"),
    "street": ("street", "route"),
    "city": ("city", "locality"),
    "state": ("state",),
    "postal_code": ("postalCode", "postal_code", "zipcode"),
    "country": ("country",),
}


class ShapeMatch(NamedTuple):
    matched: bool
    address: NormalizedAddress | None = None


NO_MATCH: Final[ShapeMatch] = ShapeMatch(matched=False)

type ShapeDetector = Callable[[RawPlaceDetails], ShapeMatch]


def _text(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _first(source: Mapping[str, object], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = _text(source.get(key))
        if value is not None:
            return value
    return None


def detect_structured(details: RawPlaceDetails) -> ShapeMatch:
    components = details.get("addressComponents")
    if not isinstance(components, Mapping):
        return NO_MATCH

    fields = {name: _first(components, keys) for name, keys in STRUCTURED_KEYS.items()}
    # An explicit top-level zipcode overrides whatever the object carries
    zipcode = _text(details.get("zipcode"))
    if zipcode is not None:
        fields["postal_code"] = zipcode
    return ShapeMatch(matched=True, address=NormalizedAddress(**fields))


def detect_typed_components(details: RawPlaceDetails) -> ShapeMatch:
    components = details.get("address_components")
    if isinstance(components, str) or not isinstance(components, Sequence):
        return NO_MATCH

    fields: dict[str, str] = {}
    for entry in components:
        if not isinstance(entry, Mapping):
            continue
        types = entry.get("types")
        value = _text(entry.get("long_name")) or _text(entry.get("short_name"))
        if value is None or not isinstance(types, Sequence) or isinstance(types, str):
            continue
        for component_type in types:
            field_name = COMPONENT_FIELDS.get(str(component_type))
            if field_name is not None and field_name not in fields:
                fields[field_name] = value
                break
    return ShapeMatch(matched=True, address=NormalizedAddress(**fields))


def detect_formatted_with_zipcode(details: RawPlaceDetails) -> ShapeMatch:
    zipcode = _text(details.get("zipcode"))
    if zipcode is None:
        return NO_MATCH
    return ShapeMatch(matched=True, address=NormalizedAddress(postal_code=zipcode))


DEFAULT_DETECTORS: Final[tuple[ShapeDetector, ...]] = (
    detect_structured,
    detect_typed_components,
    detect_formatted_with_zipcode,
)


def formatted_address_for(details: RawPlaceDetails, address: NormalizedAddress) -> str:
    explicit = _first(details, ("formatted_address", "formattedAddress"))
    if explicit is not None:
        return explicit
    return address.compose()


class AddressNormalizer:
    def __init__(self, detectors: Sequence[ShapeDetector] = DEFAULT_DETECTORS) -> None:
        self._detectors = tuple(detectors)

    def normalize(self, details: RawPlaceDetails) -> NormalizedAddress:
        """Return the first detected address that carries a postal code.

        Raises:
            AddressExtractionError: no supported shape yielded a postal code.
        """

        for detector in self._detectors:
            match = detector(details)
            if not match.matched or match.address is None:
                continue
            if match.address.postal_code:
                return match.address
            log.debug("%s matched without a postal code", detector.__name__)
        raise AddressExtractionError(NO_POSTAL_CODE)
