"""Pydantic models for the neighborhood-by-postal-code endpoint."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class NeighborhoodBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NeighborhoodRecord(NeighborhoodBaseModel):
    id: str
    name: str
    city: str | None = Field(default=None, validation_alias=AliasChoices("city", "city_name"))
    state: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        # Numeric database ids are common; the domain treats ids as opaque strings
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    _normalize_city = field_validator("city", "state", mode="before")(_blank_to_none)


class NeighborhoodsResponse(NeighborhoodBaseModel):
    neighborhoods: list[NeighborhoodRecord] = Field(
        default_factory=list["NeighborhoodRecord"],
        validation_alias=AliasChoices("neighborhoods", "data"),
    )

    @field_validator("neighborhoods", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


def should_cache_neighborhoods_payload(payload: object) -> bool:
    if isinstance(payload, list):
        payload = {"neighborhoods": payload}
    if not isinstance(payload, dict):
        return False
    try:
        return bool(NeighborhoodsResponse.model_validate(payload).neighborhoods)
    except ValidationError:
        return False
