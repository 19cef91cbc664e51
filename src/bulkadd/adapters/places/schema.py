"""Pydantic models for the places autocomplete and details endpoints."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

# Statuses that carry a usable (possibly empty) answer
OK_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


def _none_to_empty_list(value: object) -> object:
    return [] if value is None else value


class PlacesBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class StructuredFormatting(PlacesBaseModel):
    main_text: str | None = None
    secondary_text: str | None = None


class Prediction(PlacesBaseModel):
    place_id: str = Field(validation_alias=AliasChoices("place_id", "placeId"))
    description: str = ""
    structured_formatting: StructuredFormatting | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value: object) -> object:
        return "" if value is None else value


class PlacesStatusModel(PlacesBaseModel):
    status: str | None = None
    error_message: str | None = Field(
        default=None,
        validation_alias=AliasChoices("error_message", "errorMessage", "error"),
    )

    @property
    def is_error(self) -> bool:
        return self.status is not None and self.status not in OK_STATUSES

    def describe_error(self) -> str:
        return self.error_message or f"places API status {self.status}"


class AutocompleteResponse(PlacesStatusModel):
    # The service has answered under either key depending on version
    predictions: list[Prediction] = Field(
        default_factory=list["Prediction"],
        validation_alias=AliasChoices("predictions", "data"),
    )

    _normalize_predictions = field_validator("predictions", mode="before")(_none_to_empty_list)


class PlaceDetailsResponse(PlacesStatusModel):
    result: dict[str, object] | None = Field(
        default=None,
        validation_alias=AliasChoices("result", "data"),
    )


def should_cache_places_payload(payload: object) -> bool:
    """Cache only answers worth replaying: non-empty matches or present details."""

    if not isinstance(payload, dict):
        return False
    try:
        if isinstance(payload.get("result"), dict) or isinstance(payload.get("data"), dict):
            details = PlaceDetailsResponse.model_validate(payload)
            return not details.is_error and bool(details.result)
        matches = AutocompleteResponse.model_validate(payload)
    except ValidationError:
        return False
    return not matches.is_error and bool(matches.predictions)
