"""Pydantic models for the bulk restaurant submission endpoint."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SubmissionBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BulkItemPayload(SubmissionBaseModel):
    name: str
    type: str
    place_id: str
    address: str
    neighborhood_id: str
    tags: list[str] = Field(default_factory=list)
    line_number: int


class BulkRequest(SubmissionBaseModel):
    items: list[BulkItemPayload]


class BulkItemResult(SubmissionBaseModel):
    line_number: int = Field(
        validation_alias=AliasChoices("line_number", "lineNumber", "_lineNumber")
    )
    id: str | None = None
    error: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("error", mode="before")
    @classmethod
    def _error_text(cls, value: object) -> object:
        if isinstance(value, dict):
            message = value.get("message")
            return str(message) if message is not None else str(value)
        return value


class BulkResponse(SubmissionBaseModel):
    # None when the endpoint left the indicator out entirely
    success: bool | None = None
    added: int = 0
    errors: int = 0
    message: str | None = None
    items: list[BulkItemResult] | None = None

    @field_validator("added", mode="before")
    @classmethod
    def _added_count(cls, value: object) -> object:
        if value is None:
            return 0
        if isinstance(value, list):
            return len(value)
        return value

    @field_validator("errors", mode="before")
    @classmethod
    def _error_count(cls, value: object) -> object:
        # Some deployments return the error list itself instead of a count
        if value is None:
            return 0
        if isinstance(value, list):
            return len(value)
        return value
