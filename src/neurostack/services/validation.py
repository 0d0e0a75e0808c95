"""Entry schema: validation rules for log entries before persistence."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from neurostack.domain.entries import (
    COGNITIVE_TAGS,
    MOOD_TAGS,
    PHYSICAL_TAGS,
    CompoundDose,
    LogDraft,
    ensure_utc,
)
from neurostack.domain.errors import EntryValidationError

CognitiveTag = Literal[COGNITIVE_TAGS]  # type: ignore[valid-type]
PhysicalTag = Literal[PHYSICAL_TAGS]  # type: ignore[valid-type]
MoodTag = Literal[MOOD_TAGS]  # type: ignore[valid-type]


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str


class CompoundInput(BaseModel):
    """A compound and free-text dose."""

    name: str = Field(min_length=1)
    dose: str = Field(min_length=1)

    @field_validator("name", "dose")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class LogEntryInput(BaseModel):
    """Full log entry as submitted by the logging form."""

    occurred_at: datetime
    compounds: list[CompoundInput]
    sentiment_score: int | None = Field(default=None, ge=1, le=5, strict=True)
    tags_cognitive: list[CognitiveTag] = Field(default_factory=list)
    tags_physical: list[PhysicalTag] = Field(default_factory=list)
    tags_mood: list[MoodTag] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("tags_cognitive", "tags_physical", "tags_mood")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _dedupe_tags(value)


class LogEntryPatchInput(BaseModel):
    """Partial update; only the provided fields are checked."""

    occurred_at: datetime | None = None
    compounds: list[CompoundInput] | None = None
    sentiment_score: int | None = Field(default=None, ge=1, le=5, strict=True)
    tags_cognitive: list[CognitiveTag] | None = None
    tags_physical: list[PhysicalTag] | None = None
    tags_mood: list[MoodTag] | None = None
    notes: str | None = None

    @field_validator(
        "occurred_at",
        "compounds",
        "tags_cognitive",
        "tags_physical",
        "tags_mood",
        mode="before",
    )
    @classmethod
    def _not_null(cls, value: object) -> object:
        # Only sentiment_score and notes can be cleared.
        if value is None:
            raise ValueError("cannot be null")
        return value

    @field_validator("tags_cognitive", "tags_physical", "tags_mood")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _dedupe_tags(value)


def validate_log_entry(payload: dict[str, object]) -> list[FieldError]:
    """Return field errors for a full entry; an empty list means valid."""
    try:
        LogEntryInput.model_validate(payload)
    except ValidationError as exc:
        return _field_errors(exc)
    return []


def validate_log_patch(patch: dict[str, object]) -> list[FieldError]:
    """Return field errors for a partial update."""
    try:
        LogEntryPatchInput.model_validate(patch)
    except ValidationError as exc:
        return _field_errors(exc)
    return []


def parse_log_patch(patch: dict[str, object]) -> dict[str, object]:
    """Validate a partial update and return only the fields it sets, cleaned."""
    try:
        parsed = LogEntryPatchInput.model_validate(patch)
    except ValidationError as exc:
        raise EntryValidationError(_field_errors(exc)) from exc
    return parsed.model_dump(exclude_unset=True)


def parse_log_draft(payload: dict[str, object]) -> LogDraft:
    """Validate a payload and build a draft, raising on invalid input."""
    try:
        parsed = LogEntryInput.model_validate(payload)
    except ValidationError as exc:
        raise EntryValidationError(_field_errors(exc)) from exc
    return LogDraft(
        occurred_at=ensure_utc(parsed.occurred_at),
        compounds=[
            CompoundDose(name=item.name, dose=item.dose) for item in parsed.compounds
        ],
        sentiment_score=parsed.sentiment_score,
        tags_cognitive=list(parsed.tags_cognitive),
        tags_physical=list(parsed.tags_physical),
        tags_mood=list(parsed.tags_mood),
        notes=parsed.notes,
    )


def _dedupe_tags(value: list[str]) -> list[str]:
    return list(dict.fromkeys(value))


def _field_errors(exc: ValidationError) -> list[FieldError]:
    return [
        FieldError(
            field=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
        )
        for error in exc.errors()
    ]
