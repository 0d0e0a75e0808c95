"""Domain models for dose/effect log entries."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

COGNITIVE_TAGS = (
    "Flow State",
    "Brain Fog",
    "Sharp",
    "Distracted",
    "Motivation",
    "Creative",
)

PHYSICAL_TAGS = (
    "High Energy",
    "Jittery",
    "Headache",
    "Nausea",
    "Insomnia",
    "Muscle Tension",
)

MOOD_TAGS = (
    "Anxious",
    "Calm",
    "Irritable",
    "Euphoric",
    "Social",
    "Numb",
)

_DRAFT_FIELDS = (
    "occurred_at",
    "compounds",
    "sentiment_score",
    "tags_cognitive",
    "tags_physical",
    "tags_mood",
    "notes",
)


@dataclass(frozen=True)
class CompoundDose:
    """A compound taken in a log entry. Dose is free text, e.g. "150mg"."""

    name: str
    dose: str


@dataclass(frozen=True)
class LogDraft:
    """Log entry fields supplied by the caller before persistence."""

    occurred_at: datetime
    compounds: list[CompoundDose]
    sentiment_score: int | None = None
    tags_cognitive: list[str] = field(default_factory=list)
    tags_physical: list[str] = field(default_factory=list)
    tags_mood: list[str] = field(default_factory=list)
    notes: str | None = None


@dataclass(frozen=True)
class LogEntry:
    """A persisted log entry."""

    id: str
    occurred_at: datetime
    compounds: list[CompoundDose]
    sentiment_score: int | None = None
    tags_cognitive: list[str] = field(default_factory=list)
    tags_physical: list[str] = field(default_factory=list)
    tags_mood: list[str] = field(default_factory=list)
    notes: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class SessionUser:
    """Minimal projection of the signed-in user."""

    id: str
    email: str | None = None


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_datetime(value: object) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) as UTC."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and value:
        return ensure_utc(datetime.fromisoformat(value))
    raise ValueError(f"Invalid datetime: {value!r}")


def draft_to_row(draft: LogDraft | LogEntry) -> dict[str, object]:
    """Serialize the caller-editable fields of an entry."""
    return {
        "occurred_at": ensure_utc(draft.occurred_at).isoformat(),
        "compounds": [
            {"name": compound.name, "dose": compound.dose}
            for compound in draft.compounds
        ],
        "sentiment_score": draft.sentiment_score,
        "tags_cognitive": list(draft.tags_cognitive),
        "tags_physical": list(draft.tags_physical),
        "tags_mood": list(draft.tags_mood),
        "notes": draft.notes,
    }


def entry_to_row(entry: LogEntry) -> dict[str, object]:
    """Serialize an entry to its table/backup row shape."""
    row: dict[str, object] = {"id": entry.id}
    row.update(draft_to_row(entry))
    if entry.user_id is not None:
        row["user_id"] = entry.user_id
    if entry.created_at is not None:
        row["created_at"] = ensure_utc(entry.created_at).isoformat()
    return row


def entry_from_row(row: dict[str, object]) -> LogEntry:
    """Build an entry from a table/backup row."""
    created_at = row.get("created_at")
    user_id = row.get("user_id")
    return LogEntry(
        id=str(row["id"]),
        occurred_at=parse_datetime(row.get("occurred_at")),
        compounds=_parse_compounds(row.get("compounds")),
        sentiment_score=_parse_score(row.get("sentiment_score")),
        tags_cognitive=_parse_tags(row.get("tags_cognitive")),
        tags_physical=_parse_tags(row.get("tags_physical")),
        tags_mood=_parse_tags(row.get("tags_mood")),
        notes=str(row["notes"]) if row.get("notes") is not None else None,
        user_id=str(user_id) if user_id else None,
        created_at=parse_datetime(created_at) if created_at else None,
    )


def draft_from_entry(entry: LogEntry) -> LogDraft:
    """Return the caller-editable part of an entry."""
    return LogDraft(**{name: getattr(entry, name) for name in _DRAFT_FIELDS})


def merge_patch(entry: LogEntry, patch: dict[str, object]) -> LogEntry:
    """Apply a partial update on top of an entry; the id never changes."""
    row = entry_to_row(entry)
    for key, value in patch.items():
        if key in _DRAFT_FIELDS:
            row[key] = value
    if isinstance(row.get("occurred_at"), datetime):
        row["occurred_at"] = ensure_utc(row["occurred_at"]).isoformat()
    return entry_from_row(row)


def patch_to_row(patch: dict[str, object]) -> dict[str, object]:
    """Keep only editable fields of a patch and make it JSON friendly."""
    row: dict[str, object] = {}
    for key, value in patch.items():
        if key not in _DRAFT_FIELDS:
            continue
        if isinstance(value, datetime):
            value = ensure_utc(value).isoformat()
        elif key == "compounds" and isinstance(value, list):
            value = [
                {"name": item.name, "dose": item.dose}
                if isinstance(item, CompoundDose)
                else item
                for item in value
            ]
        row[key] = value
    return row


def _parse_compounds(value: object) -> list[CompoundDose]:
    if not isinstance(value, list):
        return []
    compounds: list[CompoundDose] = []
    for item in value:
        if isinstance(item, CompoundDose):
            compounds.append(item)
        elif isinstance(item, dict):
            compounds.append(
                CompoundDose(
                    name=str(item.get("name", "")), dose=str(item.get("dose", ""))
                )
            )
    return compounds


def _parse_tags(value: object) -> list[str]:
    if not isinstance(value, list | tuple | set):
        return []
    tags: list[str] = []
    for tag in value:
        if str(tag) not in tags:
            tags.append(str(tag))
    return tags


def _parse_score(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value)
    return None
