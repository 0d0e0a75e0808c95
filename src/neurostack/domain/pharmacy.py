"""Domain models for the device-local pharmacy."""

from dataclasses import dataclass, field

UNITS = ("mg", "ml", "g", "pills", "mcg", "IU")


@dataclass(frozen=True)
class Compound:
    """A compound in the user's pharmacy catalog."""

    id: str
    name: str
    default_dose: float
    unit: str
    color_hex: str
    is_active: bool
    created_at: int


@dataclass(frozen=True)
class PresetDose:
    """A compound and dose inside a stack preset."""

    compound_id: str
    dose: float


@dataclass(frozen=True)
class StackPreset:
    """Named bundle of doses for one-tap logging."""

    id: str
    name: str
    dose_items: list[PresetDose]
    color_hex: str
    created_at: int


@dataclass(frozen=True)
class DoseItem:
    """A single dose taken as part of a dose log."""

    compound_id: str
    dose: float
    timestamp: int


@dataclass(frozen=True)
class DoseLog:
    """A pharmacy-based log with anxiety/functionality ratings (1-10)."""

    id: str
    date: str
    timestamp: int
    dose_items: list[DoseItem]
    anxiety: int
    functionality: int
    notes: str = ""
    preset_id: str | None = None


@dataclass(frozen=True)
class PharmacyState:
    """Everything the local pharmacy store persists."""

    compounds: list[Compound] = field(default_factory=list)
    stack_presets: list[StackPreset] = field(default_factory=list)
    dose_logs: list[DoseLog] = field(default_factory=list)
    settings: dict[str, object] = field(default_factory=dict)


DEFAULT_SETTINGS: dict[str, object] = {"geminiApiKey": "", "theme": "cyberpunk"}

SEED_COMPOUNDS: list[tuple[str, float, str, str]] = [
    ("Bupropion (Voxra)", 150, "mg", "#3b82f6"),
    ("Escitalopram", 10, "mg", "#8b5cf6"),
    ("Buspirone", 10, "mg", "#ec4899"),
    ("Silexan", 160, "mg", "#a855f7"),
    ("Mirtazapine", 7.5, "mg", "#6366f1"),
    ("Hydroxyzine", 25, "mg", "#14b8a6"),
    ("Alimemazine", 10, "mg", "#06b6d4"),
    ("Inderal (Propranolol)", 30, "mg", "#0ea5e9"),
    ("Pregabalin", 150, "mg", "#3b82f6"),
    ("Bromantane", 75, "mg", "#10b981"),
    ("Temgicoluril (Mebicar)", 300, "mg", "#22c55e"),
    ("Emoxypine Succinate", 125, "mg", "#84cc16"),
    ("Aniracetam", 750, "mg", "#eab308"),
    ("L-Tyrosine", 500, "mg", "#f59e0b"),
    ("Huperzine-A", 150, "mcg", "#f97316"),
    ("Vitamin D", 1000, "IU", "#fbbf24"),
]


def compound_to_dict(compound: Compound) -> dict[str, object]:
    return {
        "id": compound.id,
        "name": compound.name,
        "defaultDose": compound.default_dose,
        "unit": compound.unit,
        "colorHex": compound.color_hex,
        "isActive": compound.is_active,
        "createdAt": compound.created_at,
    }


def compound_from_dict(data: dict[str, object]) -> Compound:
    return Compound(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        default_dose=float(data.get("defaultDose", 0.0)),
        unit=str(data.get("unit", "mg")),
        color_hex=str(data.get("colorHex", "#10b981")),
        is_active=bool(data.get("isActive", True)),
        created_at=int(data.get("createdAt", 0)),
    )


def preset_to_dict(preset: StackPreset) -> dict[str, object]:
    return {
        "id": preset.id,
        "name": preset.name,
        "doseItems": [
            {"compoundId": item.compound_id, "dose": item.dose}
            for item in preset.dose_items
        ],
        "colorHex": preset.color_hex,
        "createdAt": preset.created_at,
    }


def preset_from_dict(data: dict[str, object]) -> StackPreset:
    items = data.get("doseItems") or []
    return StackPreset(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        dose_items=[
            PresetDose(compound_id=str(item["compoundId"]), dose=float(item["dose"]))
            for item in items
        ],
        color_hex=str(data.get("colorHex", "#10b981")),
        created_at=int(data.get("createdAt", 0)),
    )


def dose_log_to_dict(log: DoseLog) -> dict[str, object]:
    data: dict[str, object] = {
        "id": log.id,
        "date": log.date,
        "timestamp": log.timestamp,
        "doseItems": [
            {
                "compoundId": item.compound_id,
                "dose": item.dose,
                "timestamp": item.timestamp,
            }
            for item in log.dose_items
        ],
        "anxiety": log.anxiety,
        "functionality": log.functionality,
        "notes": log.notes,
    }
    if log.preset_id is not None:
        data["presetId"] = log.preset_id
    return data


def dose_log_from_dict(data: dict[str, object]) -> DoseLog:
    items = data.get("doseItems") or []
    timestamp = int(data.get("timestamp", 0))
    preset_id = data.get("presetId")
    return DoseLog(
        id=str(data["id"]),
        date=str(data.get("date", "")),
        timestamp=timestamp,
        dose_items=[
            DoseItem(
                compound_id=str(item["compoundId"]),
                dose=float(item["dose"]),
                timestamp=int(item.get("timestamp", timestamp)),
            )
            for item in items
        ],
        anxiety=int(data.get("anxiety", 5)),
        functionality=int(data.get("functionality", 5)),
        notes=str(data.get("notes") or ""),
        preset_id=str(preset_id) if preset_id else None,
    )


def state_to_dict(state: PharmacyState) -> dict[str, object]:
    """Serialize pharmacy state with the backup file's camelCase keys."""
    return {
        "compounds": [compound_to_dict(compound) for compound in state.compounds],
        "stackPresets": [preset_to_dict(preset) for preset in state.stack_presets],
        "logEntries": [dose_log_to_dict(log) for log in state.dose_logs],
        "settings": dict(state.settings),
    }


def state_from_dict(data: dict[str, object]) -> PharmacyState:
    settings = data.get("settings")
    return PharmacyState(
        compounds=[compound_from_dict(item) for item in data.get("compounds") or []],
        stack_presets=[
            preset_from_dict(item) for item in data.get("stackPresets") or []
        ],
        dose_logs=[dose_log_from_dict(item) for item in data.get("logEntries") or []],
        settings=dict(settings) if isinstance(settings, dict) else {},
    )
