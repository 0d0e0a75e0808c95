"""Pharmacy catalog, stack presets and preset-based dose logs."""

import time
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from neurostack.domain.errors import InvalidBackupError
from neurostack.domain.pharmacy import (
    SEED_COMPOUNDS,
    UNITS,
    Compound,
    DoseItem,
    DoseLog,
    PharmacyState,
    PresetDose,
    StackPreset,
    state_from_dict,
    state_to_dict,
)

_RATING_RANGE = range(1, 11)
_IMMUTABLE_FIELDS = {"id", "created_at"}
_BACKUP_KEYS = ("compounds", "stackPresets", "logEntries", "settings")


class PharmacyRepository(Protocol):
    """Persistence interface for the pharmacy state."""

    def load_state(self) -> PharmacyState:
        """Return the full persisted state."""

    def save_state(self, state: PharmacyState) -> None:
        """Persist the full state."""


@dataclass
class PharmacyService:
    """Application service for the device-local pharmacy."""

    repository: PharmacyRepository

    def list_compounds(self, active_only: bool = False) -> list[Compound]:
        """Return compounds; inactive ones are hidden from logging."""
        compounds = self.repository.load_state().compounds
        if active_only:
            return [compound for compound in compounds if compound.is_active]
        return compounds

    def add_compound(
        self,
        name: str,
        default_dose: float,
        unit: str,
        color_hex: str = "#10b981",
        is_active: bool = True,
    ) -> Compound:
        """Add a compound to the catalog."""
        if unit not in UNITS:
            raise ValueError(f"Unknown unit: {unit}")
        compound = Compound(
            id=_new_id("compound"),
            name=name,
            default_dose=float(default_dose),
            unit=unit,
            color_hex=color_hex,
            is_active=is_active,
            created_at=_now_ms(),
        )
        state = self.repository.load_state()
        self._save(state, compounds=[*state.compounds, compound])
        return compound

    def update_compound(self, compound_id: str, changes: dict[str, object]) -> Compound:
        """Apply field changes to a compound."""
        if "unit" in changes and changes["unit"] not in UNITS:
            raise ValueError(f"Unknown unit: {changes['unit']}")
        state = self.repository.load_state()
        compounds, updated = _replace_by_id(state.compounds, compound_id, changes)
        self._save(state, compounds=compounds)
        return updated

    def delete_compound(self, compound_id: str) -> None:
        """Delete a compound and drop its doses from presets and logs."""
        state = self.repository.load_state()
        self._save(
            state,
            compounds=[c for c in state.compounds if c.id != compound_id],
            stack_presets=[
                replace(
                    preset,
                    dose_items=[
                        item
                        for item in preset.dose_items
                        if item.compound_id != compound_id
                    ],
                )
                for preset in state.stack_presets
            ],
            dose_logs=[
                replace(
                    log,
                    dose_items=[
                        item
                        for item in log.dose_items
                        if item.compound_id != compound_id
                    ],
                )
                for log in state.dose_logs
            ],
        )

    def load_sample_pharmacy(self) -> list[Compound]:
        """Add the bundled sample compounds."""
        return [
            self.add_compound(name, default_dose, unit, color_hex)
            for name, default_dose, unit, color_hex in SEED_COMPOUNDS
        ]

    def list_presets(self) -> list[StackPreset]:
        return self.repository.load_state().stack_presets

    def add_preset(
        self, name: str, dose_items: list[PresetDose], color_hex: str = "#10b981"
    ) -> StackPreset:
        """Create a stack preset."""
        preset = StackPreset(
            id=_new_id("preset"),
            name=name,
            dose_items=list(dose_items),
            color_hex=color_hex,
            created_at=_now_ms(),
        )
        state = self.repository.load_state()
        self._save(state, stack_presets=[*state.stack_presets, preset])
        return preset

    def update_preset(self, preset_id: str, changes: dict[str, object]) -> StackPreset:
        state = self.repository.load_state()
        presets, updated = _replace_by_id(state.stack_presets, preset_id, changes)
        self._save(state, stack_presets=presets)
        return updated

    def delete_preset(self, preset_id: str) -> None:
        state = self.repository.load_state()
        self._save(
            state,
            stack_presets=[p for p in state.stack_presets if p.id != preset_id],
        )

    def list_dose_logs(self) -> list[DoseLog]:
        return self.repository.load_state().dose_logs

    def add_dose_log(  # noqa: PLR0913
        self,
        dose_items: list[DoseItem],
        anxiety: int,
        functionality: int,
        notes: str = "",
        date: str | None = None,
        preset_id: str | None = None,
    ) -> DoseLog:
        """Record a dose log; ratings are on a 1-10 scale."""
        _check_rating("anxiety", anxiety)
        _check_rating("functionality", functionality)
        now = datetime.now(tz=UTC)
        log = DoseLog(
            id=_new_id("log"),
            date=date or now.date().isoformat(),
            timestamp=int(now.timestamp() * 1000),
            dose_items=list(dose_items),
            anxiety=anxiety,
            functionality=functionality,
            notes=notes,
            preset_id=preset_id,
        )
        state = self.repository.load_state()
        self._save(state, dose_logs=[*state.dose_logs, log])
        return log

    def update_dose_log(self, log_id: str, changes: dict[str, object]) -> DoseLog:
        for name in ("anxiety", "functionality"):
            if name in changes:
                _check_rating(name, changes[name])
        state = self.repository.load_state()
        logs, updated = _replace_by_id(state.dose_logs, log_id, changes)
        self._save(state, dose_logs=logs)
        return updated

    def delete_dose_log(self, log_id: str) -> None:
        state = self.repository.load_state()
        self._save(
            state, dose_logs=[log for log in state.dose_logs if log.id != log_id]
        )

    def log_preset(
        self, preset_id: str, anxiety: int, functionality: int, notes: str = ""
    ) -> DoseLog | None:
        """Log every dose of a preset at the current time."""
        preset = next(
            (p for p in self.list_presets() if p.id == preset_id),
            None,
        )
        if preset is None:
            return None
        timestamp = _now_ms()
        return self.add_dose_log(
            dose_items=[
                DoseItem(
                    compound_id=item.compound_id, dose=item.dose, timestamp=timestamp
                )
                for item in preset.dose_items
            ],
            anxiety=anxiety,
            functionality=functionality,
            notes=notes,
            preset_id=preset_id,
        )

    def update_settings(self, changes: dict[str, object]) -> dict[str, object]:
        state = self.repository.load_state()
        settings = {**state.settings, **changes}
        self._save(state, settings=settings)
        return settings

    def export_data(self) -> dict[str, object]:
        """Return the backup representation of the whole pharmacy."""
        return state_to_dict(self.repository.load_state())

    def import_data(self, data: dict[str, object]) -> None:
        """Overwrite the sections present in ``data``; keep the others."""
        current = state_to_dict(self.repository.load_state())
        for key in _BACKUP_KEYS:
            if data.get(key) is not None:
                current[key] = data[key]
        try:
            state = state_from_dict(current)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise InvalidBackupError("Invalid backup file format") from exc
        self.repository.save_state(state)

    def _save(self, state: PharmacyState, **changes: object) -> None:
        self.repository.save_state(replace(state, **changes))


def _replace_by_id(items: list, item_id: str, changes: dict[str, object]):
    allowed = {
        key: value for key, value in changes.items() if key not in _IMMUTABLE_FIELDS
    }
    for index, item in enumerate(items):
        if item.id == item_id:
            updated = replace(item, **allowed)
            return [*items[:index], updated, *items[index + 1 :]], updated
    raise LookupError(f"Not found: {item_id}")


def _check_rating(name: str, value: object) -> None:
    if not isinstance(value, int) or value not in _RATING_RANGE:
        raise ValueError(f"{name} must be an integer from 1 to 10")


def _new_id(prefix: str) -> str:
    return f"{prefix}_{_now_ms()}_{uuid4().hex[:9]}"


def _now_ms() -> int:
    return int(time.time() * 1000)
