"""Domain models for drug-name lookups."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DrugSuggestions:
    """Autocomplete suggestions for a drug-name query."""

    suggestions: list[str]
    total_count: int
