"""Carbon footprint fact table: loading, validation and total lookup."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from dishcarbon.core.normalize import normalize_ingredient_name
from dishcarbon.errors import FootprintTableError

UNKNOWN_KEY = "unknown"
DEFAULT_TABLE = "carbon_footprints.yaml"


def _load_yaml(path: Path | None, resource_name: str) -> dict[str, Any]:
    if path:
        file_path = path / resource_name if path.is_dir() else path
        if not file_path.exists():
            raise FootprintTableError(f"Footprint table not found: {file_path}")
        with file_path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    try:
        resource = resources.files("dishcarbon.templates").joinpath(resource_name)
        with resource.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}
    except FileNotFoundError as exc:
        raise FootprintTableError(f"Packaged footprint table missing: {resource_name}") from exc


class CarbonDatabase(Mapping[str, float]):
    """
    Immutable mapping of canonical ingredient key -> kg CO2e per serving-unit.

    The table always holds the ``unknown`` sentinel, so get_or_default is total.
    Iteration follows the order entries were declared in.
    """

    def __init__(self, footprints: Mapping[str, Any]) -> None:
        table: dict[str, float] = {}
        for key, value in footprints.items():
            if not isinstance(key, str) or not key:
                raise FootprintTableError(f"Footprint key must be a non-empty string: {key!r}")
            if normalize_ingredient_name(key) != key:
                raise FootprintTableError(
                    f"Footprint key is not canonical: {key!r}",
                    details={"expected": normalize_ingredient_name(key)},
                )
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise FootprintTableError(f"Footprint for {key!r} must be a number: {value!r}")
            number = float(value)
            if not math.isfinite(number) or number < 0:
                raise FootprintTableError(f"Footprint for {key!r} must be finite and >= 0")
            table[key] = number
        if UNKNOWN_KEY not in table:
            raise FootprintTableError(f"Footprint table must define the '{UNKNOWN_KEY}' entry")
        self._table = MappingProxyType(table)

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "CarbonDatabase":
        """Load a table from a YAML file (or directory holding one); packaged table if None."""
        payload = _load_yaml(Path(path) if path else None, DEFAULT_TABLE)
        footprints = payload.get("footprints") if isinstance(payload, dict) else None
        if not isinstance(footprints, dict):
            raise FootprintTableError("Footprint table has no 'footprints' mapping")
        return cls(footprints)

    def __getitem__(self, key: str) -> float:
        return self._table[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"CarbonDatabase({len(self)} entries)"

    @property
    def unknown(self) -> float:
        return self._table[UNKNOWN_KEY]

    def get_or_default(self, key: str) -> float:
        """Return the footprint for key, or the unknown fallback."""
        return self._table.get(key, self.unknown)


@lru_cache
def load_default_database(path: str | None = None) -> CarbonDatabase:
    """Process-wide table, loaded once per path."""
    return CarbonDatabase.from_yaml(path)
