"""Tests for the carbon footprint table."""

from pathlib import Path

import pytest

from dishcarbon.core.footprints import CarbonDatabase, load_default_database
from dishcarbon.errors import FootprintTableError


def test_packaged_table_loads() -> None:
    db = load_default_database()
    assert len(db) == 28
    assert db["chicken"] == 6.9
    assert db["olive oil"] == 5.4
    assert db.unknown == 2.0
    assert "unknown" in db


def test_default_database_is_cached() -> None:
    assert load_default_database() is load_default_database()


def test_get_or_default_is_total() -> None:
    db = load_default_database()
    assert db.get_or_default("rice") == 4.0
    assert db.get_or_default("dragonfruit") == db.unknown
    assert db.get_or_default("") == db.unknown


def test_table_is_read_only() -> None:
    db = load_default_database()
    with pytest.raises(TypeError):
        db["beef"] = 0.0  # type: ignore[index]

    source = {"rice": 4.0, "unknown": 2.0}
    copy = CarbonDatabase(source)
    source["rice"] = 0.0
    assert copy["rice"] == 4.0


def test_iteration_keeps_declared_order() -> None:
    db = CarbonDatabase({"oil": 1.0, "olive oil": 2.0, "unknown": 0.5})
    assert list(db) == ["oil", "olive oil", "unknown"]


def test_missing_sentinel_rejected() -> None:
    with pytest.raises(FootprintTableError):
        CarbonDatabase({"beef": 60.0})


@pytest.mark.parametrize(
    "footprints",
    [
        {"beef": -1.0, "unknown": 2.0},
        {"beef": "lots", "unknown": 2.0},
        {"beef": True, "unknown": 2.0},
        {"beef": float("nan"), "unknown": 2.0},
        {"Fresh Beef": 60.0, "unknown": 2.0},
        {"": 1.0, "unknown": 2.0},
    ],
)
def test_invalid_entries_rejected(footprints: dict) -> None:
    with pytest.raises(FootprintTableError):
        CarbonDatabase(footprints)


def test_table_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        CarbonDatabase({})


def test_from_yaml_file(tmp_path: Path) -> None:
    table = tmp_path / "table.yaml"
    table.write_text("footprints:\n  oats: 0.9\n  unknown: 1.5\n", encoding="utf-8")
    db = CarbonDatabase.from_yaml(table)
    assert dict(db) == {"oats": 0.9, "unknown": 1.5}


def test_from_yaml_directory(tmp_path: Path) -> None:
    (tmp_path / "carbon_footprints.yaml").write_text(
        "footprints:\n  tofu: 3\n  unknown: 2\n", encoding="utf-8"
    )
    db = CarbonDatabase.from_yaml(tmp_path)
    assert db["tofu"] == 3.0


def test_from_yaml_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FootprintTableError):
        CarbonDatabase.from_yaml(tmp_path / "nope.yaml")


def test_from_yaml_without_footprints(tmp_path: Path) -> None:
    table = tmp_path / "table.yaml"
    table.write_text("version: 1\n", encoding="utf-8")
    with pytest.raises(FootprintTableError):
        CarbonDatabase.from_yaml(table)
