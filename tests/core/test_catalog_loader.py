from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest
from gridbricklab.core.catalog_loader import CatalogError, load_catalog, records_from_mapping
from gridbricklab.core.ids import C, Id
from gridbricklab.core.records import DataRecord
from gridbricklab.core.resolver import resolve
from gridbricklab.handlers.registry import default_registry

CATALOG_DIR = Path(__file__).resolve().parents[1] / "data" / "catalogs"
TIME_CATALOG = CATALOG_DIR / "time_only.yaml"


def test_load_catalog_keeps_order() -> None:
    records = load_catalog(TIME_CATALOG)

    assert len(records) == 5
    assert all(isinstance(r, DataRecord) for r in records)
    assert [r.instance for r in records] == [
        "Hourly",
        "OneHour",
        "Milestones",
        "WeatherYears",
        "FirstWeek",
    ]
    hourly = records[0]
    assert hourly.category == C.TIMEINDEX
    assert hourly.variant == "RangeTimeIndex"
    assert hourly.value["Start"] == datetime(2024, 1, 1)
    assert hourly.value["Delta"] == "OneHour"


def test_loaded_catalog_resolves() -> None:
    result = resolve(load_catalog(TIME_CATALOG), default_registry())

    assert result.toplevel == {}
    assert len(result.lowlevel) == 5
    assert len(result.lowlevel[Id(C.TIMEINDEX, "Hourly")]) == 168


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    payload = {
        "records": [
            {
                "category": "TimeDelta",
                "variant": "MsTimeDelta",
                "name": "Day",
                "value": {"Period": "1D"},
            }
        ]
    }
    path.write_text(json.dumps(payload), encoding="utf-8")

    (record,) = load_catalog(path)
    assert record.key.instance == "Day"
    assert record.value == {"Period": "1D"}


def test_mapping_source_is_copied() -> None:
    value = {"Period": "1h"}
    mapping = {
        "records": [
            {"category": "TimeDelta", "variant": "MsTimeDelta", "name": "H", "value": value}
        ]
    }
    (record,) = load_catalog(mapping)
    value["Period"] = "2h"
    assert record.value == {"Period": "1h"}


def test_record_without_value() -> None:
    records = records_from_mapping(
        {"records": [{"category": "A", "variant": "B", "name": "c"}]}
    )
    assert records[0].value is None


@pytest.mark.parametrize(
    "entry, message",
    [
        ("not a mapping", "expected a mapping"),
        ({"variant": "B", "name": "c"}, "category: expected non-empty string"),
        ({"category": "A", "variant": " ", "name": "c"}, "variant: expected non-empty string"),
        ({"category": "A", "variant": "B"}, "name: expected non-empty string"),
        ({"category": "A", "variant": "B", "name": "c", "extra": 1}, "unknown keys"),
    ],
)
def test_invalid_entries(entry, message) -> None:
    with pytest.raises(CatalogError, match=message):
        records_from_mapping({"records": [entry]})


def test_records_must_be_a_list() -> None:
    with pytest.raises(CatalogError, match="records: expected a list"):
        records_from_mapping({"records": {"category": "A"}})
    with pytest.raises(CatalogError, match="records: expected a list"):
        records_from_mapping({})


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("records: [\n", encoding="utf-8")
    with pytest.raises(CatalogError, match="Invalid YAML"):
        load_catalog(path)


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(CatalogError, match="Invalid JSON"):
        load_catalog(path)


def test_root_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(CatalogError, match="root must be a mapping"):
        load_catalog(path)


def test_unsupported_format(tmp_path: Path) -> None:
    path = tmp_path / "catalog.toml"
    path.write_text("records = []", encoding="utf-8")
    with pytest.raises(CatalogError, match="Unsupported catalog format 'toml'"):
        load_catalog(path)


def test_format_override(tmp_path: Path) -> None:
    path = tmp_path / "catalog.txt"
    path.write_text("records: []\n", encoding="utf-8")
    assert load_catalog(path, format="yaml") == []


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "nope.yaml")


def test_catalog_error_is_value_error() -> None:
    assert issubclass(CatalogError, ValueError)
