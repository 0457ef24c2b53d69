"""Utilities for loading record catalogs from YAML/JSON sources."""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml

from .errors import CatalogError
from .records import DataRecord

__all__ = [
    "CatalogError",
    "load_catalog",
    "records_from_mapping",
]


def load_catalog(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> list[DataRecord]:
    """
    Parse a record catalog from YAML/JSON/dict into DataRecords.

    Expected layout::

        records:
          - category: TimeIndex
            variant: RangeTimeIndex
            name: Hourly
            value: {Start: 2024-01-01 00:00:00, Steps: 24, Delta: OneHour}

    Record order is kept; it only affects diagnostic order during resolution.
    """
    mapping, label = _read_source(source, format=format)
    return records_from_mapping(mapping, label)


def records_from_mapping(mapping: dict[str, Any], label: str = "<mapping>") -> list[DataRecord]:
    entries = _ensure_list(mapping.get("records"), f"{label}::records")
    records: list[DataRecord] = []
    for idx, entry in enumerate(entries):
        ctx = f"{label}::records[{idx}]"
        if not isinstance(entry, dict):
            raise CatalogError(f"{ctx}: expected a mapping")
        category = _coerce_str(entry.get("category"), f"{ctx}.category")
        variant = _coerce_str(entry.get("variant"), f"{ctx}.variant")
        name = _coerce_str(entry.get("name"), f"{ctx}.name")
        unknown = set(entry) - {"category", "variant", "name", "value"}
        if unknown:
            raise CatalogError(f"{ctx}: unknown keys {sorted(unknown)}")
        records.append(DataRecord(category, variant, name, deepcopy(entry.get("value"))))
    return records


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    if fmt in {"yaml", "yml", ""}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise CatalogError(f"Invalid YAML in {path}: {exc}") from exc
    elif fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Invalid JSON in {path}: {exc}") from exc
    else:
        raise CatalogError(f"Unsupported catalog format '{fmt}' for {path}")

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog root must be a mapping (source={path})")
    return data, str(path)


def _coerce_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CatalogError(f"{ctx}: expected non-empty string")
    return value


def _ensure_list(value: Any, ctx: str) -> list[Any]:
    if not isinstance(value, list):
        raise CatalogError(f"{ctx}: expected a list")
    return list(value)
