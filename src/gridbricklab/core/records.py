"""
Declarative records and the field accessors shared by every handler.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ConfigError
from .ids import WHICHCONCEPT, WHICHINSTANCE, Id, RecordKey, VariantKey


@dataclass(frozen=True)
class DataRecord:
    """
    A named, typed piece of input data.

    Records are created once from input and never mutated. The `value` is
    usually a field mapping, but some variants accept a raw sequence or a
    typed primitive directly (e.g. a list of timestamps for a time index).

    Attributes:
        category: First half of the type tag (e.g. 'TimeIndex')
        variant: Second half of the type tag (e.g. 'RangeTimeIndex')
        instance: Instance name, unique within the category
        value: Field mapping, sequence or primitive consumed by the handler
    """

    category: str
    variant: str
    instance: str
    value: Any = None

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.category, self.variant, self.instance)

    @property
    def object_id(self) -> Id:
        return Id(self.category, self.instance)

    @property
    def variant_key(self) -> VariantKey:
        return VariantKey(self.category, self.variant)


def _type_names(expected) -> str:
    if isinstance(expected, tuple):
        return " | ".join(t.__name__ for t in expected)
    return expected.__name__


def _is_instance(value: Any, expected) -> bool:
    types = expected if isinstance(expected, tuple) else (expected,)
    # bool is a subclass of int but never a valid count or number here
    if isinstance(value, bool) and bool not in types:
        return False
    return isinstance(value, types)


def get_field(value: Any, name: str, expected, key: RecordKey) -> Any:
    """
    Read a required field from a record value.

    Args:
        value: The record value (must be a mapping)
        name: Field name
        expected: Type or tuple of accepted types
        key: Record key used in error messages

    Returns:
        The field value

    Raises:
        ConfigError: If the value is not a mapping, the field is missing or
            the field has the wrong type
    """
    if not isinstance(value, Mapping):
        raise ConfigError(f"Expected a field mapping, got {type(value).__name__}", key)
    if name not in value:
        raise ConfigError(f"Missing required field '{name}'", key)
    field = value[name]
    if not _is_instance(field, expected):
        raise ConfigError(
            f"Field '{name}' must be {_type_names(expected)}, "
            f"got {type(field).__name__}",
            key,
        )
    return field


def get_optional_field(
    value: Any, name: str, expected, key: RecordKey, default: Any = None
) -> Any:
    """Like get_field but returns `default` when the field is absent."""
    if isinstance(value, Mapping) and name not in value:
        return default
    return get_field(value, name, expected, key)


def get_reference(value: Any, key: RecordKey) -> Id:
    """Read the WhichConcept/WhichInstance pair pointing at another record."""
    concept = get_field(value, WHICHCONCEPT, str, key)
    instance = get_field(value, WHICHINSTANCE, str, key)
    return Id(concept, instance)


def check_key(store: Mapping, key: RecordKey) -> None:
    """Raise if the record's identity is already present in the store."""
    if key.object_id in store:
        raise ConfigError(f"Identity {key.object_id} already exists in store", key)
