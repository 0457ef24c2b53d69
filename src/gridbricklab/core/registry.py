"""
Registry mapping (category, variant) keys to record handlers.

Populated once at startup by an explicit initialization routine (see
`gridbricklab.handlers.registry.register_defaults`) and only read afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import pandas as pd

from .errors import ConfigError
from .ids import VariantKey
from .interfaces import RecordHandler


class HandlerRegistry:
    """
    Lookup table from variant key to the handler that resolves it.

    **Example Usage:**
        ```python
        from gridbricklab.core.ids import C, VariantKey
        from gridbricklab.core.registry import HandlerRegistry
        from gridbricklab.handlers.time import include_vector_time_index

        registry = HandlerRegistry()
        registry.register(VariantKey(C.TIMEINDEX, "VectorTimeIndex"),
                          include_vector_time_index)
        handler = registry.get(VariantKey(C.TIMEINDEX, "VectorTimeIndex"))
        ```
    """

    def __init__(self, handlers: dict[VariantKey, RecordHandler] | None = None):
        self._handlers: dict[VariantKey, RecordHandler] = {}
        for key, handler in (handlers or {}).items():
            self.register(key, handler)

    def register(self, key: VariantKey, handler: RecordHandler) -> None:
        """
        Register a handler for a variant.

        Raises:
            ConfigError: If the key is already registered or the handler is
                not callable
        """
        if not isinstance(key, VariantKey):
            raise ConfigError(f"Registry keys must be VariantKey, got {key!r}")
        if key in self._handlers:
            raise ConfigError(
                f"Duplicate handler registration (existing: "
                f"{_handler_name(self._handlers[key])})",
                key,
            )
        if not callable(handler):
            raise ConfigError("Handler must be callable", key)
        self._handlers[key] = handler

    def get(self, key: VariantKey) -> RecordHandler:
        if key not in self._handlers:
            raise ConfigError("No handler registered for variant", key)
        return self._handlers[key]

    def missing(self, keys: Iterable[VariantKey]) -> list[VariantKey]:
        """Return the keys (in first-seen order) that have no handler."""
        out: list[VariantKey] = []
        for key in keys:
            if key not in self._handlers and key not in out:
                out.append(key)
        return out

    def keys(self) -> list[VariantKey]:
        return list(self._handlers.keys())

    def handlers(self) -> list[RecordHandler]:
        """Registered handlers, in the same order as `keys()`."""
        return list(self._handlers.values())

    def describe(self) -> pd.DataFrame:
        """Table of registered variants (category, variant, handler)."""
        rows = [
            {
                "category": key.category,
                "variant": key.variant,
                "handler": _handler_name(handler),
            }
            for key, handler in self._handlers.items()
        ]
        frame = pd.DataFrame(rows, columns=["category", "variant", "handler"])
        return frame.sort_values(["category", "variant"]).reset_index(drop=True)

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def __iter__(self) -> Iterator[VariantKey]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry(handlers={len(self._handlers)})"


def _handler_name(handler) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__name__
