"""
Error classes for GridBrickLab.

This module defines the exception classes raised while resolving declarative
records into model objects and while wiring boundary conditions into an
optimization problem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ids import Id


class ConfigError(Exception):
    """
    Configuration error detected during registration or resolution.

    Raised immediately at the point of detection and aborts resolution.

    **Common Causes:**
    - A record variant that has no registered handler
    - The same handler registered twice for one variant
    - Two records resolving to the same identity
    - Missing or mistyped fields in a record

    Attributes:
        key: The record key or object id the error refers to (if known)
    """

    def __init__(self, message: str, key=None):
        self.key = key
        if key is not None:
            message = f"{message} ({key})"
        super().__init__(message)


class DomainError(ConfigError):
    """
    Domain invariant violation found while constructing an object.

    Examples are non-positive steps or durations, unsorted time series,
    probability vectors that do not sum to one and bridged objects with a
    different number of state variables. These are never coerced.
    """


class UnresolvedRecordsError(ConfigError):
    """
    Raised when a resolution pass makes no progress and records are pending.

    Attributes:
        pending: Mapping from record key to the list of missing dependency ids
    """

    def __init__(self, pending: dict, message: str | None = None):
        self.pending = dict(pending)
        super().__init__(message or self._fmt(self.pending))

    @staticmethod
    def _fmt(pending: dict) -> str:
        lines = [f"{len(pending)} record(s) could not be resolved:"]
        for key, deps in pending.items():
            missing = ", ".join(str(d) for d in deps) or "<none reported>"
            lines.append(f"  {key}: {len(deps)} missing dependencies [{missing}]")
        return "\n".join(lines)


class AssemblyError(ConfigError):
    """Raised when some objects never report themselves ready for building."""

    def __init__(self, not_ready: list[Id]):
        self.not_ready = list(not_ready)
        preview = ", ".join(str(i) for i in self.not_ready[:10])
        more = f" (+{len(self.not_ready) - 10} more)" if len(self.not_ready) > 10 else ""
        super().__init__(f"Objects never became ready: [{preview}]{more}")


class ProblemError(Exception):
    """Invalid addressing of rows or columns in an optimization problem."""


class CatalogError(ConfigError, ValueError):
    """Raised when a catalog file cannot be parsed or validated."""
