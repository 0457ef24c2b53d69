"""
Identity types and category constants for GridBrickLab.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Id:
    """Identity of a resolved object, also used to address problem rows/columns."""

    category: str
    instance: str

    def __str__(self) -> str:
        return f"{self.category}:{self.instance}"


@dataclass(frozen=True, slots=True)
class VariantKey:
    """Registry lookup key selecting the handler for a record."""

    category: str
    variant: str

    def __str__(self) -> str:
        return f"{self.category}/{self.variant}"


@dataclass(frozen=True, slots=True)
class RecordKey:
    """Full key of a declarative record."""

    category: str
    variant: str
    instance: str

    @property
    def object_id(self) -> Id:
        return Id(self.category, self.instance)

    @property
    def variant_key(self) -> VariantKey:
        return VariantKey(self.category, self.variant)

    def __str__(self) -> str:
        return f"{self.category}/{self.variant}:{self.instance}"


class C:
    """Category names (behavior-centric, extensible)."""

    # === Low-level time primitives ===
    TIMEINDEX = "TimeIndex"
    TIMEDELTA = "TimeDelta"
    TIMEPERIOD = "TimePeriod"

    # === Top-level model objects (catalog lives outside this package) ===
    BALANCE = "Balance"
    FLOW = "Flow"
    STORAGE = "Storage"
    COMMODITY = "Commodity"
    HORIZON = "Horizon"

    # === Boundary conditions ===
    BOUNDARYCONDITION = "BoundaryCondition"

    @classmethod
    def all_categories(cls) -> list[str]:
        """Enumerate all known categories (for validation and docs)."""
        return [
            cls.TIMEINDEX,
            cls.TIMEDELTA,
            cls.TIMEPERIOD,
            cls.BALANCE,
            cls.FLOW,
            cls.STORAGE,
            cls.COMMODITY,
            cls.HORIZON,
            cls.BOUNDARYCONDITION,
        ]


# Field names used by records that point at another record
WHICHCONCEPT = "WhichConcept"
WHICHINSTANCE = "WhichInstance"
