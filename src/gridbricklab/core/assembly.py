"""
Readiness checks and boundary-condition coverage for resolved model objects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .boundary import BoundaryCondition
from .errors import AssemblyError, ConfigError
from .ids import Id
from .states import has_state_variables

logger = logging.getLogger(__name__)


def assemble(toplevel: dict[Id, Any], *, max_passes: int | None = None) -> int:
    """
    Call `assemble()` on every object until all of them report ready.

    Objects without an `assemble` method are considered ready. Objects may
    depend on each other being assembled first, so the loop repeats while
    it makes progress.

    Returns:
        Number of passes used

    Raises:
        AssemblyError: If a pass makes no progress while objects are not ready
    """
    pending = [
        (obj_id, obj) for obj_id, obj in toplevel.items() if hasattr(obj, "assemble")
    ]
    passes = 0
    while pending:
        if max_passes is not None and passes >= max_passes:
            raise AssemblyError([obj_id for obj_id, _ in pending])
        passes += 1
        not_ready = [(obj_id, obj) for obj_id, obj in pending if not obj.assemble()]
        if len(not_ready) == len(pending):
            raise AssemblyError([obj_id for obj_id, _ in not_ready])
        pending = not_ready
    logger.debug("Assembled %d objects in %d passes", len(toplevel), passes)
    return passes


@dataclass
class BoundaryReport:
    """
    Coverage of state-bearing objects by initial and terminal conditions.

    Every object with state variables needs exactly one initial and exactly
    one terminal condition (a single condition may be both). Conditions that
    are neither, such as ConnectTwoObjects, are not counted.
    """

    missing_initial: list[Id] = field(default_factory=list)
    missing_terminal: list[Id] = field(default_factory=list)
    duplicate_initial: dict[Id, list[Id]] = field(default_factory=dict)
    duplicate_terminal: dict[Id, list[Id]] = field(default_factory=dict)

    def has_errors(self) -> bool:
        return bool(
            self.missing_initial
            or self.missing_terminal
            or self.duplicate_initial
            or self.duplicate_terminal
        )

    def is_valid(self) -> bool:
        return not self.has_errors()

    def raise_for_errors(self) -> None:
        if self.has_errors():
            raise ConfigError(f"Boundary condition check failed:\n{self}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "missing_initial": [str(i) for i in self.missing_initial],
            "missing_terminal": [str(i) for i in self.missing_terminal],
            "duplicate_initial": {
                str(k): [str(i) for i in v] for k, v in self.duplicate_initial.items()
            },
            "duplicate_terminal": {
                str(k): [str(i) for i in v] for k, v in self.duplicate_terminal.items()
            },
            "is_valid": self.is_valid(),
        }

    def __str__(self) -> str:
        lines = ["Boundary conditions OK" if self.is_valid() else "Boundary conditions invalid"]
        if self.missing_initial:
            lines.append(
                f"Missing initial condition: {', '.join(map(str, self.missing_initial))}"
            )
        if self.missing_terminal:
            lines.append(
                f"Missing terminal condition: {', '.join(map(str, self.missing_terminal))}"
            )
        for obj_id, owners in self.duplicate_initial.items():
            lines.append(f"{obj_id} has several initial conditions: {', '.join(map(str, owners))}")
        for obj_id, owners in self.duplicate_terminal.items():
            lines.append(f"{obj_id} has several terminal conditions: {', '.join(map(str, owners))}")
        return "\n".join(lines)


def check_boundary_conditions(toplevel: dict[Id, Any]) -> BoundaryReport:
    """Build a coverage report for all state-bearing objects in the store."""
    initial: dict[Id, list[Id]] = {}
    terminal: dict[Id, list[Id]] = {}

    for obj in toplevel.values():
        if not isinstance(obj, BoundaryCondition):
            continue
        for covered in obj.get_objects():
            covered_id = covered.get_id()
            if obj.is_initial_condition():
                initial.setdefault(covered_id, []).append(obj.get_id())
            if obj.is_terminal_condition():
                terminal.setdefault(covered_id, []).append(obj.get_id())

    report = BoundaryReport()
    for obj_id, obj in toplevel.items():
        if isinstance(obj, BoundaryCondition) or not has_state_variables(obj):
            continue
        owners_in = initial.get(obj_id, [])
        owners_out = terminal.get(obj_id, [])
        if not owners_in:
            report.missing_initial.append(obj_id)
        elif len(owners_in) > 1:
            report.duplicate_initial[obj_id] = owners_in
        if not owners_out:
            report.missing_terminal.append(obj_id)
        elif len(owners_out) > 1:
            report.duplicate_terminal[obj_id] = owners_out
    return report
