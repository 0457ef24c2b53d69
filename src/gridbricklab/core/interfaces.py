"""
Interface protocols for GridBrickLab.
Defines the contracts that handlers, state-bearing objects and
optimization problems must satisfy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .ids import Id, RecordKey
    from .states import StateVariable


@runtime_checkable
class RecordHandler(Protocol):
    """
    Contract for record handlers registered per (category, variant).

    Responsibilities: validate one record and install the resolved value into
    exactly one of the two stores.
    """

    def __call__(
        self,
        toplevel: dict[Id, Any],
        lowlevel: dict[Id, Any],
        key: RecordKey,
        value: Any,
    ) -> tuple[bool, list[Id]]:
        """
        Try to resolve a record.

        Returns:
            (ok, dependencies). With ok=False nothing was written and the
            dependencies list the ids still missing. With ok=True the record
            was installed and the dependencies are informational only.

        Raises:
            ConfigError: On malformed fields or duplicate identities
        """
        ...


@runtime_checkable
class StateBearing(Protocol):
    """
    Contract for model objects with internal optimization state.
    """

    def get_id(self) -> Id: ...

    def get_state_variables(self) -> Sequence[StateVariable]:
        """State variables in a stable order."""
        ...

    def get_horizon(self) -> Any | None:
        """Time structure of the object, None until it is resolved."""
        ...


@runtime_checkable
class Problem(Protocol):
    """
    Solver-agnostic optimization problem addressed by symbolic ids.

    Indices are 1-based and local to the row/column id. The problem is
    always a minimization problem.
    """

    def add_var(self, var_id: Id, n: int) -> None: ...

    def add_eq(self, con_id: Id, n: int) -> None: ...

    def add_ge(self, con_id: Id, n: int) -> None: ...

    def add_le(self, con_id: Id, n: int) -> None: ...

    def set_con_coeff(
        self, con_id: Id, var_id: Id, con_ix: int, var_ix: int, value: float
    ) -> None: ...

    def set_obj_coeff(self, var_id: Id, var_ix: int, value: float) -> None: ...

    def set_rhs_term(
        self, con_id: Id, term_id: Id, con_ix: int, value: float
    ) -> None: ...


__all__ = ["RecordHandler", "StateBearing", "Problem"]
