"""
State-variable references.

A state variable is a quantity carried across periods (storage content,
lagged flow, ramp state). Inside one problem it exists twice: as the
incoming (start-of-period) column and as the outgoing (end-of-period)
column. Boundary conditions only ever talk to objects through these
references, never through the concrete object type.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ids import Id


@dataclass(frozen=True, slots=True)
class StateVariableRef:
    """One incarnation of a state variable: owner, column address and end."""

    owner: Id
    column: Id
    index: int
    outgoing: bool

    @property
    def address(self) -> tuple[Id, int]:
        return (self.column, self.index)


@dataclass(frozen=True, slots=True)
class StateVariable:
    """
    A state variable with its incoming and outgoing column instances.

    Hashable by value, so it can be used as a key in cut-slope mappings.
    """

    incoming: StateVariableRef
    outgoing: StateVariableRef

    def __post_init__(self):
        if self.incoming.owner != self.outgoing.owner:
            raise ValueError(
                f"State variable halves belong to different owners: "
                f"{self.incoming.owner} != {self.outgoing.owner}"
            )
        if self.incoming.outgoing or not self.outgoing.outgoing:
            raise ValueError("State variable incarnations are swapped")

    @classmethod
    def create(
        cls,
        owner: Id,
        in_column: Id,
        in_index: int,
        out_column: Id,
        out_index: int,
    ) -> StateVariable:
        return cls(
            StateVariableRef(owner, in_column, in_index, False),
            StateVariableRef(owner, out_column, out_index, True),
        )

    @property
    def owner(self) -> Id:
        return self.incoming.owner

    def var_in(self) -> tuple[Id, int]:
        """(column id, index) of the start-of-period instance."""
        return self.incoming.address

    def var_out(self) -> tuple[Id, int]:
        """(column id, index) of the end-of-period instance."""
        return self.outgoing.address

    def __str__(self) -> str:
        return f"{self.owner}[{self.outgoing.column}#{self.outgoing.index}]"


def get_state_variables(obj) -> list[StateVariable]:
    """State variables of an object, or an empty list if it has none."""
    getter = getattr(obj, "get_state_variables", None)
    if getter is None:
        return []
    return list(getter())


def has_state_variables(obj) -> bool:
    return len(get_state_variables(obj)) > 0
