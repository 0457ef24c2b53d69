"""
Boundary conditions for objects with state variables.

Objects that carry state across periods (storages, lagged flows, ramp states)
need something to pin down their state at the start and at the end of the
horizon. Boundary conditions do this purely through the state-variable
capability, without knowing the concrete object type.

Variants:
    NoInitialCondition / NoTerminalCondition / NoBoundaryCondition
        Exempt an object from needing a real condition on one or both ends.
    StartEqualStop
        Cyclic condition: outgoing state equals incoming state.
    ConnectTwoObjects
        Ties the outgoing state of one object to the incoming state of
        another. Used to chain independently built stages, e.g. a
        deterministic first stage feeding stochastic second-stage scenarios.
    SimpleSingleCuts (see `gridbricklab.core.cuts`)
        Future-cost variable constrained by Benders optimality cuts.

Lifecycle: `assemble()` until ready, then `build()` once,
`set_constants()` once, and `update()` every iteration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .errors import ConfigError, DomainError
from .ids import C, Id
from .states import get_state_variables


class BoundaryCondition(ABC):
    """
    Abstract base class for all boundary conditions.

    A condition can be initial, terminal or both. A condition that is
    neither (see ConnectTwoObjects) is a structural seam and does not count
    towards the coverage check.
    """

    id: Id

    def get_id(self) -> Id:
        return self.id

    @abstractmethod
    def get_objects(self) -> list[Any]:
        """Objects whose state variables this condition covers."""

    @abstractmethod
    def is_initial_condition(self) -> bool: ...

    @abstractmethod
    def is_terminal_condition(self) -> bool: ...

    def is_boundary_condition(self) -> bool:
        return self.is_initial_condition() or self.is_terminal_condition()

    @abstractmethod
    def build(self, problem) -> None:
        """Allocate rows and columns. Called exactly once."""

    @abstractmethod
    def set_constants(self, problem) -> None:
        """Write coefficients that never change between iterations."""

    @abstractmethod
    def update(self, problem, time) -> None:
        """Refresh time-dependent values for a new problem time."""

    @abstractmethod
    def assemble(self) -> bool:
        """True when the covered objects are ready to be built into a problem."""

    def get_parent(self) -> Any | None:
        """Single owning object, or None when the condition spans several."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id})"


def _horizon_ready(obj) -> bool:
    getter = getattr(obj, "get_horizon", None)
    return getter is not None and getter() is not None


# ---- NoInitialCondition, NoTerminalCondition and NoBoundaryCondition ----


class _NoCondition(BoundaryCondition):
    """Marks an object as exempt; contributes nothing to the problem."""

    _initial = False
    _terminal = False

    def __init__(self, id: Id, object: Any):
        self.id = id
        self.object = object

    def get_objects(self) -> list[Any]:
        return [self.object]

    def get_parent(self) -> Any:
        return self.object

    def is_initial_condition(self) -> bool:
        return self._initial

    def is_terminal_condition(self) -> bool:
        return self._terminal

    def build(self, problem) -> None:
        return None

    def set_constants(self, problem) -> None:
        return None

    def update(self, problem, time) -> None:
        return None

    def assemble(self) -> bool:
        return True


class NoInitialCondition(_NoCondition):
    _initial = True


class NoTerminalCondition(_NoCondition):
    _terminal = True


class NoBoundaryCondition(_NoCondition):
    _initial = True
    _terminal = True


# ---- StartEqualStop ----


def _eq_id(id: Id) -> Id:
    return Id(C.BOUNDARYCONDITION, f"Eq{id.instance}")


class StartEqualStop(BoundaryCondition):
    """
    Cyclic boundary: end-of-horizon state equals start-of-horizon state.

    For an object with N state variables, N equality rows are added; row i
    has +1 on the outgoing and -1 on the incoming column of variable i.

    Two construction paths:
        StartEqualStop(id, object)       before all objects are resolved, no checks
        StartEqualStop.from_object(obj)  after resolution, id derived from
                                         the owner, requires state variables
    """

    def __init__(self, id: Id, object: Any):
        self.id = id
        self.object = object

    @classmethod
    def from_object(cls, object: Any) -> StartEqualStop:
        if not get_state_variables(object):
            raise DomainError(
                "StartEqualStop requires an object with state variables",
                object.get_id(),
            )
        return cls(Id(C.BOUNDARYCONDITION, object.get_id().instance), object)

    def get_eq_id(self) -> Id:
        return _eq_id(self.id)

    def get_objects(self) -> list[Any]:
        return [self.object]

    def get_parent(self) -> Any:
        return self.object

    def is_initial_condition(self) -> bool:
        return True

    def is_terminal_condition(self) -> bool:
        return True

    def build(self, problem) -> None:
        n = len(get_state_variables(self.object))
        problem.add_eq(self.get_eq_id(), n)

    def set_constants(self, problem) -> None:
        eq_id = self.get_eq_id()
        for eq_ix, var in enumerate(get_state_variables(self.object), start=1):
            id_out, ix_out = var.var_out()
            id_in, ix_in = var.var_in()
            problem.set_con_coeff(eq_id, id_out, eq_ix, ix_out, 1.0)
            problem.set_con_coeff(eq_id, id_in, eq_ix, ix_in, -1.0)

    def update(self, problem, time) -> None:
        return None

    def assemble(self) -> bool:
        return _horizon_ready(self.object)


# ---- ConnectTwoObjects ----


class ConnectTwoObjects(BoundaryCondition):
    """
    Bridge from the outgoing state of one object to the incoming state of another.

    State variables are matched 1:1 by position. The bridge is neither an
    initial nor a terminal condition, so it is skipped by the coverage check;
    whether the free ends of the two objects need their own conditions is up
    to the caller.
    """

    def __init__(self, out_object: Any, in_object: Any):
        n_out = len(get_state_variables(out_object))
        n_in = len(get_state_variables(in_object))
        if n_out == 0:
            raise DomainError(
                "ConnectTwoObjects requires objects with state variables",
                out_object.get_id(),
            )
        if n_out != n_in:
            raise DomainError(
                f"Cannot connect objects with different number of state variables "
                f"({out_object.get_id()}: {n_out}, {in_object.get_id()}: {n_in})"
            )
        self.out_object = out_object
        self.in_object = in_object
        self.id = Id(
            C.BOUNDARYCONDITION,
            f"Connect_{out_object.get_id().instance}_{in_object.get_id().instance}",
        )

    def get_eq_id(self) -> Id:
        return _eq_id(self.id)

    def get_objects(self) -> list[Any]:
        return [self.in_object, self.out_object]

    def is_initial_condition(self) -> bool:
        return False

    def is_terminal_condition(self) -> bool:
        return False

    def build(self, problem) -> None:
        n = len(get_state_variables(self.in_object))
        problem.add_eq(self.get_eq_id(), n)

    def set_constants(self, problem) -> None:
        eq_id = self.get_eq_id()
        out_states = get_state_variables(self.out_object)
        in_states = get_state_variables(self.in_object)
        if len(out_states) != len(in_states):
            raise ConfigError("State variable count changed after construction", self.id)
        for eq_ix, (out_var, in_var) in enumerate(zip(out_states, in_states), start=1):
            id_out, ix_out = out_var.var_out()
            id_in, ix_in = in_var.var_in()
            problem.set_con_coeff(eq_id, id_out, eq_ix, ix_out, 1.0)
            problem.set_con_coeff(eq_id, id_in, eq_ix, ix_in, -1.0)

    def update(self, problem, time) -> None:
        return None

    def assemble(self) -> bool:
        return all(_horizon_ready(obj) for obj in self.get_objects())
