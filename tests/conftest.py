"""
Shared fixtures: a minimal state-bearing storage object and its handler.

The concrete model-object catalog lives outside the package, so tests use this
stand-in to exercise boundary conditions and resolution end to end.
"""

from __future__ import annotations

import pytest
from gridbricklab.core.ids import C, Id, VariantKey
from gridbricklab.core.records import check_key, get_field, get_optional_field
from gridbricklab.core.states import StateVariable
from gridbricklab.handlers.registry import default_registry


class FakeStorage:
    """Storage with `n_states` state variables; horizon set when resolved."""

    def __init__(self, name: str, n_states: int = 1, horizon=None):
        self.id = Id(C.STORAGE, name)
        self.horizon = horizon
        self.start_id = Id(C.STORAGE, f"{name}Start")
        self.state_variables = [
            StateVariable.create(self.id, self.start_id, i, self.id, i)
            for i in range(1, n_states + 1)
        ]

    def get_id(self) -> Id:
        return self.id

    def get_state_variables(self) -> list[StateVariable]:
        return self.state_variables

    def get_horizon(self):
        return self.horizon

    def build(self, problem) -> None:
        if self.state_variables:
            problem.add_var(self.start_id, len(self.state_variables))
            problem.add_var(self.id, len(self.state_variables))


class FakeFlow:
    """Top-level object without state variables."""

    def __init__(self, name: str):
        self.id = Id(C.FLOW, name)

    def get_id(self) -> Id:
        return self.id


def include_fake_storage(toplevel, lowlevel, key, value):
    """Storage whose horizon is a TimeIndex record referenced by name."""
    check_key(toplevel, key)
    horizon_name = get_field(value, "Horizon", str, key)
    n_states = get_optional_field(value, "States", int, key, default=1)
    horizon_id = Id(C.TIMEINDEX, horizon_name)
    if horizon_id not in lowlevel:
        return False, [horizon_id]
    toplevel[key.object_id] = FakeStorage(
        key.instance, n_states, horizon=lowlevel[horizon_id]
    )
    return True, [horizon_id]


@pytest.fixture
def make_storage():
    def factory(name: str = "Res", n_states: int = 1, horizon="ready"):
        return FakeStorage(name, n_states, horizon=horizon)

    return factory


@pytest.fixture
def make_flow():
    return FakeFlow


@pytest.fixture
def registry():
    """Built-in handlers plus the fake storage handler."""
    reg = default_registry()
    reg.register(VariantKey(C.STORAGE, "FakeStorage"), include_fake_storage)
    return reg
