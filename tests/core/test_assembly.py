"""
Tests for readiness assembly and boundary-condition coverage.
"""

import json

import pytest
from gridbricklab.core.assembly import BoundaryReport, assemble, check_boundary_conditions
from gridbricklab.core.boundary import (
    ConnectTwoObjects,
    NoBoundaryCondition,
    NoInitialCondition,
    NoTerminalCondition,
    StartEqualStop,
)
from gridbricklab.core.cuts import SimpleSingleCuts
from gridbricklab.core.errors import AssemblyError, ConfigError
from gridbricklab.core.ids import C, Id


def _store(*objects):
    return {obj.get_id(): obj for obj in objects}


def _bc(cls, name, obj):
    return cls(Id(C.BOUNDARYCONDITION, name), obj)


class TestAssemble:
    def test_all_ready_in_one_pass(self, make_storage):
        storage = make_storage()
        store = _store(storage, StartEqualStop.from_object(storage))
        assert assemble(store) == 1

    def test_objects_without_assemble_are_ignored(self, make_flow):
        assert assemble(_store(make_flow("Line"))) == 0

    def test_progress_over_several_passes(self, make_storage):
        storage = make_storage(horizon=None)

        class SetsHorizon:
            def get_id(self):
                return Id(C.HORIZON, "Setter")

            def assemble(self):
                storage.horizon = "ready"
                return True

        bc = StartEqualStop.from_object(storage)
        store = {bc.get_id(): bc, Id(C.HORIZON, "Setter"): SetsHorizon()}
        assert assemble(store) == 2

    def test_stuck_objects(self, make_storage):
        storage = make_storage(horizon=None)
        bc = StartEqualStop.from_object(storage)
        with pytest.raises(AssemblyError, match="BoundaryCondition:Res") as exc:
            assemble(_store(storage, bc))
        assert exc.value.not_ready == [bc.get_id()]


class TestCoverage:
    def test_cyclic_storage_is_covered(self, make_storage):
        storage = make_storage()
        report = check_boundary_conditions(_store(storage, StartEqualStop.from_object(storage)))
        assert report.is_valid()
        assert str(report) == "Boundary conditions OK"

    def test_initial_plus_terminal(self, make_storage):
        storage = make_storage()
        store = _store(
            storage,
            _bc(NoInitialCondition, "In", storage),
            _bc(NoTerminalCondition, "Out", storage),
        )
        assert check_boundary_conditions(store).is_valid()

    def test_missing_conditions(self, make_storage, make_flow):
        storage = make_storage()
        report = check_boundary_conditions(_store(storage, make_flow("Line")))
        assert report.missing_initial == [storage.id]
        assert report.missing_terminal == [storage.id]
        assert "Missing initial condition: Storage:Res" in str(report)
        with pytest.raises(ConfigError, match="Boundary condition check failed"):
            report.raise_for_errors()

    def test_duplicate_conditions(self, make_storage):
        storage = make_storage()
        first = StartEqualStop(Id(C.BOUNDARYCONDITION, "A"), storage)
        second = _bc(NoBoundaryCondition, "B", storage)
        report = check_boundary_conditions(_store(storage, first, second))
        assert report.duplicate_initial == {storage.id: [first.id, second.id]}
        assert report.duplicate_terminal == {storage.id: [first.id, second.id]}
        assert "several initial conditions" in str(report)

    def test_cuts_cover_terminal_end(self, make_storage):
        a, b = make_storage("A"), make_storage("B")
        cuts = SimpleSingleCuts(Id(C.BOUNDARYCONDITION, "Cuts"), [a, b], [1.0], 2, 0.0)
        store = _store(
            a, b, cuts, _bc(NoInitialCondition, "InA", a), _bc(NoInitialCondition, "InB", b)
        )
        assert check_boundary_conditions(store).is_valid()

    def test_bridge_does_not_count(self, make_storage):
        first, second = make_storage("Stage1"), make_storage("Stage2")
        store = _store(first, second, ConnectTwoObjects(first, second))
        report = check_boundary_conditions(store)
        assert set(report.missing_initial) == {first.id, second.id}
        assert set(report.missing_terminal) == {first.id, second.id}

    def test_report_serializes(self, make_storage):
        report = check_boundary_conditions(_store(make_storage()))
        data = json.loads(json.dumps(report.to_dict()))
        assert data["is_valid"] is False
        assert data["missing_initial"] == ["Storage:Res"]

    def test_empty_report(self):
        report = BoundaryReport()
        assert not report.has_errors()
        report.raise_for_errors()
