"""
Handlers for boundary-condition records (top-level objects).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from gridbricklab.core.boundary import (
    NoBoundaryCondition,
    NoInitialCondition,
    NoTerminalCondition,
    StartEqualStop,
)
from gridbricklab.core.cuts import SimpleSingleCuts
from gridbricklab.core.errors import ConfigError
from gridbricklab.core.ids import WHICHCONCEPT, WHICHINSTANCE, Id, RecordKey
from gridbricklab.core.records import check_key, get_field, get_reference


def _include_single_object_condition(cls):
    def handler(
        toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
    ) -> tuple[bool, list[Id]]:
        check_key(toplevel, key)
        ref = get_reference(value, key)
        if ref not in toplevel:
            return False, [ref]
        # The referenced object may not be fully wired yet, so no checks here
        toplevel[key.object_id] = cls(key.object_id, toplevel[ref])
        return True, [ref]

    handler.__name__ = f"include_{cls.__name__}"
    handler.__qualname__ = handler.__name__
    handler.__doc__ = (
        f"Resolve a {cls.__name__} pointing at one object via "
        f"{WHICHCONCEPT}/{WHICHINSTANCE}."
    )
    return handler


include_start_equal_stop = _include_single_object_condition(StartEqualStop)
include_no_initial_condition = _include_single_object_condition(NoInitialCondition)
include_no_terminal_condition = _include_single_object_condition(NoTerminalCondition)
include_no_boundary_condition = _include_single_object_condition(NoBoundaryCondition)


def include_simple_single_cuts(
    toplevel: dict, lowlevel: dict, key: RecordKey, value: Any
) -> tuple[bool, list[Id]]:
    """
    Resolve a SimpleSingleCuts record.

    Fields:
        Objects: list of {WhichConcept, WhichInstance} references
        Probabilities: list of scenario weights
        MaxCuts: number of preallocated cut rows
        LowerBound: rhs of inactive cuts
    """
    check_key(toplevel, key)
    refs_raw = get_field(value, "Objects", (list, tuple), key)
    probabilities = get_field(value, "Probabilities", (list, tuple), key)
    max_cuts = get_field(value, "MaxCuts", int, key)
    lower_bound = get_field(value, "LowerBound", (int, float), key)

    refs: list[Id] = []
    for i, raw in enumerate(refs_raw):
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Objects[{i}] must be a reference mapping", key)
        refs.append(get_reference(raw, key))
    for i, p in enumerate(probabilities):
        if isinstance(p, bool) or not isinstance(p, (int, float)):
            raise ConfigError(f"Probabilities[{i}] must be a number", key)

    missing = [ref for ref in refs if ref not in toplevel]
    if missing:
        return False, missing

    toplevel[key.object_id] = SimpleSingleCuts(
        key.object_id,
        [toplevel[ref] for ref in refs],
        [float(p) for p in probabilities],
        max_cuts,
        float(lower_bound),
    )
    return True, refs
