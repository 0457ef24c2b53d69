"""
Single-cut Benders decomposition surrogate.

`SimpleSingleCuts` approximates the cost beyond the current horizon as a
piecewise-linear lower envelope over the outgoing state variables of one or
more objects. Each cut is the probability-weighted average of the cuts found
by a set of scenario sub-problems.

It is "simple" because there is no cut selection: a fixed number of cut rows
is allocated up front and, once all are used, the oldest cut is overwritten.
Inactive rows have rhs equal to the lower bound and zero slopes, so they
only bound the future cost from below.

Row layout (minimization):

    futurecost - sum_i slope_i * x_i_out >= constant
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from .boundary import BoundaryCondition
from .errors import DomainError
from .ids import Id
from .states import StateVariable, get_state_variables

logger = logging.getLogger(__name__)

PROBABILITY_TOL = 1e-8

# The cut constant is written as an rhs term under this fixed id
CUT_CONSTANT_ID = Id("CutConstant", "CutConstant")

ScenarioCut = tuple[float, dict[StateVariable, float]]


class SimpleSingleCuts(BoundaryCondition):
    """
    Future-cost variable constrained by a fixed-capacity buffer of optimality cuts.

    Attributes:
        id: Identity of the condition
        objects: Objects whose outgoing state variables the cuts are over
        probabilities: Scenario weights (non-negative, summing to one)
        max_cuts: Number of preallocated cut rows
        lower_bound: rhs of inactive cuts
        num_cuts: Number of active cuts (saturates at max_cuts)
        cut_ix: 1-based slot written by the last update (0 = none)
    """

    def __init__(
        self,
        id: Id,
        objects: Sequence[Any],
        probabilities: Sequence[float],
        max_cuts: int,
        lower_bound: float,
    ):
        objects = list(objects)
        probabilities = np.asarray(probabilities, dtype=float)

        if isinstance(max_cuts, bool) or int(max_cuts) != max_cuts or max_cuts <= 0:
            raise DomainError(f"max_cuts must be a positive integer, got {max_cuts}", id)
        if not objects:
            raise DomainError("SimpleSingleCuts requires at least one object", id)
        for obj in objects:
            if not get_state_variables(obj):
                raise DomainError(
                    f"Object {obj.get_id()} has no state variables", id
                )
        if probabilities.ndim != 1 or probabilities.size == 0:
            raise DomainError("probabilities must be a non-empty vector", id)
        if np.any(probabilities < 0.0):
            raise DomainError("probabilities must be >= 0", id)
        if not np.isclose(probabilities.sum(), 1.0, rtol=0.0, atol=PROBABILITY_TOL):
            raise DomainError(
                f"probabilities must sum to 1, got {probabilities.sum():.12g}", id
            )

        self.id = id
        self.objects = objects
        self.probabilities = probabilities
        self.max_cuts = int(max_cuts)
        self.lower_bound = float(lower_bound)

        self._state_variables: list[StateVariable] = [
            var for obj in objects for var in get_state_variables(obj)
        ]
        self.constants = np.full(self.max_cuts, self.lower_bound)
        self.slopes: list[dict[StateVariable, float]] = [
            dict.fromkeys(self._state_variables, 0.0) for _ in range(self.max_cuts)
        ]
        self.num_cuts = 0
        self.cut_ix = 0

    # --- ids ---

    def get_future_cost_var_id(self) -> Id:
        return Id(self.id.category, f"{self.id.instance}FutureCost")

    def get_cut_con_id(self) -> Id:
        return Id(self.id.category, f"{self.id.instance}CutConstraint")

    # --- boundary condition interface ---

    def get_objects(self) -> list[Any]:
        return list(self.objects)

    def get_state_variables(self) -> list[StateVariable]:
        """Tracked state variables, in object order."""
        return list(self._state_variables)

    def is_initial_condition(self) -> bool:
        return False

    def is_terminal_condition(self) -> bool:
        return True

    def assemble(self) -> bool:
        return all(
            getattr(obj, "get_horizon", lambda: None)() is not None
            for obj in self.objects
        )

    def build(self, problem) -> None:
        problem.add_var(self.get_future_cost_var_id(), 1)
        problem.add_ge(self.get_cut_con_id(), self.max_cuts)

    def set_constants(self, problem) -> None:
        fc_id = self.get_future_cost_var_id()
        con_id = self.get_cut_con_id()

        problem.set_obj_coeff(fc_id, 1, 1.0)
        for cut_ix in range(1, self.max_cuts + 1):
            problem.set_con_coeff(con_id, fc_id, cut_ix, 1, 1.0)
            problem.set_rhs_term(con_id, CUT_CONSTANT_ID, cut_ix, self.lower_bound)
            for var in self._state_variables:
                var_id, var_ix = var.var_out()
                problem.set_con_coeff(con_id, var_id, cut_ix, var_ix, 0.0)

    def update(self, problem, time) -> None:
        return None

    # --- cuts ---

    def _advance(self) -> int:
        cut_ix = self.cut_ix + 1
        if cut_ix > self.max_cuts:
            cut_ix = 1
        elif self.num_cuts < self.max_cuts:
            self.num_cuts = cut_ix
        self.cut_ix = cut_ix
        return cut_ix

    def update_cuts(self, problem, scenario_parameters: Sequence[ScenarioCut]) -> int:
        """
        Add one averaged cut from per-scenario results.

        Args:
            problem: Problem previously built with this object
            scenario_parameters: One (constant, {state variable: slope}) per
                scenario, in the order of the probability vector

        Returns:
            The 1-based slot the cut was written to

        Raises:
            DomainError: On a scenario count mismatch or a slope for a state
                variable that is not tracked
        """
        if len(scenario_parameters) != len(self.probabilities):
            raise DomainError(
                f"Expected {len(self.probabilities)} scenario results, "
                f"got {len(scenario_parameters)}",
                self.id,
            )
        results: list[ScenarioCut] = []
        for scenario, (constant, slopes) in enumerate(scenario_parameters):
            unknown = [var for var in slopes if var not in self.slopes[0]]
            if unknown:
                raise DomainError(
                    f"Slopes given for untracked state variables: "
                    f"{', '.join(str(v) for v in unknown)}",
                    self.id,
                )
            try:
                results.append(
                    (float(constant), {var: float(v) for var, v in slopes.items()})
                )
            except (TypeError, ValueError) as e:
                raise DomainError(
                    f"Scenario {scenario} has a non-numeric constant or slope", self.id
                ) from e

        cut_ix = self._advance()

        avg_constant = 0.0
        avg_slope = self.slopes[cut_ix - 1]
        for var in avg_slope:
            avg_slope[var] = 0.0
        for probability, (constant, slopes) in zip(self.probabilities, results):
            avg_constant += constant * probability
            for var, value in slopes.items():
                avg_slope[var] += value * probability
        self.constants[cut_ix - 1] = avg_constant

        self._write_cut(problem, cut_ix)
        logger.debug(
            "%s: stored cut in slot %d (num_cuts=%d, constant=%g)",
            self.id,
            cut_ix,
            self.num_cuts,
            avg_constant,
        )
        return cut_ix

    def clear_cuts(self, problem) -> None:
        """Deactivate every cut and reset the counters, keeping problem structure."""
        self.constants.fill(self.lower_bound)
        for slopes in self.slopes:
            for var in slopes:
                slopes[var] = 0.0
        self.num_cuts = 0
        self.cut_ix = 0

        for cut_ix in range(1, self.max_cuts + 1):
            self._write_cut(problem, cut_ix)

    def _write_cut(self, problem, cut_ix: int) -> None:
        con_id = self.get_cut_con_id()
        problem.set_rhs_term(
            con_id, CUT_CONSTANT_ID, cut_ix, float(self.constants[cut_ix - 1])
        )
        for var, slope in self.slopes[cut_ix - 1].items():
            var_id, var_ix = var.var_out()
            problem.set_con_coeff(con_id, var_id, cut_ix, var_ix, -slope)

    def get_cut(self, cut_ix: int) -> ScenarioCut:
        """Stored (constant, slopes) of a 1-based slot."""
        if not 1 <= cut_ix <= self.max_cuts:
            raise IndexError(f"cut slot {cut_ix} out of range 1..{self.max_cuts}")
        return float(self.constants[cut_ix - 1]), dict(self.slopes[cut_ix - 1])

    def cuts_frame(self) -> pd.DataFrame:
        """Active cuts as a table: one row per slot, one column per state variable."""
        rows = []
        for slot in range(1, self.num_cuts + 1):
            constant, slopes = self.get_cut(slot)
            row = {"slot": slot, "constant": constant}
            row.update({str(var): value for var, value in slopes.items()})
            rows.append(row)
        columns = ["slot", "constant"] + [str(v) for v in self._state_variables]
        return pd.DataFrame(rows, columns=columns)
