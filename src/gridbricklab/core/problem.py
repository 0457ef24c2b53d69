"""
In-memory sparse optimization problem.

`SparseProblem` implements the `Problem` protocol without a solver. Rows and
columns are declared by symbolic id and count; every coefficient is addressed
by (id, local index), never by a global offset. It is used to inspect what
model objects write into a problem and as the reference backend in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .errors import ProblemError
from .ids import Id

EQ = "=="
GE = ">="
LE = "<="


@dataclass
class SparseProblem:
    """
    Sparse row/column store for a minimization problem.

    Attributes:
        name: Label used in error messages
    """

    name: str = "problem"
    _vars: dict[Id, int] = field(default_factory=dict, repr=False)
    _cons: dict[Id, tuple[str, int]] = field(default_factory=dict, repr=False)
    _coeffs: dict[tuple[Id, int, Id, int], float] = field(
        default_factory=dict, repr=False
    )
    _obj: dict[tuple[Id, int], float] = field(default_factory=dict, repr=False)
    _rhs: dict[tuple[Id, int], dict[Id, float]] = field(
        default_factory=dict, repr=False
    )

    # --- structure ---

    def add_var(self, var_id: Id, n: int) -> None:
        self._check_new(var_id, n)
        self._vars[var_id] = n

    def add_eq(self, con_id: Id, n: int) -> None:
        self._add_con(con_id, n, EQ)

    def add_ge(self, con_id: Id, n: int) -> None:
        self._add_con(con_id, n, GE)

    def add_le(self, con_id: Id, n: int) -> None:
        self._add_con(con_id, n, LE)

    def _add_con(self, con_id: Id, n: int, sense: str) -> None:
        self._check_new(con_id, n)
        self._cons[con_id] = (sense, n)

    def _check_new(self, id: Id, n: int) -> None:
        if id in self._vars or id in self._cons:
            raise ProblemError(f"{self.name}: {id} is already declared")
        if n <= 0:
            raise ProblemError(f"{self.name}: {id} must have a positive count, got {n}")

    # --- coefficients ---

    def set_con_coeff(
        self, con_id: Id, var_id: Id, con_ix: int, var_ix: int, value: float
    ) -> None:
        self._check_con(con_id, con_ix)
        self._check_var(var_id, var_ix)
        self._coeffs[(con_id, con_ix, var_id, var_ix)] = float(value)

    def set_obj_coeff(self, var_id: Id, var_ix: int, value: float) -> None:
        self._check_var(var_id, var_ix)
        self._obj[(var_id, var_ix)] = float(value)

    def set_rhs_term(self, con_id: Id, term_id: Id, con_ix: int, value: float) -> None:
        self._check_con(con_id, con_ix)
        self._rhs.setdefault((con_id, con_ix), {})[term_id] = float(value)

    def _check_var(self, var_id: Id, ix: int) -> None:
        if var_id not in self._vars:
            raise ProblemError(f"{self.name}: unknown column {var_id}")
        if not 1 <= ix <= self._vars[var_id]:
            raise ProblemError(
                f"{self.name}: column index {ix} out of range for {var_id} "
                f"(1..{self._vars[var_id]})"
            )

    def _check_con(self, con_id: Id, ix: int) -> None:
        if con_id not in self._cons:
            raise ProblemError(f"{self.name}: unknown row {con_id}")
        n = self._cons[con_id][1]
        if not 1 <= ix <= n:
            raise ProblemError(
                f"{self.name}: row index {ix} out of range for {con_id} (1..{n})"
            )

    # --- inspection ---

    def has_var(self, var_id: Id) -> bool:
        return var_id in self._vars

    def has_con(self, con_id: Id) -> bool:
        return con_id in self._cons

    def num_cols(self, var_id: Id | None = None) -> int:
        if var_id is None:
            return sum(self._vars.values())
        return self._vars[var_id]

    def num_rows(self, con_id: Id | None = None) -> int:
        if con_id is None:
            return sum(n for _, n in self._cons.values())
        return self._cons[con_id][1]

    def row_sense(self, con_id: Id) -> str:
        return self._cons[con_id][0]

    def get_con_coeff(self, con_id: Id, var_id: Id, con_ix: int, var_ix: int) -> float:
        return self._coeffs.get((con_id, con_ix, var_id, var_ix), 0.0)

    def get_obj_coeff(self, var_id: Id, var_ix: int) -> float:
        return self._obj.get((var_id, var_ix), 0.0)

    def get_rhs_term(self, con_id: Id, term_id: Id, con_ix: int) -> float:
        return self._rhs.get((con_id, con_ix), {}).get(term_id, 0.0)

    def get_rhs(self, con_id: Id, con_ix: int) -> float:
        """Right-hand side of one row (sum of all its terms)."""
        return sum(self._rhs.get((con_id, con_ix), {}).values())

    def row_coeffs(self, con_id: Id, con_ix: int) -> dict[tuple[Id, int], float]:
        """Nonzero and explicitly set coefficients of one row."""
        return {
            (var_id, var_ix): value
            for (c, ci, var_id, var_ix), value in self._coeffs.items()
            if c == con_id and ci == con_ix
        }

    def to_dense(self) -> pd.DataFrame:
        """
        Dense view of the constraint matrix.

        Returns:
            DataFrame indexed by row label with one column per variable
            instance, plus 'sense' and 'rhs' columns.
        """
        col_labels = [
            f"{var_id}#{ix}" for var_id, n in self._vars.items() for ix in range(1, n + 1)
        ]
        col_pos = {label: pos for pos, label in enumerate(col_labels)}
        row_keys = [
            (con_id, ix) for con_id, (_, n) in self._cons.items() for ix in range(1, n + 1)
        ]
        row_pos = {key: pos for pos, key in enumerate(row_keys)}

        matrix = np.zeros((len(row_keys), len(col_labels)))
        for (con_id, con_ix, var_id, var_ix), value in self._coeffs.items():
            matrix[row_pos[(con_id, con_ix)], col_pos[f"{var_id}#{var_ix}"]] = value

        frame = pd.DataFrame(
            matrix,
            index=[f"{con_id}#{ix}" for con_id, ix in row_keys],
            columns=col_labels,
        )
        frame["sense"] = [self._cons[con_id][0] for con_id, _ in row_keys]
        frame["rhs"] = [self.get_rhs(con_id, ix) for con_id, ix in row_keys]
        return frame

    def __str__(self) -> str:
        return (
            f"SparseProblem({self.name}, cols={self.num_cols()}, "
            f"rows={self.num_rows()}, nonzeros={len(self._coeffs)})"
        )
