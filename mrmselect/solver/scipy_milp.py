"""`LinearProblem` implementation backed by `scipy.optimize.milp` (HiGHS)."""

import logging

import numpy as np
from scipy import sparse
from scipy.optimize import Bounds, LinearConstraint, milp

from mrmselect.solver.base import ColumnType, LinearProblem, SolveStatus

logger = logging.getLogger()

# status codes of scipy.optimize.milp
_MILP_STATUS = {
    0: SolveStatus.OPTIMAL,
    1: SolveStatus.TIME_LIMIT,
    2: SolveStatus.INFEASIBLE,
    3: SolveStatus.UNBOUNDED,
    4: SolveStatus.ERROR,
}


class ScipyMilpProblem(LinearProblem):
    """Collects columns and rows in python lists and hands them to `scipy.optimize.milp` on `solve`."""

    def __init__(self):
        super().__init__()

        self._column_names: list[str] = []
        self._column_lower: list[float] = []
        self._column_upper: list[float] = []
        self._integrality: list[int] = []
        self._objective: list[float] = []

        # coordinate representation of the constraint matrix
        self._row_idx: list[int] = []
        self._col_idx: list[int] = []
        self._values: list[float] = []
        self._row_names: list[str] = []
        self._row_lower: list[float] = []
        self._row_upper: list[float] = []

        self._solution: np.ndarray | None = None
        self._objective_value = np.nan

    def add_column(
        self,
        name: str,
        lower: float,
        upper: float,
        column_type: ColumnType,
        objective: float,
    ) -> int:
        self._column_names.append(name)
        self._column_lower.append(lower)
        self._column_upper.append(upper)
        self._integrality.append(1 if column_type is ColumnType.INTEGER else 0)
        self._objective.append(objective)
        return len(self._column_names) - 1

    def add_row(
        self,
        indices: list[int],
        values: list[float],
        name: str,
        lower: float,
        upper: float,
    ) -> int:
        if len(indices) != len(values):
            raise ValueError(
                f"Row {name}: got {len(indices)} indices but {len(values)} values"
            )

        row = len(self._row_names)
        self._row_idx.extend([row] * len(indices))
        self._col_idx.extend(indices)
        self._values.extend(values)
        self._row_names.append(name)
        self._row_lower.append(lower)
        self._row_upper.append(upper)
        return row

    def _constraint_matrix(self) -> sparse.csr_matrix:
        return sparse.csr_matrix(
            (self._values, (self._row_idx, self._col_idx)),
            shape=(len(self._row_names), len(self._column_names)),
        )

    def solve(self, time_limit: float | None = None) -> SolveStatus:
        n_columns = len(self._column_names)
        if n_columns == 0:
            self._solution = np.zeros(0)
            self._objective_value = 0.0
            return SolveStatus.OPTIMAL

        c = np.asarray(self._objective, dtype=np.float64) * self.sense.value

        constraints = None
        if self._row_names:
            constraints = LinearConstraint(
                self._constraint_matrix(),
                np.asarray(self._row_lower, dtype=np.float64),
                np.asarray(self._row_upper, dtype=np.float64),
            )

        options = {}
        if time_limit is not None:
            options["time_limit"] = time_limit

        result = milp(
            c,
            integrality=np.asarray(self._integrality),
            bounds=Bounds(
                np.asarray(self._column_lower, dtype=np.float64),
                np.asarray(self._column_upper, dtype=np.float64),
            ),
            constraints=constraints,
            options=options,
        )

        status = _MILP_STATUS.get(result.status, SolveStatus.ERROR)
        logger.debug(
            f"milp with {n_columns} columns and {len(self._row_names)} rows: {status.value} ({result.message})"
        )

        if status is not SolveStatus.OPTIMAL or result.x is None:
            self._solution = None
            self._objective_value = np.nan
            return status if status is not SolveStatus.OPTIMAL else SolveStatus.ERROR

        self._solution = result.x
        self._objective_value = float(result.fun) * self.sense.value
        return status

    def get_column_value(self, index: int) -> float:
        if self._solution is None:
            raise ValueError("Problem has not been solved successfully")
        return float(self._solution[index])

    def get_column_name(self, index: int) -> str:
        return self._column_names[index]

    def get_number_of_columns(self) -> int:
        return len(self._column_names)

    def get_number_of_rows(self) -> int:
        return len(self._row_names)

    @property
    def objective_value(self) -> float:
        return self._objective_value
