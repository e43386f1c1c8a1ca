"""Primitives for building the selection models.

Columns are identified by typed keys instead of their names. The `VariableArena` maps each key to the
index of its column within one problem, names are only passed to the solver for debugging.
"""

from typing import NamedTuple

from mrmselect.constants.keys import VariableType
from mrmselect.exceptions import UnsupportedVariableTypeError
from mrmselect.solver.base import BoundKind, ColumnType, LinearProblem

_COLUMN_TYPES = {
    VariableType.INTEGER: ColumnType.INTEGER,
    VariableType.CONTINUOUS: ColumnType.CONTINUOUS,
}


class VariableKey(NamedTuple):
    """Selection variable of the feature `unique_id` within `group`."""

    group: str
    unique_id: int

    @property
    def name(self) -> str:
        return f"{self.group}_{self.unique_id}"


class PairKey(NamedTuple):
    """Auxiliary variables coupling the selection of two features of different groups."""

    first: VariableKey
    second: VariableKey

    @property
    def name(self) -> str:
        return f"{self.first.name}-{self.second.name}"


class VariableArena:
    """Mapping of variable keys to column indices for a single problem."""

    def __init__(self):
        self._index: dict = {}

    def __contains__(self, key) -> bool:
        return key in self._index

    def __getitem__(self, key) -> int:
        return self._index[key]

    def __len__(self) -> int:
        return len(self._index)

    def items(self):
        return self._index.items()

    def register(self, key, index: int) -> int:
        if key in self._index:
            raise KeyError(f"Variable {key} has already been added to the problem")
        self._index[key] = index
        return index


def column_type(variable_type: str) -> ColumnType:
    """Map the configured variable type to the solver column type.

    Raises
    ------
    UnsupportedVariableTypeError
        If `variable_type` is neither "integer" nor "continuous".
    """
    try:
        return _COLUMN_TYPES[variable_type]
    except KeyError:
        raise UnsupportedVariableTypeError(variable_type) from None


def add_variable(
    problem: LinearProblem,
    name: str,
    bounded: bool,
    objective: float,
    variable_type: str,
) -> int:
    """Add a column to the problem.

    Parameters
    ----------
    problem : LinearProblem
        Problem to add the column to.
    name : str
        Name of the column, used by the solver for logging only.
    bounded : bool
        If True, the column is bounded to [0, 1], otherwise it is unbounded.
    objective : float
        Objective coefficient.
    variable_type : str
        "integer" or "continuous".

    Returns
    -------
    int
        Index of the new column.
    """
    bound_kind = BoundKind.DOUBLE_BOUNDED if bounded else BoundKind.UNBOUNDED
    lower, upper = bound_kind.resolve(0.0, 1.0)
    return problem.add_column(
        name, lower, upper, column_type(variable_type), objective
    )


def add_constraint(
    problem: LinearProblem,
    indices: list[int],
    values: list[float],
    name: str,
    lower: float,
    upper: float,
    bound_kind: BoundKind,
) -> int:
    """Add the row `lower <= sum(values * columns[indices]) <= upper`, bounds are activated according to `bound_kind`."""
    lower, upper = bound_kind.resolve(lower, upper)
    return problem.add_row(indices, values, name, lower, upper)
