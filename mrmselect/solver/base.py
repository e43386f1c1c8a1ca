"""Abstract interface of the linear / mixed integer program solvers used for the feature selection."""

from abc import ABC, abstractmethod
from enum import Enum


class BoundKind(Enum):
    """Which of the bounds of a column or row are active."""

    UNBOUNDED = "unbounded"
    LOWER_BOUND_ONLY = "lower_bound_only"
    UPPER_BOUND_ONLY = "upper_bound_only"
    DOUBLE_BOUNDED = "double_bounded"
    FIXED = "fixed"

    def resolve(self, lower: float, upper: float) -> tuple[float, float]:
        """Return the effective (lower, upper) bounds, inactive bounds are replaced by -inf / inf."""
        if self is BoundKind.UNBOUNDED:
            return -float("inf"), float("inf")
        if self is BoundKind.LOWER_BOUND_ONLY:
            return lower, float("inf")
        if self is BoundKind.UPPER_BOUND_ONLY:
            return -float("inf"), upper
        if self is BoundKind.FIXED:
            return lower, lower
        return lower, upper


class ColumnType(Enum):
    CONTINUOUS = "continuous"
    INTEGER = "integer"


class Sense(Enum):
    MIN = 1
    MAX = -1


class SolveStatus(Enum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    TIME_LIMIT = "time_limit"
    ERROR = "error"


class LinearProblem(ABC):
    """A linear or mixed integer program which is built column by column and row by row.

    Columns and rows are referred to by the integer index returned when they are added.
    A new problem is created for every optimization window, problems are not shared between threads.
    """

    def __init__(self):
        self.sense = Sense.MIN

    def set_objective_sense(self, sense: Sense) -> None:
        self.sense = sense

    @abstractmethod
    def add_column(
        self,
        name: str,
        lower: float,
        upper: float,
        column_type: ColumnType,
        objective: float,
    ) -> int:
        """Add a column (variable) and return its index."""

    @abstractmethod
    def add_row(
        self,
        indices: list[int],
        values: list[float],
        name: str,
        lower: float,
        upper: float,
    ) -> int:
        """Add the row `lower <= sum(values * columns[indices]) <= upper` and return its index."""

    @abstractmethod
    def solve(self, time_limit: float | None = None) -> SolveStatus:
        """Solve the problem, blocks until the solver returns."""

    @abstractmethod
    def get_column_value(self, index: int) -> float:
        """Value of the column in the last solution."""

    @abstractmethod
    def get_column_name(self, index: int) -> str:
        pass

    @abstractmethod
    def get_number_of_columns(self) -> int:
        pass

    @abstractmethod
    def get_number_of_rows(self) -> int:
        pass

    @property
    @abstractmethod
    def objective_value(self) -> float:
        """Objective value of the last solution."""
