"""Linear and mixed integer program solvers.

`LinearProblem` is the interface the optimization strategies build their models with,
`ScipyMilpProblem` implements it on top of `scipy.optimize.milp`.
"""

from mrmselect.solver.base import (
    BoundKind,
    ColumnType,
    LinearProblem,
    Sense,
    SolveStatus,
)
from mrmselect.solver.scipy_milp import ScipyMilpProblem

__all__ = [
    "BoundKind",
    "ColumnType",
    "LinearProblem",
    "ScipyMilpProblem",
    "Sense",
    "SolveStatus",
]
