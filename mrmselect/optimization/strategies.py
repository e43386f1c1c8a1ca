"""Optimization strategies selecting one feature per group within a window of the time-name series."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from mrmselect.config import SelectorConfig
from mrmselect.constants.keys import Strategy, ThresholdMode, VariableType
from mrmselect.exceptions import OptimizationFailedError
from mrmselect.features import Feature
from mrmselect.optimization.model import (
    PairKey,
    VariableArena,
    VariableKey,
    add_constraint,
    add_variable,
    column_type,
)
from mrmselect.optimization.scoring import score_feature
from mrmselect.solver.base import BoundKind, LinearProblem, Sense, SolveStatus
from mrmselect.solver.scipy_milp import ScipyMilpProblem

logger = logging.getLogger()

# minimal margin above the threshold in the strict threshold mode
THRESHOLD_EPSILON = 1e-6

TimeName = tuple[float, str]


def is_selected(value: float, threshold: float, mode: str) -> bool:
    """Compare a solved variable value against the selection threshold.

    Parameters
    ----------
    value : float
        Value of the variable in the solution.
    threshold : float
        The `optimal_threshold`.
    mode : str
        "inclusive" for `value >= threshold`, "strict" for `value - threshold > 1e-6`.
    """
    if mode == ThresholdMode.INCLUSIVE:
        return value >= threshold
    if mode == ThresholdMode.STRICT:
        return (value - threshold) > THRESHOLD_EPSILON
    raise ValueError(f"Unknown threshold mode {mode}")


class BaseOptimizer(ABC):
    """Builds and solves one problem per window and returns the keys of the selected features.

    Parameters
    ----------
    config : SelectorConfig
        Selection configuration.
    problem_factory : callable, default ScipyMilpProblem
        Called once per window to create an empty problem.
    """

    strategy: str
    default_threshold_mode: str

    def __init__(
        self,
        config: SelectorConfig,
        problem_factory: Callable[[], LinearProblem] = ScipyMilpProblem,
    ):
        # fail before the first window is built
        column_type(config.variable_type)

        self._config = config
        self._problem_factory = problem_factory

        self.threshold_mode = (
            self.default_threshold_mode
            if config.threshold_mode == ThresholdMode.AUTO
            else config.threshold_mode
        )

    @property
    def selection_variable_type(self) -> str:
        return self._config.variable_type

    @property
    def time_limit(self) -> float | None:
        return (
            self._config.solver_time_limit
            if self._config.solver_time_limit > 0
            else None
        )

    def optimize(
        self,
        time_name: list[TimeName],
        feature_map: dict[str, list[Feature]],
        window_index: int = 0,
    ) -> set[VariableKey]:
        """Select one feature for each group of the window.

        Parameters
        ----------
        time_name : list of (float, str)
            The slice of the time-name series covered by the window.
        feature_map : dict
            Features of each group.
        window_index : int
            Index of the window, used for logging and error reporting.

        Returns
        -------
        set of VariableKey
            Keys of the selected features.

        Raises
        ------
        OptimizationFailedError
            If the solver does not return an optimal solution.
        """
        problem = self._problem_factory()
        problem.set_objective_sense(Sense.MIN)
        arena = VariableArena()

        self._build(problem, arena, time_name, feature_map)

        status = problem.solve(self.time_limit)
        if status is not SolveStatus.OPTIMAL:
            raise OptimizationFailedError(window_index, status.value)

        logger.debug(
            f"Window {window_index}: {len(time_name)} groups, {problem.get_number_of_columns()} columns, "
            f"{problem.get_number_of_rows()} rows, objective {problem.objective_value:.4f}"
        )

        return {
            key
            for key, index in arena.items()
            if is_selected(
                problem.get_column_value(index),
                self._config.optimal_threshold,
                self.threshold_mode,
            )
        }

    @abstractmethod
    def _build(
        self,
        problem: LinearProblem,
        arena: VariableArena,
        time_name: list[TimeName],
        feature_map: dict[str, list[Feature]],
    ) -> None:
        """Add all columns and rows of the window to the problem, selection variables are registered in the arena."""

    def _selection_variable(
        self,
        problem: LinearProblem,
        arena: VariableArena,
        key: VariableKey,
        objective: float,
    ) -> int:
        if key in arena:
            return arena[key]
        index = add_variable(
            problem, key.name, True, objective, self.selection_variable_type
        )
        return arena.register(key, index)

    @staticmethod
    def _add_assignment_constraint(
        problem: LinearProblem, indices: list[int], group: str
    ) -> None:
        """Exactly one feature of the group is selected. Groups without features are skipped."""
        indices = list(dict.fromkeys(indices))
        if not indices:
            logger.debug(f"Group {group} has no features, skipping constraint")
            return
        add_constraint(
            problem,
            indices,
            [1.0] * len(indices),
            f"{group}_constraint",
            1.0,
            1.0,
            BoundKind.DOUBLE_BOUNDED,
        )


class ScoreOptimizer(BaseOptimizer):
    """Selects the feature with the highest linear score of every group.

    Every feature is a bounded variable with the negated linear score as objective coefficient,
    the model is minimized under the constraint that exactly one feature per group is selected.
    """

    strategy = Strategy.SCORE
    default_threshold_mode = ThresholdMode.INCLUSIVE

    def _build(self, problem, arena, time_name, feature_map):
        constrained = set()
        for _, group in time_name:
            if group in constrained:
                continue
            constrained.add(group)

            indices = [
                self._selection_variable(
                    problem,
                    arena,
                    VariableKey(group, feature.unique_id),
                    -score_feature(feature, self.strategy),
                )
                for feature in feature_map.get(group, [])
            ]
            self._add_assignment_constraint(problem, indices, group)


class QMIPOptimizer(BaseOptimizer):
    """Selects the features with the most consistent retention times across neighbouring groups.

    For every pair of features from groups which are at most `nn_threshold` positions apart, the
    quadratic term `selected(a) * selected(b) * |deviation(a, b)|` is linearized with the auxiliary
    variables `q = a AND b` and `e >= |score * q|`. The model minimizes the sum of all `e`.
    """

    strategy = Strategy.QMIP
    default_threshold_mode = ThresholdMode.STRICT

    @property
    def selection_variable_type(self) -> str:
        # the continuous relaxation is solved by a = b = 0.5 with q = 0 for every pair
        return VariableType.INTEGER

    def _locality_weight(self, i: int, j: int) -> float:
        if not self._config.locality_weight:
            return 1.0
        return 1.0 / (self._config.nn_threshold - abs(i - j) + 1)

    def _build(self, problem, arena, time_name, feature_map):
        n_groups = len(time_name)
        radius = int(self._config.nn_threshold)
        scores = {}

        def quality(key, feature):
            if key not in scores:
                scores[key] = score_feature(feature, self.strategy)
            return scores[key]

        constrained = set()
        for i, (assay_rt_i, group_i) in enumerate(time_name):
            start = max(i - radius, 0)
            stop = min(i + radius + 1, n_groups)

            indices = []
            for feature_a in feature_map.get(group_i, []):
                key_a = VariableKey(group_i, feature_a.unique_id)
                index_a = self._selection_variable(problem, arena, key_a, 0.0)
                indices.append(index_a)

                for j in range(start, stop):
                    if j == i:
                        continue
                    assay_rt_j, group_j = time_name[j]
                    expected_delta = assay_rt_i - assay_rt_j
                    weight = self._locality_weight(i, j)

                    for feature_b in feature_map.get(group_j, []):
                        key_b = VariableKey(group_j, feature_b.unique_id)
                        index_b = self._selection_variable(problem, arena, key_b, 0.0)

                        delta = feature_a.require("rt") - feature_b.require("rt")
                        score = (
                            weight
                            * quality(key_a, feature_a)
                            * quality(key_b, feature_b)
                            * (delta - expected_delta)
                        )
                        self._add_pair(
                            problem, PairKey(key_a, key_b), index_a, index_b, score
                        )

            if group_i not in constrained:
                constrained.add(group_i)
                self._add_assignment_constraint(problem, indices, group_i)

    @staticmethod
    def _add_pair(
        problem: LinearProblem,
        key: PairKey,
        index_a: int,
        index_b: int,
        score: float,
    ) -> None:
        # q is exact for binary selection variables, so the auxiliary columns can stay continuous
        index_q = add_variable(problem, key.name, True, 0.0, VariableType.CONTINUOUS)
        index_e = add_variable(
            problem, f"{key.name}-ABS", False, 1.0, VariableType.CONTINUOUS
        )

        # q <= a, q <= b, q >= a + b - 1
        for index, suffix in ((index_a, "QP1"), (index_b, "QP2")):
            add_constraint(
                problem,
                [index, index_q],
                [1.0, -1.0],
                f"{key.name}-{suffix}",
                0.0,
                1.0,
                BoundKind.LOWER_BOUND_ONLY,
            )
        add_constraint(
            problem,
            [index_a, index_b, index_q],
            [1.0, 1.0, -1.0],
            f"{key.name}-QP3",
            0.0,
            1.0,
            BoundKind.UPPER_BOUND_ONLY,
        )

        # e >= score * q and e >= -score * q
        for sign, suffix in ((1.0, "obj+"), (-1.0, "obj-")):
            add_constraint(
                problem,
                [index_e, index_q],
                [-1.0, sign * score],
                f"{key.name}-{suffix}",
                -1.0,
                0.0,
                BoundKind.UPPER_BOUND_ONLY,
            )


OPTIMIZERS = {
    Strategy.SCORE: ScoreOptimizer,
    Strategy.QMIP: QMIPOptimizer,
}


def get_optimizer(
    config: SelectorConfig,
    problem_factory: Callable[[], LinearProblem] = ScipyMilpProblem,
) -> BaseOptimizer:
    """Create the optimizer for the configured strategy."""
    return OPTIMIZERS[config.strategy](config, problem_factory)
