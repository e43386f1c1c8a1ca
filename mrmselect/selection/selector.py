"""Selection of one feature per transition group (or transition) across the retention time axis."""

from collections.abc import Callable
from multiprocessing.pool import ThreadPool

import pandas as pd
from tqdm import tqdm

from mrmselect.config import SelectorConfig
from mrmselect.constants.keys import Strategy
from mrmselect.exceptions import OptimizationFailedError
from mrmselect.features import Feature, features_from_df, features_to_df
from mrmselect.optimization.model import VariableKey
from mrmselect.optimization.strategies import get_optimizer
from mrmselect.reporting.logging import logger
from mrmselect.selection.windowing import (
    Window,
    build_time_name_series,
    resolve_lengths,
    segment_windows,
    strip_whitespace,
)
from mrmselect.solver.base import LinearProblem
from mrmselect.solver.scipy_milp import ScipyMilpProblem


class FeatureSelector:
    def __init__(
        self,
        config: SelectorConfig | None = None,
        problem_factory: Callable[[], LinearProblem] = ScipyMilpProblem,
    ):
        """Select the best feature of every group by solving one linear program per window.

        Parameters
        ----------
        config : SelectorConfig, optional
            Selection configuration, the defaults are used if None.

        problem_factory : callable, default ScipyMilpProblem
            Creates an empty `LinearProblem`, called once per window.

        """
        self.config = SelectorConfig() if config is None else config
        self._optimizer = get_optimizer(self.config, problem_factory)

        if self.config.select_highest_count:
            logger.warning(
                "select_highest_count is reserved and has no effect on the selection"
            )

    def select(self, features: list[Feature]) -> list[Feature]:
        """Select features and return the filtered collection.

        In transition group mode (`select_transition_group`), features whose own key was selected are kept with
        all their subordinates. Otherwise only the selected subordinates are kept and features without any
        selected subordinate are dropped.

        Parameters
        ----------
        features : list of Feature
            The feature collection.

        Returns
        -------
        list of Feature
            The filtered feature collection, in input order.

        Raises
        ------
        MissingAttributeError
            If a feature lacks an attribute used by the selection. Raised before any problem is solved.
        OptimizationFailedError
            If the solver fails on a window and `tolerate_failed_windows` is not set.
        """
        time_name, feature_map = build_time_name_series(
            features, self.config.select_transition_group
        )
        self._validate(feature_map)

        window_length, step_length = resolve_lengths(
            self.config.segment_window_length,
            self.config.segment_step_length,
            len(time_name),
        )
        windows = segment_windows(len(time_name), window_length, step_length)

        logger.progress(
            f"Selecting from {len(time_name):,} groups in {len(windows):,} windows using the '{self.config.strategy}' strategy"
        )

        selected = self.optimize_windows(time_name, feature_map, windows)
        filtered = self.filter_features(features, selected)

        logger.info(
            f"Selected {len(selected):,} features, {len(filtered):,} of {len(features):,} features retained"
        )
        return filtered

    def select_df(self, features_df: pd.DataFrame) -> pd.DataFrame:
        """Select features from the flat feature table, see `FeatureCols`."""
        return features_to_df(self.select(features_from_df(features_df)))

    def _validate(self, feature_map: dict[str, list[Feature]]) -> None:
        required = ["peak_apices_sum", "sn_ratio"]
        if self.config.strategy == Strategy.QMIP:
            required.append("rt")

        for group_features in feature_map.values():
            for feature in group_features:
                for field in required:
                    feature.require(field)

    def _optimize_window(
        self,
        window: Window,
        time_name: list[tuple[float, str]],
        feature_map: dict[str, list[Feature]],
    ) -> set[VariableKey]:
        try:
            return self._optimizer.optimize(
                time_name[window.start : window.stop], feature_map, window.index
            )
        except OptimizationFailedError as e:
            if not self.config.tolerate_failed_windows:
                raise
            logger.warning(
                f"Optimization of window {window.index} failed with status '{e.status}', no features selected for groups {window.start} to {window.stop}"
            )
            return set()

    def optimize_windows(
        self,
        time_name: list[tuple[float, str]],
        feature_map: dict[str, list[Feature]],
        windows: list[Window],
    ) -> set[VariableKey]:
        """Solve all windows and return the union of their selections.

        Windows are independent. With `thread_count > 1` they are solved in a thread pool and merged once all are done.
        """

        def starfunc(window):
            return self._optimize_window(window, time_name, feature_map)

        if self.config.thread_count > 1 and len(windows) > 1:
            with ThreadPool(self.config.thread_count) as pool:
                results = list(
                    tqdm(pool.imap(starfunc, windows), total=len(windows))
                )
        else:
            results = [starfunc(window) for window in tqdm(windows)]

        selected = set()
        for result in results:
            selected |= result
        return selected

    def filter_features(
        self, features: list[Feature], selected: set[VariableKey]
    ) -> list[Feature]:
        """Keep the features and subordinates whose key is part of `selected`."""
        filtered = []
        for feature in features:
            if self.config.select_transition_group:
                key = VariableKey(
                    strip_whitespace(feature.peptide_ref), feature.unique_id
                )
                if key in selected:
                    filtered.append(feature)
                continue

            subordinates = [
                subordinate
                for subordinate in feature.subordinates
                if VariableKey(
                    strip_whitespace(subordinate.native_id), subordinate.unique_id
                )
                in selected
            ]
            if subordinates:
                filtered.append(feature.with_subordinates(subordinates))

        return filtered


def select_features(
    features: list[Feature], config: SelectorConfig | None = None
) -> list[Feature]:
    """Select features with the default solver, see `FeatureSelector.select`."""
    return FeatureSelector(config).select(features)
