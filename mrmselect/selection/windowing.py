"""Time-name series construction and its segmentation into optimization windows."""

import logging
import math
from typing import NamedTuple

from mrmselect.config import AUTO_LENGTH
from mrmselect.exceptions import DuplicateFeatureError
from mrmselect.features import Feature

logger = logging.getLogger()


class Window(NamedTuple):
    """Slice `[start, stop)` of the time-name series which is solved as one problem."""

    index: int
    start: int
    stop: int


def strip_whitespace(name) -> str:
    return "".join(str(name).split())


def build_time_name_series(
    features: list[Feature], select_transition_group: bool = True
) -> tuple[list[tuple[float, str]], dict[str, list[Feature]]]:
    """Group the features and order the groups by their assay retention time.

    Every feature contributes to the group named after its `peptide_ref`. Unless `select_transition_group` is set,
    every subordinate additionally contributes to the group named after its `native_id`, with the assay
    retention time of its parent. Whitespace is removed from all group names.

    Parameters
    ----------
    features : list of Feature
        The feature collection.
    select_transition_group : bool, default True
        Only build groups for the top-level features.

    Returns
    -------
    time_name : list of (float, str)
        (assay_rt, group) tuples, one per group, sorted by assay_rt.
    feature_map : dict
        Features of each group, in input order.

    Raises
    ------
    MissingAttributeError
        If a feature lacks its group name or assay retention time.
    DuplicateFeatureError
        If two features of a group share a unique id.
    """
    time_name = []
    feature_map: dict[str, list[Feature]] = {}
    seen = set()

    def add(group: str, assay_rt: float, feature: Feature) -> None:
        # a repeated id would map two features onto the same selection variable
        if (group, feature.unique_id) in seen:
            raise DuplicateFeatureError(group, feature.unique_id)
        seen.add((group, feature.unique_id))

        if group not in feature_map:
            time_name.append((assay_rt, group))
            feature_map[group] = []
        feature_map[group].append(feature)

    for feature in features:
        group = strip_whitespace(feature.require("peptide_ref"))
        assay_rt = float(feature.require("assay_rt"))
        add(group, assay_rt, feature)

        if select_transition_group:
            continue

        for subordinate in feature.subordinates:
            add(
                strip_whitespace(subordinate.require("native_id")),
                assay_rt,
                subordinate,
            )

    time_name.sort()
    return time_name, feature_map


def resolve_lengths(
    window_length: float, step_length: float, n_groups: int
) -> tuple[int, int]:
    """Convert the configured window and step length to group counts.

    If both are set to -1, a single window spanning all groups is used.
    """
    if window_length == AUTO_LENGTH and step_length == AUTO_LENGTH:
        return n_groups, n_groups

    if window_length < step_length:
        logger.warning(
            f"segment_window_length ({window_length}) is smaller than segment_step_length ({step_length}), "
            "some groups will not be part of any window."
        )
    return int(window_length), int(step_length)


def segment_windows(
    n_groups: int, window_length: int, step_length: int
) -> list[Window]:
    """Partition the series into `ceil(n_groups / step_length)` windows.

    Window `i` covers `[i * step_length, min(i * step_length + window_length, n_groups))`,
    consecutive windows overlap if `window_length > step_length`.
    """
    if n_groups == 0:
        return []

    n_windows = math.ceil(n_groups / step_length)
    return [
        Window(i, i * step_length, min(i * step_length + window_length, n_groups))
        for i in range(n_windows)
    ]
