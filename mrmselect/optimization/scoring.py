"""Scoring functions mapping the quality metrics of a feature to a scalar score.

All functions accept scalars or numpy arrays.
"""

import numpy as np

from mrmselect.constants.keys import Strategy
from mrmselect.features import Feature


def _as_array(x) -> np.ndarray:
    return np.asarray(x, dtype=np.float64)


def _floor_to_one(x: np.ndarray) -> np.ndarray:
    """Replace non-positive and non-finite values by 1.0"""
    return np.where(np.isfinite(x) & (x > 0), x, 1.0)


def linear_score(peak_apices_sum, sn_ratio):
    """Score used as objective coefficient in the `score` strategy.

    `log(peak_apices_sum) * log(sn_ratio)` where non-positive log terms are replaced by 1.0.

    Parameters
    ----------
    peak_apices_sum : float | np.ndarray
        Summed apex intensity of the peak.
    sn_ratio : float | np.ndarray
        Signal to noise ratio of the peak.

    Returns
    -------
    float | np.ndarray
        Higher values indicate a better peak.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        log_intensity = _floor_to_one(np.log(_as_array(peak_apices_sum)))
        log_sn = _floor_to_one(np.log(_as_array(sn_ratio)))

    score = log_intensity * log_sn
    return float(score) if score.ndim == 0 else score


def qmip_score(peak_apices_sum, sn_ratio):
    """Weight of a feature in the retention time deviation penalty of the `qmip` strategy.

    `sqrt(1 / log10(peak_apices_sum) * 1 / log(sn_ratio))` where non-positive reciprocals are replaced by 1.0.
    Better peaks receive smaller weights.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        inv_log_intensity = _floor_to_one(1.0 / np.log10(_as_array(peak_apices_sum)))
        inv_log_sn = _floor_to_one(1.0 / np.log(_as_array(sn_ratio)))

    score = np.sqrt(inv_log_intensity * inv_log_sn)
    return float(score) if score.ndim == 0 else score


_SCORE_FUNCTIONS = {
    Strategy.SCORE: linear_score,
    Strategy.QMIP: qmip_score,
}


def score_feature(feature: Feature, strategy: str) -> float:
    """Score a single feature with the scoring function of `strategy`.

    Raises
    ------
    MissingAttributeError
        If the feature has no `peak_apices_sum` or `sn_ratio`.
    """
    return _SCORE_FUNCTIONS[strategy](
        feature.require("peak_apices_sum"), feature.require("sn_ratio")
    )
