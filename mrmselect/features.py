"""Feature data model and conversion from and to the flat feature table."""

import logging
import math
from dataclasses import dataclass, replace

import numpy as np
import pandas as pd

from mrmselect.constants.keys import FeatureCols
from mrmselect.exceptions import MissingAttributeError
from mrmselect.validation.schemas import ID_COLUMNS, ID_DTYPE, features_flat_schema

logger = logging.getLogger()

# columns holding the attributes of the parent feature and the Feature attribute they map to
_FEATURE_COLUMNS = {
    FeatureCols.FEATURE_ID: "unique_id",
    FeatureCols.PEPTIDE_REF: "peptide_ref",
    FeatureCols.ASSAY_RT: "assay_rt",
    FeatureCols.RT: "rt",
    FeatureCols.PEAK_APICES_SUM: "peak_apices_sum",
    FeatureCols.SN_RATIO: "sn_ratio",
}

_SUBORDINATE_COLUMNS = {
    FeatureCols.SUBORDINATE_ID: "unique_id",
    FeatureCols.NATIVE_ID: "native_id",
    FeatureCols.SUBORDINATE_RT: "rt",
    FeatureCols.SUBORDINATE_PEAK_APICES_SUM: "peak_apices_sum",
    FeatureCols.SUBORDINATE_SN_RATIO: "sn_ratio",
}


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


@dataclass(frozen=True)
class Feature:
    """A scored peak group candidate as reported by upstream peak picking.

    Top-level features represent a transition group and are identified by `peptide_ref`,
    subordinate features represent single transitions and are identified by `native_id`.
    Subordinates are selected with the assay retention time of their parent.

    Parameters
    ----------
    unique_id : int
        Identifier which is unique within the feature collection.
    peptide_ref : str, optional
        Name of the transition group, used for top-level features.
    native_id : str, optional
        Name of the transition, used for subordinate features.
    assay_rt : float, optional
        Expected retention time of the transition group.
    rt : float, optional
        Observed retention time of the peak.
    peak_apices_sum : float, optional
        Summed intensity at the peak apices.
    sn_ratio : float, optional
        Signal to noise ratio of the peak.
    subordinates : tuple of Feature
        Transition level features belonging to this transition group.
    """

    unique_id: int
    peptide_ref: str | None = None
    native_id: str | None = None
    assay_rt: float | None = None
    rt: float | None = None
    peak_apices_sum: float | None = None
    sn_ratio: float | None = None
    subordinates: tuple["Feature", ...] = ()

    def require(self, field: str):
        """Return the value of `field` and raise `MissingAttributeError` if it is not set."""
        value = getattr(self, field)
        if _is_missing(value):
            raise MissingAttributeError(field, self.unique_id)
        return value

    def with_subordinates(self, subordinates) -> "Feature":
        return replace(self, subordinates=tuple(subordinates))


def _row_value(value):
    if pd.isna(value):
        return None
    if isinstance(value, str):
        return value
    # ids are 64 bit unsigned integers and must not pass through float
    if isinstance(value, (int, np.integer)):
        return int(value)
    return float(value)


def features_from_df(df: pd.DataFrame) -> list[Feature]:
    """Build the feature collection from the flat feature table.

    Parameters
    ----------
    df : pd.DataFrame
        Flat feature table with one row per subordinate feature, see `FeatureCols`.
        Rows of a parent without subordinates have empty subordinate columns.

    Returns
    -------
    list[Feature]
        Features in the order of their first appearance in the table.

    Raises
    ------
    MissingAttributeError
        If a required column is missing.
    """
    df = df.copy()
    features_flat_schema.validate(df, warn_on_critical_values=True)

    has_subordinates = FeatureCols.SUBORDINATE_ID in df.columns

    features = []
    for feature_id, feature_df in df.groupby(FeatureCols.FEATURE_ID, sort=False):
        feature_kwargs = {
            attribute: _row_value(feature_df[column].iat[0])
            for column, attribute in _FEATURE_COLUMNS.items()
            if column in feature_df.columns
        }
        feature_kwargs["unique_id"] = int(feature_id)

        subordinates = []
        if has_subordinates:
            subordinate_df = feature_df[feature_df[FeatureCols.SUBORDINATE_ID].notna()]
            # column wise access keeps the dtype of every column, rows would be upcast to a common dtype
            columns = {
                attribute: subordinate_df[column].tolist()
                for column, attribute in _SUBORDINATE_COLUMNS.items()
                if column in subordinate_df.columns
            }
            for values in zip(*columns.values()):
                subordinates.append(
                    Feature(
                        **{
                            attribute: _row_value(value)
                            for attribute, value in zip(columns, values)
                        }
                    )
                )

        features.append(Feature(subordinates=tuple(subordinates), **feature_kwargs))

    logger.info(
        f"Read {len(features):,} features with {sum(len(f.subordinates) for f in features):,} subordinates"
    )
    return features


def features_to_df(features: list[Feature]) -> pd.DataFrame:
    """Flatten a feature collection into the flat feature table, the inverse of `features_from_df`."""
    columns = {column: [] for column in [*_FEATURE_COLUMNS, *_SUBORDINATE_COLUMNS]}

    for feature in features:
        for subordinate in feature.subordinates or [None]:
            for column, attribute in _FEATURE_COLUMNS.items():
                columns[column].append(getattr(feature, attribute))
            for column, attribute in _SUBORDINATE_COLUMNS.items():
                columns[column].append(
                    None if subordinate is None else getattr(subordinate, attribute)
                )

    for column in ID_COLUMNS:
        columns[column] = pd.array(columns[column], dtype=ID_DTYPE)

    return pd.DataFrame(columns)
