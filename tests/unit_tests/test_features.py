import numpy as np
import pandas as pd
import pytest
from conftest import mock_feature, mock_feature_df, mock_subordinate

from mrmselect.exceptions import ColumnTypeError, MissingAttributeError
from mrmselect.features import Feature, features_from_df, features_to_df


def test_feature_require():
    feature = Feature(unique_id=1, peptide_ref="A", rt=float("nan"), native_id="")

    assert feature.require("peptide_ref") == "A"
    for field in ["rt", "native_id", "sn_ratio"]:
        with pytest.raises(MissingAttributeError) as exc_info:
            feature.require(field)
        assert exc_info.value.field == field
        assert exc_info.value.feature_id == 1


def test_feature_with_subordinates():
    # given
    feature = mock_feature(1, "A", 10.0, subordinates=[mock_subordinate(100, "A_y3", 10.0)])

    # when
    stripped = feature.with_subordinates([])

    # then
    assert stripped.subordinates == ()
    assert stripped.unique_id == 1
    assert len(feature.subordinates) == 1


def test_features_from_df():
    # given
    features_df = mock_feature_df(n_groups=3, n_candidates=2)

    # when
    features = features_from_df(features_df)

    # then
    assert [f.unique_id for f in features] == list(range(6))
    assert all(len(f.subordinates) == 2 for f in features)

    first = features[0]
    assert first.peptide_ref == "PEPTIDE_0"
    assert first.assay_rt == 0.0
    assert first.rt == pytest.approx(features_df["rt"].iloc[0])
    assert [s.unique_id for s in first.subordinates] == [1000, 1001]
    assert [s.native_id for s in first.subordinates] == ["PEPTIDE_0_y3", "PEPTIDE_0_y4"]
    assert first.subordinates[0].sn_ratio == pytest.approx(
        features_df["subordinate_sn_ratio"].iloc[0]
    )
    # subordinates do not carry the attributes of their parent
    assert first.subordinates[0].peptide_ref is None


def test_features_from_df_does_not_modify_input():
    features_df = mock_feature_df(n_groups=2, n_candidates=1)
    expected_df = features_df.copy()

    features_from_df(features_df)

    pd.testing.assert_frame_equal(features_df, expected_df)


def test_features_from_df_without_subordinates():
    # given
    features_df = pd.DataFrame(
        {
            "feature_id": [1, 2],
            "peptide_ref": ["A", "B"],
            "assay_rt": [10.0, 20.0],
            "peak_apices_sum": [1e4, np.nan],
        }
    )

    # when
    features = features_from_df(features_df)

    # then
    assert [f.subordinates for f in features] == [(), ()]
    assert features[0].peak_apices_sum == 1e4
    assert features[1].peak_apices_sum is None
    assert features[0].rt is None


def test_features_from_df_missing_column():
    features_df = mock_feature_df(n_groups=2).drop(columns=["assay_rt"])

    with pytest.raises(MissingAttributeError) as exc_info:
        features_from_df(features_df)

    assert exc_info.value.field == "assay_rt"


def test_features_to_df():
    # given
    features = [
        mock_feature(
            1,
            "A",
            10.0,
            subordinates=[
                mock_subordinate(100, "A_y3", 10.1),
                mock_subordinate(101, "A_y4", 10.2),
            ],
        ),
        mock_feature(2, "B", 20.0),
    ]

    # when
    df = features_to_df(features)

    # then
    assert len(df) == 3
    assert df["feature_id"].tolist() == [1, 1, 2]
    assert df["subordinate_id"].tolist()[:2] == [100, 101]
    assert pd.isna(df["subordinate_id"].iloc[2])
    assert df["subordinate_rt"].tolist()[:2] == [10.1, 10.2]


def test_features_round_trip():
    features = features_from_df(mock_feature_df(n_groups=4, n_candidates=2))

    assert features_from_df(features_to_df(features)) == features


def _large_id_df():
    """Two features of one group with ids beyond the int64 range, the first two subordinate ids differ only in the last digit."""
    return pd.DataFrame(
        {
            "feature_id": [2**63 + 1, 2**63 + 2, 2**63 + 2],
            "peptide_ref": ["A", "A", "A"],
            "assay_rt": [10.0, 10.0, 10.0],
            "subordinate_id": [1234567890123456789, 1234567890123456790, 2**64 - 1],
            "native_id": ["A_y3", "A_y3", "A_y4"],
        }
    )


def test_features_from_df_keeps_large_ids():
    # when
    features = features_from_df(_large_id_df())

    # then
    assert [f.unique_id for f in features] == [2**63 + 1, 2**63 + 2]
    assert [s.unique_id for s in features[0].subordinates] == [1234567890123456789]
    assert [s.unique_id for s in features[1].subordinates] == [
        1234567890123456790,
        2**64 - 1,
    ]


def test_features_to_df_keeps_large_ids():
    # given
    features = features_from_df(_large_id_df())

    # when
    df = features_to_df(features + [mock_feature(3, "B", 20.0)])

    # then
    assert df["feature_id"].tolist() == [2**63 + 1, 2**63 + 2, 2**63 + 2, 3]
    assert df["subordinate_id"].tolist()[:3] == [
        1234567890123456789,
        1234567890123456790,
        2**64 - 1,
    ]
    assert pd.isna(df["subordinate_id"].iloc[3])


def test_features_from_df_invalid_id_column():
    features_df = pd.DataFrame(
        {"feature_id": ["first", "second"], "peptide_ref": ["A", "B"], "assay_rt": [1.0, 2.0]}
    )

    with pytest.raises(ColumnTypeError) as exc_info:
        features_from_df(features_df)

    assert exc_info.value.column == "feature_id"
