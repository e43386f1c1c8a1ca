import os

import matplotlib.pyplot as plt
from conftest import mock_feature_df

from mrmselect.plotting import plot_selection
from mrmselect.selection import FeatureSelector


def test_plot_selection():
    # given
    features_df = mock_feature_df(n_groups=5, n_candidates=3)
    selected_df = FeatureSelector().select_df(features_df)

    # when
    fig = plot_selection(features_df, selected_df)

    # then
    assert isinstance(fig, plt.Figure)
    assert len(fig.axes) == 2
    # candidates and selected features in the first panel
    assert len(fig.axes[0].collections) == 2
    assert len(fig.axes[0].collections[0].get_offsets()) == 15
    assert len(fig.axes[0].collections[1].get_offsets()) == 5
    plt.close(fig)


def test_plot_selection_to_file(tmp_path):
    features_df = mock_feature_df(n_groups=3)
    figure_path = os.path.join(tmp_path, "selection.png")

    assert plot_selection(features_df, features_df, figure_path=figure_path) is None
    assert os.path.exists(figure_path)


def test_plot_selection_without_retention_times():
    features_df = mock_feature_df(n_groups=3).drop(columns=["rt"]).assign(rt=float("nan"))

    assert plot_selection(features_df, features_df) is None


def test_plot_selection_empty_selection():
    features_df = mock_feature_df(n_groups=3)

    fig = plot_selection(features_df, features_df.iloc[0:0])

    assert isinstance(fig, plt.Figure)
    plt.close(fig)
