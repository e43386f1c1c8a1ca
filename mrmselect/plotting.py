import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from mrmselect.constants.keys import FeatureCols

logger = logging.getLogger()


def _feature_level(df: pd.DataFrame) -> pd.DataFrame:
    """One row per top-level feature with its assay and observed retention time."""
    return df.drop_duplicates(FeatureCols.FEATURE_ID)[
        [FeatureCols.FEATURE_ID, FeatureCols.ASSAY_RT, FeatureCols.RT]
    ].dropna()


def plot_selection(
    features_df: pd.DataFrame,
    selected_df: pd.DataFrame,
    figure_path: str | None = None,
) -> plt.Figure | None:
    """Plot observed against assay retention time for all and for the selected features.

    Parameters
    ----------
    features_df : pd.DataFrame
        Flat feature table before the selection.

    selected_df : pd.DataFrame
        Flat feature table after the selection.

    figure_path : str, default=None
        If set, the figure is saved to the given path and closed, otherwise the figure is returned.

    """
    all_features = _feature_level(features_df)
    selected = _feature_level(selected_df)

    if len(all_features) == 0:
        logger.warning("No features with observed retention time found for plotting")
        return None

    fig, axs = plt.subplots(1, 2, figsize=(9, 4), sharex=True)

    axs[0].scatter(
        all_features[FeatureCols.ASSAY_RT],
        all_features[FeatureCols.RT],
        s=4,
        color="lightgrey",
        label="candidates",
    )
    axs[0].scatter(
        selected[FeatureCols.ASSAY_RT],
        selected[FeatureCols.RT],
        s=6,
        color="tab:red",
        label="selected",
    )
    axs[0].set_ylabel("observed RT")
    axs[0].legend(loc="upper left")

    # deviation from the assay retention time
    deviation = selected[FeatureCols.RT] - selected[FeatureCols.ASSAY_RT]
    axs[1].scatter(selected[FeatureCols.ASSAY_RT], deviation, s=6, color="tab:red")
    axs[1].axhline(0, color="black", linewidth=0.5)
    if len(deviation) > 0:
        y_abs = np.abs(deviation).max()
        axs[1].set_ylim(-y_abs * 1.05 - 1e-3, y_abs * 1.05 + 1e-3)
    axs[1].set_ylabel("observed - assay RT")

    for ax in axs:
        ax.set_xlabel("assay RT")

    fig.tight_layout()

    if figure_path is not None:
        fig.savefig(figure_path)
        plt.close(fig)
        return None

    return fig
