import matplotlib
import numpy as np
import pandas as pd
import pytest

matplotlib.use("Agg")
from matplotlib import pyplot as plt

from mrmselect.features import Feature
from mrmselect.solver.base import LinearProblem, SolveStatus

plt.ioff()


def mock_feature(
    unique_id: int,
    peptide_ref: str,
    assay_rt: float,
    rt: float | None = None,
    peak_apices_sum: float = 1e4,
    sn_ratio: float = 10.0,
    subordinates: tuple = (),
) -> Feature:
    """Create a top-level feature, the observed retention time defaults to the assay retention time."""
    return Feature(
        unique_id=unique_id,
        peptide_ref=peptide_ref,
        assay_rt=assay_rt,
        rt=assay_rt if rt is None else rt,
        peak_apices_sum=peak_apices_sum,
        sn_ratio=sn_ratio,
        subordinates=tuple(subordinates),
    )


def mock_subordinate(
    unique_id: int,
    native_id: str,
    rt: float,
    peak_apices_sum: float = 1e4,
    sn_ratio: float = 10.0,
) -> Feature:
    return Feature(
        unique_id=unique_id,
        native_id=native_id,
        rt=rt,
        peak_apices_sum=peak_apices_sum,
        sn_ratio=sn_ratio,
    )


def mock_feature_df(n_groups: int = 10, n_candidates: int = 3, seed: int = 42):
    """Create a flat feature table with `n_candidates` features per group and two transitions per feature.

    Returns
    -------
    pd.DataFrame
        The flat feature table.
    """
    rng = np.random.default_rng(seed)

    rows = []
    feature_id = 0
    subordinate_id = 1000
    for group in range(n_groups):
        assay_rt = 2.0 * group
        for _ in range(n_candidates):
            rt = assay_rt + rng.normal(0, 0.5)
            for transition in range(2):
                rows.append(
                    {
                        "feature_id": feature_id,
                        "peptide_ref": f"PEPTIDE_{group}",
                        "assay_rt": assay_rt,
                        "rt": rt,
                        "peak_apices_sum": rng.uniform(1e3, 1e6),
                        "sn_ratio": rng.uniform(2, 100),
                        "subordinate_id": subordinate_id,
                        "native_id": f"PEPTIDE_{group}_y{transition + 3}",
                        "subordinate_rt": rt,
                        "subordinate_peak_apices_sum": rng.uniform(1e3, 1e6),
                        "subordinate_sn_ratio": rng.uniform(2, 100),
                    }
                )
                subordinate_id += 1
            feature_id += 1

    return pd.DataFrame(rows)


class ConstantValueProblem(LinearProblem):
    """Problem which reports the same value for every column, used to test the solution extraction."""

    def __init__(self, value: float = 1.0, status: SolveStatus = SolveStatus.OPTIMAL):
        super().__init__()
        self.value = value
        self.status = status
        self.columns = []
        self.rows = []

    def add_column(self, name, lower, upper, column_type, objective):
        self.columns.append((name, lower, upper, column_type, objective))
        return len(self.columns) - 1

    def add_row(self, indices, values, name, lower, upper):
        self.rows.append((list(indices), list(values), name, lower, upper))
        return len(self.rows) - 1

    def solve(self, time_limit=None):
        return self.status

    def get_column_value(self, index):
        return self.value

    def get_column_name(self, index):
        return self.columns[index][0]

    def get_number_of_columns(self):
        return len(self.columns)

    def get_number_of_rows(self):
        return len(self.rows)

    @property
    def objective_value(self):
        return 0.0


@pytest.fixture
def three_group_features():
    """Three groups with two candidates each, the second candidate of every group has the higher score."""
    features = []
    for i, (group, assay_rt) in enumerate([("A", 0.0), ("B", 5.0), ("C", 10.0)]):
        features.append(
            mock_feature(10 * i + 1, group, assay_rt, peak_apices_sum=1e3, sn_ratio=5.0)
        )
        features.append(
            mock_feature(10 * i + 2, group, assay_rt, peak_apices_sum=1e6, sn_ratio=50.0)
        )
    return features
