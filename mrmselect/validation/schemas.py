import numpy as np
import pandas as pd

from mrmselect.constants.keys import FeatureCols
from mrmselect.validation.base import Optional, Required, Schema

# unique ids are unsigned 64 bit integers, the nullable dtype keeps them exact next to empty subordinate rows
ID_DTYPE = pd.UInt64Dtype()
ID_COLUMNS = [FeatureCols.FEATURE_ID, FeatureCols.SUBORDINATE_ID]

features_flat_schema = Schema(
    "features_flat",
    [
        Required(FeatureCols.FEATURE_ID, ID_DTYPE),
        Required(FeatureCols.PEPTIDE_REF, object),
        Required(FeatureCols.ASSAY_RT, np.float64),
        Optional(FeatureCols.RT, np.float64),
        Optional(FeatureCols.PEAK_APICES_SUM, np.float64),
        Optional(FeatureCols.SN_RATIO, np.float64),
        Optional(FeatureCols.SUBORDINATE_ID, ID_DTYPE),
        Optional(FeatureCols.NATIVE_ID, object),
        Optional(FeatureCols.SUBORDINATE_RT, np.float64),
        Optional(FeatureCols.SUBORDINATE_PEAK_APICES_SUM, np.float64),
        Optional(FeatureCols.SUBORDINATE_SN_RATIO, np.float64),
    ],
)
