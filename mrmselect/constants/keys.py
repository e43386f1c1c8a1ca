class ConstantsClass(type):
    """A metaclass for classes that should only contain string constants."""

    def __setattr__(self, name, value):
        raise TypeError("Constants class cannot be modified")

    def get_values(cls):
        """Get all user-defined string values of the class."""
        return [
            value
            for key, value in cls.__dict__.items()
            if not key.startswith("__") and isinstance(value, str)
        ]


class ConfigKeys(metaclass=ConstantsClass):
    """String constants for accessing the config."""

    STRATEGY = "strategy"
    NN_THRESHOLD = "nn_threshold"
    LOCALITY_WEIGHT = "locality_weight"
    SELECT_TRANSITION_GROUP = "select_transition_group"
    SEGMENT_WINDOW_LENGTH = "segment_window_length"
    SEGMENT_STEP_LENGTH = "segment_step_length"
    SELECT_HIGHEST_COUNT = "select_highest_count"
    VARIABLE_TYPE = "variable_type"
    OPTIMAL_THRESHOLD = "optimal_threshold"
    THRESHOLD_MODE = "threshold_mode"
    TOLERATE_FAILED_WINDOWS = "tolerate_failed_windows"
    THREAD_COUNT = "thread_count"
    SOLVER_TIME_LIMIT = "solver_time_limit"


class Strategy(metaclass=ConstantsClass):
    """Names of the optimization strategies."""

    SCORE = "score"
    QMIP = "qmip"


class VariableType(metaclass=ConstantsClass):
    """Domain of the selection variables."""

    INTEGER = "integer"
    CONTINUOUS = "continuous"


class ThresholdMode(metaclass=ConstantsClass):
    """How solved variable values are compared against `optimal_threshold`."""

    AUTO = "auto"
    INCLUSIVE = "inclusive"
    STRICT = "strict"


class FeatureCols(metaclass=ConstantsClass):
    """String constants for the columns of the flat feature table.

    One row per subordinate feature, the columns of the parent feature are repeated.
    """

    FEATURE_ID = "feature_id"
    PEPTIDE_REF = "peptide_ref"
    ASSAY_RT = "assay_rt"
    RT = "rt"
    PEAK_APICES_SUM = "peak_apices_sum"
    SN_RATIO = "sn_ratio"

    SUBORDINATE_ID = "subordinate_id"
    NATIVE_ID = "native_id"
    SUBORDINATE_RT = "subordinate_rt"
    SUBORDINATE_PEAK_APICES_SUM = "subordinate_peak_apices_sum"
    SUBORDINATE_SN_RATIO = "subordinate_sn_ratio"
