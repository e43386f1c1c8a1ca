"""Module containing custom exceptions."""


class CustomError(Exception):
    """Custom mrmselect error class."""

    _error_code = ""
    _msg = ""
    _detail_msg = ""
    _user_msg = ""

    @property
    def error_code(self):
        return self._error_code

    @property
    def msg(self):
        return self._msg

    @property
    def detail_msg(self):
        return self._detail_msg

    def __init__(self, msg: str = ""):
        self._user_msg = msg

        super().__init__(self._msg)

    def __str__(self):
        user_msg = f"\n'{self._user_msg}'" if self._user_msg else ""
        return f"{self._error_code}: {self._msg}{user_msg}\n{self._detail_msg}"


class BusinessError(CustomError):
    """Custom error class for 'business' errors.

    A 'business' error is raised while processing valid input, e.g. when the solver cannot find a solution.
    """


class UserError(CustomError):
    """Custom error class for 'user' errors.

    A 'user' error is caused by input (feature tables, configuration, ...) that does not fulfill the input contract.
    """


class MissingAttributeError(UserError):
    """Raise when a feature lacks an attribute needed for the selection."""

    _error_code = "MISSING_ATTRIBUTE"

    _msg = "Feature is missing a required attribute."

    def __init__(self, field: str, feature_id: int | None = None):
        self.field = field
        self.feature_id = feature_id
        self._user_msg = (
            f"Column '{field}' is not present in the feature table"
            if feature_id is None
            else f"Feature {feature_id} has no value for '{field}'"
        )
        self._detail_msg = f"field='{field}', feature_id='{feature_id}'"


class DuplicateFeatureError(UserError):
    """Raise when two features of the same group share a unique id."""

    _error_code = "DUPLICATE_FEATURE"

    _msg = "Feature ids must be unique within a group."

    def __init__(self, group: str, feature_id: int):
        self.group = group
        self.feature_id = feature_id
        self._user_msg = f"Feature {feature_id} appears more than once in group {group}"
        self._detail_msg = f"group='{group}', feature_id='{feature_id}'"


class ColumnTypeError(UserError):
    """Raise when a column of the feature table cannot be cast to its dtype."""

    _error_code = "COLUMN_TYPE"

    _msg = "Column of the feature table has an invalid type."

    def __init__(self, column: str, dtype):
        self.column = column
        self._user_msg = f"Column '{column}' cannot be converted to {dtype}"
        self._detail_msg = f"column='{column}', dtype='{dtype}'"


class OptimizationFailedError(BusinessError):
    """Raise when the solver did not return an optimal solution for a window."""

    _error_code = "OPTIMIZATION_FAILED"

    _msg = "Solver did not find an optimal solution."

    def __init__(self, window_index: int, status: str = ""):
        self.window_index = window_index
        self.status = status
        self._user_msg = f"Window {window_index} returned solver status '{status}'"
        self._detail_msg = f"window_index={window_index}, solver status='{status}'"


class ConfigError(BusinessError):
    """Raise when something is wrong with the provided configuration."""

    _error_code = "CONFIG_ERROR"

    _msg = "Malformed or invalid configuration."
    _key = ""
    _config_name = ""
    _detail_msg = ""

    def __init__(
        self,
        key: str = "",
        value: str = "",
        config_name: str = "",
        detail_msg: str = "",
    ):
        self._key = key
        self._value = value
        self._config_name = config_name
        self._detail_msg = detail_msg

    @property
    def key(self):
        return self._key


class KeyAddedConfigError(ConfigError):
    """Raise when a key should be added to a config."""

    def __init__(self, key: str, value: str, config_name: str):
        super().__init__(key, value, config_name)
        self._detail_msg = (
            f"Defining new keys is not allowed when updating a config: "
            f"key='{self._key}', value='{self._value}', config_name='{self._config_name}'"
        )


class TypeMismatchConfigError(ConfigError):
    """Raise when the type of a value does not match the default type."""

    def __init__(self, key: str, value: str, config_name: str, extra_msg: str):
        super().__init__(key, value, config_name)
        self._detail_msg = (
            f"Types of values must match default config: "
            f"key='{self._key}', value='{self._value}', config_name='{self._config_name}', types='{extra_msg}'"
        )


class InvalidValueConfigError(ConfigError):
    """Raise when a config value is outside of its allowed range."""

    def __init__(self, key: str, value: str, allowed: str):
        super().__init__(key, value)
        self._detail_msg = (
            f"Invalid config value: key='{self._key}', value='{self._value}', allowed='{allowed}'"
        )


class UnsupportedVariableTypeError(ConfigError):
    """Raise when the configured LP variable type is neither 'integer' nor 'continuous'."""

    _error_code = "UNSUPPORTED_VARIABLE_TYPE"

    _msg = "Variable type not supported."

    def __init__(self, value: str):
        super().__init__("variable_type", value)
        self._detail_msg = f"variable_type='{value}', allowed='integer, continuous'"
