"""This module is responsible for creating and validating the selection configuration.

The default configuration is read from `constants/default.yaml` and can be updated with one or more user defined
configurations, either yaml files or dictionaries. The order of configs holds significance, with configurations later
in the sequence overwriting previous values.

The merged configuration is frozen into a `SelectorConfig` which is validated once on construction and not changed afterwards.
"""

import logging
import os
from copy import deepcopy
from dataclasses import asdict, dataclass, fields

import yaml

from mrmselect.constants.keys import (
    ConfigKeys,
    Strategy,
    ThresholdMode,
    VariableType,
)
from mrmselect.exceptions import (
    InvalidValueConfigError,
    KeyAddedConfigError,
    TypeMismatchConfigError,
    UnsupportedVariableTypeError,
)

logger = logging.getLogger()

DEFAULT = "default"
USER_DEFINED = "user defined"

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(__file__), "constants", "default.yaml"
)

# window and step length value which requests a single window spanning the whole series
AUTO_LENGTH = -1.0


def _coerce(value, target_value):
    """Convert values which are commonly passed with a different but compatible type."""
    # "true"/"false" strings are passed e.g. from the --config-dict CLI parameter
    if isinstance(value, str) and isinstance(target_value, bool):
        if value.lower() == "true":
            return True
        if value.lower() == "false":
            return False

    # yaml reads 8 as int while the default is 8.0
    if (
        isinstance(target_value, float)
        and isinstance(value, int)
        and not isinstance(value, bool)
    ):
        return float(value)

    return value


def _update(target_config: dict, update_config: dict, config_name: str) -> None:
    """Update `target_config` in-place with the values from `update_config`.

    Parameters
    ----------
    target_config:
        The config dictionary to be modified
    update_config:
        The config dictionary containing update values
    config_name:
        The name of the update config, used only for exception messages.

    Raises
    ------
    KeyAddedConfigError
        A key of `update_config` is not found in `target_config`.
    TypeMismatchConfigError
        The type of an update value does not match the type of the target value.
    """
    for key, update_value in update_config.items():
        if key not in target_config:
            raise KeyAddedConfigError(key, update_value, config_name)

        target_value = target_config[key]
        update_value = _coerce(update_value, target_value)

        if type(target_value) != type(update_value):  # noqa: E721 # bool is a subclass of int
            raise TypeMismatchConfigError(
                key,
                update_value,
                config_name,
                f"{type(update_value)} != {type(target_value)}",
            )

        if target_value != update_value:
            logger.info(f"Config '{config_name}': {key} = {update_value}")
        target_config[key] = update_value


def load_config(
    *user_configs: str | dict, default_path: str = DEFAULT_CONFIG_PATH
) -> dict:
    """Read the default config and update it with the user defined configs.

    Parameters
    ----------
    user_configs:
        Paths to yaml files or dictionaries. Later configs take precedence.

    default_path:
        Path to the yaml file holding the defaults.

    Returns
    -------
    dict
        The merged configuration.
    """
    with open(default_path) as f:
        config = yaml.safe_load(f)

    for i, user_config in enumerate(user_configs):
        if isinstance(user_config, str):
            config_name = user_config
            with open(user_config) as f:
                user_config = yaml.safe_load(f) or {}
        else:
            config_name = f"{USER_DEFINED} ({i})"

        _update(config, user_config, config_name)

    return config


@dataclass(frozen=True)
class SelectorConfig:
    """Immutable configuration of the feature selection.

    Please see `constants/default.yaml` for the documentation of the individual values.
    """

    strategy: str = Strategy.SCORE
    nn_threshold: float = 4.0
    locality_weight: bool = False
    select_transition_group: bool = True
    segment_window_length: float = 8.0
    segment_step_length: float = 4.0
    select_highest_count: bool = False
    variable_type: str = VariableType.CONTINUOUS
    optimal_threshold: float = 0.5
    threshold_mode: str = ThresholdMode.AUTO
    tolerate_failed_windows: bool = False
    thread_count: int = 1
    solver_time_limit: float = -1.0

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.variable_type not in VariableType.get_values():
            raise UnsupportedVariableTypeError(self.variable_type)

        if self.strategy not in Strategy.get_values():
            raise InvalidValueConfigError(
                ConfigKeys.STRATEGY, self.strategy, ", ".join(Strategy.get_values())
            )

        if self.threshold_mode not in ThresholdMode.get_values():
            raise InvalidValueConfigError(
                ConfigKeys.THRESHOLD_MODE,
                self.threshold_mode,
                ", ".join(ThresholdMode.get_values()),
            )

        if self.nn_threshold < 0:
            raise InvalidValueConfigError(
                ConfigKeys.NN_THRESHOLD, self.nn_threshold, ">= 0"
            )

        window_auto = self.segment_window_length == AUTO_LENGTH
        step_auto = self.segment_step_length == AUTO_LENGTH
        if window_auto != step_auto:
            raise InvalidValueConfigError(
                ConfigKeys.SEGMENT_WINDOW_LENGTH,
                f"{self.segment_window_length}, {self.segment_step_length}",
                "segment_window_length and segment_step_length must both be -1 or both be >= 1",
            )
        if not window_auto:
            for key in (
                ConfigKeys.SEGMENT_WINDOW_LENGTH,
                ConfigKeys.SEGMENT_STEP_LENGTH,
            ):
                value = getattr(self, key)
                # lengths count groups of the time-name series
                if value < 1 or not float(value).is_integer():
                    raise InvalidValueConfigError(key, value, "integral value >= 1")

        if self.thread_count < 1:
            raise InvalidValueConfigError(
                ConfigKeys.THREAD_COUNT, self.thread_count, ">= 1"
            )

    @property
    def auto_segmentation(self) -> bool:
        return self.segment_window_length == AUTO_LENGTH

    @classmethod
    def from_dict(cls, config: dict) -> "SelectorConfig":
        """Create a config from a (merged) config dictionary, keys which are not known are rejected."""
        known = {field.name for field in fields(cls)}
        for key, value in config.items():
            if key not in known:
                raise KeyAddedConfigError(key, value, DEFAULT)
        return cls(**config)

    @classmethod
    def from_yaml(cls, *user_configs: str | dict) -> "SelectorConfig":
        """Load the default config, apply the user configs and freeze the result."""
        return cls.from_dict(load_config(*user_configs))

    def to_dict(self) -> dict:
        return deepcopy(asdict(self))

    def to_yaml(self, path: str) -> None:
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, sort_keys=False)
