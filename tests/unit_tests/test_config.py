import dataclasses
import os

import pytest
import yaml

from mrmselect.config import DEFAULT_CONFIG_PATH, SelectorConfig, load_config
from mrmselect.exceptions import (
    InvalidValueConfigError,
    KeyAddedConfigError,
    TypeMismatchConfigError,
    UnsupportedVariableTypeError,
)


def test_default_config_matches_dataclass_defaults():
    """The defaults in default.yaml and SelectorConfig must not drift apart."""
    with open(DEFAULT_CONFIG_PATH) as f:
        default_config = yaml.safe_load(f)

    assert default_config == SelectorConfig().to_dict()
    assert SelectorConfig.from_yaml() == SelectorConfig()


def test_load_config_update_from_dicts():
    """Later configs take precedence."""
    # when
    config = load_config(
        {"strategy": "qmip", "nn_threshold": 2.0}, {"nn_threshold": 3.0}
    )

    # then
    assert config["strategy"] == "qmip"
    assert config["nn_threshold"] == 3.0
    assert config["segment_window_length"] == 8.0


def test_load_config_update_from_yaml(tmp_path):
    # given
    config_path = os.path.join(tmp_path, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump({"strategy": "qmip", "locality_weight": True}, f)

    # when
    config = SelectorConfig.from_yaml(config_path, {"thread_count": 4})

    # then
    assert config.strategy == "qmip"
    assert config.locality_weight is True
    assert config.thread_count == 4


def test_load_config_empty_yaml(tmp_path):
    config_path = os.path.join(tmp_path, "config.yaml")
    with open(config_path, "w") as f:
        f.write("")

    assert SelectorConfig.from_yaml(config_path) == SelectorConfig()


def test_load_config_coerces_int_to_float():
    config = SelectorConfig.from_yaml(
        {"segment_window_length": 10, "segment_step_length": 5}
    )

    assert config.segment_window_length == 10.0
    assert isinstance(config.segment_window_length, float)


def test_load_config_coerces_bool_strings():
    config = SelectorConfig.from_yaml(
        {"select_transition_group": "false", "tolerate_failed_windows": "True"}
    )

    assert config.select_transition_group is False
    assert config.tolerate_failed_windows is True


def test_load_config_rejects_new_keys():
    with pytest.raises(KeyAddedConfigError) as exc_info:
        load_config({"not_a_key": 1})

    assert exc_info.value.key == "not_a_key"


@pytest.mark.parametrize(
    "update",
    [
        {"thread_count": 2.0},
        {"locality_weight": 1},
        {"strategy": 1},
        {"select_transition_group": "yes"},
    ],
)
def test_load_config_rejects_type_mismatch(update):
    with pytest.raises(TypeMismatchConfigError) as exc_info:
        load_config(update)

    assert exc_info.value.key == list(update)[0]


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(KeyAddedConfigError):
        SelectorConfig.from_dict({**SelectorConfig().to_dict(), "unknown": 1})


@pytest.mark.parametrize(
    "kwargs, key",
    [
        ({"strategy": "greedy"}, "strategy"),
        ({"threshold_mode": "fuzzy"}, "threshold_mode"),
        ({"nn_threshold": -1.0}, "nn_threshold"),
        ({"segment_window_length": -1.0}, "segment_window_length"),
        ({"segment_window_length": 0.0}, "segment_window_length"),
        ({"segment_step_length": 0.5}, "segment_step_length"),
        ({"segment_window_length": 8.5}, "segment_window_length"),
        ({"segment_step_length": 2.5}, "segment_step_length"),
        ({"thread_count": 0}, "thread_count"),
    ],
)
def test_config_invalid_values(kwargs, key):
    with pytest.raises(InvalidValueConfigError) as exc_info:
        SelectorConfig(**kwargs)

    assert exc_info.value.key == key


def test_config_unsupported_variable_type():
    with pytest.raises(UnsupportedVariableTypeError) as exc_info:
        SelectorConfig(variable_type="binary")

    assert exc_info.value.key == "variable_type"
    assert exc_info.value.error_code == "UNSUPPORTED_VARIABLE_TYPE"


def test_config_auto_segmentation():
    assert not SelectorConfig().auto_segmentation
    assert SelectorConfig(
        segment_window_length=-1.0, segment_step_length=-1.0
    ).auto_segmentation


def test_config_is_frozen():
    config = SelectorConfig()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.strategy = "qmip"


def test_config_to_yaml(tmp_path):
    # given
    config = SelectorConfig(strategy="qmip", nn_threshold=2.0, thread_count=3)
    config_path = os.path.join(tmp_path, "config.yaml")

    # when
    config.to_yaml(config_path)

    # then
    assert SelectorConfig.from_yaml(config_path) == config
