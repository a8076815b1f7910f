import json

import pytest

from edgeagent.params import (
    MissingParameterError,
    get_bool_param,
    get_str_param,
    get_u64_param,
    require_str_param,
    require_u64_param,
)


def test_require_str_param_present():
    params = {"device": "plc-1"}
    assert require_str_param(params, "device") == "plc-1"


def test_require_str_param_missing_message():
    with pytest.raises(MissingParameterError) as info:
        require_str_param({}, "device")
    assert str(info.value) == "Missing required parameter: device"
    assert info.value.key == "device"


@pytest.mark.parametrize("value", [1, True, None, ["a"], {"a": "b"}])
def test_require_str_param_wrong_type(value):
    with pytest.raises(MissingParameterError):
        require_str_param({"id": value}, "id")


def test_require_u64_param_present():
    assert require_u64_param({"address": 40001}, "address") == 40001


def test_require_u64_param_missing():
    with pytest.raises(MissingParameterError) as info:
        require_u64_param({"other": 1}, "address")
    assert "address" in str(info.value)


@pytest.mark.parametrize("value", [-1, 1.5, 5.0, "5", True, False, 2**64])
def test_require_u64_param_rejects_non_u64(value):
    with pytest.raises(MissingParameterError):
        require_u64_param({"value": value}, "value")


def test_u64_bounds_accepted():
    assert get_u64_param({"v": 0}, "v") == 0
    assert get_u64_param({"v": 2**64 - 1}, "v") == 2**64 - 1


def test_get_str_param():
    params = {"level": "debug", "n": 3}
    assert get_str_param(params, "level") == "debug"
    assert get_str_param(params, "n") is None
    assert get_str_param(params, "missing") is None


def test_get_u64_param_from_decoded_json():
    params = json.loads('{"delay_seconds": 10, "ratio": 10.0}')
    assert get_u64_param(params, "delay_seconds") == 10
    assert get_u64_param(params, "ratio") is None


def test_get_bool_param():
    params = {"enabled": True, "disabled": False, "flag": 1, "text": "true"}
    assert get_bool_param(params, "enabled") is True
    assert get_bool_param(params, "disabled") is False
    assert get_bool_param(params, "flag") is None
    assert get_bool_param(params, "text") is None


@pytest.mark.parametrize("params", [None, [], "key", 42])
def test_non_object_params_yield_nothing(params):
    assert get_str_param(params, "key") is None
    assert get_u64_param(params, "key") is None
    assert get_bool_param(params, "key") is None
    with pytest.raises(MissingParameterError):
        require_str_param(params, "key")


def test_missing_parameter_error_is_value_error():
    with pytest.raises(ValueError):
        require_u64_param({}, "pin")