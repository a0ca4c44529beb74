"""Tests for config.config_loader."""

import json

import pytest

from config.config_loader import CONFIG_SCHEMA, DEFAULT_CONFIG, load_config, validate_config


def write_config(tmp_path, data):
    path = tmp_path / "runtime_config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_path():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_file_overrides_defaults(tmp_path):
    config = load_config(write_config(tmp_path, {"max_steps": 500, "trace_window": 3}))
    assert config["max_steps"] == 500
    assert config["trace_window"] == 3
    assert config["batch_size"] == DEFAULT_CONFIG["batch_size"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.json")


def test_wrong_type(tmp_path):
    with pytest.raises(TypeError, match="batch_size"):
        load_config(write_config(tmp_path, {"batch_size": "big"}))


def test_bool_is_not_an_int(tmp_path):
    with pytest.raises(TypeError, match="trace_window"):
        load_config(write_config(tmp_path, {"trace_window": True}))


def test_non_object_file(tmp_path):
    with pytest.raises(TypeError, match="JSON object"):
        load_config(write_config(tmp_path, [1, 2]))


@pytest.mark.parametrize(
    "override, message",
    [
        ({"max_steps": -1}, "max_steps"),
        ({"trace_window": -3}, "trace_window"),
        ({"batch_size": 0}, "batch_size"),
    ],
)
def test_value_checks(override, message):
    config = dict(DEFAULT_CONFIG, **override)
    with pytest.raises(ValueError, match=message):
        validate_config(config)


def test_missing_key():
    config = dict(DEFAULT_CONFIG)
    del config["log_runs"]
    with pytest.raises(ValueError, match="log_runs"):
        validate_config(config)


def test_verbose_prints_summary(tmp_path, capsys):
    load_config(write_config(tmp_path, {}), verbose=True)
    out = capsys.readouterr().out
    assert "Loaded config:" in out
    assert "max_steps: None" in out


def test_every_default_key_is_in_schema():
    assert set(DEFAULT_CONFIG) == set(CONFIG_SCHEMA)
    assert "default_blank" not in DEFAULT_CONFIG
