import json

import pytest

from sunday.config import DEFAULT_BASE_URL, ConfigError, load_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "config.json", environ={})
    assert config.base_url == DEFAULT_BASE_URL
    assert config.sunday_base == f"{DEFAULT_BASE_URL}/api/sunday"


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"base_url": "https://file.test/", "username": "bob"}))
    config = load_config(path, environ={"SUNDAY_USERNAME": "alice"})
    assert config.username == "alice"
    assert config.api_base == "https://file.test/api"
    config = load_config(path, environ={"SUNDAY_BASE_URL": "https://env.test"})
    assert config.base_url == "https://env.test"
    assert config.username == "bob"


def test_malformed_file_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        load_config(path, environ={})
    path.write_text("{broken")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_non_numeric_timeout_raises_config_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"timeout": "fast"}))
    with pytest.raises(ConfigError, match="timeout"):
        load_config(path, environ={})


def test_undecodable_file_raises_config_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_bytes(b'{"username": "\xff\xfe"}')
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_numeric_string_timeout_is_accepted(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"timeout": "30", "username": "carol", "role": "management"}))
    loaded = load_config(path, environ={})
    assert loaded.timeout == 30.0
    assert loaded.username == "carol"
    assert loaded.role == "management"
