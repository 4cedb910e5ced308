"""Unit tests for server configuration"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from sensorboard.core.config import (
    ServerConfig, load_config_from, resolve_paths, resolve_secret_key
)


def test_load_config_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "port: 9000\n"
        "log_level: debug\n"
        "sensor_db_path: /var/lib/sensors/data.db\n"
        "timezone: Europe/Prague\n"
        "language: cs\n"
        "users:\n"
        "  admin: abc123\n",
        encoding="utf-8",
    )
    config = load_config_from(str(config_file))

    assert config.port == 9000
    assert config.log_level == "DEBUG"
    assert config.timezone == "Europe/Prague"
    assert config.users == {"admin": "abc123"}
    assert config.password_salt == "sůl"
    assert config.password_iterations == 1000


def test_empty_yaml_uses_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("", encoding="utf-8")

    config = load_config_from(str(config_file))
    assert config.log_page_size == 200
    assert config.default_log_level == 3


def test_unsupported_language_is_rejected():
    with pytest.raises(ValidationError):
        ServerConfig(language="de")


def test_resolve_paths():
    paths = resolve_paths(ServerConfig(log_db_path="/tmp/log.db"))

    assert paths["log"] == Path("/tmp/log.db")
    assert set(paths) == {"sensor", "log", "script"}


class TestSecretKey:

    def test_configured_key(self):
        assert resolve_secret_key(ServerConfig(secret_key="s3cret")) == "s3cret"

    def test_missing_key_fails_outside_test_mode(self):
        with pytest.raises(RuntimeError):
            resolve_secret_key(ServerConfig())

    def test_missing_key_generated_in_test_mode(self):
        first = resolve_secret_key(ServerConfig(test_mode=True))
        second = resolve_secret_key(ServerConfig(test_mode=True))

        assert first and second and first != second
