"""Tests for service options and environment settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from geispoint.config.models import EnvSettings, ServiceConfig
from geispoint.errors import ConfigurationError


def test_defaults():
    """Built-in defaults: CZ, region 19 (Praha), caching off."""
    config = ServiceConfig()
    assert config.default_country == "CZ"
    assert config.default_region == 19
    assert config.use_cache is False
    assert config.used_cache is None
    assert config.cache_options == {}


def test_camel_case_and_snake_case_options():
    """camelCase option names and field names are both accepted."""
    camel = ServiceConfig.from_options(
        {
            "defaultCountry": "SK",
            "defaultRegion": 2,
            "useCache": True,
            "usedCache": "file",
            "cacheOptions": {"path": "/tmp/gp.json"},
        }
    )
    snake = ServiceConfig.from_options(
        {
            "default_country": "SK",
            "default_region": 2,
            "use_cache": True,
            "used_cache": "file",
            "cache_options": {"path": "/tmp/gp.json"},
        }
    )
    assert camel == snake
    assert camel.cache_options == {"path": "/tmp/gp.json"}


@pytest.mark.parametrize(
    "options",
    [
        {"cacheOptions": "not-a-mapping"},
        {"defaultRegion": "Praha"},
        {"defaultCountry": ""},
    ],
)
def test_invalid_options_are_configuration_errors(options):
    """Bad option values fail at construction with ConfigurationError."""
    with pytest.raises(ConfigurationError):
        ServiceConfig.from_options(options)


def test_options_must_be_mapping():
    """A non-mapping options object is rejected."""
    with pytest.raises(ConfigurationError):
        ServiceConfig.from_options(["useCache"])  # type: ignore[arg-type]


def test_unknown_option_keys_are_ignored():
    """Keys the service does not know about are accepted and dropped."""
    config = ServiceConfig.from_options({"useCache": True, "unknownOption": 1})

    assert config.use_cache is True
    assert not hasattr(config, "unknownOption")


def test_config_is_frozen():
    """Options are immutable for the lifetime of the service."""
    config = ServiceConfig()
    with pytest.raises(ValidationError):
        config.use_cache = True  # type: ignore[misc]


def test_load_from_json_file(tmp_path: Path):
    """Service options load from a JSON file."""
    path = tmp_path / "geispoint.json"
    path.write_text(json.dumps({"defaultCountry": "SK", "useCache": False}))
    assert ServiceConfig.load(path).default_country == "SK"


def test_load_missing_or_invalid_file(tmp_path: Path):
    """Unreadable config files are configuration errors."""
    with pytest.raises(ConfigurationError):
        ServiceConfig.load(tmp_path / "absent.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{")
    with pytest.raises(ConfigurationError):
        ServiceConfig.load(bad)


def test_env_settings(monkeypatch):
    """Environment variables with the GEISPOINT_ prefix are honoured."""
    monkeypatch.setenv("GEISPOINT_ENDPOINT", "http://soap.example/ws")
    monkeypatch.setenv("GEISPOINT_TIMEOUT_SECONDS", "5")
    settings = EnvSettings()
    assert settings.endpoint == "http://soap.example/ws"
    assert settings.timeout_seconds == 5.0
    assert settings.log_level == "INFO"
