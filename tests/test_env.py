import os
from unittest.mock import patch

import pytest

from waypost.server.env import (
    EnvironmentSettings,
    get_duplicate_routes_policy,
    is_development,
    is_production,
)


def test_env_settings_defaults():
    with patch.dict(os.environ, {}, clear=True):
        env = EnvironmentSettings.from_env()

    assert env.env == "production"
    assert env.duplicate_routes == "replace"
    assert env.view_cache is True


def test_env_settings_env_property():
    with patch.dict(os.environ, {"APP_ENV": "development"}):
        env = EnvironmentSettings.from_env()
        assert env.env == "development"

    with patch.dict(os.environ, {"APP_ENV": "production"}):
        env = EnvironmentSettings.from_env()
        assert env.env == "production"


@pytest.mark.parametrize("value", ["local", "dev", "development", "DEV"])
def test_is_development(value):
    with patch.dict(os.environ, {"APP_ENV": value}):
        assert is_development() is True
        assert is_production() is False


@pytest.mark.parametrize("value", ["replace", "warn", "error", "WARN"])
def test_duplicate_routes_policy(value):
    with patch.dict(os.environ, {"APP_ROUTE_DUPLICATES": value}):
        assert get_duplicate_routes_policy() == value.lower()
        assert EnvironmentSettings.from_env().duplicate_routes == value.lower()


def test_invalid_duplicate_routes_policy():
    with patch.dict(os.environ, {"APP_ROUTE_DUPLICATES": "ignore"}):
        with pytest.raises(ValueError):
            EnvironmentSettings.from_env()


@pytest.mark.parametrize(
    "value,expected_value",
    [("1", True), ("true", True), ("0", False), ("false", False), ("", True)],
)
def test_env_settings_view_cache(value, expected_value):
    with patch.dict(os.environ, {"APP_VIEW_CACHE": value}):
        env = EnvironmentSettings.from_env()
        assert env.view_cache is expected_value
