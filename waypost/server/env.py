import os
from dataclasses import dataclass

from waypost.utils import truthy

DUPLICATE_ROUTES_POLICIES = {"replace", "warn", "error"}


def get_env() -> str:
    return os.environ.get("APP_ENV", "production")


def is_development() -> bool:
    """
    Returns a value indicating whether the application is running for local development.
    This method checks if an `APP_ENV` environment variable is set and its lowercase
    value is either "local", "dev", or "development".
    """
    return get_env().lower() in {"local", "dev", "development"}


def is_production() -> bool:
    """
    Returns a value indicating whether the application is running for the production
    environment (default is true).
    This method checks if an `APP_ENV` environment variable is set and its lowercase
    value is either "prod" or "production".
    """
    return get_env().lower() in {"prod", "production"}


def get_duplicate_routes_policy() -> str:
    """
    Returns what a router does when a path is registered more than once, defined by
    the `APP_ROUTE_DUPLICATES` environment variable: "replace" (default) silently
    replaces the existing route, "warn" replaces it logging a warning, "error"
    raises an exception.
    """
    value = os.environ.get("APP_ROUTE_DUPLICATES", "replace").lower()
    if value not in DUPLICATE_ROUTES_POLICIES:
        raise ValueError(
            f"Invalid APP_ROUTE_DUPLICATES: '{value}'. "
            "Must be 'replace', 'warn', or 'error'."
        )
    return value


def get_view_cache_default() -> bool:
    return truthy(os.environ.get("APP_VIEW_CACHE", ""), default=True)


@dataclass(frozen=True)
class EnvironmentSettings:
    env: str
    duplicate_routes: str
    view_cache: bool

    @classmethod
    def from_env(cls) -> "EnvironmentSettings":
        return cls(
            env=get_env(),
            duplicate_routes=get_duplicate_routes_policy(),
            view_cache=get_view_cache_default(),
        )
