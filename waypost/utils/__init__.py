import re
from typing import AnyStr


def ensure_str(value: AnyStr) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode()
    raise ValueError("Expected bytes or str")


def remove_duplicate_slashes(value: str) -> str:
    return re.sub("/{2,}", "/", value)


def trim_slashes(value: str) -> str:
    return value.strip("/")


def split_path(value: str) -> list:
    """
    Splits a path into its segments, dropping the empty ones produced by leading,
    trailing, or repeated slashes.
    """
    return [part for part in value.split("/") if part]


def truthy(value: str, default: bool = False) -> bool:
    if not value:
        return default
    return value.upper() in {"1", "TRUE"}
