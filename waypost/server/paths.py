"""
This module defines how registered paths are normalized and split into segments.
Route patterns, blocked patterns, and redirects all share the same rules.
"""
from enum import Enum
from typing import Any, Optional, Tuple

from waypost.exceptions import InvalidArgument
from waypost.utils import ensure_str, remove_duplicate_slashes, trim_slashes

DEFAULT_CONTENT_TYPE = "text/html"

# checked in this order, the first matching prefix wins
CONTENT_TYPE_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("csv:", "text/csv"),
    ("json:", "application/json"),
    ("pdf:", "application/pdf"),
    ("plain:", "text/plain"),
    ("xml:", "application/xml"),
)

WILDCARD = "*"


class SegmentKind(Enum):
    LITERAL = "literal"
    PARAMETER = "parameter"
    OPTIONAL_PARAMETER = "optional_parameter"
    WILDCARD = "wildcard"


class Segment:
    __slots__ = ("value", "kind", "name")

    def __init__(
        self,
        value: str,
        kind: SegmentKind = SegmentKind.LITERAL,
        name: Optional[str] = None,
    ) -> None:
        self.value = value
        self.kind = kind
        self.name = name

    @property
    def is_parameter(self) -> bool:
        return self.kind in {SegmentKind.PARAMETER, SegmentKind.OPTIONAL_PARAMETER}

    @property
    def is_optional(self) -> bool:
        return self.kind is SegmentKind.OPTIONAL_PARAMETER

    @classmethod
    def from_route_part(cls, value: str) -> "Segment":
        """
        Classifies a segment of a route template:

        users   -> literal
        {id}    -> parameter "id"
        {id?}   -> optional parameter "id"
        """
        if value.startswith("{") and value.endswith("}"):
            inner = value[1:-1]
            if inner.endswith("?"):
                return cls(value, SegmentKind.OPTIONAL_PARAMETER, inner[:-1])
            return cls(value, SegmentKind.PARAMETER, inner)
        return cls(value)

    @classmethod
    def from_blocked_part(cls, value: str) -> "Segment":
        if value == WILDCARD:
            return cls(value, SegmentKind.WILDCARD)
        return cls(value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.kind.value} {self.value!r}>"


def ensure_path(value: Any, name: str = "path") -> str:
    if not isinstance(value, (str, bytes)):
        raise InvalidArgument(name, "a value of type str")
    try:
        return ensure_str(value)
    except UnicodeDecodeError as decode_error:
        raise InvalidArgument(name, "UTF-8 encoded bytes") from decode_error


def strip_content_type_prefix(value: str) -> Tuple[str, str]:
    """
    Removes a recognized content type prefix from the given path, returning the
    path without prefix and the content type selected by it.
    """
    for prefix, content_type in CONTENT_TYPE_PREFIXES:
        if value.startswith(prefix):
            return value[len(prefix) :], content_type
    return value, DEFAULT_CONTENT_TYPE


def normalize_path(value: Any, name: str = "path") -> Tuple[str, str]:
    """
    Normalizes a path given at registration time, returning the path without
    content type prefix, with repeated slashes collapsed and without leading
    and trailing slashes, and its content type.

    >>> normalize_path("json:/api/status/")
    ('api/status', 'application/json')
    """
    path, content_type = strip_content_type_prefix(ensure_path(value, name))
    return trim_slashes(remove_duplicate_slashes(path)), content_type
