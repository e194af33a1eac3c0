from typing import Iterator, List

from waypost.server.paths import Segment, SegmentKind, ensure_path, normalize_path
from waypost.utils import split_path


class BlockedPattern:
    """
    A path pattern whose requests must be refused. A "*" segment matches any
    single segment and ends the comparison as soon as it is reached, so
    "admin/*" blocks "admin/settings" and "admin/settings/users" too, but not
    "admin" alone.
    """

    __slots__ = ("value", "segments")

    def __init__(self, value: str) -> None:
        self.value = value
        self.segments = [Segment.from_blocked_part(part) for part in split_path(value)]

    def match(self, parts: List[str]) -> bool:
        segments = self.segments

        if not segments and not parts:
            return True

        last_segment = len(segments) - 1
        last_part = len(parts) - 1

        for i in range(min(last_segment, last_part) + 1):
            segment = segments[i]

            if segment.kind is SegmentKind.WILDCARD:
                return True

            if parts[i] != segment.value:
                return False

            if i == last_segment and i == last_part:
                return True

        return False

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} "{self.value}">'


class BlockList:
    """Ordered list of blocked path patterns."""

    __slots__ = ("_patterns",)

    def __init__(self) -> None:
        self._patterns: List[BlockedPattern] = []

    def __iter__(self) -> Iterator[BlockedPattern]:
        yield from self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def add(self, path: str) -> BlockedPattern:
        value, _ = normalize_path(path)
        pattern = BlockedPattern(value)
        self._patterns.append(pattern)
        return pattern

    def is_blocked(self, path: str) -> bool:
        parts = split_path(ensure_path(path))
        return any(pattern.match(parts) for pattern in self._patterns)

    def reset(self) -> None:
        self._patterns = []
