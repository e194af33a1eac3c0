from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from waypost.exceptions import InvalidArgument
from waypost.server.paths import ensure_path, normalize_path
from waypost.utils import remove_duplicate_slashes, trim_slashes

STATUS_REDIRECT = 301


@dataclass(frozen=True)
class Redirect:
    source: str
    destination: str
    status: int = STATUS_REDIRECT


class RedirectTable:
    """
    Redirects keyed by source path. Lookups compare whole paths: no parameters and
    no wildcards are interpreted, so a redirect from "old" does not apply to
    "old/page".
    """

    __slots__ = ("_redirects",)

    def __init__(self) -> None:
        self._redirects: Dict[str, Redirect] = {}

    def __iter__(self) -> Iterator[Redirect]:
        yield from self._redirects.values()

    def __len__(self) -> int:
        return len(self._redirects)

    def __contains__(self, path: str) -> bool:
        return self.get(path) is not None

    def add(self, source: str, destination: str, status: int = STATUS_REDIRECT):
        if not isinstance(status, int) or isinstance(status, bool):
            raise InvalidArgument("status", "a value of type int")

        source_path, _ = normalize_path(source, "source")
        destination_path, _ = normalize_path(destination, "destination")

        redirect = Redirect(source_path, destination_path, status)
        self._redirects[source_path] = redirect
        return redirect

    def get(self, path: str) -> Optional[Redirect]:
        key = trim_slashes(remove_duplicate_slashes(ensure_path(path)))
        return self._redirects.get(key)

    def to_dict(self) -> Dict[str, Redirect]:
        return dict(self._redirects)

    def reset(self) -> None:
        self._redirects = {}
