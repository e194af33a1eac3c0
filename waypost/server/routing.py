import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from waypost.exceptions import InvalidArgument
from waypost.server.blocking import BlockList
from waypost.server.context import RequestContext
from waypost.server.env import (
    DUPLICATE_ROUTES_POLICIES,
    get_duplicate_routes_policy,
    get_view_cache_default,
)
from waypost.server.logs import get_logger
from waypost.server.paths import Segment, ensure_path, normalize_path
from waypost.server.redirects import STATUS_REDIRECT, Redirect, RedirectTable
from waypost.server.rendering.abc import Renderer
from waypost.server.statuses import StatusHandler, StatusHandlers
from waypost.settings.html import html_settings
from waypost.utils import ensure_str, split_path

_placeholder_rx = re.compile(r"\{[^/}]*\}")


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    ANY = "*"

    @classmethod
    def parse(cls, value: Union[str, bytes, "HTTPMethod"]) -> "HTTPMethod":
        if isinstance(value, cls):
            return value
        if not isinstance(value, (str, bytes)):
            raise InvalidArgument("method", "a value of type str")
        name = ensure_str(value).upper()
        if name in {"", "ANY"}:
            return cls.ANY
        try:
            return cls(name)
        except ValueError:
            raise InvalidArgument(
                "method", "one of GET, POST, PUT, PATCH, DELETE, ANY"
            ) from None


class RouteException(Exception):
    """Base class for routing exceptions."""


class RouteDuplicate(RouteException):
    def __init__(self, path: str, current_handler: Any):
        handler_name = getattr(current_handler, "__qualname__", repr(current_handler))
        super().__init__(
            f"Cannot register the route '{path}' more than once. "
            f"This route is already registered for {handler_name}."
        )
        self.path = path
        self.current_handler = current_handler


class RouterFrozenError(RouteException):
    def __init__(self) -> None:
        super().__init__(
            "The router is frozen: routes, views, blocked paths, redirects, and "
            "status handlers must be registered before the router starts serving "
            "requests."
        )


class RoutePattern:
    """
    A route template parsed into segments, e.g. "users/{id}/posts/{page?}".
    Only the last segment can be an optional parameter.
    """

    __slots__ = ("value", "segments")

    def __init__(self, value: str) -> None:
        self.value = value
        self.segments = [Segment.from_route_part(part) for part in split_path(value)]

    @property
    def has_misplaced_optional(self) -> bool:
        return any(segment.is_optional for segment in self.segments[:-1])

    def match(self, parts: List[str]) -> bool:
        """
        Returns a value indicating whether the given path segments match this
        pattern. Literal segments must be equal, parameter segments accept any
        value, and a trailing optional parameter can be missing.
        """
        segments = self.segments

        if not segments and not parts:
            return True

        last_segment = len(segments) - 1
        last_part = len(parts) - 1

        for i in range(min(last_segment, last_part) + 1):
            segment = segments[i]

            if parts[i] != segment.value and not segment.is_parameter:
                return False

            if i == last_part and (
                i == last_segment
                or (i + 1 == last_segment and segments[i + 1].is_optional)
            ):
                return True

        return False

    def bind(self, parts: List[str], values: Dict[str, str]) -> Dict[str, str]:
        """
        Writes the parameters captured from matching path segments into the given
        dictionary. A missing optional parameter is set to an empty string.
        """
        for i, segment in enumerate(self.segments):
            if segment.is_parameter:
                values[segment.name] = parts[i] if i < len(parts) else ""
        return values

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} "{self.value}">'


class RouteEntry:
    __slots__ = ("path", "method", "handler", "status", "content_type", "pattern")

    def __init__(
        self,
        path: str,
        method: HTTPMethod,
        handler: Any,
        status: Optional[int],
        content_type: str,
    ) -> None:
        self.path = path
        self.method = method
        self.handler = handler
        self.status = status
        self.content_type = content_type
        self.pattern = RoutePattern(path)

    def accepts(self, method: str) -> bool:
        return self.method is HTTPMethod.ANY or self.method.value == method

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.method.value} "{self.path}">'


class RouteMatch:
    __slots__ = ("entry", "values")

    def __init__(self, entry: RouteEntry, values: Dict[str, str]):
        self.entry = entry
        self.values = values

    @property
    def handler(self) -> Any:
        return self.entry.handler

    @property
    def content_type(self) -> str:
        return self.entry.content_type

    @property
    def status(self) -> Optional[int]:
        return self.entry.status


def _validate_handler(handler: Any) -> None:
    # a string is a controller reference, e.g. "HomeController@index"
    if handler is None or not (callable(handler) or isinstance(handler, str)):
        raise InvalidArgument("handler", "a callable or a str")


def _validate_status(status: Any) -> None:
    if status is not None and (not isinstance(status, int) or isinstance(status, bool)):
        raise InvalidArgument("status", "a value of type int or None")


def _get_shape(path: str) -> str:
    return _placeholder_rx.sub("{}", path)


class RouteTable:
    """
    Registry of routes keyed by normalized path. A path is registered at most once:
    registering it again replaces the whole entry, keeping its original position.
    Lookups evaluate entries in registration order and the first match wins.
    """

    __slots__ = ("_entries", "_duplicates", "logger")

    def __init__(self, duplicates: Optional[str] = None) -> None:
        if duplicates is not None and duplicates not in DUPLICATE_ROUTES_POLICIES:
            raise ValueError(
                f"Invalid duplicates policy: '{duplicates}'. "
                "Must be 'replace', 'warn', or 'error'."
            )
        self._entries: Dict[str, RouteEntry] = {}
        self._duplicates = duplicates
        self.logger = get_logger()

    @property
    def duplicates(self) -> str:
        if self._duplicates is None:
            return get_duplicate_routes_policy()
        return self._duplicates

    def __iter__(self) -> Iterator[RouteEntry]:
        yield from self._entries.values()

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> Dict[str, RouteEntry]:
        return dict(self._entries)

    def add(
        self,
        method: Union[str, HTTPMethod],
        path: str,
        handler: Any,
        status: Optional[int] = None,
    ) -> RouteEntry:
        route_method = HTTPMethod.parse(method)
        normalized_path, content_type = normalize_path(path)
        _validate_handler(handler)
        _validate_status(status)

        entry = RouteEntry(
            normalized_path, route_method, handler, status, content_type
        )

        if entry.pattern.has_misplaced_optional:
            self.logger.debug(
                "Route '%s' has an optional parameter before its last segment; "
                "it is matched as a required parameter.",
                normalized_path,
            )

        current_entry = self._entries.get(normalized_path)
        if current_entry is not None:
            self._handle_duplicate(current_entry, entry)

        self._entries[normalized_path] = entry
        self.logger.debug(
            "Registered route %s '%s' (%s)",
            route_method.value,
            normalized_path,
            content_type,
        )
        return entry

    def _handle_duplicate(self, current_entry: RouteEntry, new_entry: RouteEntry):
        policy = self.duplicates

        if policy == "error":
            raise RouteDuplicate(current_entry.path, current_entry.handler)

        if policy == "warn":
            self.logger.warning(
                "The route '%s' (%s) is replaced by a new registration (%s).",
                current_entry.path,
                current_entry.method.value,
                new_entry.method.value,
            )

    def get_match(self, method: Union[str, bytes], path: str) -> Optional[RouteMatch]:
        request_method = ensure_str(method).upper()
        parts = split_path(ensure_path(path))

        for entry in self._entries.values():
            if not entry.accepts(request_method):
                continue

            if entry.pattern.match(parts):
                return RouteMatch(entry, entry.pattern.bind(parts, {}))

        return None

    def exists(self, path: str) -> bool:
        """
        Returns a value indicating whether a route with the same shape is
        registered, regardless of the names of its parameters: "users/{id}" exists
        if "users/{user_id}" is registered.
        """
        normalized_path, _ = normalize_path(path)
        shape = _get_shape(normalized_path)
        return any(_get_shape(key) == shape for key in self._entries)

    def reset(self) -> None:
        self._entries = {}


class RouterBase(ABC):
    """
    Base abstract class for types that can register HTTP routes.
    """

    @abstractmethod
    def add(
        self,
        method: Union[str, HTTPMethod],
        path: str,
        handler: Any,
        status: Optional[int] = None,
    ) -> Any:
        """Adds a request handler for the given HTTP method and route path."""

    def normalize_default_pattern_name(self, handler_name: str) -> str:
        return handler_name.replace("_", "-")

    def _get_decorator(
        self,
        method: HTTPMethod,
        path: Optional[str] = "/",
        status: Optional[int] = None,
    ) -> Callable[..., Any]:
        def decorator(fn):
            nonlocal path
            if path is ... or path is None:
                # default to something depending on decorated function's name
                if fn.__name__ in {"index", "default"}:
                    path = "/"
                else:
                    path = "/" + self.normalize_default_pattern_name(fn.__name__)

                get_logger().debug(
                    "Defaulting to route path '%s' for request handler <%s>",
                    path,
                    fn.__qualname__,
                )
            self.add(method, path, fn, status)
            return fn

        return decorator

    def add_get(self, path: str, handler: Any, status: Optional[int] = None):
        return self.add(HTTPMethod.GET, path, handler, status)

    def add_post(self, path: str, handler: Any, status: Optional[int] = None):
        return self.add(HTTPMethod.POST, path, handler, status)

    def add_put(self, path: str, handler: Any, status: Optional[int] = None):
        return self.add(HTTPMethod.PUT, path, handler, status)

    def add_patch(self, path: str, handler: Any, status: Optional[int] = None):
        return self.add(HTTPMethod.PATCH, path, handler, status)

    def add_delete(self, path: str, handler: Any, status: Optional[int] = None):
        return self.add(HTTPMethod.DELETE, path, handler, status)

    def add_any(self, path: str, handler: Any, status: Optional[int] = None):
        return self.add(HTTPMethod.ANY, path, handler, status)

    def get(self, path: Optional[str] = "/", status: Optional[int] = None):
        return self._get_decorator(HTTPMethod.GET, path, status)

    def post(self, path: Optional[str] = "/", status: Optional[int] = None):
        return self._get_decorator(HTTPMethod.POST, path, status)

    def put(self, path: Optional[str] = "/", status: Optional[int] = None):
        return self._get_decorator(HTTPMethod.PUT, path, status)

    def patch(self, path: Optional[str] = "/", status: Optional[int] = None):
        return self._get_decorator(HTTPMethod.PATCH, path, status)

    def delete(self, path: Optional[str] = "/", status: Optional[int] = None):
        return self._get_decorator(HTTPMethod.DELETE, path, status)

    def any(self, path: Optional[str] = "/", status: Optional[int] = None):
        return self._get_decorator(HTTPMethod.ANY, path, status)


class Router(RouterBase):
    """
    Owns the routes, blocked paths, redirects, and status handlers of an
    application. Everything is registered first, then the router is frozen and
    only read while serving requests; parameters captured for a request are
    written to that request's own context.
    """

    def __init__(
        self,
        *,
        duplicates: Optional[str] = None,
        renderer: Optional[Renderer] = None,
    ):
        self._routes = RouteTable(duplicates)
        self._blocked = BlockList()
        self._redirects = RedirectTable()
        self._statuses = StatusHandlers()
        self._renderer = renderer
        self._frozen = False
        self.logger = get_logger()

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            return html_settings.renderer
        return self._renderer

    @property
    def routes(self) -> Dict[str, RouteEntry]:
        return self._routes.to_dict()

    @property
    def redirects(self) -> Dict[str, Redirect]:
        return self._redirects.to_dict()

    @property
    def blocked(self) -> List[str]:
        return [pattern.value for pattern in self._blocked]

    @property
    def status_handlers(self) -> Dict[int, StatusHandler]:
        return self._statuses.to_dict()

    def __iter__(self) -> Iterator[RouteEntry]:
        yield from self._routes

    def freeze(self) -> None:
        """Ends the registration phase. Registering anything afterwards fails."""
        self._frozen = True
        self.logger.debug(
            "Router frozen with %s routes, %s blocked paths, %s redirects",
            len(self._routes),
            len(self._blocked),
            len(self._redirects),
        )

    def reset(self) -> None:
        """
        Resets this router to its initial state. A frozen router cannot be reset.
        """
        self._ensure_not_frozen()
        self._routes.reset()
        self._blocked.reset()
        self._redirects.reset()
        self._statuses.reset()

    def _ensure_not_frozen(self) -> None:
        if self._frozen:
            raise RouterFrozenError()

    def add(
        self,
        method: Union[str, HTTPMethod],
        path: str,
        handler: Any,
        status: Optional[int] = None,
    ) -> RouteEntry:
        self._ensure_not_frozen()
        return self._routes.add(method, path, handler, status)

    def view(
        self,
        path: str,
        view_path: str,
        data: Optional[Dict[str, Any]] = None,
        cache: Optional[bool] = None,
    ) -> RouteEntry:
        """
        Registers a GET route that renders a view. The view receives the given
        data, and the parameters captured from the request path as `params`.
        """
        if not isinstance(view_path, str):
            raise InvalidArgument("view_path", "a value of type str")
        if cache is None:
            cache = get_view_cache_default()

        def view_handler(context: Optional[RequestContext] = None) -> str:
            params = context.params if context is not None else {}
            return self.renderer.render(view_path, data, cache=cache, params=params)

        return self.add(HTTPMethod.GET, path, view_handler)

    def on_status(self, status: int, handler: StatusHandler) -> None:
        self._ensure_not_frozen()
        self._statuses.add(status, handler)

    def status(self, status: int) -> Callable[..., Any]:
        def decorator(fn):
            self.on_status(status, fn)
            return fn

        return decorator

    def block(self, path: str) -> None:
        self._ensure_not_frozen()
        pattern = self._blocked.add(path)
        self.logger.debug("Blocked path '%s'", pattern.value)

    def redirect(
        self, source: str, destination: str, status: int = STATUS_REDIRECT
    ) -> Redirect:
        self._ensure_not_frozen()
        return self._redirects.add(source, destination, status)

    def get_match(self, method: Union[str, bytes], path: str) -> Optional[RouteMatch]:
        """
        Gets a match for the given method and request path, without side effects.
        """
        return self._routes.get_match(method, path)

    def resolve(
        self,
        method: Union[str, bytes],
        path: str,
        context: RequestContext,
    ) -> Optional[Any]:
        """
        Returns the handler of the first route matching the given method and path,
        or None if no route matches. On a match, the captured parameters, the
        route content type, and its status (if defined) are set on the context.
        """
        match = self._routes.get_match(method, path)

        if match is None:
            self.logger.debug("No route for %s '%s'", ensure_str(method), path)
            return None

        context.params.update(match.values)
        context.content_type = match.content_type
        if match.status is not None:
            context.status = match.status

        return match.handler

    def exists(self, path: str) -> bool:
        return self._routes.exists(path)

    def is_blocked(self, path: str) -> bool:
        return self._blocked.is_blocked(path)

    def get_redirect(self, path: str) -> Optional[Redirect]:
        return self._redirects.get(path)

    async def dispatch_status(self, request: Any, response: Any, status: int) -> bool:
        """
        Executes the handler configured for the given response status, if any.
        """
        return await self._statuses.dispatch(status, request, response)


# Singleton router used to store initial configuration, before the application starts.
router = Router()

get = router.get
post = router.post
put = router.put
patch = router.patch
delete = router.delete
any_method = router.any
view = router.view
block = router.block
redirect = router.redirect
status = router.status
