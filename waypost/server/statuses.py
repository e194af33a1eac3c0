import inspect
from typing import Any, Callable, Dict, Optional

from waypost.exceptions import InvalidArgument

StatusHandler = Callable[[Any, Any], Any]


class StatusHandlers:
    """
    Handlers executed for a response status code, after the request handler has
    produced the final status. Typically used to render custom error pages.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: Dict[int, StatusHandler] = {}

    def __contains__(self, status: int) -> bool:
        return status in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def add(self, status: int, handler: StatusHandler) -> None:
        if not isinstance(status, int) or isinstance(status, bool):
            raise InvalidArgument("status", "a value of type int")
        if not callable(handler):
            raise InvalidArgument("handler", "a callable")
        self._handlers[status] = handler

    def get(self, status: int) -> Optional[StatusHandler]:
        return self._handlers.get(status)

    def to_dict(self) -> Dict[int, StatusHandler]:
        return dict(self._handlers)

    async def dispatch(self, status: int, request: Any, response: Any) -> bool:
        """
        Calls the handler configured for the given status, if any, with the request
        and response objects. Returns True if a handler was called.
        The status is never modified here.
        """
        handler = self._handlers.get(status)
        if handler is None:
            return False

        result = handler(request, response)
        if inspect.isawaitable(result):
            await result
        return True

    def reset(self) -> None:
        self._handlers = {}
