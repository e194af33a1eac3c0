from typing import Any, Dict, Optional


class RequestContext:
    """
    Per-request scope filled when a route is resolved.

    It carries the parameters captured from the request path, and the content type
    and status the matched route prescribes for the outgoing response. The request
    and response objects belong to the hosting server and are only passed through.
    """

    __slots__ = ("request", "response", "params", "content_type", "status")

    def __init__(self, request: Any = None, response: Any = None) -> None:
        self.request = request
        self.response = response
        self.params: Dict[str, str] = {}
        self.content_type: Optional[str] = None
        self.status: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} params={self.params!r} "
            f"content_type={self.content_type!r} status={self.status!r}>"
        )
