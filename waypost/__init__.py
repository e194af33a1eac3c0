"""
Root module of the library. This module re-exports the most commonly
used types to reduce the verbosity of the imports statements.
"""

__version__ = "1.0.0"

from .exceptions import InvalidArgument as InvalidArgument
from .server.blocking import BlockList as BlockList
from .server.context import RequestContext as RequestContext
from .server.redirects import Redirect as Redirect
from .server.redirects import RedirectTable as RedirectTable
from .server.routing import HTTPMethod as HTTPMethod
from .server.routing import RouteDuplicate as RouteDuplicate
from .server.routing import RouteException as RouteException
from .server.routing import RouteMatch as RouteMatch
from .server.routing import Router as Router
from .server.routing import RouterFrozenError as RouterFrozenError
from .server.routing import RouteTable as RouteTable
from .server.statuses import StatusHandlers as StatusHandlers
