"""
=============================================================================
HTTP ROUTER
=============================================================================

Maps a request path to a handler.

The lab API needs two kinds of route and nothing else:

    EXACT    "/labs/3/getDate/"     path must equal the literal
    PREFIX   "/labs/3/readFile/"    path must start with the literal;
                                    the remainder is path_params["rest"]

Routes match on the path alone. The method is ignored, so a POST to
getDate is served the same as a GET.

=============================================================================
MATCHING RULES
=============================================================================

    ┌──────────────────────────────┬────────────────────┬─────────────────┐
    │ Request path                 │ Route              │ Result          │
    ├──────────────────────────────┼────────────────────┼─────────────────┤
    │ /labs/3/getDate/             │ EXACT getDate/     │ match           │
    │ /labs/3/getDate              │ EXACT getDate/     │ no match        │
    │ /labs/3/GetDate/             │ EXACT getDate/     │ no match        │
    │ /labs/3/getDate%2F           │ EXACT getDate/     │ no match        │
    │ /labs/3/x/../getDate/        │ EXACT getDate/     │ no match        │
    │ /labs/3/readFile/file.txt    │ PREFIX readFile/   │ rest="file.txt" │
    │ /labs/3/readFile/            │ PREFIX readFile/   │ rest=""         │
    │ /labs/3/readFile             │ PREFIX readFile/   │ no match        │
    └──────────────────────────────┴────────────────────┴─────────────────┘

Matching is case-sensitive and the trailing slash is part of the literal:
paths are never normalised or percent-decoded. Routes are tried in
registration order and the first match wins. A path nothing matches goes
to the fallback handler.

=============================================================================
USAGE
=============================================================================

    router = Router(prefix="/labs/3")

    @router.exact("/getDate/")
    def get_date(request):
        ...

    @router.prefix_route("/readFile/")
    def read_file(request):
        filename = request.path_params["rest"]
        ...

    router.fallback = not_found_handler
    response = router.handle(request)

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional
import html

from .request import HTTPRequest
from .response import HTTPResponse, html_response
from .status_codes import HTTPStatus


Handler = Callable[[HTTPRequest], HTTPResponse]


class RouteType(Enum):
    """How a route's path is compared with the request path."""

    EXACT = "exact"
    PREFIX = "prefix"


@dataclass
class Route:
    """A path literal bound to a handler."""

    path: str
    kind: RouteType
    handler: Handler
    name: Optional[str] = None

    def matches(self, path: str) -> bool:
        if self.kind is RouteType.EXACT:
            return path == self.path
        return path.startswith(self.path)


@dataclass
class RouteMatch:
    """
    Result of a successful match.

        Route:  PREFIX /labs/3/readFile/
        Path:   /labs/3/readFile/notes.txt
        Result: RouteMatch(route=<Route>, params={"rest": "notes.txt"})
    """

    route: Route
    params: Dict[str, str]


def default_fallback(request: HTTPRequest) -> HTTPResponse:
    """Minimal 404 page for routers without a fallback."""
    return html_response(
        HTTPStatus.NOT_FOUND,
        f"<h1>404 - Not Found</h1>\n<p>{html.escape(request.path)}</p>\n",
    )


class Router:
    """
    Exact and prefix path router.

    Args:
        prefix: Prepended to every route path registered on this router.
        fallback: Handler for paths no route matches.
    """

    def __init__(self, prefix: str = "", fallback: Optional[Handler] = None):
        self.prefix = prefix.rstrip("/")
        self.fallback: Handler = fallback or default_fallback
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        kind: RouteType = RouteType.EXACT,
        name: Optional[str] = None
    ) -> Route:
        """
        Register a route.

        Args:
            path: Literal path, appended to the router prefix as-is.
            handler: Callable taking a request and returning a response.
            kind: EXACT or PREFIX.
            name: Optional label for the route.
        """
        route = Route(
            path=self.prefix + path,
            kind=kind,
            handler=handler,
            name=name,
        )
        self._routes.append(route)
        return route

    def exact(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator registering an EXACT route."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, RouteType.EXACT, name)
            return handler
        return decorator

    def prefix_route(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator registering a PREFIX route."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, RouteType.PREFIX, name)
            return handler
        return decorator

    # =========================================================================
    # MATCHING
    # =========================================================================

    def match(self, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching `path`.

        Returns:
            RouteMatch, or None if nothing matches.
        """
        for route in self._routes:
            if route.matches(path):
                params: Dict[str, str] = {}
                if route.kind is RouteType.PREFIX:
                    params["rest"] = path[len(route.path):]
                return RouteMatch(route=route, params=params)
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request.

        Path parameters are injected into request.path_params before the
        handler runs. Unmatched paths go to the fallback.
        """
        match = self.match(request.path)
        if match is None:
            return self.fallback(request)

        request.path_params = match.params
        return match.route.handler(request)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[Route]:
        """All registered routes, in matching order."""
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print the routing table.

            Registered Routes:
            ------------------------------------------------------------
              EXACT    /labs/3/getDate/
              EXACT    /labs/3/writeFile/
              PREFIX   /labs/3/readFile/
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            print(f"  {route.kind.name:8} {route.path}")
        print("-" * 60)
