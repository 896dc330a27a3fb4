"""
Unit tests for URL router.
"""

from labserver.http.router import Router, RouteType
from labserver.http.request import HTTPRequest
from labserver.http.response import HTTPResponse, html_response
from labserver.http.status_codes import HTTPStatus


def make_request(path: str, method: str = "GET") -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def dummy_handler(request: HTTPRequest) -> HTTPResponse:
    """Dummy handler for testing."""
    return html_response(HTTPStatus.OK, request.path)


class TestRouter:
    """Tests for Router class."""

    def test_add_route_applies_prefix(self):
        """Test that the router prefix is prepended to route paths."""
        router = Router(prefix="/labs/3/")
        route = router.add_route("/getDate/", dummy_handler)

        assert route.path == "/labs/3/getDate/"
        assert route.kind is RouteType.EXACT

    def test_exact_match(self):
        """Test that exact routes need the whole path, slash included."""
        router = Router(prefix="/labs/3")
        router.add_route("/getDate/", dummy_handler)

        assert router.match("/labs/3/getDate/") is not None
        assert router.match("/labs/3/getDate") is None
        assert router.match("/labs/3/getDate/x") is None

    def test_match_is_case_sensitive(self):
        """Test that paths are compared literally."""
        router = Router(prefix="/labs/3")
        router.add_route("/getDate/", dummy_handler)

        assert router.match("/labs/3/GetDate/") is None

    def test_prefix_match_params(self):
        """Test that prefix routes expose the remainder as 'rest'."""
        router = Router(prefix="/labs/3")
        router.add_route("/readFile/", dummy_handler, RouteType.PREFIX)

        match = router.match("/labs/3/readFile/file.txt")
        assert match is not None
        assert match.params == {"rest": "file.txt"}

        assert router.match("/labs/3/readFile/").params == {"rest": ""}
        assert router.match("/labs/3/readFile") is None

    def test_first_match_wins(self):
        """Test registration order decides between overlapping routes."""
        router = Router()
        first = router.add_route("/a/", dummy_handler, RouteType.PREFIX, name="first")
        router.add_route("/a/b", dummy_handler, name="second")

        assert router.match("/a/b").route is first

    def test_decorators(self):
        """Test registering routes with decorators."""
        router = Router(prefix="/labs/3")

        @router.exact("/getDate/", name="getDate")
        def get_date(request):
            return html_response(HTTPStatus.OK, "date")

        @router.prefix_route("/readFile/")
        def read_file(request):
            return html_response(HTTPStatus.OK, request.path_params["rest"])

        kinds = [(route.name, route.kind) for route in router.routes()]
        assert kinds == [("getDate", RouteType.EXACT), (None, RouteType.PREFIX)]

        response = router.handle(make_request("/labs/3/readFile/notes.txt"))
        assert response.body == b"notes.txt"

    def test_handle_unmatched_uses_fallback(self):
        """Test custom fallback for unknown paths."""
        def fallback(request):
            return html_response(HTTPStatus.NOT_FOUND, "nope")

        router = Router(fallback=fallback)
        response = router.handle(make_request("/anything"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b"nope"

    def test_default_fallback_escapes_path(self):
        """Test the built-in 404 page."""
        response = Router().handle(make_request("/<x>"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert b"&lt;x&gt;" in response.body

    def test_method_ignored(self):
        """Test that any method reaches the same handler."""
        router = Router()
        router.add_route("/x", dummy_handler)

        assert router.handle(make_request("/x", method="POST")).status == HTTPStatus.OK

    def test_print_routes(self, capsys):
        """Test the routing table printout."""
        router = Router(prefix="/labs/3")
        router.add_route("/getDate/", dummy_handler)
        router.add_route("/readFile/", dummy_handler, RouteType.PREFIX)

        router.print_routes()
        out = capsys.readouterr().out

        assert "Registered Routes:" in out
        assert "EXACT    /labs/3/getDate/" in out
        assert "PREFIX   /labs/3/readFile/" in out
