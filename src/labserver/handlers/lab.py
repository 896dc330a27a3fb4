"""
=============================================================================
LAB ENDPOINT HANDLERS
=============================================================================

The three endpoints, plus the page for everything else.

    ┌──────────────────────────────┬───────────────────┬─────────────────────┐
    │ Route                        │ Handler           │ Collaborators       │
    ├──────────────────────────────┼───────────────────┼─────────────────────┤
    │ EXACT  <prefix>/getDate/     │ DateHandler       │ DateProvider,       │
    │                              │                   │ MessageCatalog      │
    │ EXACT  <prefix>/writeFile/   │ WriteFileHandler  │ FileStore           │
    │ PREFIX <prefix>/readFile/    │ ReadFileHandler   │ FileStore           │
    │ (fallback)                   │ RouteNotFound...  │                     │
    └──────────────────────────────┴───────────────────┴─────────────────────┘

Each handler holds the objects it needs rather than inheriting them, and
renders its own expected outcomes (400 / 404 / 500 pages). Anything it does
not expect propagates to ErrorHandlerMiddleware.

=============================================================================
"""

import logging
from typing import List, Optional
from urllib.parse import unquote

from ..config import ServerConfig
from ..dates import DateProvider
from ..errors import FileNotFoundInStore, StorageError, ValidationError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, html_response
from ..http.router import Router
from ..http.status_codes import HTTPStatus
from ..messages import MessageCatalog
from ..store import FileStore
from .. import render


logger = logging.getLogger(__name__)


DEFAULT_NAME = "Guest"


class DateHandler:
    """
    GET <prefix>/getDate/?name=Joey

    Greets `name` (or "Guest" when it is missing or empty) and shows the
    current server date.
    """

    def __init__(self, dates: DateProvider, messages: MessageCatalog):
        self.dates = dates
        self.messages = messages

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        name = request.get_query("name") or DEFAULT_NAME
        greeting = self.messages.greeting(name)
        return html_response(
            HTTPStatus.OK,
            render.render_date(greeting, self.dates.current_date()),
        )


class WriteFileHandler:
    """
    GET <prefix>/writeFile/?text=Hello

    Appends `text` as a new line of the store file.

        text missing or empty   → 400, nothing written
        write fails             → 500
        otherwise               → 200 confirmation
    """

    def __init__(self, store: FileStore, dates: DateProvider, filename: str = "file.txt"):
        self.store = store
        self.dates = dates
        self.filename = filename

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        text = request.get_query("text")

        if not text:
            return html_response(
                HTTPStatus.BAD_REQUEST,
                render.render_bad_request(
                    render.escape("No text parameter provided"),
                    self.dates.timestamp(),
                ),
            )

        try:
            self.store.append(self.filename, text)
        except StorageError as e:
            return html_response(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                render.render_server_error(render.escape(e.message), self.dates.timestamp()),
            )

        logger.info(f"Appended {len(text)} chars to {self.filename}")
        return html_response(
            HTTPStatus.OK,
            render.render_write_success(
                render.escape(text),
                self.dates.timestamp(),
                filename=self.filename,
            ),
        )


class ReadFileHandler:
    """
    GET <prefix>/readFile/<filename>

    The filename is the last raw segment after the route, percent-decoded
    on its own:

        readFile/notes/file.txt    → "file.txt"
        readFile/my%20notes.txt    → "my notes.txt"
        readFile/a%2Fb.txt         → "a/b.txt", i.e. base_dir/a/b.txt
        readFile/..%2Fsecret.txt   → "../secret.txt", refused by the store

        empty filename          → 400
        outside base dir        → 400
        no such file            → 404 naming the file
        other read failure      → 500
        otherwise               → 200 with the escaped contents
    """

    def __init__(self, store: FileStore, dates: DateProvider):
        self.store = store
        self.dates = dates

    @staticmethod
    def filename_from(request: HTTPRequest) -> str:
        rest = request.path_params.get("rest", "")
        return unquote(rest.rsplit("/", 1)[-1])

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        filename = self.filename_from(request)

        try:
            content = self.store.read(filename)
        except ValidationError as e:
            return html_response(
                HTTPStatus.BAD_REQUEST,
                render.render_bad_request(render.escape(e.message), self.dates.timestamp()),
            )
        except FileNotFoundInStore:
            return html_response(
                HTTPStatus.NOT_FOUND,
                render.render_not_found(render.escape(filename)),
            )
        except StorageError as e:
            return html_response(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                render.render_server_error(render.escape(e.message), self.dates.timestamp()),
            )

        return html_response(
            HTTPStatus.OK,
            render.render_file_content(
                render.escape(filename),
                render.escape(content),
                self.dates.timestamp(),
            ),
        )


class RouteNotFoundHandler:
    """404 page for unknown paths, listing the endpoints under `prefix`."""

    def __init__(self, prefix: str = "/labs/3"):
        self.prefix = prefix

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        return html_response(
            HTTPStatus.NOT_FOUND,
            render.render_route_not_found(render.escape(request.path), self.prefix),
        )


class LabAPI:
    """
    Wires the lab handlers into a Router.

    Usage:
        api = LabAPI(ServerConfig(base_dir="/tmp/lab"))
        response = api.router.handle(request)

    Args:
        config: Supplies base_dir, store_filename, route_prefix and language.
        dates: Clock override, mainly for tests.
    """

    def __init__(self, config: ServerConfig, dates: Optional[DateProvider] = None):
        self.config = config
        self.prefix = config.route_prefix.rstrip("/")

        self.dates = dates or DateProvider()
        self.messages = MessageCatalog(config.language)
        self.store = FileStore(config.base_dir)

        self.date_handler = DateHandler(self.dates, self.messages)
        self.write_handler = WriteFileHandler(self.store, self.dates, config.store_filename)
        self.read_handler = ReadFileHandler(self.store, self.dates)
        self.not_found_handler = RouteNotFoundHandler(self.prefix)

        self.router = Router(prefix=self.prefix, fallback=self.not_found_handler.handle)
        self.router.exact("/getDate/", name="getDate")(self.date_handler.handle)
        self.router.exact("/writeFile/", name="writeFile")(self.write_handler.handle)
        self.router.prefix_route("/readFile/", name="readFile")(self.read_handler.handle)

    def example_urls(self, base_url: str) -> List[str]:
        """One sample URL per endpoint, for the startup banner."""
        return [
            f"{base_url}{self.prefix}/getDate/?name=Joey",
            f"{base_url}{self.prefix}/writeFile/?text=Hello",
            f"{base_url}{self.prefix}/readFile/{self.config.store_filename}",
        ]
