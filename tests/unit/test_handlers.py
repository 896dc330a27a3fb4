"""
Unit tests for the lab endpoint handlers, called through the router.
"""

from pathlib import Path
from typing import Optional

import pytest

from labserver.config import ServerConfig
from labserver.dates import DateProvider
from labserver.errors import StorageError
from labserver.handlers import LabAPI, ReadFileHandler
from labserver.http.request import HTTPRequest
from labserver.http.status_codes import HTTPStatus


def make_request(path: str, query: Optional[dict] = None) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(
        method="GET",
        path=path,
        query_params={key: list(values) for key, values in (query or {}).items()},
    )


@pytest.fixture
def api(config: ServerConfig, fixed_dates: DateProvider) -> LabAPI:
    return LabAPI(config, dates=fixed_dates)


class TestDateHandler:
    """Tests for GET /labs/3/getDate/."""

    def test_greets_name(self, api: LabAPI):
        response = api.router.handle(make_request("/labs/3/getDate/", {"name": ["Joey"]}))

        assert response.status == HTTPStatus.OK
        assert "Hello Joey, What a beautiful day." in response.text
        assert "Thu Jan 15 2026 12:30:45" in response.text

    @pytest.mark.parametrize("query", [None, {"name": [""]}])
    def test_defaults_to_guest(self, api: LabAPI, query):
        response = api.router.handle(make_request("/labs/3/getDate/", query))

        assert "Hello Guest," in response.text

    def test_last_name_wins(self, api: LabAPI):
        response = api.router.handle(make_request("/labs/3/getDate/", {"name": ["a", "b"]}))

        assert "Hello b," in response.text

    def test_name_is_escaped(self, api: LabAPI):
        response = api.router.handle(
            make_request("/labs/3/getDate/", {"name": ["<script>alert(1)</script>"]})
        )

        assert "<script>" not in response.text
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in response.text


class TestWriteFileHandler:
    """Tests for GET /labs/3/writeFile/."""

    def test_appends_line(self, api: LabAPI, tmp_path: Path):
        response = api.router.handle(make_request("/labs/3/writeFile/", {"text": ["Hello"]}))

        assert response.status == HTTPStatus.OK
        assert '"<strong>Hello</strong>" has been appended to file.txt' in response.text
        assert "Timestamp: 2026-01-15T12:30:45.123Z" in response.text
        assert (tmp_path / "file.txt").read_text(encoding="utf-8") == "Hello\n"

    @pytest.mark.parametrize("query", [None, {"text": [""]}])
    def test_missing_text(self, api: LabAPI, tmp_path: Path, query):
        response = api.router.handle(make_request("/labs/3/writeFile/", query))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert "No text parameter provided" in response.text
        assert not (tmp_path / "file.txt").exists()

    def test_text_is_stored_raw_and_shown_escaped(self, api: LabAPI, tmp_path: Path):
        response = api.router.handle(make_request("/labs/3/writeFile/", {"text": ["<b>&</b>"]}))

        assert "&lt;b&gt;&amp;&lt;/b&gt;" in response.text
        assert (tmp_path / "file.txt").read_text(encoding="utf-8") == "<b>&</b>\n"

    def test_storage_failure(self, api: LabAPI, monkeypatch):
        def fail(filename, text):
            raise StorageError("Error writing to file: disk full")

        monkeypatch.setattr(api.store, "append", fail)
        response = api.router.handle(make_request("/labs/3/writeFile/", {"text": ["x"]}))

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert "Error writing to file: disk full" in response.text


class TestReadFileHandler:
    """Tests for GET /labs/3/readFile/<filename>."""

    def test_reads_written_lines(self, api: LabAPI):
        api.router.handle(make_request("/labs/3/writeFile/", {"text": ["A"]}))
        api.router.handle(make_request("/labs/3/writeFile/", {"text": ["B"]}))

        response = api.router.handle(make_request("/labs/3/readFile/file.txt"))

        assert response.status == HTTPStatus.OK
        assert '<div class="file-content">A\nB\n</div>' in response.text
        assert "File read at: 2026-01-15T12:30:45.123Z" in response.text

    def test_content_is_escaped(self, api: LabAPI, tmp_path: Path):
        (tmp_path / "file.txt").write_text("<i>x</i>\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/file.txt"))

        assert "&lt;i&gt;x&lt;/i&gt;" in response.text

    def test_missing_file(self, api: LabAPI):
        response = api.router.handle(make_request("/labs/3/readFile/missing.txt"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "missing.txt" in response.text
        assert "File Not Found" in response.text

    def test_empty_filename(self, api: LabAPI):
        response = api.router.handle(make_request("/labs/3/readFile/"))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert "No filename provided" in response.text

    def test_last_segment_is_filename(self, api: LabAPI, tmp_path: Path):
        (tmp_path / "file.txt").write_text("hi\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/some/dir/file.txt"))

        assert response.status == HTTPStatus.OK
        assert "hi" in response.text

    def test_read_failure(self, api: LabAPI, tmp_path: Path):
        (tmp_path / "adir").mkdir()

        response = api.router.handle(make_request("/labs/3/readFile/adir"))

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert "Error reading file adir" in response.text

    @pytest.mark.parametrize("rest, filename", [
        ("a/b.txt", "b.txt"),
        ("my%20notes.txt", "my notes.txt"),
        ("a%2Fb.txt", "a/b.txt"),
        ("", ""),
    ])
    def test_filename_from(self, rest: str, filename: str):
        """Only the last raw segment is taken, then percent-decoded."""
        request = make_request("/labs/3/readFile/" + rest)
        request.path_params = {"rest": rest}

        assert ReadFileHandler.filename_from(request) == filename

    def test_encoded_space_in_filename(self, api: LabAPI, tmp_path: Path):
        (tmp_path / "my notes.txt").write_text("spaced\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/my%20notes.txt"))

        assert response.status == HTTPStatus.OK
        assert "spaced" in response.text
        assert "my notes.txt" in response.text

    def test_encoded_slash_stays_inside_one_segment(self, api: LabAPI, tmp_path: Path):
        """a%2Fb.txt names base_dir/a/b.txt and never falls back to b.txt."""
        (tmp_path / "b.txt").write_text("wrong file\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/a%2Fb.txt"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "wrong file" not in response.text
        assert "a/b.txt" in response.text

    def test_encoded_slash_reaches_subdirectory(self, api: LabAPI, tmp_path: Path):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "b.txt").write_text("nested\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/a%2Fb.txt"))

        assert response.status == HTTPStatus.OK
        assert "nested" in response.text

    @pytest.mark.parametrize("segment", ["..%2Fsecret.txt", "%2E%2E%2Fsecret.txt", "..%2F..%2Fetc%2Fpasswd"])
    def test_encoded_traversal_refused(self, api: LabAPI, tmp_path: Path, segment: str):
        (tmp_path.parent / "secret.txt").write_text("top secret\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/" + segment))

        assert response.status == HTTPStatus.BAD_REQUEST
        assert "Invalid filename" in response.text
        assert "top secret" not in response.text

    def test_encoded_nul_refused(self, api: LabAPI):
        response = api.router.handle(make_request("/labs/3/readFile/a%00.txt"))

        assert response.status == HTTPStatus.BAD_REQUEST

    def test_raw_parent_segment_reads_last_segment_only(self, api: LabAPI, tmp_path: Path):
        """readFile/../secret.txt is just "secret.txt" inside base_dir."""
        (tmp_path.parent / "secret.txt").write_text("top secret\n", encoding="utf-8")

        response = api.router.handle(make_request("/labs/3/readFile/../secret.txt"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "top secret" not in response.text


class TestRouteNotFound:
    """Tests for unknown paths."""

    @pytest.mark.parametrize("path", [
        "/",
        "/labs/3/getDate",
        "/labs/3/GETDATE/",
        "/labs/3/writeFile",
        "/labs/3/readFile",
        "/labs/4/getDate/",
        "/labs/3/getDate%2F",
        "/labs/3/getDate%2f",
        "/labs/3/unknown/../x",
        "/labs/3/x/../getDate/",
    ])
    def test_unknown_path(self, api: LabAPI, path: str):
        response = api.router.handle(make_request(path))

        assert response.status == HTTPStatus.NOT_FOUND
        assert "Available endpoints" in response.text

    def test_all_responses_are_cors_html(self, api: LabAPI):
        requests = [
            make_request("/labs/3/getDate/"),
            make_request("/labs/3/writeFile/"),
            make_request("/labs/3/readFile/none.txt"),
            make_request("/nowhere"),
        ]

        for request in requests:
            response = api.router.handle(request)
            assert response.headers["Access-Control-Allow-Origin"] == "*"
            assert response.headers["Content-Type"] == "text/html; charset=utf-8"


class TestLabAPI:
    """Tests for LabAPI wiring."""

    def test_routes(self, api: LabAPI):
        paths = [route.path for route in api.router.routes()]

        assert paths == ["/labs/3/getDate/", "/labs/3/writeFile/", "/labs/3/readFile/"]

    def test_custom_prefix(self, tmp_path: Path):
        api = LabAPI(ServerConfig(base_dir=str(tmp_path), route_prefix="/COMP4537/labs/3/"))

        response = api.router.handle(make_request("/COMP4537/labs/3/getDate/"))
        assert response.status == HTTPStatus.OK

    def test_custom_store_filename(self, tmp_path: Path):
        api = LabAPI(ServerConfig(base_dir=str(tmp_path), store_filename="log.txt"))

        api.router.handle(make_request("/labs/3/writeFile/", {"text": ["x"]}))

        assert (tmp_path / "log.txt").read_text(encoding="utf-8") == "x\n"

    def test_example_urls(self, api: LabAPI):
        urls = api.example_urls("http://127.0.0.1:3000")

        assert urls == [
            "http://127.0.0.1:3000/labs/3/getDate/?name=Joey",
            "http://127.0.0.1:3000/labs/3/writeFile/?text=Hello",
            "http://127.0.0.1:3000/labs/3/readFile/file.txt",
        ]
