"""
=============================================================================
HTML RENDERING
=============================================================================

Pure string-building functions for every page the server sends. Nothing
here touches the network or the disk.

=============================================================================
ESCAPING CONTRACT
=============================================================================

Anything that came from a request or from a file is escaped exactly once
before it is embedded:

    &  →  &amp;      <  →  &lt;      >  →  &gt;
    "  →  &quot;     '  →  &#x27;

Functions taking an `escaped_*` argument expect the caller to have escaped
it already (the handlers do, because they also log the raw value).
render_date() is the exception: it receives the greeting straight from the
message catalog and escapes it itself.

    html.unescape(escape(s)) == s     for every string s

=============================================================================
PAGES
=============================================================================

    render_date              200   greeting + server date
    render_write_success     200   "appended to file.txt"
    render_file_content      200   file contents in a pre-wrap block
    render_bad_request       400   missing text / filename
    render_not_found         404   missing file
    render_route_not_found   404   unknown path, lists the endpoints
    render_server_error      500   storage failure, handler bug
    render_error             any   transport-level errors (408, 503, ...)

=============================================================================
"""

import html

from .http.status_codes import phrase_for


def escape(text: str) -> str:
    """Replace the five HTML-significant characters with entities."""
    return html.escape(text, quote=True)


def _page(title: str, body: str, head_extra: str = "") -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '    <meta charset="utf-8">\n'
        f"    <title>{title}</title>\n"
        f"{head_extra}"
        "</head>\n"
        "<body>\n"
        f"{body}"
        "</body>\n"
        "</html>\n"
    )


def render_date(greeting: str, date: str) -> str:
    """
    Page for the getDate endpoint.

    Args:
        greeting: Unescaped greeting line from the message catalog.
        date: Formatted server date.
    """
    body = (
        '    <p style="color: blue; font-size: 16px; font-family: Arial, sans-serif;">\n'
        f"        {escape(greeting)} {escape(date)}\n"
        "    </p>\n"
    )
    return _page("Server Date API", body)


def render_write_success(escaped_text: str, timestamp: str, filename: str = "file.txt") -> str:
    """Confirmation that `escaped_text` was appended to `filename`."""
    body = (
        "    <h1>Success!</h1>\n"
        f'    <p>Text "<strong>{escaped_text}</strong>" has been appended to {escape(filename)}</p>\n'
        f"    <p><em>Timestamp: {timestamp}</em></p>\n"
    )
    return _page("File Write Success", body)


_FILE_CONTENT_STYLE = (
    "    <style>\n"
    "        body { font-family: monospace; padding: 20px; }\n"
    "        .file-content {\n"
    "            background-color: #f5f5f5;\n"
    "            padding: 15px;\n"
    "            border: 1px solid #ddd;\n"
    "            white-space: pre-wrap;\n"
    "            word-wrap: break-word;\n"
    "        }\n"
    "    </style>\n"
)


def render_file_content(escaped_filename: str, escaped_content: str, timestamp: str) -> str:
    """File contents shown verbatim inside a pre-wrap block."""
    body = (
        f"    <h1>Contents of: {escaped_filename}</h1>\n"
        f'    <div class="file-content">{escaped_content}</div>\n'
        "    <hr>\n"
        f"    <p><em>File read at: {timestamp}</em></p>\n"
    )
    return _page(f"File Content: {escaped_filename}", body, _FILE_CONTENT_STYLE)


def render_not_found(escaped_filename: str) -> str:
    """404 body for a file that does not exist."""
    body = (
        "    <h1>404 - File Not Found</h1>\n"
        f'    <p>The file "<strong>{escaped_filename}</strong>" does not exist.</p>\n'
        "    <p>Make sure you have written to the file first using the writeFile endpoint.</p>\n"
    )
    return _page("File Not Found", body)


def render_route_not_found(escaped_path: str, prefix: str = "/labs/3") -> str:
    """404 body for an unknown path, listing the three endpoints under `prefix`."""
    prefix = escape(prefix)
    body = (
        "    <h1>404 - Not Found</h1>\n"
        f'    <p>The requested path "<strong>{escaped_path}</strong>" was not found.</p>\n'
        "    <h3>Available endpoints:</h3>\n"
        "    <ul>\n"
        f'        <li><a href="{prefix}/getDate/?name=Joey">{prefix}/getDate/?name=Joey</a></li>\n'
        f"        <li>{prefix}/writeFile/?text=YourText</li>\n"
        f"        <li>{prefix}/readFile/file.txt</li>\n"
        "    </ul>\n"
    )
    return _page("Not Found", body)


def render_error(status: int, escaped_message: str, timestamp: str) -> str:
    """Generic error page: "<code> - <phrase>", the message, and when it happened."""
    title = f"{int(status)} - {phrase_for(status)}"
    body = (
        f"    <h1>{title}</h1>\n"
        f"    <p>{escaped_message}</p>\n"
        f"    <p><em>Error occurred at: {timestamp}</em></p>\n"
    )
    return _page(title, body)


def render_bad_request(escaped_message: str, timestamp: str) -> str:
    """400 body."""
    return render_error(400, escaped_message, timestamp)


def render_server_error(escaped_message: str, timestamp: str) -> str:
    """500 body."""
    return render_error(500, escaped_message, timestamp)
