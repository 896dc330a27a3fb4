"""
=============================================================================
LABSERVER - Date, Greeting and Text File Endpoints over Raw HTTP/1.1
=============================================================================

A small HTTP service built directly on sockets, exposing three endpoints
under a configurable prefix (default /labs/3):

    GET /labs/3/getDate/?name=Joey       greeting + current server date
    GET /labs/3/writeFile/?text=Hello    append a line to file.txt
    GET /labs/3/readFile/file.txt        show a stored file

Every response is an HTML page with Access-Control-Allow-Origin: *.

=============================================================================
PACKAGE LAYOUT
=============================================================================

    labserver/
    ├── __main__.py      CLI (python -m labserver)
    ├── config.py        ServerConfig: defaults, environment, validation
    ├── server.py        APIServer: wires everything below together
    ├── errors.py        ValidationError, NotFoundError, StorageError, ...
    ├── dates.py         DateProvider: page date and ISO timestamps
    ├── messages.py      MessageCatalog: greeting templates
    ├── store.py         FileStore: append/read under a base directory
    ├── render.py        HTML pages, escaping
    ├── core/            sockets, connections, thread pool
    ├── http/            request parsing, responses, router, status codes
    ├── middleware/      access log, CORS, error boundary
    └── handlers/        the lab endpoint handlers

=============================================================================
QUICK START
=============================================================================

    from labserver import create_app

    app = create_app()    # reads PORT / LAB_* from the environment
    app.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import APIServer, create_app
from .config import ServerConfig

__all__ = ["APIServer", "ServerConfig", "create_app", "__version__"]
