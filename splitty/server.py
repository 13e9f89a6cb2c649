"""Entry point that serves the events API over HTTP with CORS."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable, Iterable, Mapping, Sequence
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from splitty.api import EventHandler, setup_routes
from splitty.expense_service import ExpenseService
from splitty.repository import InMemoryEventRepository

logger = logging.getLogger("splitty")


class CorsMiddleware:
    """WSGI middleware answering preflight requests and adding CORS headers."""

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        *,
        allowed_origins: Sequence[str] = ("*",),
        allowed_methods: Sequence[str] = ("GET", "POST", "HEAD"),
        allowed_headers: Sequence[str] = ("Accept", "Content-Type", "X-Requested-With"),
        allow_credentials: bool = False,
        max_age: int = 0,
    ) -> None:
        self.app = app
        self._origins = {origin.lower() for origin in allowed_origins}
        self._methods = {method.upper() for method in allowed_methods} | {"OPTIONS"}
        self._headers = {header.lower() for header in allowed_headers} | {"origin"}
        self._allow_credentials = allow_credentials
        self._max_age = max_age

    def _allowed_origin(self, environ: Mapping[str, Any]) -> str | None:
        origin = environ.get("HTTP_ORIGIN", "")
        if origin and ("*" in self._origins or origin.lower() in self._origins):
            return "*" if "*" in self._origins else origin
        return None

    def _credentials(self) -> list[tuple[str, str]]:
        return [("Access-Control-Allow-Credentials", "true")] if self._allow_credentials else []

    def _preflight_headers(self, environ: Mapping[str, Any]) -> list[tuple[str, str]]:
        headers = [("Vary", "Origin, Access-Control-Request-Method, Access-Control-Request-Headers")]
        allow_origin = self._allowed_origin(environ)
        method = environ.get("HTTP_ACCESS_CONTROL_REQUEST_METHOD", "").upper()
        raw_headers = environ.get("HTTP_ACCESS_CONTROL_REQUEST_HEADERS", "").strip()
        requested = [part.strip().lower() for part in raw_headers.split(",") if part.strip()]
        if (
            allow_origin is None
            or method not in self._methods
            or not ("*" in self._headers or set(requested) <= self._headers)
        ):
            return headers
        headers += [("Access-Control-Allow-Origin", allow_origin), ("Access-Control-Allow-Methods", method)]
        if requested:
            headers.append(("Access-Control-Allow-Headers", raw_headers))
        headers += self._credentials()
        if self._max_age > 0:
            headers.append(("Access-Control-Max-Age", str(self._max_age)))
        return headers

    def _actual_headers(self, environ: Mapping[str, Any]) -> list[tuple[str, str]]:
        allow_origin = self._allowed_origin(environ)
        if allow_origin is None or environ.get("REQUEST_METHOD", "").upper() not in self._methods:
            return [("Vary", "Origin")]
        return [("Vary", "Origin"), ("Access-Control-Allow-Origin", allow_origin), *self._credentials()]

    def __call__(self, environ: Mapping[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        if environ.get("REQUEST_METHOD") == "OPTIONS" and environ.get("HTTP_ACCESS_CONTROL_REQUEST_METHOD"):
            start_response("204 No Content", self._preflight_headers(environ))
            return [b""]
        cors_headers = self._actual_headers(environ)

        def start_with_cors(status: str, headers: list[tuple[str, str]], exc_info: Any = None) -> Any:
            return start_response(status, [*headers, *cors_headers], exc_info)

        return self.app(environ, start_with_cors)


def create_app() -> CorsMiddleware:
    """Wire the repository, service and routes behind the CORS middleware."""
    handler = EventHandler(InMemoryEventRepository(), ExpenseService())
    return CorsMiddleware(
        setup_routes(handler),
        allowed_origins=("*",),
        allowed_methods=("GET", "POST", "PUT", "DELETE", "OPTIONS"),
        allowed_headers=("Content-Type", "Authorization"),
        allow_credentials=True,
        max_age=86400,
    )


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _RequestHandler(WSGIRequestHandler):
    timeout = 15


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the API until interrupted; return a process exit status."""
    parser = argparse.ArgumentParser(prog="splitty", description="Serve the Splitty events API.")
    parser.add_argument("--port", default=os.environ.get("PORT") or "8080", help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stdout,
        level=logging.INFO,
        format="[SPLITTY] %(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )
    logger.info("Starting Splitty API...")
    try:
        server = make_server(
            "", int(args.port), create_app(), server_class=_ThreadingWSGIServer, handler_class=_RequestHandler
        )
    except (ValueError, OverflowError, OSError) as exc:
        logger.error("Server failed to start: %s", exc)
        return 1

    logger.info("Server listening on port %s", args.port)
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())