"""HTTP handlers and routing for the events API."""

from __future__ import annotations

import functools
import json
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Union

from splitty.expense_service import ExpenseService
from splitty.models import Event, event_from_dict
from splitty.repository import EventNotFoundError, EventRepository

Body = Union[bytes, bytearray, str, None]

_ID_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


@dataclass
class Response:
    """An HTTP response produced by a handler."""

    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


class _Failure(Exception):
    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.response = Response(
            int(status),
            (message + "\n").encode("utf-8"),
            {"Content-Type": "text/plain; charset=utf-8", "X-Content-Type-Options": "nosniff"},
        )


def _normalise(value: Any) -> Any:
    """Write whole floats as integers."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {key: _normalise(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalise(item) for item in value]
    return value


def _json_response(data: Any, status: int = HTTPStatus.OK) -> Response:
    text = json.dumps(_normalise(data), ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return Response(int(status), (text + "\n").encode("utf-8"), {"Content-Type": "application/json"})


def _parse_id(raw: Any) -> int:
    text = str(raw)
    if not _ID_PATTERN.fullmatch(text):
        raise _Failure(f'Invalid event ID: parsing "{text}": invalid syntax', HTTPStatus.BAD_REQUEST)
    value = int(text)
    if not -(2**63) <= value < 2**63:
        raise _Failure(f'Invalid event ID: parsing "{text}": value out of range', HTTPStatus.BAD_REQUEST)
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid number literal {name}")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def _decode_event(body: Body) -> Event:
    """Decode the first JSON value of a request body into a named Event."""
    text = bytes(body).decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body or ""
    try:
        stripped = text.lstrip(" \t\r\n")
        if not stripped:
            raise ValueError("EOF")
        data, _ = _DECODER.raw_decode(stripped)
        event = event_from_dict({} if data is None else data)
    except ValueError as exc:
        raise _Failure(f"Invalid request body: {exc}", HTTPStatus.BAD_REQUEST) from exc
    if not event.name:
        raise _Failure("Event name is required", HTTPStatus.BAD_REQUEST)
    return event


def _responds(method: Callable[..., Response]) -> Callable[..., Response]:
    @functools.wraps(method)
    def wrapper(*args: Any) -> Response:
        try:
            return method(*args)
        except _Failure as failure:
            return failure.response

    return wrapper


class EventHandler:
    """Turns API requests into repository and service calls."""

    def __init__(self, repository: EventRepository, expense_service: ExpenseService) -> None:
        self._repository = repository
        self._expense_service = expense_service

    def _find(self, raw_id: Any) -> Event:
        try:
            return self._repository.find_by_id(_parse_id(raw_id))
        except EventNotFoundError as exc:
            raise _Failure(f"Event not found: {exc}", HTTPStatus.NOT_FOUND) from exc

    @_responds
    def create_event(self, body: Body) -> Response:
        event = _decode_event(body)
        self._repository.save(event)
        return _json_response(event.to_dict(), HTTPStatus.CREATED)

    def get_all_events(self) -> Response:
        return _json_response([event.to_dict() for event in self._repository.find_all()])

    @_responds
    def get_event(self, event_id: Any) -> Response:
        return _json_response(self._find(event_id).to_dict())

    @_responds
    def update_event(self, event_id: Any, body: Body) -> Response:
        identifier = self._find(event_id).id
        event = _decode_event(body)
        event.id = identifier
        self._repository.save(event)
        return _json_response(event.to_dict())

    @_responds
    def delete_event(self, event_id: Any) -> Response:
        try:
            self._repository.delete(_parse_id(event_id))
        except EventNotFoundError as exc:
            raise _Failure(f"Failed to delete event: {exc}", HTTPStatus.NOT_FOUND) from exc
        return Response(int(HTTPStatus.NO_CONTENT))

    @_responds
    def get_event_summary(self, event_id: Any) -> Response:
        summary = self._expense_service.calculate_summary(self._find(event_id))
        return _json_response(summary.to_dict())


def _read_body(environ: Mapping[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    return stream.read(length) if length > 0 and stream is not None else b""


class Application:
    """WSGI application that routes API paths to an EventHandler."""

    def __init__(self, handler: EventHandler) -> None:
        self.handler = handler
        events = r"/api/events"
        single = r"/api/events/(?P<id>[^/]+)"
        self._routes = [
            ("POST", events, lambda _, body: handler.create_event(body)),
            ("GET", events, lambda _, __: handler.get_all_events()),
            ("GET", single, lambda p, _: handler.get_event(p["id"])),
            ("PUT", single, lambda p, body: handler.update_event(p["id"], body)),
            ("DELETE", single, lambda p, _: handler.delete_event(p["id"])),
            ("GET", single + "/summary", lambda p, _: handler.get_event_summary(p["id"])),
        ]

    def dispatch(self, method: str, path: str, body: Body = b"") -> Response:
        """Route one request; unknown paths give 404, wrong methods 405."""
        path_matched = False
        for route_method, pattern, action in self._routes:
            match = re.fullmatch(pattern, path)
            if match is None:
                continue
            if route_method == method:
                return action(match.groupdict(), body)
            path_matched = True
        if path_matched:
            return Response(int(HTTPStatus.METHOD_NOT_ALLOWED))
        return _Failure("404 page not found", HTTPStatus.NOT_FOUND).response

    def __call__(self, environ: Mapping[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        raw_path = environ.get("PATH_INFO") or "/"
        path = raw_path.encode("latin-1", errors="replace").decode("utf-8", errors="replace")
        response = self.dispatch(environ.get("REQUEST_METHOD", "GET"), path, _read_body(environ))
        status = HTTPStatus(response.status)
        headers = [*response.headers.items(), ("Content-Length", str(len(response.body)))]
        start_response(f"{status.value} {status.phrase}", headers)
        return [response.body]


def setup_routes(handler: EventHandler) -> Application:
    """Build the application serving the events API."""
    return Application(handler)