"""A small authenticated JSON API that stores named things."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Callable, Iterable, Mapping

from petapi.auth import SECURITY_SCHEME_NAME, AuthError, JWSValidator, authenticate
from petapi.store import ApiError

WRITE_SCOPE = "things:w"

StartResponse = Callable[..., Any]


@dataclass(frozen=True)
class Thing:
    """A thing as submitted by a client."""

    name: str

    @classmethod
    def from_dict(cls, data: Any) -> Thing:
        if not isinstance(data, Mapping):
            raise ValueError("Thing must be a JSON object")
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("field 'name' must be a string")
        return cls(name=name)


@dataclass(frozen=True)
class ThingWithID:
    """A stored thing together with its id."""

    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass
class ThingStore:
    """Thread-safe in-memory collection of things keyed by id."""

    things: dict[int, Thing] = field(default_factory=dict)
    last_id: int = 0
    _lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def list_things(self) -> list[ThingWithID]:
        """Return all things ordered by id."""
        with self._lock:
            return [
                ThingWithID(id=key, name=self.things[key].name)
                for key in sorted(self.things)
            ]

    def add_thing(self, thing: Thing) -> ThingWithID:
        """Store a thing under the next id and return it with that id."""
        with self._lock:
            thing_id = self.last_id
            self.things[thing_id] = thing
            self.last_id += 1
        return ThingWithID(id=thing_id, name=thing.name)


class _HTTPError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


def _request_headers(environ: Mapping[str, Any]) -> dict[str, str]:
    headers = {
        key[5:].replace("_", "-").title(): value
        for key, value in environ.items()
        if key.startswith("HTTP_")
    }
    if environ.get("CONTENT_TYPE"):
        headers["Content-Type"] = environ["CONTENT_TYPE"]
    return headers


def _read_body(environ: Mapping[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0:
        return b""
    return environ["wsgi.input"].read(length)


class ThingsApp:
    """WSGI callable exposing a ThingStore at /things behind bearer auth."""

    def __init__(self, store: ThingStore | None, validator: JWSValidator) -> None:
        self.store = store if store is not None else ThingStore()
        self.validator = validator

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        try:
            status, payload = self._dispatch(environ)
        except _HTTPError as exc:
            status = exc.status
            payload = ApiError(exc.status, exc.message).to_dict()
        body = (json.dumps(payload) + "\n").encode("utf-8")
        start_response(
            f"{status} {HTTPStatus(status).phrase}",
            [
                ("Content-Type", "application/json; charset=UTF-8"),
                ("Content-Length", str(len(body))),
            ],
        )
        return [body]

    def _dispatch(self, environ: dict[str, Any]) -> tuple[int, Any]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        path = environ.get("PATH_INFO", "") or "/"
        if path != "/things":
            raise _HTTPError(404, "no matching operation was found")
        if method == "GET":
            scopes: list[str] = []
        elif method == "POST":
            scopes = [WRITE_SCOPE]
        else:
            raise _HTTPError(405, "Method not allowed")

        try:
            environ["jwt_claims"] = authenticate(
                self.validator,
                SECURITY_SCHEME_NAME,
                _request_headers(environ),
                scopes,
            )
        except AuthError as exc:
            raise _HTTPError(403, str(exc)) from None

        if method == "GET":
            return 200, [thing.to_dict() for thing in self.store.list_things()]
        return self._add_thing(environ)

    def _add_thing(self, environ: dict[str, Any]) -> tuple[int, Any]:
        try:
            thing = Thing.from_dict(json.loads(_read_body(environ).decode("utf-8")))
        except (ValueError, UnicodeDecodeError):
            raise _HTTPError(400, "could not bind request body") from None
        return 201, self.store.add_thing(thing).to_dict()


def create_app(store: ThingStore | None, validator: JWSValidator) -> ThingsApp:
    """Build the authenticated things application."""
    return ThingsApp(store, validator)