"""WSGI application serving the pet store over a small JSON HTTP API."""

from __future__ import annotations

import argparse
import json
import re
from http import HTTPStatus
from typing import Any, Callable, Iterable
from urllib.parse import parse_qs
from wsgiref.simple_server import make_server

from petapi.store import ApiError, NewPet, PetNotFoundError, PetStore

_PET_ITEM_PATH = re.compile(r"^/pets/([^/]+)$")
_INTEGER = re.compile(r"^-?\d+$")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1
_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1

StartResponse = Callable[..., Any]


class _HTTPError(Exception):
    def __init__(
        self, status: int, message: str, headers: list[tuple[str, str]] | None = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.headers = headers or []


def _parse_int(text: str, name: str, low: int, high: int) -> int:
    if not _INTEGER.match(text):
        raise _HTTPError(400, f"Invalid format for parameter {name}: {text!r}")
    value = int(text)
    if not low <= value <= high:
        raise _HTTPError(400, f"Parameter {name} is out of range: {value}")
    return value


def _read_body(environ: dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0:
        return b""
    return environ["wsgi.input"].read(length)


class PetStoreApp:
    """WSGI callable exposing a PetStore at /pets and /pets/{id}."""

    def __init__(self, store: PetStore | None = None) -> None:
        self.store = store if store is not None else PetStore()

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        extra_headers: list[tuple[str, str]] = []
        try:
            status, payload = self._dispatch(environ)
        except PetNotFoundError as exc:
            status = exc.status
            payload = ApiError(exc.status, exc.message).to_dict()
        except _HTTPError as exc:
            status = exc.status
            payload = ApiError(exc.status, exc.message).to_dict()
            extra_headers = exc.headers

        status_line = f"{status} {HTTPStatus(status).phrase}"
        if status == HTTPStatus.NO_CONTENT:
            start_response(status_line, [("Content-Length", "0"), *extra_headers])
            return [b""]
        body = (json.dumps(payload) + "\n").encode("utf-8")
        headers = [
            ("Content-Type", "application/json; charset=UTF-8"),
            ("Content-Length", str(len(body))),
            *extra_headers,
        ]
        start_response(status_line, headers)
        return [body]

    def _dispatch(self, environ: dict[str, Any]) -> tuple[int, Any]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        path = environ.get("PATH_INFO", "") or "/"

        if path == "/pets":
            if method == "GET":
                return self._find_pets(environ)
            if method == "POST":
                return self._add_pet(environ)
            raise _HTTPError(405, "Method not allowed", [("Allow", "GET, POST")])

        match = _PET_ITEM_PATH.match(path)
        if match:
            pet_id = _parse_int(match.group(1), "id", _INT64_MIN, _INT64_MAX)
            if method == "GET":
                return 200, self.store.find_pet_by_id(pet_id).to_dict()
            if method == "DELETE":
                self.store.delete_pet(pet_id)
                return 204, None
            raise _HTTPError(405, "Method not allowed", [("Allow", "GET, DELETE")])

        raise _HTTPError(404, "no matching operation was found")

    def _find_pets(self, environ: dict[str, Any]) -> tuple[int, Any]:
        query = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)
        tags = query.get("tags")
        limit = None
        if "limit" in query:
            limit = _parse_int(query["limit"][0], "limit", _INT32_MIN, _INT32_MAX)
        pets = self.store.find_pets(tags=tags, limit=limit)
        return 200, [pet.to_dict() for pet in pets]

    def _add_pet(self, environ: dict[str, Any]) -> tuple[int, Any]:
        content_type = environ.get("CONTENT_TYPE", "")
        if content_type and not content_type.split(";")[0].strip().lower().endswith(
            "json"
        ):
            raise _HTTPError(400, "Invalid format for NewPet")
        try:
            data = json.loads(_read_body(environ).decode("utf-8"))
            if not isinstance(data, dict) or "name" not in data:
                raise ValueError("missing name")
            new_pet = NewPet.from_dict(data)
        except (ValueError, UnicodeDecodeError):
            raise _HTTPError(400, "Invalid format for NewPet") from None
        pet = self.store.add_pet(new_pet)
        return 201, pet.to_dict()


def create_app(store: PetStore | None = None) -> PetStoreApp:
    """Build the WSGI application around a store, creating one if needed."""
    return PetStoreApp(store)


def main(argv: list[str] | None = None) -> None:
    """Serve the pet store over HTTP until interrupted."""
    parser = argparse.ArgumentParser(description="Pet store HTTP server")
    parser.add_argument(
        "--port", type=int, default=8080, help="Port for test HTTP server"
    )
    args = parser.parse_args(argv)
    app = create_app()
    with make_server("0.0.0.0", args.port, app) as server:
        server.serve_forever()


if __name__ == "__main__":
    main()