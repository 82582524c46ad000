import io
import json
from wsgiref.util import setup_testing_defaults

import pytest

from petapi.things import Thing, ThingStore, ThingWithID, create_app


class _DictValidator:
    def __init__(self, tokens):
        self.tokens = tokens

    def validate_jws(self, jws):
        if jws not in self.tokens:
            raise ValueError("bad signature")
        return self.tokens[jws]


READER = "token"
WRITER = "secret"


def _validator():
    return _DictValidator({READER: {}, WRITER: {"perms": ["things:w"]}})


def _call(app, method, path, jws=None, body=None):
    environ = {}
    setup_testing_defaults(environ)
    environ["REQUEST_METHOD"] = method
    environ["PATH_INFO"] = path
    environ["HTTP_ACCEPT"] = "application/json"
    if jws is not None:
        environ["HTTP_AUTHORIZATION"] = "Bearer " + jws
    raw = b""
    if body is not None:
        raw = body if isinstance(body, bytes) else json.dumps(body).encode()
        environ["CONTENT_TYPE"] = "application/json"
    environ["CONTENT_LENGTH"] = str(len(raw))
    environ["wsgi.input"] = io.BytesIO(raw)
    captured = {}

    def start_response(status, headers):
        captured["status"] = int(status.split()[0])

    data = b"".join(app(environ, start_response))
    return captured["status"], json.loads(data)


def test_api_flow():
    app = create_app(ThingStore(), _validator())

    status, _ = _call(app, "GET", "/things")
    assert status == 403

    status, body = _call(app, "POST", "/things", WRITER, {"name": "Thing 1"})
    assert status == 201
    assert body == {"id": 0, "name": "Thing 1"}

    status, _ = _call(app, "POST", "/things", READER, {"name": "Thing 2"})
    assert status == 403

    for jws in (READER, WRITER):
        status, body = _call(app, "GET", "/things", jws)
        assert status == 200
        assert body == [{"id": 0, "name": "Thing 1"}]


def test_invalid_token_forbidden():
    app = create_app(ThingStore(), _validator())
    status, body = _call(app, "GET", "/things", "placeholder")
    assert status == 403
    assert body["code"] == 403


def test_bad_body_is_bad_request():
    app = create_app(ThingStore(), _validator())
    status, body = _call(app, "POST", "/things", WRITER, b"not json")
    assert status == 400
    assert body == {"code": 400, "message": "could not bind request body"}


def test_unknown_path_not_found():
    app = create_app(ThingStore(), _validator())
    status, _ = _call(app, "GET", "/other", READER)
    assert status == 404


def test_store_assigns_sequential_ids_and_lists_sorted():
    store = ThingStore()
    first = store.add_thing(Thing("a"))
    second = store.add_thing(Thing("b"))
    assert (first.id, second.id) == (0, 1)
    assert store.list_things() == [ThingWithID(0, "a"), ThingWithID(1, "b")]


def test_empty_store_lists_nothing():
    assert ThingStore().list_things() == []


def test_thing_from_dict_requires_name():
    with pytest.raises(ValueError):
        Thing.from_dict({"name": 3})


def test_thing_round_trip():
    stored = ThingStore().add_thing(Thing.from_dict({"name": "Thing 1"}))
    assert stored.to_dict() == {"id": 0, "name": "Thing 1"}