# petapi

This package holds two small JSON APIs. Both run as plain WSGI applications
and use only the standard library.

- **Pet store** (`petapi.store`, `petapi.app`): an in-memory store of pets.
  You can list pets, add one, look one up by id and delete one.
- **Things** (`petapi.auth`, `petapi.things`): an in-memory list of named
  "things" that sits behind bearer-token checks. Any valid token may read
  the list. Adding to it needs a token whose claims include `things:w`.

## Installation

```
pip install .
```

## Running the pet store

```
petapi --port 8080
```

This serves the pet store on `0.0.0.0` through `wsgiref`. The port
defaults to 8080. The server runs until it is interrupted.

| Method | Path         | Result                                                             |
|--------|--------------|--------------------------------------------------------------------|
| GET    | `/pets`      | 200 and a JSON list of pets; optional `tags` (repeatable) and `limit` |
| POST   | `/pets`      | 201 and the new pet; the body is `{"name": ..., "tag": ...}`       |
| GET    | `/pets/{id}` | 200 and the pet, or 404                                            |
| DELETE | `/pets/{id}` | 204 with an empty body, or 404                                     |

Every error has a JSON body of the form `{"code": <status>, "message": ...}`.

- A POST body that is not a JSON object with a `name` gets 400.
- A POST body sent with a non-JSON content type gets 400.
- An id or `limit` that is not an integer gets 400.
- An id or `limit` that is out of range gets 400.
- A method the path does not support gets 405.
- Any other path gets 404.

New pets get ids that start at 1000 and go up by one each time. When you
filter by `tags`, a pet shows up once for each listed tag that it matches.
The `limit` is checked after each pet is looked at.

## Using the store directly

```python
from petapi.store import NewPet, PetNotFoundError, PetStore

store = PetStore()
pet = store.add_pet(NewPet(name="Spot", tag="TagOfSpot"))
assert store.find_pet_by_id(pet.id) == pet
store.find_pets(tags=["TagOfSpot"], limit=10)
store.delete_pet(pet.id)

try:
    store.find_pet_by_id(pet.id)
except PetNotFoundError as exc:
    print(exc.message)  # "Could not find pet with ID 1000"
```

The data types are frozen dataclasses:

- `NewPet` and `Pet` can be built from a dict with `from_dict` and turned
  back into one with `to_dict`.
- `ApiError` is the error body. It has only `to_dict`.

`PetStore` guards its data with a lock, so it can be shared between
threads.

## Embedding the applications

`petapi.app.create_app(store)` returns a `PetStoreApp`, which is a WSGI
callable. If you pass no store, it makes a new empty one.

```python
from wsgiref.simple_server import make_server
from petapi.app import create_app
from petapi.store import PetStore

make_server("localhost", 8080, create_app(PetStore())).serve_forever()
```

`petapi.things.create_app(store, validator)` builds a `ThingsApp`, which
serves `/things`:

- `GET /things` returns the things in id order as `{"id": ..., "name": ...}`.
- `POST /things` with `{"name": ...}` stores a thing and returns 201. Ids
  start at 0.

The validator must have a `validate_jws(jws)` method. The `JWSValidator`
protocol describes it. The method must check the token and return its
claims as a mapping. Permissions go in the `"perms"` claim as a list of
strings.

```python
from petapi.things import ThingStore, create_app

class MyValidator:
    def validate_jws(self, jws):
        ...  # verify the token and return its claims

app = create_app(ThingStore(), MyValidator())
```

Clients send `Authorization: Bearer token`. The response is 403 in each
of these cases:

- the header is missing;
- the header does not start with `Bearer `;
- the validator raises;
- `"perms"` is not a list of strings;
- a required scope is missing.

A POST body that is not a JSON object with a string `name` gets 400. Once
a request is authenticated, the validated claims are put in the WSGI
environ under `"jwt_claims"`.

`petapi.auth` also exports the checks on their own, for use elsewhere:

- `get_jws_from_request`
- `get_claims_from_token`
- `check_token_claims`
- `authenticate`

They raise `AuthError` or one of its subclasses: `NoAuthHeaderError`,
`InvalidAuthHeaderError` and `ClaimsInvalidError`.

## What this package does not do

- It does not issue, sign or verify tokens. Checking a token is left to
  the validator you supply.
- It has no command that serves the things API. You host `ThingsApp` in a
  WSGI server yourself.
- Both stores keep their data in memory only. Nothing is saved once the
  process ends.

## Tests

```
pip install .[test]
pytest
```