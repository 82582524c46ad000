"""In-memory pet store and the data types it exchanges."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _require_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"Invalid format for {kind}")
    return data


@dataclass(frozen=True)
class NewPet:
    """A pet as submitted by a client, before it has an id."""

    name: str
    tag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.tag is not None:
            result["tag"] = self.tag
        return result

    @classmethod
    def from_dict(cls, data: Any) -> NewPet:
        data = _require_mapping(data, "NewPet")
        name = _optional_str(data, "name")
        return cls(name=name or "", tag=_optional_str(data, "tag"))


@dataclass(frozen=True)
class Pet:
    """A stored pet with its unique id."""

    id: int = 0
    name: str = ""
    tag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.tag is not None:
            result["tag"] = self.tag
        return result

    @classmethod
    def from_dict(cls, data: Any) -> Pet:
        data = _require_mapping(data, "Pet")
        pet_id = data.get("id", 0)
        if isinstance(pet_id, bool) or not isinstance(pet_id, int):
            raise ValueError("field 'id' must be an integer")
        name = _optional_str(data, "name")
        return cls(id=pet_id, name=name or "", tag=_optional_str(data, "tag"))


@dataclass(frozen=True)
class ApiError:
    """Error body returned to clients."""

    code: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class PetNotFoundError(LookupError):
    """Raised when no pet has the requested id."""

    status = 404

    def __init__(self, pet_id: int) -> None:
        self.pet_id = pet_id
        self.message = f"Could not find pet with ID {pet_id}"
        super().__init__(self.message)


@dataclass
class PetStore:
    """Thread-safe in-memory collection of pets keyed by id."""

    pets: dict[int, Pet] = field(default_factory=dict)
    next_id: int = 1000
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def find_pets(
        self, tags: Iterable[str] | None = None, limit: int | None = None
    ) -> list[Pet]:
        """Return pets, optionally filtered by tag and capped at a limit.

        A pet is included once for every listed tag it matches. The limit is
        checked after each pet is examined.
        """
        tag_list = list(tags) if tags is not None else None
        result: list[Pet] = []
        with self._lock:
            for pet in self.pets.values():
                if tag_list is not None:
                    result.extend(
                        pet for t in tag_list if pet.tag is not None and pet.tag == t
                    )
                else:
                    result.append(pet)
                if limit is not None and len(result) >= limit:
                    break
        return result

    def add_pet(self, new_pet: NewPet) -> Pet:
        """Store a new pet under the next free id and return it."""
        with self._lock:
            pet = Pet(id=self.next_id, name=new_pet.name, tag=new_pet.tag)
            self.next_id += 1
            self.pets[pet.id] = pet
        return pet

    def find_pet_by_id(self, pet_id: int) -> Pet:
        with self._lock:
            try:
                return self.pets[pet_id]
            except KeyError:
                raise PetNotFoundError(pet_id) from None

    def delete_pet(self, pet_id: int) -> None:
        with self._lock:
            if pet_id not in self.pets:
                raise PetNotFoundError(pet_id)
            del self.pets[pet_id]