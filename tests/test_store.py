import pytest

from petapi.store import ApiError, NewPet, Pet, PetNotFoundError, PetStore


@pytest.fixture
def store():
    return PetStore()


def test_add_pet(store):
    new_pet = NewPet(name="Spot", tag="TagOfSpot")
    result = store.add_pet(new_pet)
    assert result.name == "Spot"
    assert result.tag == "TagOfSpot"
    assert result.id == 1000
    assert store.pets[1000] == result


def test_ids_increment(store):
    first = store.add_pet(NewPet(name="A"))
    second = store.add_pet(NewPet(name="B"))
    assert (first.id, second.id) == (1000, 1001)
    assert store.next_id == 1002


def test_find_pet_by_id(store):
    pet = Pet(id=100)
    store.pets[pet.id] = pet
    assert store.find_pet_by_id(100) == pet


def test_pet_not_found(store):
    with pytest.raises(PetNotFoundError) as info:
        store.find_pet_by_id(27179095781)
    assert info.value.pet_id == 27179095781
    assert info.value.status == 404
    assert str(info.value) == "Could not find pet with ID 27179095781"


def test_list_all_pets(store):
    store.pets = {1: Pet(), 2: Pet()}
    assert len(store.find_pets()) == 2


def test_filter_pets_by_tag(store):
    store.pets = {1: Pet(tag="TagOfFido"), 2: Pet()}
    result = store.find_pets(tags=["TagOfFido"])
    assert len(result) == 1
    assert result[0].tag == "TagOfFido"


def test_filter_pets_by_missing_tag(store):
    store.pets = {1: Pet(), 2: Pet()}
    assert store.find_pets(tags=["NotExists"]) == []


def test_duplicate_tags_repeat_matches(store):
    store.pets = {1: Pet(id=1, tag="x")}
    assert store.find_pets(tags=["x", "x"]) == [Pet(id=1, tag="x"), Pet(id=1, tag="x")]


def test_limit_caps_results(store):
    store.pets = {i: Pet(id=i) for i in range(1, 6)}
    assert len(store.find_pets(limit=3)) == 3


def test_limit_zero_still_examines_first_pet(store):
    store.pets = {1: Pet(id=1), 2: Pet(id=2)}
    assert store.find_pets(limit=0) == [Pet(id=1)]


def test_delete_pets(store):
    store.pets = {1: Pet(), 2: Pet()}
    with pytest.raises(PetNotFoundError):
        store.delete_pet(7)
    store.delete_pet(1)
    store.delete_pet(2)
    assert store.find_pets() == []


def test_pet_round_trip():
    pet = Pet(id=5, name="testpet", tag="cat")
    assert Pet.from_dict(pet.to_dict()) == pet
    assert pet.to_dict() == {"id": 5, "name": "testpet", "tag": "cat"}


def test_pet_to_dict_omits_missing_tag():
    assert Pet(id=1, name="n").to_dict() == {"id": 1, "name": "n"}


def test_new_pet_round_trip():
    new_pet = NewPet(name="Spot", tag="TagOfSpot")
    assert NewPet.from_dict(new_pet.to_dict()) == new_pet


def test_new_pet_from_invalid_data():
    with pytest.raises(ValueError):
        NewPet.from_dict(["not", "an", "object"])
    with pytest.raises(ValueError):
        NewPet.from_dict({"name": 3})


def test_pet_from_dict_rejects_bad_id():
    with pytest.raises(ValueError):
        Pet.from_dict({"id": "x"})


def test_api_error_to_dict():
    assert ApiError(code=404, message="gone").to_dict() == {"code": 404, "message": "gone"}