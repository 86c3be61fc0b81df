import uuid
from datetime import date

from petvet.db.models.pet import Pet
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord

PETS_URL = "/api/v1/pets"


def _create_pet(client, **overrides):
    payload = {"name": "Biscuit", "species": "Dog", "breed": "Beagle", "birth_date": "2020-05-01", "weight": 11.5}
    payload.update(overrides)
    response = client.post(PETS_URL, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["pet"]


def test_create_pet_201_owned_by_caller(owner_client, owner):
    pet = _create_pet(owner_client)
    assert pet["owner_id"] == str(owner.id)
    assert pet["birth_date"] == "2020-05-01"
    assert pet["weight"] == 11.5


def test_create_pet_requires_name_and_species_400(owner_client):
    response = owner_client.post(PETS_URL, json={"name": "  ", "species": "Cat"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Name and species are required"


def test_create_pet_rejects_negative_weight_400(owner_client):
    response = owner_client.post(PETS_URL, json={"name": "Tom", "species": "Cat", "weight": -2})
    assert response.status_code == 400


def test_create_pet_for_another_owner_403(owner_client, other_owner):
    response = owner_client.post(PETS_URL, json={"name": "Tom", "species": "Cat", "owner_id": str(other_owner.id)})
    assert response.status_code == 403


def test_admin_creates_pet_for_owner(admin_client, owner):
    pet = _create_pet(admin_client, owner_id=str(owner.id))
    assert pet["owner_id"] == str(owner.id)


def test_anonymous_pet_access_401(client):
    assert client.get(PETS_URL).status_code == 401
    assert client.get(f"{PETS_URL}/{uuid.uuid4()}").status_code == 401


def test_vet_cannot_list_pets_403(vet_client):
    assert vet_client.get(PETS_URL).status_code == 403


def test_list_pets_only_returns_own(owner_client, login_as, other_owner, admin_client):
    _create_pet(owner_client, name="Mine")
    other_client = login_as(other_owner.username)
    _create_pet(other_client, name="Theirs")

    names = [p["name"] for p in owner_client.get(PETS_URL).json()["pets"]]
    assert names == ["Mine"]

    admin_names = {p["name"] for p in admin_client.get(PETS_URL).json()["pets"]}
    assert admin_names == {"Mine", "Theirs"}


def test_get_pet_includes_records(owner_client, vet, db):
    pet = _create_pet(owner_client)
    db.add(VetRecord(pet_id=uuid.UUID(pet["id"]), vet_id=vet.id, visit_date=date(2024, 1, 2), reason="Checkup"))
    db.commit()

    response = owner_client.get(f"{PETS_URL}/{pet['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["pet"]["name"] == "Biscuit"
    assert [r["reason"] for r in body["vet_records"]] == ["Checkup"]

    records = owner_client.get(f"{PETS_URL}/{pet['id']}/records").json()["records"]
    assert len(records) == 1


def test_other_owners_pet_403(owner_client, login_as, other_owner):
    pet = _create_pet(owner_client)
    other_client = login_as(other_owner.username)
    assert other_client.get(f"{PETS_URL}/{pet['id']}").status_code == 403
    assert other_client.put(f"{PETS_URL}/{pet['id']}", json={"name": "X", "species": "Dog"}).status_code == 403
    assert other_client.delete(f"{PETS_URL}/{pet['id']}").status_code == 403


def test_missing_pet_404(owner_client):
    response = owner_client.get(f"{PETS_URL}/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"error": "not_found", "detail": "Pet not found"}


def test_malformed_pet_id_400(owner_client):
    assert owner_client.get(f"{PETS_URL}/not-a-uuid").status_code == 400


def test_update_pet(owner_client):
    pet = _create_pet(owner_client)
    response = owner_client.put(
        f"{PETS_URL}/{pet['id']}",
        json={"name": "Biscuit II", "species": "Dog", "color": "Brown"},
    )
    assert response.status_code == 200
    updated = response.json()["pet"]
    assert updated["name"] == "Biscuit II"
    assert updated["color"] == "Brown"
    assert updated["breed"] is None


def test_delete_pet_removes_records_and_assignments(owner_client, vet, db):
    pet = _create_pet(owner_client)
    pet_id = uuid.UUID(pet["id"])
    db.add(VetPatient(vet_id=vet.id, pet_id=pet_id, status="active"))
    db.add(VetRecord(pet_id=pet_id, vet_id=vet.id, visit_date=date(2024, 1, 2), reason="Checkup"))
    db.commit()

    response = owner_client.delete(f"{PETS_URL}/{pet['id']}")
    assert response.status_code == 200

    db.expire_all()
    assert db.get(Pet, pet_id) is None
    assert db.query(VetRecord).filter_by(pet_id=pet_id).count() == 0
    assert db.query(VetPatient).filter_by(pet_id=pet_id).count() == 0
