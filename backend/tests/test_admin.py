import uuid
from datetime import date

from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord

USERS_URL = "/api/v1/admin/users"


def test_admin_lists_users(admin_client, owner, vet):
    response = admin_client.get(USERS_URL)
    assert response.status_code == 200
    usernames = {u["username"] for u in response.json()["users"]}
    assert {owner.username, vet.username, "ada_admin"} <= usernames


def test_non_admin_forbidden_403(owner_client, vet_client, client):
    assert owner_client.get(USERS_URL).status_code == 403
    assert vet_client.delete(f"{USERS_URL}/{uuid.uuid4()}").status_code == 403
    assert client.get(USERS_URL).status_code == 401


def test_admin_creates_user_with_any_role(admin_client, login_as):
    response = admin_client.post(
        USERS_URL,
        json={"username": "second_admin", "password": "pw123456", "role": "admin", "type": "vet"},
    )
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "admin"

    new_admin = login_as("second_admin", "pw123456")
    assert new_admin.get(USERS_URL).status_code == 200


def test_admin_create_duplicate_409(admin_client, owner):
    response = admin_client.post(USERS_URL, json={"username": owner.username, "password": "x"})
    assert response.status_code == 409


def test_admin_create_invalid_role_400(admin_client):
    response = admin_client.post(USERS_URL, json={"username": "x", "password": "y", "role": "root"})
    assert response.status_code == 400


def test_admin_updates_user(admin_client, owner, login_as):
    response = admin_client.put(
        f"{USERS_URL}/{owner.id}",
        json={"username": "olive_renamed", "type": "vet", "password": "changed99"},
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["username"] == "olive_renamed"
    assert user["type"] == "vet"
    assert user["role"] == "user"

    renamed = login_as("olive_renamed", "changed99")
    assert renamed.get("/api/v1/vet/stats").status_code == 200


def test_admin_update_to_taken_username_409(admin_client, owner, vet):
    response = admin_client.put(f"{USERS_URL}/{owner.id}", json={"username": vet.username})
    assert response.status_code == 409


def test_admin_update_missing_user_404(admin_client):
    assert admin_client.put(f"{USERS_URL}/{uuid.uuid4()}", json={"username": "nobody"}).status_code == 404


def test_role_change_applies_to_existing_session(owner_client, admin_client, owner):
    assert owner_client.get(USERS_URL).status_code == 403
    admin_client.put(f"{USERS_URL}/{owner.id}", json={"role": "admin"})
    assert owner_client.get(USERS_URL).status_code == 200


def test_delete_user_cascades(admin_client, db, owner, vet, other_vet):
    pet = Pet(owner_id=owner.id, name="Biscuit", species="Dog")
    office = PartneredVetOffice(name="Oak Vet", address="9 Oak Ave")
    db.add_all([pet, office])
    db.flush()
    db.add_all([
        VetPatient(vet_id=vet.id, pet_id=pet.id, status="active"),
        VetRecord(pet_id=pet.id, vet_id=vet.id, visit_date=date(2024, 1, 1), reason="Checkup"),
        PreferredVetOffice(user_id=owner.id, vet_office_id=office.id),
        VetOfficeMember(vet_user_id=vet.id, vet_office_id=office.id),
        VetOfficeMember(vet_user_id=other_vet.id, vet_office_id=office.id),
    ])
    db.commit()

    assert admin_client.delete(f"{USERS_URL}/{owner.id}").status_code == 200
    db.expire_all()
    assert db.get(User, owner.id) is None
    assert db.query(Pet).count() == 0
    assert db.query(VetPatient).count() == 0
    assert db.query(VetRecord).count() == 0
    assert db.query(PreferredVetOffice).count() == 0

    assert admin_client.delete(f"{USERS_URL}/{vet.id}").status_code == 200
    db.expire_all()
    assert db.query(VetOfficeMember).filter_by(vet_user_id=vet.id).count() == 0
    assert db.query(VetOfficeMember).filter_by(vet_user_id=other_vet.id).count() == 1
    assert db.get(PartneredVetOffice, office.id) is not None


def test_delete_missing_user_404(admin_client):
    assert admin_client.delete(f"{USERS_URL}/{uuid.uuid4()}").status_code == 404
