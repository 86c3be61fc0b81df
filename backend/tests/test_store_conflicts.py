import threading
from datetime import date

import pytest
from sqlalchemy.orm import sessionmaker

from petvet.core.errors import ConflictError
from petvet.db.base import Base
from petvet.db.models.office_link import PreferredVetOffice
from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_patient import VetPatient
from petvet.db.session import build_engine
from petvet.services import patients as patient_service
from petvet.services import users as user_service
from petvet.services.common import commit_or_conflict


def test_duplicate_username_insert_maps_to_conflict(db, owner):
    db.add(User(username=owner.username, password_hash="x", role="user", type="owner"))
    with pytest.raises(ConflictError) as exc:
        commit_or_conflict(db, "Username already exists")
    assert exc.value.message == "Username already exists"

    # The session is usable again after the rollback.
    assert db.query(User).filter_by(username=owner.username).count() == 1


def test_duplicate_assignment_insert_maps_to_conflict(db, owner, vet):
    pet = Pet(owner_id=owner.id, name="Rex", species="Dog")
    db.add(pet)
    db.commit()

    db.add(VetPatient(vet_id=vet.id, pet_id=pet.id, assigned_date=date.today(), status="active"))
    db.commit()
    db.add(VetPatient(vet_id=vet.id, pet_id=pet.id, assigned_date=date.today(), status="active"))
    with pytest.raises(ConflictError):
        commit_or_conflict(db, patient_service.DUPLICATE_ASSIGNMENT)
    assert db.query(VetPatient).count() == 1


def test_duplicate_link_insert_maps_to_conflict(db, owner):
    office = PartneredVetOffice(name="Oak Vet", address="9 Oak Ave")
    db.add(office)
    db.commit()

    db.add(PreferredVetOffice(user_id=owner.id, vet_office_id=office.id))
    db.commit()
    db.add(PreferredVetOffice(user_id=owner.id, vet_office_id=office.id))
    with pytest.raises(ConflictError):
        commit_or_conflict(db, "Already added")
    assert db.query(PreferredVetOffice).count() == 1


def test_assignment_race_past_precheck_is_conflict(db, owner, vet, monkeypatch):
    pet = Pet(owner_id=owner.id, name="Rex", species="Dog")
    db.add(pet)
    db.commit()
    patient_service.assign_patient(db, vet.id, pet.id)

    # A second request that read "no assignment" before the first committed.
    monkeypatch.setattr(patient_service, "find_assignment", lambda *args: None)
    with pytest.raises(ConflictError) as exc:
        patient_service.assign_patient(db, vet.id, pet.id)
    assert exc.value.message == patient_service.DUPLICATE_ASSIGNMENT
    assert db.query(VetPatient).count() == 1


def test_concurrent_registrations_yield_one_user(tmp_path, monkeypatch):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}", connect_args={"check_same_thread": False, "timeout": 30})
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    # Every thread passes the pre-check, so the unique index decides.
    monkeypatch.setattr(user_service, "_username_taken", lambda *args, **kwargs: False)

    workers = 8
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []
    lock = threading.Lock()

    def register():
        session = factory()
        try:
            barrier.wait()
            user_service.register_user(session, username="dup", password="pw123456", type_="owner")
            result = "ok"
        except ConflictError:
            result = "conflict"
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=register) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict"] * (workers - 1) + ["ok"]
    with factory() as session:
        assert session.query(User).filter_by(username="dup").count() == 1
    engine.dispose()
