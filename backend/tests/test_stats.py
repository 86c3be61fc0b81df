from datetime import date, timedelta

import pytest

from petvet.db.models.pet import Pet
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord
from petvet.services.stats import age_bucket, compute_vet_stats

TODAY = date(2026, 6, 15)


@pytest.mark.parametrize(
    "age_days, expected",
    [
        (0, "Under 1 year"),
        (364, "Under 1 year"),
        (365, "1-5 years"),
        (1824, "1-5 years"),
        (1825, "5-10 years"),
        (3649, "5-10 years"),
        (3650, "Over 10 years"),
    ],
)
def test_age_bucket_boundaries(age_days, expected):
    assert age_bucket(TODAY - timedelta(days=age_days), TODAY) == expected


def test_age_bucket_unknown_without_birth_date():
    assert age_bucket(None, TODAY) == "Unknown"


def _pet(db, owner, name, species, birth_date=None):
    pet = Pet(owner_id=owner.id, name=name, species=species, birth_date=birth_date)
    db.add(pet)
    db.flush()
    return pet


def test_compute_vet_stats(db, owner, vet, other_vet):
    cat = _pet(db, owner, "Mittens", "Cat", TODAY - timedelta(days=200))
    dog = _pet(db, owner, "Rex", "Dog", TODAY - timedelta(days=800))
    old_dog = _pet(db, owner, "Duke", "Dog", None)
    gone = _pet(db, owner, "Ghost", "Cat", TODAY - timedelta(days=4000))

    db.add_all([
        VetPatient(vet_id=vet.id, pet_id=cat.id, status="active"),
        VetPatient(vet_id=vet.id, pet_id=dog.id, status="active"),
        VetPatient(vet_id=vet.id, pet_id=old_dog.id, status="active"),
        VetPatient(vet_id=vet.id, pet_id=gone.id, status="discharged"),
        # Another vet's patients never leak into the totals.
        VetPatient(vet_id=other_vet.id, pet_id=gone.id, status="active"),
    ])
    db.add_all([
        VetRecord(pet_id=cat.id, vet_id=vet.id, visit_date=TODAY - timedelta(days=5), reason="Checkup",
                  next_visit_date=TODAY + timedelta(days=7)),
        VetRecord(pet_id=dog.id, vet_id=vet.id, visit_date=TODAY - timedelta(days=31), reason="Dental",
                  next_visit_date=TODAY + timedelta(days=8)),
        VetRecord(pet_id=gone.id, vet_id=other_vet.id, visit_date=TODAY, reason="Other vet",
                  next_visit_date=TODAY),
    ])
    db.commit()

    stats = compute_vet_stats(db, vet.id, today=TODAY)

    assert stats["total_patients"] == 4
    assert stats["active_patients"] == 3
    assert stats["recent_visits"] == 1
    assert stats["upcoming_appointments"] == 1
    assert stats["patients_by_species"] == [{"species": "Dog", "count": 2}, {"species": "Cat", "count": 1}]
    assert stats["patients_by_age"] == [
        {"age_group": "1-5 years", "count": 1},
        {"age_group": "Under 1 year", "count": 1},
        {"age_group": "Unknown", "count": 1},
    ]
