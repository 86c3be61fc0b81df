"""Module: stats.

Read-only dashboard aggregates for a single vet. Every query is filtered on
the vet's own id; counts come back as integers and empty groups as empty lists.
"""

import uuid
from collections import Counter
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from petvet.db.models.pet import Pet
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord

RECENT_VISIT_DAYS = 30
UPCOMING_DAYS = 7

AGE_UNKNOWN = "Unknown"
# (exclusive upper bound in days, label)
AGE_BUCKETS = (
    (365, "Under 1 year"),
    (1825, "1-5 years"),
    (3650, "5-10 years"),
)
AGE_OLDEST = "Over 10 years"


def age_bucket(birth_date: date | None, today: date) -> str:
    if birth_date is None:
        return AGE_UNKNOWN
    age_days = (today - birth_date).days
    for limit, label in AGE_BUCKETS:
        if age_days < limit:
            return label
    return AGE_OLDEST


def _count(db: Session, stmt) -> int:
    return int(db.execute(stmt).scalar_one() or 0)


def _sorted_groups(counter: Counter, key_name: str) -> list[dict]:
    # Count desc, then label for a stable order between ties.
    items = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return [{key_name: label, "count": count} for label, count in items]


def compute_vet_stats(db: Session, vet_id: uuid.UUID, today: date | None = None) -> dict:
    today = today or date.today()

    total_patients = _count(
        db, select(func.count(VetPatient.id)).where(VetPatient.vet_id == vet_id)
    )
    active_patients = _count(
        db,
        select(func.count(VetPatient.id)).where(VetPatient.vet_id == vet_id, VetPatient.status == "active"),
    )
    recent_visits = _count(
        db,
        select(func.count(VetRecord.id)).where(
            VetRecord.vet_id == vet_id,
            VetRecord.visit_date >= today - timedelta(days=RECENT_VISIT_DAYS),
        ),
    )
    upcoming_appointments = _count(
        db,
        select(func.count(VetRecord.id)).where(
            VetRecord.vet_id == vet_id,
            VetRecord.next_visit_date >= today,
            VetRecord.next_visit_date <= today + timedelta(days=UPCOMING_DAYS),
        ),
    )

    active_pets = db.execute(
        select(Pet.species, Pet.birth_date)
        .join(VetPatient, VetPatient.pet_id == Pet.id)
        .where(VetPatient.vet_id == vet_id, VetPatient.status == "active")
    ).all()

    by_species = Counter(species for species, _ in active_pets)
    by_age = Counter(age_bucket(birth_date, today) for _, birth_date in active_pets)

    return {
        "total_patients": total_patients,
        "active_patients": active_patients,
        "recent_visits": recent_visits,
        "upcoming_appointments": upcoming_appointments,
        "patients_by_species": _sorted_groups(by_species, "species"),
        "patients_by_age": _sorted_groups(by_age, "age_group"),
    }
