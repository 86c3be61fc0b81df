"""Module: patients."""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from petvet.core.errors import ConflictError, NotFoundError, ValidationError
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_patient import PATIENT_STATUSES, VetPatient
from petvet.services.common import commit_or_conflict, normalize_optional

logger = logging.getLogger(__name__)

DUPLICATE_ASSIGNMENT = "Pet is already assigned to this vet"


def _patient_select():
    # Assignment + pet + owner in one read.
    return (
        select(
            VetPatient.id.label("id"),
            VetPatient.vet_id.label("vet_id"),
            VetPatient.pet_id.label("pet_id"),
            VetPatient.assigned_date.label("assigned_date"),
            VetPatient.status.label("status"),
            VetPatient.notes.label("notes"),
            VetPatient.created_at.label("created_at"),
            Pet.name.label("pet_name"),
            Pet.species.label("species"),
            Pet.breed.label("breed"),
            Pet.birth_date.label("birth_date"),
            Pet.weight.label("weight"),
            Pet.color.label("color"),
            Pet.microchip_id.label("microchip_id"),
            User.id.label("owner_id"),
            User.username.label("owner_username"),
        )
        .select_from(VetPatient)
        .join(Pet, Pet.id == VetPatient.pet_id)
        .join(User, User.id == Pet.owner_id)
    )


def _row_to_dict(row) -> dict:
    d = dict(row)
    for key in ("id", "vet_id", "pet_id", "owner_id"):
        d[key] = str(d[key])
    return d


def _validate_status(status: str | None) -> str | None:
    if status is not None and status not in PATIENT_STATUSES:
        raise ValidationError(f"Invalid status (expected one of {', '.join(PATIENT_STATUSES)})")
    return status


def get_assignment(db: Session, assignment_id: uuid.UUID) -> VetPatient:
    assignment = db.execute(select(VetPatient).where(VetPatient.id == assignment_id)).scalar_one_or_none()
    if not assignment:
        raise NotFoundError("Patient assignment not found")
    return assignment


def find_assignment(db: Session, vet_id: uuid.UUID, pet_id: uuid.UUID) -> VetPatient | None:
    return db.execute(
        select(VetPatient).where(VetPatient.vet_id == vet_id, VetPatient.pet_id == pet_id)
    ).scalar_one_or_none()


def get_patient_detail(db: Session, assignment_id: uuid.UUID) -> dict:
    row = db.execute(_patient_select().where(VetPatient.id == assignment_id)).mappings().one_or_none()
    if not row:
        raise NotFoundError("Patient assignment not found")
    return _row_to_dict(row)


def list_patients(
    db: Session,
    vet_id: uuid.UUID,
    *,
    status: str | None = None,
    species: str | None = None,
) -> list[dict]:
    stmt = _patient_select().where(VetPatient.vet_id == vet_id)
    if status:
        stmt = stmt.where(VetPatient.status == _validate_status(status))
    if species:
        stmt = stmt.where(Pet.species == species)
    stmt = stmt.order_by(VetPatient.assigned_date.desc(), VetPatient.created_at.desc())
    return [_row_to_dict(r) for r in db.execute(stmt).mappings().all()]


def assign_patient(
    db: Session,
    vet_id: uuid.UUID,
    pet_id: uuid.UUID,
    *,
    status: str | None = None,
    notes: str | None = None,
) -> dict:
    status = _validate_status(status or "active")
    if not db.execute(select(Pet.id).where(Pet.id == pet_id)).first():
        raise NotFoundError("Pet not found")

    if find_assignment(db, vet_id, pet_id):
        raise ConflictError(DUPLICATE_ASSIGNMENT)

    assignment = VetPatient(
        vet_id=vet_id,
        pet_id=pet_id,
        assigned_date=date.today(),
        status=status,
        notes=normalize_optional(notes),
    )
    db.add(assignment)
    # A racing duplicate assignment loses on uq_vet_patients_vet_pet.
    commit_or_conflict(db, DUPLICATE_ASSIGNMENT)
    logger.info("Vet %s assigned pet %s", vet_id, pet_id)
    return get_patient_detail(db, assignment.id)


def update_assignment(
    db: Session,
    assignment: VetPatient,
    *,
    status: str | None = None,
    notes: str | None = None,
) -> dict:
    if status:
        assignment.status = _validate_status(status)
    if notes:
        assignment.notes = notes
    db.commit()
    return get_patient_detail(db, assignment.id)


def remove_assignment(db: Session, assignment: VetPatient) -> None:
    db.delete(assignment)
    db.commit()
    logger.info("Removed patient assignment %s", assignment.id)
