"""Module: records."""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from petvet.core.errors import ValidationError
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_record import VetRecord
from petvet.services.common import normalize_optional, parse_optional_date

logger = logging.getLogger(__name__)

RECORD_TEXT_FIELDS = ("diagnosis", "treatment", "medications", "office_location", "notes")


def record_to_dict(record: VetRecord) -> dict:
    d = {
        "id": str(record.id),
        "pet_id": str(record.pet_id),
        "vet_id": str(record.vet_id),
        "visit_date": record.visit_date,
        "reason": record.reason,
        "next_visit_date": record.next_visit_date,
        "created_at": record.created_at,
    }
    for field in RECORD_TEXT_FIELDS:
        d[field] = getattr(record, field)
    return d


def validate_record_payload(data: dict) -> dict:
    """Check required record fields before any ownership lookup or write."""
    visit_date = parse_optional_date(data.get("visit_date"), "visit_date")
    reason = normalize_optional(data.get("reason"))
    if not data.get("pet_id") or not visit_date or not reason:
        raise ValidationError("Pet ID, visit date, and reason are required")

    values = {
        "visit_date": visit_date,
        "reason": reason,
        "next_visit_date": parse_optional_date(data.get("next_visit_date"), "next_visit_date"),
    }
    for field in RECORD_TEXT_FIELDS:
        values[field] = normalize_optional(data.get(field))
    return values


def _record_select():
    return (
        select(
            VetRecord,
            Pet.name.label("pet_name"),
            Pet.species.label("species"),
            User.username.label("owner_username"),
        )
        .join(Pet, Pet.id == VetRecord.pet_id)
        .join(User, User.id == Pet.owner_id)
    )


def _joined_to_dict(record: VetRecord, pet_name: str, species: str, owner_username: str) -> dict:
    d = record_to_dict(record)
    d.update(pet_name=pet_name, species=species, owner_username=owner_username)
    return d


def create_record(db: Session, vet_id: uuid.UUID, pet_id: uuid.UUID, values: dict) -> dict:
    # Caller has already verified the vet's active assignment for this pet.
    record = VetRecord(pet_id=pet_id, vet_id=vet_id, **values)
    db.add(record)
    db.commit()
    logger.info("Vet %s wrote record %s for pet %s", vet_id, record.id, pet_id)

    row = db.execute(_record_select().where(VetRecord.id == record.id)).one()
    return _joined_to_dict(*row)


def list_vet_records(
    db: Session,
    vet_id: uuid.UUID,
    *,
    pet_id: uuid.UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[dict]:
    stmt = _record_select().where(VetRecord.vet_id == vet_id)
    if pet_id:
        stmt = stmt.where(VetRecord.pet_id == pet_id)
    if date_from:
        stmt = stmt.where(VetRecord.visit_date >= date_from)
    if date_to:
        stmt = stmt.where(VetRecord.visit_date <= date_to)
    stmt = stmt.order_by(VetRecord.visit_date.desc())
    return [_joined_to_dict(*row) for row in db.execute(stmt).all()]
