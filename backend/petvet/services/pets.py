"""Module: pets."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from petvet.core.errors import NotFoundError, ValidationError
from petvet.core.permissions import Identity
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord
from petvet.services.common import normalize_optional, parse_optional_date
from petvet.services.records import record_to_dict

logger = logging.getLogger(__name__)

PET_TEXT_FIELDS = (
    "breed",
    "color",
    "microchip_id",
    "photo_url",
    "owner_name",
    "owner_phone",
    "owner_email",
    "notes",
)


def pet_to_dict(pet: Pet, owner_username: str | None = None) -> dict:
    d = {
        "id": str(pet.id),
        "owner_id": str(pet.owner_id),
        "name": pet.name,
        "species": pet.species,
        "birth_date": pet.birth_date,
        "weight": pet.weight,
        "created_at": pet.created_at,
        "updated_at": pet.updated_at,
    }
    for field in PET_TEXT_FIELDS:
        d[field] = getattr(pet, field)
    if owner_username is not None:
        d["owner_username"] = owner_username
    return d


def _clean_pet_fields(data: dict) -> dict:
    """Validate a pet payload and return the column values to write."""
    name = normalize_optional(data.get("name"))
    species = normalize_optional(data.get("species"))
    if not name or not species:
        raise ValidationError("Name and species are required")

    weight = data.get("weight")
    if weight is not None:
        try:
            weight = float(weight)
        except (TypeError, ValueError):
            raise ValidationError("Invalid weight")
        if weight < 0:
            raise ValidationError("Invalid weight")

    values = {
        "name": name,
        "species": species,
        "birth_date": parse_optional_date(data.get("birth_date"), "birth_date"),
        "weight": weight,
    }
    for field in PET_TEXT_FIELDS:
        values[field] = normalize_optional(data.get(field))
    return values


def get_pet(db: Session, pet_id: uuid.UUID) -> Pet:
    pet = db.execute(select(Pet).where(Pet.id == pet_id)).scalar_one_or_none()
    if not pet:
        raise NotFoundError("Pet not found")
    return pet


def list_pets(db: Session, identity: Identity) -> list[dict]:
    stmt = (
        select(Pet, User.username.label("owner_username"))
        .join(User, User.id == Pet.owner_id)
        .order_by(Pet.created_at.desc())
    )
    # Admins see every pet; everyone else only their own.
    if not identity.is_admin:
        stmt = stmt.where(Pet.owner_id == identity.id)

    return [pet_to_dict(pet, owner_username) for pet, owner_username in db.execute(stmt).all()]


def create_pet(db: Session, owner_id: uuid.UUID, data: dict) -> Pet:
    values = _clean_pet_fields(data)
    if not db.execute(select(User.id).where(User.id == owner_id)).first():
        raise NotFoundError("Owner not found")

    pet = Pet(owner_id=owner_id, **values)
    db.add(pet)
    db.commit()
    db.refresh(pet)
    logger.info("Created pet %s for owner %s", pet.id, owner_id)
    return pet


def update_pet(db: Session, pet: Pet, data: dict) -> Pet:
    values = _clean_pet_fields(data)
    for key, value in values.items():
        setattr(pet, key, value)
    pet.updated_at = datetime.now(UTC)
    db.commit()
    db.refresh(pet)
    return pet


def delete_pet(db: Session, pet: Pet) -> None:
    pet_id = pet.id
    try:
        db.execute(delete(VetRecord).where(VetRecord.pet_id == pet_id))
        db.execute(delete(VetPatient).where(VetPatient.pet_id == pet_id))
        db.execute(delete(Pet).where(Pet.id == pet_id).execution_options(synchronize_session=False))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted pet %s", pet_id)


def list_pet_records(db: Session, pet_id: uuid.UUID) -> list[dict]:
    rows = db.execute(
        select(VetRecord)
        .where(VetRecord.pet_id == pet_id)
        .order_by(VetRecord.visit_date.desc())
    ).scalars().all()
    return [record_to_dict(r) for r in rows]
