"""Module: pets."""

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import get_db, get_identity
from petvet.core.errors import AuthorizationError
from petvet.core.permissions import Action, Identity, Resource, require, require_authenticated
from petvet.services import pets as pet_service
from petvet.services.common import parse_uuid

router = APIRouter()


class PetPayload(BaseModel):
    name: str | None = None
    species: str | None = None
    breed: str | None = None
    birth_date: date | None = None
    weight: float | None = None
    color: str | None = None
    microchip_id: str | None = None
    photo_url: str | None = None
    owner_name: str | None = None
    owner_phone: str | None = None
    owner_email: str | None = None
    notes: str | None = None
    # Only honoured for admins creating a pet on someone's behalf.
    owner_id: str | None = None


def _load_owned_pet(db: Session, identity: Identity | None, pet_id: str, action: Action):
    identity = require_authenticated(identity)
    pet = pet_service.get_pet(db, parse_uuid(pet_id, "pet_id"))
    require(identity, action, Resource(owner_id=pet.owner_id))
    return pet


# -------------------------
# Endpoints
# -------------------------

@router.get("", summary="List pets visible to the caller")
def list_pets(identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    identity = require(identity, Action.PET_LIST)
    return {"pets": pet_service.list_pets(db, identity)}


@router.post("", status_code=201, summary="Create a pet")
def create_pet(
    payload: PetPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.PET_CREATE)

    owner_id = identity.id
    if payload.owner_id:
        requested = parse_uuid(payload.owner_id, "owner_id")
        if requested != identity.id and not identity.is_admin:
            raise AuthorizationError("Cannot create pets for another owner")
        owner_id = requested

    pet = pet_service.create_pet(db, owner_id, payload.model_dump(exclude={"owner_id"}))
    return {"pet": pet_service.pet_to_dict(pet)}


# Endpoint: pet detail including its visit history.
@router.get("/{pet_id}", summary="Get a pet with its records")
def get_pet(pet_id: str, identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    pet = _load_owned_pet(db, identity, pet_id, Action.PET_READ)
    return {
        "pet": pet_service.pet_to_dict(pet),
        "vet_records": pet_service.list_pet_records(db, pet.id),
    }


@router.put("/{pet_id}", summary="Update a pet")
def update_pet(
    pet_id: str,
    payload: PetPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    pet = _load_owned_pet(db, identity, pet_id, Action.PET_UPDATE)
    pet = pet_service.update_pet(db, pet, payload.model_dump(exclude={"owner_id"}))
    return {"pet": pet_service.pet_to_dict(pet)}


@router.delete("/{pet_id}", summary="Delete a pet and its records")
def delete_pet(pet_id: str, identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    pet = _load_owned_pet(db, identity, pet_id, Action.PET_DELETE)
    pet_service.delete_pet(db, pet)
    return {"message": "Pet deleted successfully"}


@router.get("/{pet_id}/records", summary="List vet records for a pet")
def list_pet_records(
    pet_id: str,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    pet = _load_owned_pet(db, identity, pet_id, Action.PET_READ)
    return {"records": pet_service.list_pet_records(db, pet.id)}
