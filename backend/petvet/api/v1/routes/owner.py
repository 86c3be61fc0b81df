"""Module: owner."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import get_db, get_identity
from petvet.core.errors import ValidationError
from petvet.core.permissions import Action, Identity, Resource, require, require_authenticated
from petvet.services import offices as office_service
from petvet.services.common import parse_uuid

router = APIRouter()


class PreferredOfficePayload(BaseModel):
    vet_office_id: str | None = None


@router.get("/preferred-offices", summary="List the owner's saved offices")
def list_preferred(identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    identity = require(identity, Action.PREFERRED_LIST)
    return {"offices": office_service.list_preferred_offices(db, identity.id)}


@router.post("/preferred-offices", summary="Save a partnered office")
def add_preferred(
    payload: PreferredOfficePayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.PREFERRED_CREATE)
    if not payload.vet_office_id:
        raise ValidationError("Office ID is required")
    link = office_service.add_preferred_office(db, identity.id, parse_uuid(payload.vet_office_id, "vet_office_id"))
    return {"success": True, "id": str(link.id)}


@router.delete("/preferred-offices/{link_id}", summary="Remove a saved office")
def remove_preferred(
    link_id: str,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require_authenticated(identity)
    link = office_service.get_preferred_link(db, parse_uuid(link_id, "link_id"))
    require(identity, Action.PREFERRED_DELETE, Resource(user_id=link.user_id))
    office_service.delete_link(db, link)
    return {"success": True}
