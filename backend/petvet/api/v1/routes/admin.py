"""Module: admin."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import get_db, get_identity
from petvet.core.permissions import Action, Identity, require
from petvet.services import offices as office_service
from petvet.services import users as user_service
from petvet.services.common import parse_uuid

router = APIRouter()


class UserPayload(BaseModel):
    username: str | None = None
    password: str | None = None
    role: str | None = None
    type: str | None = None


class PartneredOfficePayload(BaseModel):
    name: str | None = None
    address: str | None = None
    detail_link: str | None = None
    external_id: str | None = None


# -------------------------
# Users
# -------------------------

@router.get("/users", summary="List all users")
def list_users(identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    require(identity, Action.USER_LIST)
    return {"users": [user_service.user_to_dict(u) for u in user_service.list_users(db)]}


@router.post("/users", status_code=201, summary="Create a user with any role and type")
def create_user(
    payload: UserPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    require(identity, Action.USER_CREATE)
    user = user_service.create_user(
        db,
        username=payload.username,
        password=payload.password,
        role=payload.role,
        type_=payload.type,
    )
    return {"user": user_service.user_to_dict(user)}


@router.put("/users/{user_id}", summary="Update a user")
def update_user(
    user_id: str,
    payload: UserPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    require(identity, Action.USER_UPDATE)
    user = user_service.update_user(
        db,
        parse_uuid(user_id, "user_id"),
        username=payload.username,
        password=payload.password,
        role=payload.role,
        type_=payload.type,
    )
    return {"user": user_service.user_to_dict(user)}


# Endpoint: removes the user and every dependent row in one transaction.
@router.delete("/users/{user_id}", summary="Delete a user")
def delete_user(user_id: str, identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    require(identity, Action.USER_DELETE)
    user_service.delete_user(db, parse_uuid(user_id, "user_id"))
    return {"message": "User deleted"}


# -------------------------
# Partnered offices
# -------------------------

@router.get("/partnered-offices", summary="List partnered offices")
def list_offices(identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    require(identity, Action.OFFICE_LIST)
    return {"offices": [office_service.office_to_dict(o) for o in office_service.list_partnered_offices(db)]}


@router.post("/partnered-offices", status_code=201, summary="Add a partnered office")
def create_office(
    payload: PartneredOfficePayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    require(identity, Action.OFFICE_CREATE)
    office = office_service.create_partnered_office(
        db,
        name=payload.name,
        address=payload.address,
        detail_link=payload.detail_link,
        external_id=payload.external_id,
    )
    return {"office": office_service.office_to_dict(office)}


@router.delete("/partnered-offices/{office_id}", summary="Remove a partnered office")
def delete_office(office_id: str, identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    require(identity, Action.OFFICE_DELETE)
    office_service.delete_partnered_office(db, parse_uuid(office_id, "office_id"))
    return {"success": True}
