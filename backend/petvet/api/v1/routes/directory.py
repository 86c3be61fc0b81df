"""Module: directory."""

import httpx
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import get_db, get_directory_client, get_identity
from petvet.core.permissions import Action, Identity, require
from petvet.services import directory as directory_service

router = APIRouter()


class ListingPayload(BaseModel):
    name: str | None = None
    address: str | None = None


# Endpoint: scrape the external directory and flag partnered clinics.
@router.get("/search", summary="Search the clinic directory by ZIP code")
def search(
    zip_code: str | None = Query(default=None, alias="zip"),
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
    client: httpx.Client = Depends(get_directory_client),
):
    require(identity, Action.DIRECTORY_SEARCH)
    listings = directory_service.search_directory(db, zip_code, client=client)
    return {"vets": [listing.to_dict() for listing in listings]}


@router.post("/save", status_code=201, summary="Save a partnered listing as a preferred office")
def save(
    payload: ListingPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.DIRECTORY_SAVE)
    link = directory_service.save_listing(db, identity.id, payload.name, payload.address)
    return {"success": True, "id": str(link.id), "vet_office_id": str(link.vet_office_id)}


@router.post("/join", status_code=201, summary="Join a partnered listing as a member vet")
def join(
    payload: ListingPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.DIRECTORY_JOIN)
    link = directory_service.join_listing(db, identity.id, payload.name, payload.address)
    return {"success": True, "id": str(link.id), "vet_office_id": str(link.vet_office_id)}
