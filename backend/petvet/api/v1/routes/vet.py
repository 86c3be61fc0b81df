"""Module: vet.

Vet-facing workspace: patient assignments, visit records, dashboard stats
and partnered-office memberships. Every query is scoped to the calling vet.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import get_db, get_identity
from petvet.core.errors import ValidationError
from petvet.core.permissions import Action, Identity, Resource, require, require_authenticated
from petvet.services import offices as office_service
from petvet.services import patients as patient_service
from petvet.services import records as record_service
from petvet.services.common import parse_optional_date, parse_uuid
from petvet.services.stats import compute_vet_stats

router = APIRouter()


class AssignPatientPayload(BaseModel):
    pet_id: str | None = None
    status: str | None = None
    notes: str | None = None


class UpdatePatientPayload(BaseModel):
    status: str | None = None
    notes: str | None = None


class RecordPayload(BaseModel):
    pet_id: str | None = None
    visit_date: date | None = None
    reason: str | None = None
    diagnosis: str | None = None
    treatment: str | None = None
    medications: str | None = None
    next_visit_date: date | None = None
    office_location: str | None = None
    notes: str | None = None


class OfficeLinkPayload(BaseModel):
    vet_office_id: str | None = None


def _load_assignment(db: Session, identity: Identity | None, assignment_id: str, action: Action):
    identity = require_authenticated(identity)
    assignment = patient_service.get_assignment(db, parse_uuid(assignment_id, "assignment_id"))
    require(identity, action, Resource(vet_id=assignment.vet_id))
    return assignment


# -------------------------
# Patients
# -------------------------

@router.get("/patients", summary="List the vet's patients")
def list_patients(
    status: str | None = Query(default=None),
    species: str | None = Query(default=None),
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.PATIENT_LIST)
    return {"patients": patient_service.list_patients(db, identity.id, status=status, species=species)}


@router.post("/patients", status_code=201, summary="Assign a pet to the vet")
def assign_patient(
    payload: AssignPatientPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.PATIENT_ASSIGN)
    if not payload.pet_id:
        raise ValidationError("Pet ID is required")
    patient = patient_service.assign_patient(
        db,
        identity.id,
        parse_uuid(payload.pet_id, "pet_id"),
        status=payload.status,
        notes=payload.notes,
    )
    return {"patient": patient}


@router.put("/patients/{assignment_id}", summary="Update a patient assignment")
def update_patient(
    assignment_id: str,
    payload: UpdatePatientPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    assignment = _load_assignment(db, identity, assignment_id, Action.PATIENT_UPDATE)
    patient = patient_service.update_assignment(db, assignment, status=payload.status, notes=payload.notes)
    return {"patient": patient}


@router.delete("/patients/{assignment_id}", summary="Remove a patient assignment")
def remove_patient(
    assignment_id: str,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    assignment = _load_assignment(db, identity, assignment_id, Action.PATIENT_REMOVE)
    patient_service.remove_assignment(db, assignment)
    return {"message": "Patient assignment removed"}


# -------------------------
# Records
# -------------------------

@router.get("/records", summary="List records written by the vet")
def list_records(
    pet_id: str | None = Query(default=None),
    date_from: str | None = Query(default=None),
    date_to: str | None = Query(default=None),
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.RECORD_LIST)
    records = record_service.list_vet_records(
        db,
        identity.id,
        pet_id=parse_uuid(pet_id, "pet_id") if pet_id else None,
        date_from=parse_optional_date(date_from, "date_from"),
        date_to=parse_optional_date(date_to, "date_to"),
    )
    return {"records": records}


# Endpoint: write a visit record; the vet must hold an active assignment for the pet.
@router.post("/records", status_code=201, summary="Create a vet record")
def create_record(
    payload: RecordPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require_authenticated(identity)
    if not payload.pet_id:
        raise ValidationError("Pet ID, visit date, and reason are required")
    pet_id = parse_uuid(payload.pet_id, "pet_id")

    assignment = patient_service.find_assignment(db, identity.id, pet_id)
    resource = Resource(
        vet_id=assignment.vet_id if assignment else None,
        assignment_active=assignment is not None and assignment.status == "active",
    )
    require(
        identity,
        Action.RECORD_CREATE,
        resource,
        message="Pet is not assigned to this vet" if identity.is_vet else None,
    )

    values = record_service.validate_record_payload(payload.model_dump())
    return {"record": record_service.create_record(db, identity.id, pet_id, values)}


@router.get("/stats", summary="Dashboard counts for the vet")
def vet_stats(identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    identity = require(identity, Action.VET_STATS)
    return compute_vet_stats(db, identity.id)


# -------------------------
# Office memberships
# -------------------------

@router.get("/office-memberships", summary="List partnered offices the vet belongs to")
def list_memberships(identity: Identity | None = Depends(get_identity), db: Session = Depends(get_db)):
    identity = require(identity, Action.MEMBERSHIP_LIST)
    return {"offices": office_service.list_memberships(db, identity.id)}


@router.post("/office-memberships", summary="Join a partnered office")
def add_membership(
    payload: OfficeLinkPayload,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require(identity, Action.MEMBERSHIP_CREATE)
    if not payload.vet_office_id:
        raise ValidationError("Office ID is required")
    link = office_service.add_membership(db, identity.id, parse_uuid(payload.vet_office_id, "vet_office_id"))
    return {"success": True, "id": str(link.id)}


@router.delete("/office-memberships/{link_id}", summary="Leave a partnered office")
def remove_membership(
    link_id: str,
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
):
    identity = require_authenticated(identity)
    link = office_service.get_membership(db, parse_uuid(link_id, "link_id"))
    require(identity, Action.MEMBERSHIP_DELETE, Resource(user_id=link.vet_user_id))
    office_service.delete_link(db, link)
    return {"success": True}
