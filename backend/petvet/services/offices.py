"""Module: offices."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from petvet.core.errors import ConflictError, NotFoundError, ValidationError
from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.services.common import commit_or_conflict, normalize_optional

logger = logging.getLogger(__name__)

ALREADY_ADDED = "Already added"
ALREADY_MEMBER = "Already a member"


def office_key(name: str | None, address: str | None) -> tuple[str, str]:
    """Identity key across the scraped/curated boundary: trimmed, lower-cased name and address."""
    return ((name or "").strip().lower(), (address or "").strip().lower())


def office_to_dict(office: PartneredVetOffice) -> dict:
    return {
        "id": str(office.id),
        "name": office.name,
        "address": office.address,
        "detail_link": office.detail_link,
        "external_id": office.external_id,
        "created_at": office.created_at,
    }


# -------------------------
# Partnered offices (admin)
# -------------------------

def list_partnered_offices(db: Session) -> list[PartneredVetOffice]:
    return list(
        db.execute(select(PartneredVetOffice).order_by(PartneredVetOffice.created_at.desc())).scalars().all()
    )


def create_partnered_office(
    db: Session,
    *,
    name: str | None,
    address: str | None,
    detail_link: str | None = None,
    external_id: str | None = None,
) -> PartneredVetOffice:
    name = normalize_optional(name)
    address = normalize_optional(address)
    if not name or not address:
        raise ValidationError("Name and address are required")

    office = PartneredVetOffice(
        name=name,
        address=address,
        detail_link=normalize_optional(detail_link),
        external_id=normalize_optional(external_id),
    )
    db.add(office)
    db.commit()
    db.refresh(office)
    logger.info("Partnered office %s added: %s", office.id, office.name)
    return office


def delete_partnered_office(db: Session, office_id: uuid.UUID) -> None:
    office = db.execute(select(PartneredVetOffice).where(PartneredVetOffice.id == office_id)).scalar_one_or_none()
    if not office:
        raise NotFoundError("Office not found")
    db.delete(office)
    db.commit()


def partnered_keys(db: Session) -> set[tuple[str, str]]:
    rows = db.execute(select(PartneredVetOffice.name, PartneredVetOffice.address)).all()
    return {office_key(name, address) for name, address in rows}


def find_partnered_office(db: Session, name: str | None, address: str | None) -> PartneredVetOffice | None:
    wanted = office_key(name, address)
    for office in db.execute(select(PartneredVetOffice).order_by(PartneredVetOffice.created_at)).scalars():
        if office_key(office.name, office.address) == wanted:
            return office
    return None


def _require_office(db: Session, office_id: uuid.UUID) -> PartneredVetOffice:
    office = db.execute(select(PartneredVetOffice).where(PartneredVetOffice.id == office_id)).scalar_one_or_none()
    if not office:
        raise NotFoundError("Office not found")
    return office


# -------------------------
# Owner links
# -------------------------

def list_preferred_offices(db: Session, user_id: uuid.UUID) -> list[dict]:
    rows = db.execute(
        select(
            PreferredVetOffice.id.label("id"),
            PreferredVetOffice.vet_office_id.label("vet_office_id"),
            PreferredVetOffice.user_id.label("user_id"),
            PreferredVetOffice.created_at.label("created_at"),
            PartneredVetOffice.name.label("name"),
            PartneredVetOffice.address.label("address"),
            PartneredVetOffice.detail_link.label("detail_link"),
        )
        .join(PartneredVetOffice, PartneredVetOffice.id == PreferredVetOffice.vet_office_id)
        .where(PreferredVetOffice.user_id == user_id)
        .order_by(PreferredVetOffice.created_at.desc())
    ).mappings().all()
    return [_link_row(r, "user_id") for r in rows]


def add_preferred_office(db: Session, user_id: uuid.UUID, office_id: uuid.UUID) -> PreferredVetOffice:
    _require_office(db, office_id)
    exists = db.execute(
        select(PreferredVetOffice.id).where(
            PreferredVetOffice.user_id == user_id,
            PreferredVetOffice.vet_office_id == office_id,
        )
    ).first()
    if exists:
        raise ConflictError(ALREADY_ADDED)

    link = PreferredVetOffice(user_id=user_id, vet_office_id=office_id)
    db.add(link)
    commit_or_conflict(db, ALREADY_ADDED)
    logger.info("Owner %s saved office %s", user_id, office_id)
    return link


def get_preferred_link(db: Session, link_id: uuid.UUID) -> PreferredVetOffice:
    link = db.execute(select(PreferredVetOffice).where(PreferredVetOffice.id == link_id)).scalar_one_or_none()
    if not link:
        raise NotFoundError("Preferred office not found")
    return link


# -------------------------
# Vet memberships
# -------------------------

def list_memberships(db: Session, vet_user_id: uuid.UUID) -> list[dict]:
    rows = db.execute(
        select(
            VetOfficeMember.id.label("id"),
            VetOfficeMember.vet_office_id.label("vet_office_id"),
            VetOfficeMember.vet_user_id.label("vet_user_id"),
            VetOfficeMember.created_at.label("created_at"),
            PartneredVetOffice.name.label("name"),
            PartneredVetOffice.address.label("address"),
            PartneredVetOffice.detail_link.label("detail_link"),
        )
        .join(PartneredVetOffice, PartneredVetOffice.id == VetOfficeMember.vet_office_id)
        .where(VetOfficeMember.vet_user_id == vet_user_id)
        .order_by(VetOfficeMember.created_at.desc())
    ).mappings().all()
    return [_link_row(r, "vet_user_id") for r in rows]


def add_membership(db: Session, vet_user_id: uuid.UUID, office_id: uuid.UUID) -> VetOfficeMember:
    _require_office(db, office_id)
    exists = db.execute(
        select(VetOfficeMember.id).where(
            VetOfficeMember.vet_user_id == vet_user_id,
            VetOfficeMember.vet_office_id == office_id,
        )
    ).first()
    if exists:
        raise ConflictError(ALREADY_MEMBER)

    link = VetOfficeMember(vet_user_id=vet_user_id, vet_office_id=office_id)
    db.add(link)
    commit_or_conflict(db, ALREADY_MEMBER)
    logger.info("Vet %s joined office %s", vet_user_id, office_id)
    return link


def get_membership(db: Session, link_id: uuid.UUID) -> VetOfficeMember:
    link = db.execute(select(VetOfficeMember).where(VetOfficeMember.id == link_id)).scalar_one_or_none()
    if not link:
        raise NotFoundError("Membership not found")
    return link


def delete_link(db: Session, link: PreferredVetOffice | VetOfficeMember) -> None:
    db.delete(link)
    db.commit()


def _link_row(row, user_field: str) -> dict:
    d = dict(row)
    for key in ("id", "vet_office_id", user_field):
        d[key] = str(d[key])
    return d
