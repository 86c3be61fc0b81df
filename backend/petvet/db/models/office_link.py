"""Module: office_link."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from petvet.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


# Owner's saved clinic.
class PreferredVetOffice(Base):
    __tablename__ = "preferred_vet_offices"
    __table_args__ = (
        UniqueConstraint("user_id", "vet_office_id", name="uq_preferred_vet_offices_user_office"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vet_office_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("partnered_vet_offices.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)


# Vet's membership in a clinic.
class VetOfficeMember(Base):
    __tablename__ = "vet_office_members"
    __table_args__ = (
        UniqueConstraint("vet_user_id", "vet_office_id", name="uq_vet_office_members_vet_office"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    vet_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vet_office_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("partnered_vet_offices.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)
