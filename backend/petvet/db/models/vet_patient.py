"""Module: vet_patient."""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from petvet.db.base import Base

PATIENT_STATUSES = ("active", "inactive", "discharged")


# Assignment of a pet to a vet; a vet holds at most one row per pet.
class VetPatient(Base):
    __tablename__ = "vet_patients"
    __table_args__ = (
        UniqueConstraint("vet_id", "pet_id", name="uq_vet_patients_vet_pet"),
        CheckConstraint("status IN ('active', 'inactive', 'discharged')", name="ck_vet_patients_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    vet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    pet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    assigned_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
