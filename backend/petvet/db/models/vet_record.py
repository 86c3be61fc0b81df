"""Module: vet_record."""

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from petvet.db.base import Base

# Clinical visit record written by the vet assigned to the pet.
class VetRecord(Base):
    __tablename__ = "vet_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vet_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    visit_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String, nullable=False)
    diagnosis: Mapped[str | None] = mapped_column(String, nullable=True)
    treatment: Mapped[str | None] = mapped_column(String, nullable=True)
    medications: Mapped[str | None] = mapped_column(String, nullable=True)
    next_visit_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    office_location: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
