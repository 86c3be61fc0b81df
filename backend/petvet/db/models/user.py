"""Module: user."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from petvet.db.base import Base

USER_ROLES = ("user", "admin")
USER_TYPES = ("owner", "vet")


# Account row; role gates admin actions, type gates owner-only vs vet-only actions.
class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        CheckConstraint("type IN ('owner', 'vet')", name="ck_users_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    username: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, default="user")
    type: Mapped[str] = mapped_column(String, nullable=False, default="owner")

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
