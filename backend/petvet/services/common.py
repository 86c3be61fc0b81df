"""Module: common."""

import logging
import uuid
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from petvet.core.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)


def parse_uuid(value, field_name: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name} (must be UUID)")


def normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned if cleaned else None


def parse_optional_date(value, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (expected YYYY-MM-DD)")


def commit_or_conflict(db: Session, conflict_message: str) -> None:
    """Commit the unit of work, mapping a uniqueness violation to ConflictError."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Uniqueness violation: %s (%s)", conflict_message, exc.orig)
        raise ConflictError(conflict_message) from exc
