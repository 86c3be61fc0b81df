"""Module: users."""

import logging
import uuid

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from petvet.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from petvet.core.permissions import ROLE_USER, TYPE_OWNER
from petvet.core.security import hash_password, verify_password
from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
from petvet.db.models.pet import Pet
from petvet.db.models.user import USER_ROLES, USER_TYPES, User
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord
from petvet.services.common import commit_or_conflict, normalize_optional

logger = logging.getLogger(__name__)

DUPLICATE_USERNAME = "Username already exists"


def user_to_dict(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "role": user.role,
        "type": user.type,
        "created_at": user.created_at,
    }


def _validate_role_type(role: str, type_: str) -> None:
    if role not in USER_ROLES:
        raise ValidationError("Invalid role")
    if type_ not in USER_TYPES:
        raise ValidationError("Invalid account type")


def _username_taken(db: Session, username: str, exclude_id: uuid.UUID | None = None) -> bool:
    stmt = select(User.id).where(User.username == username)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return db.execute(stmt).first() is not None


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    return db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()


def create_user(
    db: Session,
    *,
    username: str | None,
    password: str | None,
    role: str | None = None,
    type_: str | None = None,
) -> User:
    username = normalize_optional(username)
    if not username or not password:
        raise ValidationError("Username and password are required")

    role = role or ROLE_USER
    type_ = type_ or TYPE_OWNER
    _validate_role_type(role, type_)

    if _username_taken(db, username):
        raise ConflictError(DUPLICATE_USERNAME)

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        type=type_,
    )
    db.add(user)
    # The unique index decides concurrent registrations of the same name.
    commit_or_conflict(db, DUPLICATE_USERNAME)
    db.refresh(user)
    logger.info("Created user %s (role=%s, type=%s)", user.username, user.role, user.type)
    return user


def register_user(db: Session, *, username: str | None, password: str | None, type_: str | None) -> User:
    # Self-registration never grants admin.
    if type_ and type_ not in USER_TYPES:
        raise ValidationError("Invalid account type")
    return create_user(db, username=username, password=password, role=ROLE_USER, type_=type_)


def authenticate(db: Session, *, username: str | None, password: str | None) -> User:
    username = normalize_optional(username)
    if not username or not password:
        raise ValidationError("Username and password are required")

    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for username %r", username)
        raise AuthenticationError("Invalid username or password")
    return user


def list_users(db: Session) -> list[User]:
    return list(db.execute(select(User).order_by(User.created_at.desc())).scalars().all())


def update_user(
    db: Session,
    user_id: uuid.UUID,
    *,
    username: str | None = None,
    password: str | None = None,
    role: str | None = None,
    type_: str | None = None,
) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    new_username = normalize_optional(username) or user.username
    new_role = role or user.role
    new_type = type_ or user.type
    _validate_role_type(new_role, new_type)

    if new_username != user.username and _username_taken(db, new_username, exclude_id=user.id):
        raise ConflictError(DUPLICATE_USERNAME)

    user.username = new_username
    user.role = new_role
    user.type = new_type
    if password:
        user.password_hash = hash_password(password)

    commit_or_conflict(db, DUPLICATE_USERNAME)
    db.refresh(user)
    logger.info("Updated user %s", user.id)
    return user


def delete_user(db: Session, user_id: uuid.UUID) -> None:
    """
    Delete a user and everything that depends on them in one transaction.

    Removes the user's pets together with the records and assignments of those
    pets, records and assignments the user wrote as a vet, and both kinds of
    office link. The foreign keys cascade as well; the explicit statements keep
    the cascade intact on backends where FK enforcement is off.
    """
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    pet_ids = select(Pet.id).where(Pet.owner_id == user_id)
    statements = [
        delete(VetRecord).where(or_(VetRecord.pet_id.in_(pet_ids), VetRecord.vet_id == user_id)),
        delete(VetPatient).where(or_(VetPatient.pet_id.in_(pet_ids), VetPatient.vet_id == user_id)),
        delete(PreferredVetOffice).where(PreferredVetOffice.user_id == user_id),
        delete(VetOfficeMember).where(VetOfficeMember.vet_user_id == user_id),
        delete(Pet).where(Pet.owner_id == user_id),
        delete(User).where(User.id == user_id),
    ]
    try:
        for stmt in statements:
            db.execute(stmt.execution_options(synchronize_session=False))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted user %s with dependent rows", user_id)
