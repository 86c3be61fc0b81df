"""Module: deps."""

import uuid
from typing import Generator

import httpx
from fastapi import Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from petvet.core.config import settings
from petvet.core.errors import AuthenticationError, StoreError
from petvet.core.permissions import Identity
from petvet.core.security import SessionClaims, decode_session, encode_session
from petvet.db.models.user import User
from petvet.db.session import SessionLocal
from petvet.services.directory import build_directory_client
from petvet.services.users import get_user


# Dependency provider: one DB session per request lifecycle.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreError() from exc
    finally:
        db.close()


# Dependency provider: HTTP client for the external clinic directory.
def get_directory_client() -> Generator[httpx.Client, None, None]:
    client = build_directory_client()
    try:
        yield client
    finally:
        client.close()


def get_identity(request: Request, db: Session = Depends(get_db)) -> Identity | None:
    """
    Resolve the session cookie to the current identity, or None for anonymous.

    The signed token only names the user; role and type are read from the
    database row so deletions and admin edits take effect immediately.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    try:
        claims = decode_session(token)
        user_id = uuid.UUID(claims.user_id)
    except (AuthenticationError, ValueError):
        return None

    user = get_user(db, user_id)
    if not user:
        return None
    return Identity(id=user.id, username=user.username, role=user.role, type=user.type)


def set_session_cookie(response: Response, user: User) -> None:
    token = encode_session(
        SessionClaims(user_id=str(user.id), username=user.username, role=user.role, type=user.type)
    )
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )
