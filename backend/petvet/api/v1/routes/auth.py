"""Module: auth."""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from petvet.api.v1.routes.deps import clear_session_cookie, get_db, get_identity, set_session_cookie
from petvet.core.permissions import Action, Identity, require
from petvet.services.users import authenticate, register_user, user_to_dict

router = APIRouter()


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class RegisterRequest(BaseModel):
    username: str | None = None
    password: str | None = None
    type: str | None = None


# Endpoint: authenticate a user and issue the session cookie.
@router.post("/login", summary="Login with username and password")
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    require(None, Action.LOGIN)
    user = authenticate(db, username=payload.username, password=payload.password)
    set_session_cookie(response, user)
    return {"user": user_to_dict(user)}


# Endpoint: self-service account creation (never grants admin).
@router.post("/register", status_code=201, summary="Register a new owner or vet account")
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    require(None, Action.REGISTER)
    user = register_user(db, username=payload.username, password=payload.password, type_=payload.type)
    return {"user": user_to_dict(user)}


@router.post("/logout", summary="Clear the session cookie")
def logout(response: Response):
    require(None, Action.LOGOUT)
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/me", summary="Current session identity")
def me(identity: Identity | None = Depends(get_identity)):
    identity = require(identity, Action.SESSION_READ)
    return {
        "user": {
            "id": str(identity.id),
            "username": identity.username,
            "role": identity.role,
            "type": identity.type,
        }
    }
