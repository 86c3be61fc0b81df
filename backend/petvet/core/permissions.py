"""Module: permissions.

Single access-control matrix for every route. ``authorize`` is a pure
decision function; ``require`` raises the matching domain error on DENY.
"""

import enum
import uuid
from dataclasses import dataclass

from petvet.core.errors import AuthenticationError, AuthorizationError

ROLE_USER = "user"
ROLE_ADMIN = "admin"
TYPE_OWNER = "owner"
TYPE_VET = "vet"

NOT_AUTHENTICATED = "not authenticated"
ACCESS_DENIED = "access denied"


class Action(str, enum.Enum):
    LOGIN = "auth.login"
    REGISTER = "auth.register"
    LOGOUT = "auth.logout"
    SESSION_READ = "auth.me"

    PET_LIST = "pet.list"
    PET_CREATE = "pet.create"
    PET_READ = "pet.read"
    PET_UPDATE = "pet.update"
    PET_DELETE = "pet.delete"

    PATIENT_LIST = "patient.list"
    PATIENT_ASSIGN = "patient.assign"
    PATIENT_UPDATE = "patient.update"
    PATIENT_REMOVE = "patient.remove"

    RECORD_LIST = "record.list"
    RECORD_CREATE = "record.create"
    VET_STATS = "vet.stats"

    USER_LIST = "user.list"
    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"

    OFFICE_LIST = "office.list"
    OFFICE_CREATE = "office.create"
    OFFICE_DELETE = "office.delete"

    PREFERRED_LIST = "preferred.list"
    PREFERRED_CREATE = "preferred.create"
    PREFERRED_DELETE = "preferred.delete"

    MEMBERSHIP_LIST = "membership.list"
    MEMBERSHIP_CREATE = "membership.create"
    MEMBERSHIP_DELETE = "membership.delete"

    DIRECTORY_SEARCH = "directory.search"
    DIRECTORY_SAVE = "directory.save"
    DIRECTORY_JOIN = "directory.join"


@dataclass(frozen=True)
class Identity:
    id: uuid.UUID
    username: str
    role: str
    type: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_owner(self) -> bool:
        return self.type == TYPE_OWNER

    @property
    def is_vet(self) -> bool:
        return self.type == TYPE_VET


# Foreign-key fields of the target row needed for ownership checks.
@dataclass(frozen=True)
class Resource:
    owner_id: uuid.UUID | None = None
    vet_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    assignment_active: bool = False


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    status_code: int = 200

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)
DENY_UNAUTHENTICATED = Decision(False, NOT_AUTHENTICATED, 401)
DENY_FORBIDDEN = Decision(False, ACCESS_DENIED, 403)

ANONYMOUS_ACTIONS = {Action.LOGIN, Action.REGISTER, Action.LOGOUT}
ANY_USER_ACTIONS = {Action.SESSION_READ, Action.DIRECTORY_SEARCH}

ADMIN_ACTIONS = {
    Action.USER_LIST,
    Action.USER_CREATE,
    Action.USER_UPDATE,
    Action.USER_DELETE,
    Action.OFFICE_LIST,
    Action.OFFICE_CREATE,
    Action.OFFICE_DELETE,
    Action.PET_LIST,
    Action.PET_CREATE,
    Action.PET_READ,
    Action.PET_UPDATE,
    Action.PET_DELETE,
}

OWNER_ACTIONS = {
    Action.PET_LIST,
    Action.PET_CREATE,
    Action.PREFERRED_LIST,
    Action.PREFERRED_CREATE,
    Action.DIRECTORY_SAVE,
}
OWNER_SELF_ACTIONS = {Action.PET_READ, Action.PET_UPDATE, Action.PET_DELETE}

VET_ACTIONS = {
    Action.PATIENT_LIST,
    Action.PATIENT_ASSIGN,
    Action.RECORD_LIST,
    Action.VET_STATS,
    Action.MEMBERSHIP_LIST,
    Action.MEMBERSHIP_CREATE,
    Action.DIRECTORY_JOIN,
}
VET_SELF_ACTIONS = {Action.PATIENT_UPDATE, Action.PATIENT_REMOVE}


def _owner_allows(identity: Identity, action: Action, resource: Resource | None) -> bool:
    if action in OWNER_ACTIONS:
        return True
    if action in OWNER_SELF_ACTIONS:
        return resource is not None and resource.owner_id == identity.id
    if action == Action.PREFERRED_DELETE:
        return resource is not None and resource.user_id == identity.id
    return False


def _vet_allows(identity: Identity, action: Action, resource: Resource | None) -> bool:
    if action in VET_ACTIONS:
        return True
    if action in VET_SELF_ACTIONS:
        return resource is not None and resource.vet_id == identity.id
    if action == Action.RECORD_CREATE:
        # An assignment must exist before any record is written.
        return resource is not None and resource.vet_id == identity.id and resource.assignment_active
    if action == Action.MEMBERSHIP_DELETE:
        return resource is not None and resource.user_id == identity.id
    return False


def authorize(identity: Identity | None, action: Action, resource: Resource | None = None) -> Decision:
    if action in ANONYMOUS_ACTIONS:
        return ALLOW
    if identity is None:
        return DENY_UNAUTHENTICATED
    if action in ANY_USER_ACTIONS:
        return ALLOW

    # Role and type are independent axes; any matching grant allows.
    if identity.is_admin and action in ADMIN_ACTIONS:
        return ALLOW
    if identity.is_owner and _owner_allows(identity, action, resource):
        return ALLOW
    if identity.is_vet and _vet_allows(identity, action, resource):
        return ALLOW
    return DENY_FORBIDDEN


def require(
    identity: Identity | None,
    action: Action,
    resource: Resource | None = None,
    message: str | None = None,
) -> Identity:
    decision = authorize(identity, action, resource)
    if decision.allowed:
        return identity  # type: ignore[return-value]
    if decision.status_code == 401:
        raise AuthenticationError("Not authenticated")
    raise AuthorizationError(message or "Access denied")


def require_authenticated(identity: Identity | None) -> Identity:
    # Runs before row lookups so anonymous callers never learn which ids exist.
    if identity is None:
        raise AuthenticationError("Not authenticated")
    return identity
