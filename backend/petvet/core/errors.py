"""Module: errors.

Domain error taxonomy. Services and the authorization guard raise these; the
handlers registered in ``petvet.main`` translate each one into its HTTP status
and a stable ``error`` code.
"""


class PetVetError(Exception):
    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PetVetError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid input"


class AuthenticationError(PetVetError):
    status_code = 401
    code = "not_authenticated"
    default_message = "Not authenticated"


class AuthorizationError(PetVetError):
    status_code = 403
    code = "access_denied"
    default_message = "Access denied"


class NotFoundError(PetVetError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ConflictError(PetVetError):
    status_code = 409
    code = "conflict"
    default_message = "Already exists"


class FetchError(PetVetError):
    status_code = 500
    code = "fetch_failed"
    default_message = "Failed to fetch vet data"


class StoreError(PetVetError):
    status_code = 500
    code = "store_error"
    default_message = "Unexpected storage failure"
