"""Domain errors raised by the service layer.

Services never raise ``HTTPException``; the API layer maps these types to
status codes in ``fixsewa.main``.
"""


class FixSewaError(Exception):
    """Base class for all domain failures."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class DuplicateEmail(FixSewaError):
    """An account with this email already exists."""

    status_code = 409


class NotFound(FixSewaError):
    status_code = 404


class InvalidCredentials(FixSewaError):
    status_code = 401


class Unauthorized(FixSewaError):
    """The principal's role may not perform this operation."""

    status_code = 403


class InvalidInput(FixSewaError):
    """Malformed or missing fields, out-of-range values, illegal transitions."""

    status_code = 400


class InvalidState(FixSewaError):
    """A stored record violates an invariant the operation relies on."""

    status_code = 409


class Conflict(FixSewaError):
    status_code = 409


class StoreError(FixSewaError):
    """The data store failed; nothing is retried."""

    status_code = 503
