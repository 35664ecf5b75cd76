class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is the stable tag callers switch on; ``http_status`` is what the
    web boundary answers with.
    """

    code = "DomainError"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "InvalidData"
    http_status = 422


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "Unauthorized"
    http_status = 403


class StateError(DomainError):
    """Raised when an action is not legal from the record's current state."""

    code = "InvalidTransition"
    http_status = 409


class IncompleteRatingError(DomainError):
    """Raised when a form is finalized before every line has all sub-scores."""

    code = "IncompleteData"
    http_status = 422


class NotFoundError(DomainError):
    code = "NotFound"
    http_status = 404


class InvariantViolation(RuntimeError):
    """Internal state that can only come from a programming error."""
