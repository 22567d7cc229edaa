"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each class carries a stable ``kind`` that callers can map to a message
without parsing the text.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "domain_error"


# --- Validation -------------------------------------------------------------


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "validation_error"


class OrderNotPendingError(ValidationError):
    """The order has already left the ``pending`` state."""

    kind = "order_not_pending"


class OrderNotCompletedError(ValidationError):
    """The operation needs a completed order."""

    kind = "order_not_completed"


class MalformedTokenError(ValidationError):
    """A handoff token string could not be decoded."""

    kind = "malformed_token"


# --- Lookup / identity ------------------------------------------------------


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "not_found"


class OrderNotFoundError(EntityNotFoundError):
    kind = "order_not_found"


class UnauthorizedError(DomainException):
    """The acting party is not allowed to perform this operation."""

    kind = "unauthorized"


# --- Handoff tokens ---------------------------------------------------------


class TokenError(DomainException):
    """A handoff token was rejected.  Recoverable by issuing a new one."""

    kind = "token_error"


class InvalidSignatureError(TokenError):
    kind = "invalid_signature"


class TokenSupersededError(InvalidSignatureError):
    """The token is authentic but a newer one was issued for the order."""


class TokenExpiredError(TokenError):
    kind = "expired"


class TokenAlreadyUsedError(TokenError):
    kind = "already_used"


# --- Conflicts --------------------------------------------------------------


class ConflictError(DomainException):
    kind = "conflict"


class DuplicateRatingError(ConflictError):
    """The rater has already rated this order."""

    kind = "duplicate_rating"


class ConcurrentUpdateError(ConflictError):
    """A conditional write lost against a concurrent writer."""

    kind = "concurrent_update"
