"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the outer layers (CLI, RPC adapters) can catch them uniformly.  Each class
carries a machine-readable ``code`` that maps cleanly onto a transport status.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "DOMAIN_ERROR"
    retryable = False


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    code = "VALIDATION_ERROR"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "NOT_FOUND"


class UnauthorizedError(DomainException):
    """The acting user may not perform this operation."""

    code = "UNAUTHORIZED"


class InvalidTransitionError(DomainException):
    """Status rank violation or an unknown target status."""

    code = "INVALID_TRANSITION"


class ItemsLockedError(DomainException):
    """Line items of a dispatched order cannot change."""

    code = "ITEMS_LOCKED"


class AlreadyCancelledError(DomainException):
    code = "ALREADY_CANCELLED"


class ReturnConfirmationRequiredError(DomainException):
    """A delivered order can only be cancelled once goods are confirmed back."""

    code = "RETURN_CONFIRMATION_REQUIRED"


class HoldAlreadyReleasedError(DomainException):
    code = "HOLD_ALREADY_RELEASED"


class StorageUnavailableError(DomainException):
    """Transient storage failure; the transaction was rolled back.

    The only error a caller may safely retry.
    """

    code = "STORAGE_UNAVAILABLE"
    retryable = True
