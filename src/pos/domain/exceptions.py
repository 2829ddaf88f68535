"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the application layer can turn them into failed results and the CLI can
display user-friendly messages.  Each class carries a ``kind`` so callers
can switch on the category without importing every subclass.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "DomainError"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "Validation"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "NotFound"


class OrderNotFoundError(EntityNotFoundError):
    pass


class ProductNotFoundError(EntityNotFoundError):
    pass


class LineItemNotFoundError(EntityNotFoundError):
    pass


class InvalidStateError(DomainException):
    """A mutation was attempted on an order that is no longer open."""

    kind = "InvalidState"


class ProductUnavailableError(DomainException):
    """The product exists but has been deactivated."""

    kind = "ProductUnavailable"


class OrderNumberExhaustedError(DomainException):
    """No unique order number could be allocated within the allowed number of attempts."""

    kind = "OrderNumberExhausted"


class PersistenceError(DomainException):
    """The storage collaborator failed.  ``cause`` holds the original error."""

    kind = "PersistenceFailure"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
