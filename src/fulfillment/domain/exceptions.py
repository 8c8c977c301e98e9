"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Stock shortfalls are deliberately *not* in this hierarchy: order creation
returns an ``InsufficientStock`` value instead of raising.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidPromotionFieldError(ValidationError):
    """A promotion update does not fit the promotion's kind or range."""


class PersistenceError(DomainException):
    """A durable write could not be performed.

    In-memory state is left as it was; the next successful save brings
    the file back in line.
    """
