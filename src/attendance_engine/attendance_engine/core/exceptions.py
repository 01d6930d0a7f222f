class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity (academic year, class) does not exist."""


class StoreUnavailableError(DomainError):
    """Raised when the backing store fails; the whole query is aborted."""
