class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidReadingError(ValidationError):
    """Raised when a position reading carries malformed coordinates."""


class AlreadyCompletedError(ValidationError):
    """Raised when today's attendance record is already closed."""


class OutOfBoundsError(ValidationError):
    """Raised when a measured position is outside the geofence and simulation is off."""


class ScanConflictError(ValidationError):
    """Raised when another scan already opened today's record for the same user."""


class AuthenticationError(DomainError):
    """Raised when there is no usable session identity."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class LLMNotConfiguredError(DomainError):
    """Raised when the LLM client is requested without an API key."""
