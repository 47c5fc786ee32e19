"""Error hierarchy for teamgate.

Error layers:
- TeamgateError: Base class for all teamgate errors
- DomainError: Business rule violations, invalid input, denied access (4xx responses)
- InfrastructureError: System-level failures like storage or misconfiguration (503 responses)

These errors are mapped to HTTP responses in application/api/errors.py.
"""


class TeamgateError(Exception):
    """Base class for all teamgate errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(TeamgateError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(
        self, message: str, field: str | None = None, code: str | None = None
    ) -> None:
        super().__init__(message, code=code or "VALIDATION_ERROR")
        self.field = field


class InvalidInputError(DomainError):
    """Malformed identifier or argument (e.g. a team id that is not a UUID)."""


class InvalidUserError(DomainError):
    """A resolver that requires a user was called without one."""


class BadRequestError(DomainError):
    """Structural invariant would be violated (last admin, resources still in team)."""


class AuthorizationError(DomainError):
    """User not authorized for this operation."""


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(TeamgateError):
    """Base class for infrastructure/system errors."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
