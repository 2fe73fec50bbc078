"""
Domain exceptions - Semantic error types for supplier registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each type onto an HTTP status code.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class InvalidSubmission(RegistrationError):
    """Submitted fields are missing or fail format validation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class SupplierAlreadyRegistered(RegistrationError):
    """A supplier with the same email address already exists."""

    pass


class RateLimitExceeded(RegistrationError):
    """Client sent too many submissions within the rate window."""

    pass


class DependencyError(RegistrationError):
    """An infrastructure dependency (store, secret provider) failed."""

    pass


class RegistrationStoreError(DependencyError):
    """The supplier store could not be queried or written."""

    pass


class SecretUnavailable(DependencyError):
    """No secret provider could resolve a required secret."""

    pass
