"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .supplier import SupplierRegistration


class RegistrationState(str, Enum):
    """
    Registration workflow states for a single submission.

    Happy path:
        RECEIVED -> RATE_CHECKED -> VALIDATED -> DEDUP_CHECKED
        -> PERSISTED -> NOTIFIED -> RESPONDED

    Terminal failure states:
    - REJECTED_RATE: rate limiter denied the client
    - REJECTED_VALIDATION: validator reported at least one error
    - REJECTED_DUPLICATE: email already registered
    - FAILED_PERSIST: store unavailable or insert failed

    Once PERSISTED, a submission can no longer fail: notification
    outcomes are recorded, never raised.
    """

    RECEIVED = "RECEIVED"
    RATE_CHECKED = "RATE_CHECKED"
    VALIDATED = "VALIDATED"
    DEDUP_CHECKED = "DEDUP_CHECKED"
    PERSISTED = "PERSISTED"
    NOTIFIED = "NOTIFIED"
    RESPONDED = "RESPONDED"
    REJECTED_RATE = "REJECTED_RATE"
    REJECTED_VALIDATION = "REJECTED_VALIDATION"
    REJECTED_DUPLICATE = "REJECTED_DUPLICATE"
    FAILED_PERSIST = "FAILED_PERSIST"


class NotificationState(str, Enum):
    """How many of the two post-registration emails went out."""

    FULL = "full"
    PARTIAL = "partial"
    NONE = "none"


@dataclass(frozen=True)
class OutgoingEmail:
    """Transport-neutral email message."""

    to: tuple[str, ...]
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class SendResult:
    """Outcome of a single send attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "SendResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class NotificationReport:
    """Joined outcome of the confirmation and admin-alert sends."""

    confirmation: SendResult
    admin_alert: SendResult

    @property
    def state(self) -> NotificationState:
        sent = sum((self.confirmation.success, self.admin_alert.success))
        if sent == 2:
            return NotificationState.FULL
        if sent == 1:
            return NotificationState.PARTIAL
        return NotificationState.NONE


class SupplierRepository(Protocol):
    """Port interface for supplier persistence."""

    def exists_by_email(self, email: str) -> bool:
        """
        Check whether a supplier is already registered under this email.

        Args:
            email: Normalized (lowercased) email address

        Returns:
            True if a registration exists, False otherwise
        """
        ...

    def insert(self, registration: SupplierRegistration) -> int:
        """
        Persist a new supplier registration.

        The store's UNIQUE constraint on email is the authoritative
        duplicate guard. A violation must surface as
        SupplierAlreadyRegistered, any other failure as
        RegistrationStoreError.

        Args:
            registration: Validated and sanitized registration

        Returns:
            Identifier of the inserted row
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, message: OutgoingEmail) -> SendResult:
        """
        Deliver a message.

        Implementations may raise on transport failure; the
        notification dispatcher converts exceptions into failed results.
        """
        ...


class SecretProvider(Protocol):
    """Port interface for a single source of secrets."""

    name: str

    def get_secret(self, secret_name: str) -> str | None:
        """
        Look up a secret by name.

        Returns:
            The secret value, or None if this provider does not hold it.
            Raises if the provider itself is unreachable.
        """
        ...


class RateLimiter(Protocol):
    """Port interface for per-client request throttling."""

    def allow(self, client_id: str) -> bool:
        """Record a request for client_id and return False if over the limit."""
        ...
