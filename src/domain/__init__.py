"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for supplier
self-registration: validation and sanitization, rate limiting, the
registration workflow and notification dispatch. It defines its own
port interfaces for infrastructure abstraction, ensuring true
hexagonal architecture decoupling.
"""

from .exceptions import (
    DependencyError,
    InvalidSubmission,
    RateLimitExceeded,
    RegistrationError,
    RegistrationStoreError,
    SecretUnavailable,
    SupplierAlreadyRegistered,
)
from .notifications import NotificationDispatcher
from .ports import (
    EmailSender,
    NotificationReport,
    NotificationState,
    OutgoingEmail,
    RateLimiter,
    RegistrationState,
    SecretProvider,
    SendResult,
    SupplierRepository,
)
from .rate_limiter import RateLimiterState, SlidingWindowRateLimiter
from .registration import RegistrationOutcome, RegistrationService
from .secrets import SecretResolver
from .supplier import SupplierRegistration
from .validation import ValidationResult, validate

__all__ = [
    "DependencyError",
    "EmailSender",
    "InvalidSubmission",
    "NotificationDispatcher",
    "NotificationReport",
    "NotificationState",
    "OutgoingEmail",
    "RateLimitExceeded",
    "RateLimiter",
    "RateLimiterState",
    "RegistrationError",
    "RegistrationOutcome",
    "RegistrationService",
    "RegistrationState",
    "RegistrationStoreError",
    "SecretProvider",
    "SecretResolver",
    "SecretUnavailable",
    "SendResult",
    "SlidingWindowRateLimiter",
    "SupplierAlreadyRegistered",
    "SupplierRegistration",
    "SupplierRepository",
    "ValidationResult",
    "validate",
]
