"""
Registration domain service - Supplier intake workflow.

This module orchestrates a single supplier submission from receipt to
response. It owns no I/O of its own; the store, the email transport and
the rate limiter are injected through ports.

Workflow
========

    RECEIVED
      -> REJECTED_RATE          (rate limiter denies the client)
      -> RATE_CHECKED
      -> REJECTED_VALIDATION    (any field error, nothing touched)
      -> VALIDATED
      -> REJECTED_DUPLICATE     (email already registered)
      -> DEDUP_CHECKED
      -> FAILED_PERSIST         (store unavailable / insert failed)
      -> PERSISTED
      -> NOTIFIED (full | partial | none)

The duplicate check strictly precedes the insert and the insert strictly
precedes any notification. The pre-insert check is only there for a
friendlier error: the store's UNIQUE constraint is authoritative, and a
violation raised by insert() maps to the same duplicate rejection.

Once PERSISTED the submission is successful regardless of what happens
to the emails.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import (
    InvalidSubmission,
    RateLimitExceeded,
    RegistrationStoreError,
    SupplierAlreadyRegistered,
)
from .notifications import NotificationDispatcher
from .ports import NotificationReport, RateLimiter, RegistrationState, SupplierRepository
from .supplier import SupplierRegistration
from .validation import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationOutcome:
    """Result of a persisted registration."""

    supplier_id: int
    registration: SupplierRegistration
    notifications: NotificationReport


@dataclass
class RegistrationService:
    """
    Domain service for supplier self-registration.

    Orchestrates rate limiting, validation, duplicate detection,
    persistence and best-effort notification.
    """

    repository: SupplierRepository
    notifier: NotificationDispatcher
    rate_limiter: RateLimiter
    require_vat_number: bool = False
    default_phone_region: str = "BE"

    def register(self, raw: Mapping[str, Any], client_id: str) -> RegistrationOutcome:
        """
        Register a supplier from a raw (unsanitized) submission.

        Args:
            raw: Decoded JSON request body
            client_id: Stable identifier of the submitting client

        Returns:
            RegistrationOutcome with the stored record and email status

        Raises:
            RateLimitExceeded: Too many submissions from client_id
            InvalidSubmission: One or more field errors (all reported)
            SupplierAlreadyRegistered: Email already has a registration
            RegistrationStoreError: Store failed before the record was saved
        """
        self._transition(RegistrationState.RECEIVED, client_id)

        if not self.rate_limiter.allow(client_id):
            self._transition(RegistrationState.REJECTED_RATE, client_id)
            raise RateLimitExceeded(client_id)
        self._transition(RegistrationState.RATE_CHECKED, client_id)

        result = validate(
            raw,
            require_vat_number=self.require_vat_number,
            default_phone_region=self.default_phone_region,
        )
        if not result.is_valid:
            self._transition(RegistrationState.REJECTED_VALIDATION, client_id)
            logger.warning("Submission rejected with %d validation error(s)", len(result.errors))
            raise InvalidSubmission(result.errors)
        registration = result.to_registration()
        self._transition(RegistrationState.VALIDATED, client_id)

        try:
            if self.repository.exists_by_email(registration.email):
                raise SupplierAlreadyRegistered(registration.email)
            self._transition(RegistrationState.DEDUP_CHECKED, client_id)

            supplier_id = self.repository.insert(registration)
        except SupplierAlreadyRegistered:
            self._transition(RegistrationState.REJECTED_DUPLICATE, client_id)
            raise
        except RegistrationStoreError:
            self._transition(RegistrationState.FAILED_PERSIST, client_id)
            raise
        self._transition(RegistrationState.PERSISTED, client_id)
        logger.info("Registered supplier %s (%s)", supplier_id, registration.company_name)

        report = self.notifier.dispatch(registration)
        self._transition(RegistrationState.NOTIFIED, client_id, report.state.value)

        return RegistrationOutcome(
            supplier_id=supplier_id,
            registration=registration,
            notifications=report,
        )

    def _transition(self, state: RegistrationState, client_id: str, detail: str = "") -> None:
        logger.debug("Registration %s client=%s %s", state.value, client_id, detail)
