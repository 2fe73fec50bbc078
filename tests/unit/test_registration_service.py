"""
Unit tests for RegistrationService domain logic.

Tests domain logic with mocked ports to verify:
- Rate limiting and validation short-circuit before any I/O
- Duplicate detection (pre-check and store constraint)
- Persistence failures are fatal
- Notification failures are not
- Step ordering
"""

import logging
from unittest.mock import Mock

import pytest

from src.domain.exceptions import (
    InvalidSubmission,
    RateLimitExceeded,
    RegistrationStoreError,
    SupplierAlreadyRegistered,
)
from src.domain.notifications import NotificationDispatcher
from src.domain.ports import NotificationState, SendResult
from src.domain.rate_limiter import SlidingWindowRateLimiter
from src.domain.registration import RegistrationService
from src.domain.supplier import SupplierRegistration
from tests.clock import FakeClock


def make_service(
    repository: Mock,
    sender: Mock,
    rate_limiter=None,
    admins: list[str] | None = None,
    **kwargs,
) -> RegistrationService:
    if rate_limiter is None:
        rate_limiter = Mock()
        rate_limiter.allow.return_value = True
    return RegistrationService(
        repository=repository,
        notifier=NotificationDispatcher(sender, ["ops@acme.be"] if admins is None else admins),
        rate_limiter=rate_limiter,
        **kwargs,
    )


class TestSuccessfulRegistration:
    """Tests for the happy path."""

    def test_register_returns_outcome(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        service = make_service(repository, email_sender)

        outcome = service.register(valid_payload, "203.0.113.7")

        assert outcome.supplier_id == 1
        assert outcome.registration.email == "billing@acme-supplies.be"
        assert outcome.notifications.state == NotificationState.FULL

    def test_inserts_sanitized_registration(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        valid_payload["companyName"] = "<script>alert(1)</script>Acme"
        service = make_service(repository, email_sender)

        service.register(valid_payload, "203.0.113.7")

        inserted = repository.insert.call_args[0][0]
        assert isinstance(inserted, SupplierRegistration)
        assert inserted.company_name == "Acme"
        assert inserted.iban == "BE68539007547034"

    def test_steps_run_in_order(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        """Duplicate check, then insert, then notifications."""
        manager = Mock()
        manager.attach_mock(repository, "repository")
        manager.attach_mock(email_sender, "sender")
        service = make_service(repository, email_sender)

        service.register(valid_payload, "203.0.113.7")

        names = [name for name, _, _ in manager.mock_calls]
        assert names[:2] == ["repository.exists_by_email", "repository.insert"]
        assert names[2:] == ["sender.send", "sender.send"]

    def test_logs_persisted_supplier(
        self,
        repository: Mock,
        email_sender: Mock,
        valid_payload: dict,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        service = make_service(repository, email_sender)

        with caplog.at_level(logging.INFO):
            service.register(valid_payload, "203.0.113.7")

        assert "Registered supplier 1 (Acme Supplies BV)" in caplog.text


class TestRateLimiting:
    """Tests for rate limit rejection."""

    def test_denied_client_rejected_before_validation(
        self, repository: Mock, email_sender: Mock
    ) -> None:
        limiter = Mock()
        limiter.allow.return_value = False
        service = make_service(repository, email_sender, rate_limiter=limiter)

        with pytest.raises(RateLimitExceeded):
            service.register({}, "203.0.113.7")

        limiter.allow.assert_called_once_with("203.0.113.7")
        repository.exists_by_email.assert_not_called()
        repository.insert.assert_not_called()

    def test_sixth_submission_rejected(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        limiter = SlidingWindowRateLimiter(window_seconds=900, max_requests=5, clock=FakeClock())
        service = make_service(repository, email_sender, rate_limiter=limiter)

        for _ in range(5):
            service.register(valid_payload, "203.0.113.7")
        with pytest.raises(RateLimitExceeded):
            service.register(valid_payload, "203.0.113.7")

        assert repository.insert.call_count == 5


class TestValidationFailure:
    """Tests for validation rejection."""

    def test_all_errors_reported(self, repository: Mock, email_sender: Mock) -> None:
        service = make_service(repository, email_sender, require_vat_number=True)

        with pytest.raises(InvalidSubmission) as exc_info:
            service.register({}, "203.0.113.7")

        assert exc_info.value.errors == [
            "Company name is required",
            "Email is required",
            "IBAN is required",
            "VAT number is required",
        ]

    def test_no_io_on_invalid_submission(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        valid_payload["iban"] = "BE00000000000000"
        service = make_service(repository, email_sender)

        with pytest.raises(InvalidSubmission):
            service.register(valid_payload, "203.0.113.7")

        repository.exists_by_email.assert_not_called()
        repository.insert.assert_not_called()
        email_sender.send.assert_not_called()


class TestDuplicateRejection:
    """Tests for at-most-one registration per email."""

    @pytest.mark.parametrize("email", ["a@b.com", "A@B.COM", "  a@B.com "])
    def test_existing_email_rejected_any_case(
        self, repository: Mock, email_sender: Mock, valid_payload: dict, email: str
    ) -> None:
        repository.exists_by_email.side_effect = lambda value: value == "a@b.com"
        valid_payload["email"] = email
        service = make_service(repository, email_sender)

        with pytest.raises(SupplierAlreadyRegistered):
            service.register(valid_payload, "203.0.113.7")

        repository.exists_by_email.assert_called_once_with("a@b.com")
        repository.insert.assert_not_called()
        email_sender.send.assert_not_called()

    def test_constraint_violation_on_insert_is_duplicate(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        """A concurrent insert that wins the race still yields a duplicate rejection."""
        repository.insert.side_effect = SupplierAlreadyRegistered("billing@acme-supplies.be")
        service = make_service(repository, email_sender)

        with pytest.raises(SupplierAlreadyRegistered):
            service.register(valid_payload, "203.0.113.7")

        email_sender.send.assert_not_called()


class TestPersistenceFailure:
    """Tests for store failures."""

    def test_insert_failure_is_fatal(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        repository.insert.side_effect = RegistrationStoreError("Supplier insert failed")
        service = make_service(repository, email_sender)

        with pytest.raises(RegistrationStoreError):
            service.register(valid_payload, "203.0.113.7")

        email_sender.send.assert_not_called()

    def test_lookup_failure_is_fatal(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        repository.exists_by_email.side_effect = RegistrationStoreError("Duplicate check failed")
        service = make_service(repository, email_sender)

        with pytest.raises(RegistrationStoreError):
            service.register(valid_payload, "203.0.113.7")

        repository.insert.assert_not_called()


class TestNotificationFailure:
    """Tests that email problems never fail a persisted registration."""

    def test_always_failing_sender(self, repository: Mock, valid_payload: dict) -> None:
        sender = Mock()
        sender.send.side_effect = TimeoutError("smtp timeout")
        service = make_service(repository, sender)

        outcome = service.register(valid_payload, "203.0.113.7")

        assert outcome.supplier_id == 1
        assert outcome.notifications.confirmation.success is False
        assert outcome.notifications.admin_alert.success is False
        assert outcome.notifications.state == NotificationState.NONE

    def test_unsuccessful_result(self, repository: Mock, valid_payload: dict) -> None:
        sender = Mock()
        sender.send.return_value = SendResult.failed("rejected by relay")
        service = make_service(repository, sender)

        outcome = service.register(valid_payload, "203.0.113.7")

        assert outcome.notifications.confirmation.error == "rejected by relay"
        repository.insert.assert_called_once()

    def test_missing_admin_recipients(
        self, repository: Mock, email_sender: Mock, valid_payload: dict
    ) -> None:
        service = make_service(repository, email_sender, admins=[])

        outcome = service.register(valid_payload, "203.0.113.7")

        assert outcome.notifications.state == NotificationState.PARTIAL
