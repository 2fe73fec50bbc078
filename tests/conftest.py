"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A complete, valid supplier submission
- A controllable clock for the rate limiter
- Mock factories for the repository and email sender
"""

from typing import Any
from unittest.mock import Mock

import pytest

from src.domain.ports import SendResult
from tests.clock import FakeClock


@pytest.fixture
def valid_payload() -> dict[str, Any]:
    """Raw form submission that passes every check."""
    return {
        "companyName": "Acme Supplies BV",
        "contactPerson": "Jan Peeters",
        "email": "Billing@Acme-Supplies.BE",
        "phone": "+32 470 12 34 56",
        "address": "Rue de la Loi 16",
        "city": "Brussels",
        "postalCode": "1000",
        "country": "Belgium",
        "vatNumber": "BE 0123 456 789",
        "iban": "BE68 5390 0754 7034",
        "bic": "gebabebb",
        "bankName": "BNP Paribas Fortis",
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> Mock:
    """Repository mock reporting no existing supplier."""
    repo = Mock()
    repo.exists_by_email.return_value = False
    repo.insert.return_value = 1
    return repo


@pytest.fixture
def email_sender() -> Mock:
    """Email sender mock that always succeeds."""
    sender = Mock()
    sender.send.return_value = SendResult(success=True, message_id="msg-1")
    return sender
