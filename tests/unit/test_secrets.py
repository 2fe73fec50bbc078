"""
Unit tests for layered secret resolution and the provider adapters.
"""

import logging
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from azure.core.exceptions import ResourceNotFoundError

from src.adapters.secrets import EnvironmentSecretProvider, KeyVaultSecretProvider
from src.domain.exceptions import DependencyError, SecretUnavailable
from src.domain.secrets import ADMIN_EMAILS, DATABASE_URL, SecretResolver, parse_recipients


def provider(name: str, values: dict[str, str] | None = None, error: Exception | None = None):
    fake = Mock()
    fake.name = name
    if error is not None:
        fake.get_secret.side_effect = error
    else:
        fake.get_secret.side_effect = lambda secret_name: (values or {}).get(secret_name)
    return fake


class TestSecretResolver:
    """Tests for the ordered provider chain."""

    def test_first_provider_wins(self) -> None:
        resolver = SecretResolver(
            [provider("vault", {DATABASE_URL: "from-vault"}), provider("env", {DATABASE_URL: "from-env"})]
        )
        assert resolver.get(DATABASE_URL) == "from-vault"

    def test_falls_through_missing_value(self) -> None:
        resolver = SecretResolver([provider("vault"), provider("env", {DATABASE_URL: "from-env"})])
        assert resolver.get(DATABASE_URL) == "from-env"

    def test_falls_through_empty_value(self) -> None:
        resolver = SecretResolver(
            [provider("vault", {DATABASE_URL: ""}), provider("env", {DATABASE_URL: "from-env"})]
        )
        assert resolver.get(DATABASE_URL) == "from-env"

    def test_failing_provider_is_logged_and_skipped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        resolver = SecretResolver(
            [
                provider("vault", error=ConnectionError("vault unreachable")),
                provider("env", {DATABASE_URL: "from-env"}),
            ]
        )

        with caplog.at_level(logging.INFO):
            assert resolver.get(DATABASE_URL) == "from-env"

        assert "Secret provider vault failed for database-url" in caplog.text
        assert "Resolved secret database-url from env" in caplog.text

    def test_unavailable_raises_dependency_error(self) -> None:
        resolver = SecretResolver([provider("vault"), provider("env")])

        with pytest.raises(SecretUnavailable) as exc_info:
            resolver.get(DATABASE_URL)
        assert isinstance(exc_info.value, DependencyError)

    def test_get_optional_returns_none(self) -> None:
        resolver = SecretResolver([provider("env")])
        assert resolver.get_optional(ADMIN_EMAILS) is None

    def test_hits_are_cached(self) -> None:
        env = provider("env", {DATABASE_URL: "from-env"})
        resolver = SecretResolver([env])

        resolver.get(DATABASE_URL)
        resolver.get(DATABASE_URL)

        assert env.get_secret.call_count == 1

    def test_availability_reports_booleans_only(self) -> None:
        resolver = SecretResolver([provider("env", {DATABASE_URL: "postgresql://secret"})])

        report = resolver.availability()

        assert report == {
            "database-url": True,
            "email-connection-string": False,
            "admin-emails": False,
        }

    def test_provider_names(self) -> None:
        resolver = SecretResolver([provider("key-vault"), provider("environment")])
        assert resolver.provider_names == ["key-vault", "environment"]


class TestParseRecipients:
    """Tests for the comma-separated admin recipient list."""

    def test_trims_and_drops_empty_entries(self) -> None:
        assert parse_recipients(" a@acme.be, ,b@acme.be,, ") == ["a@acme.be", "b@acme.be"]

    @pytest.mark.parametrize("value", [None, "", " , "])
    def test_empty(self, value: str | None) -> None:
        assert parse_recipients(value) == []


class TestEnvironmentSecretProvider:
    """Tests for the environment variable layer."""

    def test_maps_secret_name_to_variable(self) -> None:
        env = EnvironmentSecretProvider(environ={"ADMIN_EMAILS": "ops@acme.be"})
        assert env.get_secret(ADMIN_EMAILS) == "ops@acme.be"

    def test_unknown_secret_returns_none(self) -> None:
        env = EnvironmentSecretProvider(environ={"ADMIN_EMAILS": "ops@acme.be"})
        assert env.get_secret("something-else") is None

    def test_blank_variable_returns_none(self) -> None:
        env = EnvironmentSecretProvider(environ={"DATABASE_URL": "   "})
        assert env.get_secret(DATABASE_URL) is None

    def test_reads_process_environment_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://env")
        assert EnvironmentSecretProvider().get_secret(DATABASE_URL) == "postgresql://env"


class TestKeyVaultSecretProvider:
    """Tests for the Key Vault layer with a mocked SecretClient."""

    def test_returns_secret_value(self) -> None:
        client = Mock()
        client.get_secret.return_value = SimpleNamespace(value="postgresql://vault")

        vault = KeyVaultSecretProvider(client)

        assert vault.get_secret(DATABASE_URL) == "postgresql://vault"
        client.get_secret.assert_called_once_with("database-url")

    def test_missing_secret_returns_none(self) -> None:
        client = Mock()
        client.get_secret.side_effect = ResourceNotFoundError("not found")

        assert KeyVaultSecretProvider(client).get_secret(DATABASE_URL) is None

    def test_other_errors_propagate(self) -> None:
        client = Mock()
        client.get_secret.side_effect = ConnectionError("no route to vault")

        with pytest.raises(ConnectionError):
            KeyVaultSecretProvider(client).get_secret(DATABASE_URL)

    def test_vault_outage_falls_back_to_environment(self) -> None:
        client = Mock()
        client.get_secret.side_effect = ConnectionError("no route to vault")
        resolver = SecretResolver(
            [
                KeyVaultSecretProvider(client),
                EnvironmentSecretProvider(environ={"DATABASE_URL": "postgresql://env"}),
            ]
        )

        assert resolver.get(DATABASE_URL) == "postgresql://env"
