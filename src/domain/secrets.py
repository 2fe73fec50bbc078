"""
Layered secret resolution.

Secrets are looked up through an ordered chain of providers; the first
provider that returns a non-empty value wins. A provider that raises is
logged and skipped, so an unreachable vault degrades to the next layer
(typically environment variables) instead of failing the request.
"""

import logging
from collections.abc import Sequence

from .exceptions import SecretUnavailable
from .ports import SecretProvider

logger = logging.getLogger(__name__)

DATABASE_URL = "database-url"
EMAIL_CONNECTION_STRING = "email-connection-string"
ADMIN_EMAILS = "admin-emails"

KNOWN_SECRETS = (DATABASE_URL, EMAIL_CONNECTION_STRING, ADMIN_EMAILS)


class SecretResolver:
    """Resolves secrets through an ordered provider chain, caching hits."""

    def __init__(self, providers: Sequence[SecretProvider]) -> None:
        self._providers = list(providers)
        self._cache: dict[str, str] = {}

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self._providers]

    def get(self, secret_name: str) -> str:
        """
        Resolve a secret.

        Raises:
            SecretUnavailable: No provider holds a non-empty value
        """
        if secret_name in self._cache:
            return self._cache[secret_name]

        for provider in self._providers:
            try:
                value = provider.get_secret(secret_name)
            except Exception:
                logger.exception(
                    "Secret provider %s failed for %s, trying next", provider.name, secret_name
                )
                continue
            if value:
                logger.info("Resolved secret %s from %s", secret_name, provider.name)
                self._cache[secret_name] = value
                return value
            logger.debug("Secret %s not found in %s", secret_name, provider.name)

        logger.error("Secret %s unavailable from providers %s", secret_name, self.provider_names)
        raise SecretUnavailable(secret_name)

    def get_optional(self, secret_name: str) -> str | None:
        try:
            return self.get(secret_name)
        except SecretUnavailable:
            return None

    def availability(self, secret_names: Sequence[str] = KNOWN_SECRETS) -> dict[str, bool]:
        """Report which secrets resolve, without exposing values."""
        return {name: self.get_optional(name) is not None for name in secret_names}


def parse_recipients(value: str | None) -> list[str]:
    """Split a comma-separated recipient list, trimming and dropping empties."""
    if not value:
        return []
    return [address.strip() for address in value.split(",") if address.strip()]
