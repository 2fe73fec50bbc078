"""
Environment secret provider - Implements SecretProvider protocol.

Maps secret names onto environment variables. Used as the fallback
layer behind Key Vault, and as the only layer in local development.
"""

import os
from collections.abc import Mapping

from src.domain.secrets import ADMIN_EMAILS, DATABASE_URL, EMAIL_CONNECTION_STRING

DEFAULT_ENV_MAPPING = {
    DATABASE_URL: "DATABASE_URL",
    EMAIL_CONNECTION_STRING: "EMAIL_CONNECTION_STRING",
    ADMIN_EMAILS: "ADMIN_EMAILS",
}


class EnvironmentSecretProvider:
    """Implements SecretProvider protocol over os.environ."""

    name = "environment"

    def __init__(
        self,
        mapping: Mapping[str, str] = DEFAULT_ENV_MAPPING,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._mapping = dict(mapping)
        self._environ = os.environ if environ is None else environ

    def get_secret(self, secret_name: str) -> str | None:
        env_var = self._mapping.get(secret_name)
        if env_var is None:
            return None
        value = self._environ.get(env_var, "").strip()
        return value or None
