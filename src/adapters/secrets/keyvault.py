"""
Azure Key Vault secret provider - Implements SecretProvider protocol.

Secrets live in the vault under their kebab-case names
(database-url, email-connection-string, admin-emails).
"""

import logging

from azure.core.exceptions import ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

logger = logging.getLogger(__name__)


class KeyVaultSecretProvider:
    """
    Implements SecretProvider protocol via azure-keyvault-secrets.

    A missing secret returns None so the resolver can fall through to
    the next provider; authentication or network errors propagate.
    """

    name = "key-vault"

    def __init__(self, client: SecretClient) -> None:
        self._client = client

    @classmethod
    def from_vault_url(cls, vault_url: str) -> "KeyVaultSecretProvider":
        """Build a provider authenticated with DefaultAzureCredential."""
        logger.info("Using Key Vault at %s", vault_url)
        return cls(SecretClient(vault_url=vault_url, credential=DefaultAzureCredential()))

    def get_secret(self, secret_name: str) -> str | None:
        try:
            secret = self._client.get_secret(secret_name)
        except ResourceNotFoundError:
            return None
        return secret.value
