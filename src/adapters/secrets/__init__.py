"""Secret provider adapters - Key Vault and environment layers."""

from .environment import EnvironmentSecretProvider
from .keyvault import KeyVaultSecretProvider

__all__ = ["EnvironmentSecretProvider", "KeyVaultSecretProvider"]
