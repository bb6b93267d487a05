import logging
from typing import Optional
from azure.core.exceptions import ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

logger = logging.getLogger(__name__)


class SecretManager:
    """Read-only access to the Key Vault holding the portal's credentials."""

    def __init__(self, key_vault_name: str):
        self.client = SecretClient(
            vault_url=f"https://{key_vault_name}.vault.azure.net",
            credential=DefaultAzureCredential(),
        )

    def get_secret(self, name: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return self.client.get_secret(name).value
        except ResourceNotFoundError:
            logger.warning("Secret %s not found in Key Vault; using configured value", name)
            return default
