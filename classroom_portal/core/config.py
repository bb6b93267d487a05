from functools import lru_cache
from typing import List, Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from classroom_portal.core.secret_manager import SecretManager

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    project_name: str = "classroom_portal"
    app_env: str = "dev"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    cosmos_endpoint: Optional[str] = None
    cosmos_key: Optional[str] = None
    cosmos_database_name: str = "classroom-portal"

    storage_account_connection_string: Optional[str] = None
    blob_container_name: str = "classroom-portal"

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    # 7 days
    jwt_expire_minutes: int = 60 * 24 * 7

    key_vault_name: Optional[str] = None

    def load_from_vault(self):
        sm = SecretManager(self.key_vault_name)
        self.jwt_secret_key = sm.get_secret("jwt-secret", self.jwt_secret_key)
        self.cosmos_key = sm.get_secret("cosmos-key", self.cosmos_key)
        self.storage_account_connection_string = sm.get_secret(
            "storage-connection-string", self.storage_account_connection_string
        )


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    if settings.key_vault_name:
        settings.load_from_vault()
    return settings
