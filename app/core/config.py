"""Application configuration settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Enigma Hub API"
    app_env: str = "development"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    storage_backend: str = "memory"  # "memory", "json" or "database"
    data_dir: str = "./data"
    database_url: str = "sqlite+aiosqlite:///./enigma.db"
    store_namespace: str = "enigma"
    store_timeout_seconds: float = 5.0

    # Bootstrap identities (generated on first start when left empty)
    admin_uuid: str = ""
    dashboard_uuid: str = ""
    seed_demo_content: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Security
    allowed_hosts: str = "*"

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Get allowed hosts as a list."""
        return [host.strip() for host in self.allowed_hosts.split(",")]

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def normalized_storage_backend(self) -> str:
        return self.storage_backend.strip().lower()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
