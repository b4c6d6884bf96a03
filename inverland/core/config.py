"""
Application Configuration

Uses Pydantic Settings for environment variable management.
Supports both development (SQLite, in-process document store) and
production (server database, Firestore).
"""
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ===========================================
    # APPLICATION
    # ===========================================
    APP_NAME: str = "Inverland CRM"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", alias="ENVIRONMENT")
    DEBUG: bool = Field(default=False, alias="DEBUG")
    SECRET_KEY: str = Field(default="change-me-in-production", alias="SECRET_KEY")
    LOG_LEVEL: str = Field(default="INFO", alias="LOG_LEVEL")

    # ===========================================
    # LOCAL STORE
    # ===========================================
    # Keyed JSON blobs, one per entity collection
    DATABASE_URL: str = Field(
        default="sqlite:///./data/inverland.db",
        alias="DATABASE_URL"
    )
    STORAGE_KEY_PREFIX: str = Field(default="inverland_", alias="STORAGE_KEY_PREFIX")

    # PostgreSQL settings (when DATABASE_URL starts with postgresql://)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # ===========================================
    # REMOTE DOCUMENT STORE
    # ===========================================
    # firestore, memory, none
    REMOTE_BACKEND: str = Field(default="memory", alias="REMOTE_BACKEND")
    FIRESTORE_PROJECT_ID: str = Field(default="", alias="FIRESTORE_PROJECT_ID")
    # Collections written through to the remote store (others stay local-only)
    REMOTE_COLLECTIONS: List[str] = Field(default=["users"], alias="REMOTE_COLLECTIONS")
    # Mirror remote collections into the local store as a read cache
    MIRROR_REMOTE_LOCALLY: bool = Field(default=True, alias="MIRROR_REMOTE_LOCALLY")

    # ===========================================
    # LISTINGS & DATA
    # ===========================================
    PROPERTIES_PER_PAGE: int = Field(default=9, alias="PROPERTIES_PER_PAGE")
    SEED_SAMPLE_DATA: bool = Field(default=True, alias="SEED_SAMPLE_DATA")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True

    @property
    def is_development(self) -> bool:
        """Check if running in the local development environment"""
        return self.ENVIRONMENT.strip().lower() in ("development", "dev", "local")

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite database"""
        return self.DATABASE_URL.startswith("sqlite")

    def storage_key(self, collection: str) -> str:
        """Local store key for an entity collection"""
        return f"{self.STORAGE_KEY_PREFIX}{collection}"


# Global settings instance
settings = Settings()
