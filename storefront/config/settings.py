"""
Application configuration settings.
Handles environment variables and application-wide settings.
"""
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application settings
    app_name: str = Field(default="Storefront API")
    app_version: str = Field(default="1.0.0")
    app_description: str = Field(
        default="Store, blog and ledger service backed by MongoDB"
    )
    debug: bool = Field(default=False)

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    # Database settings
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    database_name: str = Field(default="storefront_db")

    # MongoDB connection settings
    server_selection_timeout_ms: int = Field(default=5000, alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS")
    connect_timeout_ms: int = Field(default=5000, alias="MONGODB_CONNECT_TIMEOUT_MS")
    socket_timeout_ms: int = Field(default=30000, alias="MONGODB_SOCKET_TIMEOUT_MS")
    max_pool_size: int = Field(default=10, alias="MONGODB_MAX_POOL_SIZE")
    min_pool_size: int = Field(default=1, alias="MONGODB_MIN_POOL_SIZE")
    retry_writes: bool = Field(default=True, alias="MONGODB_RETRY_WRITES")
    direct_connection: bool = Field(default=False, alias="MONGODB_DIRECT_CONNECTION")

    # Collection $jsonSchema validators are applied with collMod on startup
    apply_collection_validators: bool = Field(default=True)

    # Logging settings
    log_level: str = Field(default="INFO")

    # Pagination
    max_page_size: int = Field(default=100)

    # Business logic settings
    max_order_items: int = Field(default=50)
    max_item_quantity: int = Field(default=100)
    popular_posts_limit: int = Field(default=5)

    # Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


@lru_cache()
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
