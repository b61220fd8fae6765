"""Application configuration settings.

Provides settings for the HTTP surface, task storage and event queue.
Storage and queue backends are selected by the presence of their
connection settings.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _has_value(value: str | None) -> bool:
    return bool(value and value.strip())


class APISettings(BaseSettings):
    """General API and process settings."""

    title: str = Field(default="TaskHub API", description="API title")
    description: str = Field(
        default="Task management API",
        description="API description",
    )
    version: str = Field(default="1.0.0", description="API version")
    host: str = Field(default="0.0.0.0", description="Listening host")
    port: int = Field(default=8080, description="Listening port")
    environment: str = Field(
        default="development",
        description="Deployment environment label (development, production, ...)",
    )
    api_prefix: str = Field(default="/api", description="API route prefix")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )
    log_level: str = Field(default="INFO", description="Log level")
    shutdown_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for closing each resource on shutdown",
    )

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running with the production label."""
        return self.environment.strip().lower() == "production"


class StorageSettings(BaseSettings):
    """Document store settings. Unset URL selects in-memory storage."""

    mongodb_url: str | None = Field(
        default=None,
        description="MongoDB connection string",
    )
    database: str = Field(default="tasks_db", description="Database name")
    collection: str = Field(default="tasks", description="Collection name")
    server_selection_timeout_ms: int = Field(
        default=5000,
        description="Server selection timeout for the MongoDB client",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def uses_document_store(self) -> bool:
        """Check if a document store is configured."""
        return _has_value(self.mongodb_url)


class QueueSettings(BaseSettings):
    """Event queue settings. Both values are needed to enable publishing."""

    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL for the event queue",
    )
    name: str | None = Field(
        default=None,
        description="Queue (Redis list) name",
    )

    model_config = SettingsConfigDict(
        env_prefix="QUEUE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def is_enabled(self) -> bool:
        """Check if both the connection URL and queue name are set."""
        return _has_value(self.redis_url) and _has_value(self.name)


class Settings(BaseModel):
    """All settings groups."""

    api: APISettings = Field(default_factory=APISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
