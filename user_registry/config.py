"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - database_url has no default: a missing DATABASE_URL fails Settings() and
      the process exits before listening (see main.run)
    - get_settings() is cached (lru_cache): single instance per process
    - environment == "production" disables error detail in responses

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - NODE_ENV accepted as an alias of ENVIRONMENT so existing deployment env files keep working
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


def to_async_url(url: str) -> str:
    """Hosting providers hand out postgres:// URLs; the async engine needs +asyncpg."""
    if isinstance(url, str):
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return url.replace(prefix, "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    database_url: str

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        return to_async_url(v)

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_connect_timeout_seconds: float = 5.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = Field(
        "development", validation_alias=AliasChoices("environment", "node_env"),
    )
    static_dir: Path | None = None
    cors_origins: list[str] = []

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def resolve_static_dir(self) -> Path:
        """Configured STATIC_DIR, else the first existing conventional location."""
        if self.static_dir is not None:
            return self.static_dir.resolve()
        candidates = [
            Path.cwd() / "public",
            Path.cwd() / "static",
            PACKAGE_DIR.parent / "public",
        ]
        for candidate in candidates:
            if candidate.is_dir():
                return candidate.resolve()
        return candidates[0].resolve()


@lru_cache
def get_settings() -> Settings:
    return Settings()
