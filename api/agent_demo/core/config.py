import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # API settings
    DEBUG: bool = False
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Agent Demo Platform"

    # CORS settings - accepts string or list, normalized to list[str] by validator
    CORS_ORIGINS: str | list[str] = "*"

    # Directory settings
    DATA_DIR: str = "api/data"

    # Admin settings
    ADMIN_API_KEY: str = ""  # Required in production, empty allowed for testing

    # Security settings for cookie handling
    COOKIE_SECURE: bool = True  # Set to False for HTTP development environments
    ADMIN_SESSION_MAX_AGE: int = (
        86400  # Session duration in seconds (default: 24 hours)
    )
    DEMO_SESSION_MAX_AGE: int = 30 * 86400  # Lifetime of the demo visitor cookie

    # Matching settings
    MATCH_THRESHOLD: float = 0.3  # Best score must be strictly greater to answer
    MAX_VARIANTS: int = 12  # Upper bound on generated variants per text
    VARIANT_RANDOM_SEED: Optional[int] = None  # Pin for reproducible variant sets

    # Chat settings
    CHAT_HISTORY_LIMIT: int = 10  # Messages returned by the history endpoint
    CHAT_SESSION_LIST_LIMIT: int = 20  # Sessions returned by the sessions endpoint

    # Environment settings
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow",
    )

    @property
    def CATALOG_DB_PATH(self) -> str:
        """Complete path to the SQLite catalog database (domains, agents, Q&A)"""
        return self.get_data_path("catalog.db")

    @property
    def CHAT_DB_PATH(self) -> str:
        """Complete path to the SQLite chat database (sessions, messages)"""
        return self.get_data_path("chat.db")

    def get_data_path(self, *path_parts) -> str:
        """Utility method to construct paths within DATA_DIR

        Args:
            *path_parts: Path components to join with DATA_DIR

        Returns:
            Complete path within DATA_DIR
        """
        return os.path.join(self.DATA_DIR, *path_parts)

    @field_validator("MATCH_THRESHOLD")
    @classmethod
    def validate_match_threshold(cls, v: float) -> float:
        """Validate match threshold is within the score range.

        Args:
            v: Threshold value

        Returns:
            Validated threshold value

        Raises:
            ValueError: If threshold is outside [0.0, 1.0]
        """
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"MATCH_THRESHOLD must be between 0.0 and 1.0, got {v}")
        return v

    @field_validator("MAX_VARIANTS", "CHAT_HISTORY_LIMIT", "CHAT_SESSION_LIST_LIMIT")
    @classmethod
    def validate_positive_limit(cls, v: int, info: ValidationInfo) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1, got {v}")
        return v

    @field_validator("ADMIN_SESSION_MAX_AGE")
    @classmethod
    def validate_admin_session_max_age(cls, v: int) -> int:
        """Validate admin session max age is within acceptable range.

        Args:
            v: Session max age in seconds

        Returns:
            Validated session max age

        Raises:
            ValueError: If session max age is outside acceptable range
        """
        if v < 60:
            raise ValueError("ADMIN_SESSION_MAX_AGE must be at least 60 seconds")
        if v > 30 * 24 * 3600:  # 30 days
            raise ValueError("ADMIN_SESSION_MAX_AGE must be ≤ 30 days")
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Normalize CORS_ORIGINS to list of hosts.

        Accepts either a comma-separated string or a list of strings.
        Handles wildcards, trims whitespace, and ignores empty entries.

        Args:
            v: CORS origins as string (comma-separated), list of strings, or "*" for all

        Returns:
            List of CORS origin hosts with whitespace trimmed and empty entries removed
        """
        if isinstance(v, list):
            return [
                host.strip() for host in v if isinstance(host, str) and host.strip()
            ]

        if isinstance(v, str):
            if v.strip() == "*":
                return ["*"]
            return [host.strip() for host in v.split(",") if host.strip()]

        # Unexpected types fail closed (deny all origins)
        return []

    @classmethod
    def _is_production(cls, info: ValidationInfo) -> bool:
        """Check if ENVIRONMENT indicates production.

        Args:
            info: Validation info containing other field values

        Returns:
            True if environment is production, False otherwise
        """
        raw_env = info.data.get("ENVIRONMENT", "development")
        environment = str(raw_env).strip().lower()
        if environment in {"prod"}:
            environment = "production"
        return environment == "production"

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_in_production(cls, v: list[str], info) -> list[str]:
        """Reject wildcard CORS in production environments.

        Args:
            v: Normalized CORS origins list
            info: Validation info containing other field values

        Returns:
            Validated CORS origins list

        Raises:
            ValueError: If wildcard CORS is used in production
        """
        if cls._is_production(info) and v == ["*"]:
            raise ValueError("CORS wildcard '*' not allowed in production")
        return v

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Make paths absolute
        self.DATA_DIR = os.path.abspath(self.DATA_DIR)

    def ensure_data_dirs(self) -> None:
        """Create required data directories if they don't exist.

        This method is called during application startup (lifespan) to avoid
        import-time side effects and I/O operations.
        """
        Path(self.DATA_DIR).mkdir(parents=True, exist_ok=True)


# Thread-safe lazy initialization using lru_cache
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings instance with lazy initialization.

    Settings are only created once on first access, then cached for subsequent calls.
    This prevents module-level side effects and allows testing without environment variables.

    Returns:
        Settings: Application settings object
    """
    return Settings()


def reset_settings() -> None:
    """Reset the cached settings instance.

    Useful for testing when you need to reload settings with different values.
    """
    get_settings.cache_clear()
