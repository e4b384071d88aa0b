"""Runtime configuration using pydantic-settings.

Every value can be set through a ``PTDIFF_`` prefixed environment variable
(or a ``.env`` file), e.g. ``PTDIFF_OVERFLOW_POLICY=error``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import CleanupMode, OverflowPolicy


class Settings(BaseSettings):
    """Diff engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PTDIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    overflow_policy: OverflowPolicy = OverflowPolicy.TRUNCATE
    cleanup: CleanupMode = CleanupMode.EFFICIENCY

    # Seconds diff_main may spend before returning a coarser script; 0 = no limit
    diff_timeout: float = 1.0
    diff_edit_cost: int = 4

    @field_validator("diff_timeout")
    @classmethod
    def validate_diff_timeout(cls, v: float) -> float:
        """Validate the timeout is not negative."""
        if v < 0:
            raise ValueError("diff_timeout must be >= 0")
        return v

    @field_validator("diff_edit_cost")
    @classmethod
    def validate_diff_edit_cost(cls, v: int) -> int:
        """Validate the edit cost is positive."""
        if v < 1:
            raise ValueError("diff_edit_cost must be >= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return Settings()
