# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for environment defaults: search roots, digest
algorithm, user version, cache backend and logging.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from assetpipe.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Search paths ===
    asset_root: Path = Path(".")
    asset_paths: str = ""

    # === Digest ===
    asset_version: str = ""
    digest_algorithm: Literal["sha1", "sha256", "md5"] = "sha1"

    # === Reading ===
    default_encoding: str = "utf-8"

    # === Cache ===
    cache_backend: Literal["memory", "null"] = "memory"
    cache_max_size: int = 1000

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_max_size")
    @classmethod
    def validate_cache_max_size(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("cache_max_size must be >= 0")
        return v

    @field_validator("default_encoding")
    @classmethod
    def validate_default_encoding(cls, v: str) -> str:  # noqa: N805
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown default_encoding: {v!r}") from exc
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.digest_algorithm not in hashlib.algorithms_available:
            errors.append(
                f"DIGEST_ALGORITHM {self.digest_algorithm!r} is not available in hashlib"
            )

        if self.log_file is not None:
            try:
                parse_size(self.log_rotation)
            except ValueError:
                errors.append(
                    f"LOG_ROTATION {self.log_rotation!r} is not a size like '10MB'"
                )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def asset_paths_list(self) -> list[str]:
        """Parse comma-separated search roots, made absolute against asset_root."""
        root = self.asset_root.expanduser()
        return [
            str((root / p.strip()).resolve())
            for p in self.asset_paths.split(",")
            if p.strip()
        ]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-build config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
