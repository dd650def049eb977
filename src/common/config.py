"""Configuration helpers for the builder generator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from dotenv import dotenv_values


DEFAULT_ENVIRONMENT = "development"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_OUTPUT_FORMAT = "yaml"
OUTPUT_FORMATS = ("yaml", "json")


@dataclass
class Settings:
    """Container for environment-derived configuration."""

    environment: str = DEFAULT_ENVIRONMENT
    log_level: str = DEFAULT_LOG_LEVEL
    output_format: str = DEFAULT_OUTPUT_FORMAT
    emit_docs: bool = False

    @classmethod
    def from_env(cls, *, env_files: Iterable[str] | None = None) -> "Settings":
        """Build settings from environment variables, optionally loading dotenv files."""

        env_overrides: dict[str, str] = {}
        if env_files:
            for candidate in env_files:
                candidate_path = os.path.abspath(candidate)
                if os.path.isfile(candidate_path):
                    values = {
                        key: value
                        for key, value in dotenv_values(candidate_path).items()
                        if value is not None
                    }
                    env_overrides.update(values)

        def get_override(key: str) -> Optional[str]:
            if key in os.environ:
                return os.environ[key]
            return env_overrides.get(key)

        def lookup(key: str, default: str) -> str:
            value = get_override(key)
            return value.strip() if value is not None and value.strip() else default

        return cls(
            environment=lookup("BUILDERGEN_ENV", DEFAULT_ENVIRONMENT),
            log_level=lookup("BUILDERGEN_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            output_format=lookup("BUILDERGEN_OUTPUT_FORMAT", DEFAULT_OUTPUT_FORMAT).lower(),
            emit_docs=lookup("BUILDERGEN_EMIT_DOCS", "0") in ("1", "true", "yes"),
        )
