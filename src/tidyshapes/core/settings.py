"""Centralized configuration for tidyshapes using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

The parser itself is a pure function; these values only provide the defaults
the CLI and the pipeline hand to :class:`~tidyshapes.parsing.parser.TidyCoordinateParser`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `TIDYSHAPES_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    marker : str
        Literal word of the shape header (``"# Shape 01"``); maps from `TIDYSHAPES_MARKER`.
    pair_delimiter : str
        Literal separator between coordinate pairs; maps from `TIDYSHAPES_PAIR_DELIMITER`.
    workers : int
        Thread count for per-shape normalization; 1 means sequential.
    trace_dir : Optional[str]
        Directory for stage snapshots written by the CLI; maps from `TIDYSHAPES_TRACE_DIR`.
    """

    environment: EnvName = Field(default="dev", alias="TIDYSHAPES_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    marker: str = Field(default="Shape", min_length=1, alias="TIDYSHAPES_MARKER")
    pair_delimiter: str = Field(default=" , ", min_length=1, alias="TIDYSHAPES_PAIR_DELIMITER")
    workers: int = Field(default=1, ge=1, alias="TIDYSHAPES_WORKERS")
    trace_dir: str | None = Field(default=None, alias="TIDYSHAPES_TRACE_DIR")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("TIDYSHAPES_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "tidyshapes") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
