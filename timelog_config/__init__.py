"""
timelog_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Other components receive a ``TimelogConfig``
    and never read YAML files or environment variables themselves.

Resolution order:
    1. ``path`` argument
    2. ``TIMELOG_CONFIG`` environment variable
    3. ``timelog_config/sets/default.yaml``

    ``TIMELOG_DB_URL``, when set, overrides ``storage.database_url``.

Failure modes:
    - ``FileNotFoundError`` -- the selected file does not exist.
    - ``InvalidConfigError`` -- schema or range validation failed.
"""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path

from timelog_config.loader import load_config_file
from timelog_config.schema import (
    AssistantSettings,
    BackendSettings,
    CompanySettings,
    ScheduleSettings,
    StorageSettings,
    TimelogConfig,
)
from timelog_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "TIMELOG_CONFIG"
DATABASE_URL_ENV = "TIMELOG_DB_URL"


def get_active_config(path: Path | None = None) -> TimelogConfig:
    """Load, validate and return the active configuration."""
    env_path = os.environ.get(CONFIG_PATH_ENV)
    source = Path(path or env_path or DEFAULT_CONFIG_PATH)
    config = load_config_file(source)

    db_url = os.environ.get(DATABASE_URL_ENV)
    if db_url:
        config = dataclasses.replace(
            config, storage=StorageSettings(database_url=db_url)
        )

    _logger.info(
        "TIMELOG_CONFIG_TRACE",
        extra={
            "trace_type": "TIMELOG_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_path": str(source),
            "checksum": config.checksum,
            "assistant_enabled": config.assistant.enabled,
            "assistant_model": config.assistant.model,
            "database_dialect": config.storage.database_url.split(":", 1)[0],
        },
    )
    return config


__all__ = [
    "AssistantSettings",
    "BackendSettings",
    "CompanySettings",
    "ScheduleSettings",
    "StorageSettings",
    "TimelogConfig",
    "get_active_config",
]
