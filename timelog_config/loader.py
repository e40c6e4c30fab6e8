"""
Configuration Loader (``timelog_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen dataclasses
of ``timelog_config.schema``.  The single public entry point for runtime
config is ``timelog_config.get_active_config()``.

Invariants enforced
-------------------
* Unknown keys are rejected, so a typo never silently falls back to a
  default.
* Every value is coerced to the type of the schema default and range
  checked; failures raise ``InvalidConfigError``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  source for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Bad key or value  -> ``InvalidConfigError``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from timelog_config.schema import (
    AssistantSettings,
    BackendSettings,
    CompanySettings,
    ScheduleSettings,
    StorageSettings,
    TimelogConfig,
)
from timelog_kernel.exceptions import InvalidConfigError

_SECTIONS: dict[str, type] = {
    "company": CompanySettings,
    "schedule": ScheduleSettings,
    "assistant": AssistantSettings,
    "backend": BackendSettings,
    "storage": StorageSettings,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 over a canonical JSON rendering of the raw config."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _coerce(key: str, value: Any, default: Any) -> Any:
    """Coerce ``value`` to the type of the schema default."""
    try:
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise TypeError("expected true/false")
            return value
        if isinstance(default, int):
            if isinstance(value, bool):
                raise TypeError("expected an integer")
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, Decimal):
            return Decimal(str(value))
        if isinstance(default, tuple):
            if not isinstance(value, (list, tuple)):
                raise TypeError("expected a list")
            return tuple(int(item) for item in value)
        return str(value)
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise InvalidConfigError(key, value, str(exc)) from exc


def parse_section(name: str, cls: type, data: dict[str, Any] | None) -> Any:
    """Parse one YAML mapping into its settings dataclass."""
    data = data or {}
    if not isinstance(data, dict):
        raise InvalidConfigError(name, data, "expected a mapping")

    fields = {f.name: f for f in dataclasses.fields(cls)}
    unknown = set(data) - set(fields)
    if unknown:
        raise InvalidConfigError(name, sorted(unknown), "unknown keys")

    kwargs = {}
    for key, value in data.items():
        f = fields[key]
        default = f.default if f.default is not dataclasses.MISSING else f.default_factory()
        kwargs[key] = _coerce(f"{name}.{key}", value, default)
    return cls(**kwargs)


def _require(condition: bool, key: str, value: Any, reason: str) -> None:
    if not condition:
        raise InvalidConfigError(key, value, reason)


def validate_config(config: TimelogConfig) -> None:
    """Range checks that types alone cannot express."""
    company = config.company
    _require(
        len(company.currency) == 3 and company.currency.isalpha() and company.currency.isupper(),
        "company.currency", company.currency, "must be a 3-letter ISO 4217 code",
    )

    schedule = config.schedule
    for key in ("submission_days", "payment_days"):
        days = getattr(schedule, key)
        _require(bool(days), f"schedule.{key}", days, "must not be empty")
        _require(all(1 <= d <= 31 for d in days), f"schedule.{key}", days, "days must be 1-31")
    _require(
        schedule.deadline_warning_hours > 0,
        "schedule.deadline_warning_hours", schedule.deadline_warning_hours, "must be positive",
    )

    assistant = config.assistant
    _require(assistant.timeout_seconds > 0, "assistant.timeout_seconds",
             assistant.timeout_seconds, "must be positive")
    for key in ("enhance_temperature", "classify_temperature"):
        value = getattr(assistant, key)
        _require(Decimal("0") <= value <= Decimal("2"), f"assistant.{key}", value, "must be 0-2")
    for key in ("enhance_max_tokens", "classify_max_tokens"):
        value = getattr(assistant, key)
        _require(value > 0, f"assistant.{key}", value, "must be positive")

    backend = config.backend
    for key in ("sync_delay_seconds", "submit_delay_seconds"):
        value = getattr(backend, key)
        _require(value >= 0, f"backend.{key}", value, "must not be negative")
    _require(backend.remote_id_max > 0, "backend.remote_id_max",
             backend.remote_id_max, "must be positive")

    _require(bool(config.storage.database_url), "storage.database_url",
             config.storage.database_url, "must not be empty")


def parse_config(data: dict[str, Any]) -> TimelogConfig:
    """
    Parse a raw YAML mapping into a validated ``TimelogConfig``.

    Raises:
        InvalidConfigError: on unknown keys, bad types or out-of-range values.
    """
    unknown = set(data) - set(_SECTIONS) - {"config_id"}
    if unknown:
        raise InvalidConfigError("<root>", sorted(unknown), "unknown sections")

    sections = {
        name: parse_section(name, cls, data.get(name))
        for name, cls in _SECTIONS.items()
    }
    config = TimelogConfig(
        config_id=str(data.get("config_id", "default")),
        checksum=compute_checksum(data),
        **sections,
    )
    validate_config(config)
    return config


def load_config_file(path: Path) -> TimelogConfig:
    """Load and parse a YAML configuration file."""
    return parse_config(load_yaml_file(path))
