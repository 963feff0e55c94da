"""Settings loading and validation.

This module provides a minimal, type-safe configuration loader for the loader.

Design principles:
- Fail-fast: missing required fields raise a readable error that includes field path
- No side effects: this module only parses/validates configuration; no fetch/engine init
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


class SettingsError(ValueError):
    """Raised when settings are missing or invalid."""


@dataclass(frozen=True)
class EngineSettings:
    engine: str = "hooks"
    base_url: str = "."
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FetchSettings:
    timeout: float = 30.0
    encoding: str = "utf-8"


@dataclass(frozen=True)
class ObservabilitySettings:
    log_level: str = "INFO"
    trace_enabled: bool = False
    trace_file: str = "./logs/loads.jsonl"


@dataclass(frozen=True)
class Settings:
    loader: EngineSettings = field(default_factory=EngineSettings)
    fetch: FetchSettings = field(default_factory=FetchSettings)
    observability: ObservabilitySettings = field(default_factory=ObservabilitySettings)


def _require_section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None or not isinstance(value, Mapping):
        raise SettingsError(f"Missing required section: {key}")
    return value


def _optional_section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SettingsError(f"Invalid section type: {key}")
    return value


def _require(raw: Mapping[str, Any], key: str, path: str) -> Any:
    if key not in raw:
        raise SettingsError(f"Missing required field: {path}")
    return raw[key]


def _as_str(value: Any, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"Invalid value for {path}: expected non-empty string")
    return value


def _as_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise SettingsError(f"Invalid value for {path}: expected bool")
    return value


def _as_float(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsError(f"Invalid value for {path}: expected float")
    return float(value)


def _as_mapping(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise SettingsError(f"Invalid value for {path}: expected mapping")
    out: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise SettingsError(f"Invalid key in {path}: expected str, got {key!r}")
        out[key] = item
    return out


def validate_settings(settings: Settings) -> None:
    """Validate required fields and basic invariants."""

    if not settings.loader.engine:
        raise SettingsError("Missing required field: loader.engine")
    if not settings.loader.base_url:
        raise SettingsError("Missing required field: loader.base_url")
    if settings.fetch.timeout <= 0:
        raise SettingsError("Invalid value for fetch.timeout: expected positive number")


def load_settings(path: str | Path) -> Settings:
    """Load settings from a YAML file."""

    settings_path = Path(path)
    if not settings_path.exists():
        raise SettingsError(f"Settings file not found: {settings_path}")

    try:
        raw_obj = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file: {settings_path}") from e

    if raw_obj is None or not isinstance(raw_obj, Mapping):
        raise SettingsError(f"Invalid settings root: expected mapping in {settings_path}")

    loader_raw = _optional_section(raw_obj, "loader")
    fetch_raw = _optional_section(raw_obj, "fetch")
    observability_raw = _require_section(raw_obj, "observability")

    loader = EngineSettings(
        engine=_as_str(loader_raw.get("engine", "hooks"), "loader.engine"),
        base_url=_as_str(loader_raw.get("base_url", "."), "loader.base_url"),
        options=_as_mapping(loader_raw.get("options") or {}, "loader.options"),
    )

    fetch = FetchSettings(
        timeout=_as_float(fetch_raw.get("timeout", 30.0), "fetch.timeout"),
        encoding=_as_str(fetch_raw.get("encoding", "utf-8"), "fetch.encoding"),
    )

    observability = ObservabilitySettings(
        log_level=_as_str(
            _require(observability_raw, "log_level", "observability.log_level"),
            "observability.log_level",
        ),
        trace_enabled=_as_bool(
            _require(observability_raw, "trace_enabled", "observability.trace_enabled"),
            "observability.trace_enabled",
        ),
        trace_file=_as_str(
            _require(observability_raw, "trace_file", "observability.trace_file"),
            "observability.trace_file",
        ),
    )

    settings = Settings(loader=loader, fetch=fetch, observability=observability)

    validate_settings(settings)
    return settings
