"""Configuration loading: the ordered list of sources plus dashboard settings."""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tailgrid_core.errors import ConfigError
from tailgrid_core.models import DEFAULT_MAX_HISTORY, DEFAULT_TAIL_LINES, Source

CONFIG_ENV = "TAILGRID_CONFIG"
DEFAULT_CONFIG_PATH = "~/.rogger/config.toml"

DEFAULT_REFRESH_MS = 50
MIN_REFRESH_MS = 10
MAX_REFRESH_MS = 1000
DEFAULT_READ_TIMEOUT = 30.0

REQUIRED_FIELDS = ("name", "host", "port", "log_path")


@dataclass
class Settings:
    sources: list[Source] = field(default_factory=list)
    refresh_ms: int = DEFAULT_REFRESH_MS
    read_timeout: float = DEFAULT_READ_TIMEOUT
    path: Path | None = None


def resolve_config_path(path: str | None = None) -> Path:
    raw = path or os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH
    return Path(raw).expanduser()


def read_config_file(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"config path not found: {path}")
    try:
        text = path.read_text()
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc

    if path.suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON config: {exc}") from exc
    else:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML config: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("config root must be a table")
    return data


def _positive_int(entry: dict, key: str, default: int, label: str) -> int:
    value = entry.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{label}: {key} must be a positive integer, got {value!r}")
    return value


def _optional_str(entry: dict, key: str, label: str) -> str | None:
    value = entry.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{label}: {key} must be a string")
    return value


def parse_source(entry: Any, index: int) -> Source:
    label = f"logs[{index}]"
    if not isinstance(entry, dict):
        raise ConfigError(f"{label}: entry must be a table")

    for key in REQUIRED_FIELDS:
        if entry.get(key) in (None, ""):
            raise ConfigError(f"{label}: missing required field '{key}'")
    for key in ("name", "host", "log_path"):
        if not isinstance(entry[key], str):
            raise ConfigError(f"{label}: {key} must be a string")

    port = entry["port"]
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"{label}: port must be an integer in 1..65535, got {port!r}")

    key_path = _optional_str(entry, "ssh_key", label) or _optional_str(entry, "key_path", label)
    return Source(
        name=entry["name"],
        host=entry["host"],
        port=port,
        log_path=entry["log_path"],
        username=_optional_str(entry, "username", label),
        password=_optional_str(entry, "password", label),
        key_path=str(Path(key_path).expanduser()) if key_path else None,
        max_history=_positive_int(entry, "max_history", DEFAULT_MAX_HISTORY, label),
        tail_lines=_positive_int(entry, "tail_lines", DEFAULT_TAIL_LINES, label),
    )


def parse_settings(data: dict, path: Path | None = None) -> Settings:
    logs = data.get("logs")
    if not isinstance(logs, list) or not logs:
        raise ConfigError("config must define at least one [[logs]] entry")

    settings = Settings(
        sources=[parse_source(entry, i) for i, entry in enumerate(logs)],
        path=path,
    )

    if "refresh_ms" in data:
        try:
            value = int(data["refresh_ms"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"refresh_ms must be an integer: {exc}") from exc
        settings.refresh_ms = min(MAX_REFRESH_MS, max(MIN_REFRESH_MS, value))

    if "read_timeout" in data:
        try:
            timeout = float(data["read_timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"read_timeout must be a number: {exc}") from exc
        if timeout <= 0:
            raise ConfigError("read_timeout must be positive")
        settings.read_timeout = timeout

    return settings


def load_settings(path: str | None = None) -> Settings:
    config_path = resolve_config_path(path)
    return parse_settings(read_config_file(config_path), config_path)
