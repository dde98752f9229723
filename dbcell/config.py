"""App configuration loading helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import tomllib

from pydantic import BaseModel, Field, ValidationError

from .codegen import DEFAULT_LINE_LENGTH
from .drivers import DriverKind

CONFIG_FILE = Path.home() / ".config" / "dbcell" / "config.toml"

LOG = logging.getLogger(__name__)


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    variable_prefix: str = "conn"
    line_length: int = DEFAULT_LINE_LENGTH
    mix_lock: Path | None = None
    available_drivers: list[DriverKind] | None = None
    connection: dict[str, Any] = Field(default_factory=dict)

    def with_connection(self, attrs: Mapping[str, Any]) -> AppConfig:
        """Return a copy holding the given persisted cell attrs."""

        return self.model_copy(update={"connection": dict(attrs)})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        LOG.warning("Ignoring unreadable config file", extra={"path": str(CONFIG_FILE)})
        return AppConfig()

    try:
        return AppConfig(**data)
    except ValidationError:
        LOG.warning("Ignoring invalid config file", extra={"path": str(CONFIG_FILE)})
        return AppConfig()


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f"variable_prefix = {_toml_value(config.variable_prefix)}",
        f"line_length = {config.line_length}",
    ]
    if config.mix_lock is not None:
        lines.append(f"mix_lock = {_toml_value(str(config.mix_lock))}")
    if config.available_drivers is not None:
        lines.append(f"available_drivers = {_toml_value([kind.value for kind in config.available_drivers])}")
    if config.connection:
        lines.extend(_toml_table("connection", config.connection))
    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    prefix = raw.get("variable_prefix")
    if isinstance(prefix, str):
        data["variable_prefix"] = prefix
    line_length = raw.get("line_length")
    if isinstance(line_length, int) and not isinstance(line_length, bool) and line_length > 0:
        data["line_length"] = line_length
    mix_lock = raw.get("mix_lock")
    if isinstance(mix_lock, str) and mix_lock:
        data["mix_lock"] = Path(mix_lock).expanduser()
    drivers = raw.get("available_drivers")
    if isinstance(drivers, list):
        known = {kind.value for kind in DriverKind}
        data["available_drivers"] = [name for name in drivers if isinstance(name, str) and name in known]
    connection = raw.get("connection")
    if isinstance(connection, dict):
        data["connection"] = connection
    return data


def _toml_table(name: str, table: Mapping[str, Any]) -> list[str]:
    lines = ["", f"[{name}]"]
    nested: list[tuple[str, Mapping[str, Any]]] = []
    for key, value in table.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            nested.append((key, value))
            continue
        lines.append(f"{_toml_key(key)} = {_toml_value(value)}")
    for key, value in nested:
        lines.extend(_toml_table(f"{name}.{_toml_key(key)}", value))
    return lines


def _toml_key(key: str) -> str:
    return json.dumps(str(key), ensure_ascii=False)


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Mapping):
        entries = ", ".join(
            f"{_toml_key(key)} = {_toml_value(item)}" for key, item in value.items() if item is not None
        )
        return f"{{ {entries} }}" if entries else "{}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(item) for item in value if item is not None) + "]"
    return json.dumps(str(value), ensure_ascii=False)


__all__ = ["AppConfig", "CONFIG_FILE", "load_config", "save_config"]
