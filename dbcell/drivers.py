"""Registry of supported database drivers and their client dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Tuple


class UnsupportedDriverError(ValueError):
    """Raised when a driver kind outside the registry is requested."""


class DriverKind(str, Enum):
    """Database backends a connection cell can target.

    Declaration order doubles as the detection order used when picking a
    default kind for a fresh cell.
    """

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    BIGQUERY = "bigquery"
    SNOWFLAKE = "snowflake"


@dataclass(frozen=True, slots=True)
class DriverSpec:
    """Static description of a driver kind."""

    kind: DriverKind
    label: str
    attribute_keys: Tuple[str, ...]
    dependency: str
    package: str
    default_port: int | None = None


AvailabilityProbe = Callable[[DriverKind], bool]

_DRIVER_SPECS: Mapping[DriverKind, DriverSpec] = {
    DriverKind.POSTGRES: DriverSpec(
        kind=DriverKind.POSTGRES,
        label="PostgreSQL",
        attribute_keys=("database", "hostname", "port", "username", "password"),
        dependency='{:postgrex, "~> 0.16.3"}',
        package="postgrex",
        default_port=5432,
    ),
    DriverKind.MYSQL: DriverSpec(
        kind=DriverKind.MYSQL,
        label="MySQL",
        attribute_keys=("database", "hostname", "port", "username", "password"),
        dependency='{:myxql, "~> 0.6.2"}',
        package="myxql",
        default_port=3306,
    ),
    DriverKind.SQLITE: DriverSpec(
        kind=DriverKind.SQLITE,
        label="SQLite",
        attribute_keys=("database_path",),
        dependency='{:exqlite, "~> 0.11.0"}',
        package="exqlite",
    ),
    DriverKind.BIGQUERY: DriverSpec(
        kind=DriverKind.BIGQUERY,
        label="Google BigQuery",
        attribute_keys=("project_id", "default_dataset_id", "credentials"),
        dependency='{:req_bigquery, github: "livebook-dev/req_bigquery"}',
        package="req_bigquery",
    ),
    DriverKind.SNOWFLAKE: DriverSpec(
        kind=DriverKind.SNOWFLAKE,
        label="Snowflake",
        attribute_keys=(
            "hostname",
            "username",
            "password",
            "account_name",
            "database",
            "schema",
            "role",
            "warehouse",
        ),
        dependency='{:snowflake_elixir, github: "joshuataylor/snowflake_elixir"}',
        package="snowflake_elixir",
    ),
}

_unregistered = [kind.value for kind in DriverKind if kind not in _DRIVER_SPECS]
if _unregistered:  # pragma: no cover - guards future additions to DriverKind
    raise RuntimeError(f"Driver kinds missing a registry entry: {', '.join(_unregistered)}")


def parse_driver_kind(value: DriverKind | str) -> DriverKind:
    """Coerce a wire value into a DriverKind."""

    try:
        return DriverKind(value)
    except ValueError:
        raise UnsupportedDriverError(f"Unsupported driver kind '{value}'.") from None


def driver_spec(kind: DriverKind | str) -> DriverSpec:
    """Return the registry entry for the given kind."""

    return _DRIVER_SPECS[parse_driver_kind(kind)]


def driver_specs() -> tuple[DriverSpec, ...]:
    """All registry entries in detection order."""

    return tuple(_DRIVER_SPECS[kind] for kind in DriverKind)


def default_port(kind: DriverKind | str | None) -> int | None:
    """Default port for the kind; unknown kinds have none."""

    try:
        return driver_spec(kind).default_port  # type: ignore[arg-type]
    except UnsupportedDriverError:
        return None


def missing_dependency(kind: DriverKind | str, probe: AvailabilityProbe) -> str | None:
    """Dependency declaration to suggest when the kind's client is unavailable."""

    spec = driver_spec(kind)
    if probe(spec.kind):
        return None
    return spec.dependency


def default_driver_kind(probe: AvailabilityProbe) -> DriverKind:
    """First kind whose client is available, falling back to postgres."""

    for kind in DriverKind:
        if probe(kind):
            return kind
    return DriverKind.POSTGRES


__all__ = [
    "AvailabilityProbe",
    "DriverKind",
    "DriverSpec",
    "UnsupportedDriverError",
    "default_driver_kind",
    "default_port",
    "driver_spec",
    "driver_specs",
    "missing_dependency",
    "parse_driver_kind",
]
