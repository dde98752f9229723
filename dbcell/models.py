"""Connection configuration model shared by the session and code generator."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .drivers import DriverKind, default_port, driver_spec, parse_driver_kind
from .normalizer import is_valid_variable_name, parse_port

LOG = logging.getLogger(__name__)

DEFAULT_KEYS = ("type", "variable")

_TEXT_FIELDS = (
    "hostname",
    "username",
    "password",
    "database",
    "database_path",
    "db_schema",
    "account_name",
    "warehouse",
    "role",
    "project_id",
    "default_dataset_id",
)


class ConnectionConfig(BaseModel):
    """Typed connection settings for a single cell.

    Attributes are addressed by their wire names (``type``, ``schema``, ...)
    everywhere outside Python code; ``field_names()`` lists them.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="forbid")

    driver: DriverKind = Field(alias="type")
    variable: str
    hostname: str = "localhost"
    port: int | None = None
    username: str = ""
    password: str = ""
    database: str = ""
    database_path: str = ""
    db_schema: str = Field(default="", alias="schema")
    account_name: str = ""
    warehouse: str = ""
    role: str = ""
    project_id: str = ""
    default_dataset_id: str = ""
    credentials: dict[str, Any] = Field(default_factory=dict)

    @field_validator("variable")
    @classmethod
    def _check_variable(cls, value: str) -> str:
        if not is_valid_variable_name(value):
            raise ValueError(f"'{value}' is not a valid variable name")
        return value

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("credentials", mode="before")
    @classmethod
    def _none_as_empty_map(cls, value: object) -> object:
        return {} if value is None else value

    @classmethod
    def from_attrs(
        cls,
        attrs: Mapping[str, Any] | None,
        *,
        default_driver: DriverKind = DriverKind.POSTGRES,
        variable_prefix: str = "conn",
    ) -> ConnectionConfig:
        """Build a config from persisted attrs, filling defaults for gaps."""

        attrs = dict(attrs or {})
        driver = parse_driver_kind(attrs.get("type") or default_driver)
        variable = attrs.get("variable")
        if not is_valid_variable_name(variable):
            variable = variable_prefix
        port = parse_port(attrs.get("port"))
        if port is None:
            port = default_port(driver)
        values: dict[str, Any] = {"type": driver, "variable": variable, "port": port}
        for name in cls.field_names():
            value = attrs.get(name)
            if name in values or value is None:
                continue
            if name == "credentials" and isinstance(value, Mapping):
                values[name] = {str(key): item for key, item in value.items()}
            elif name != "credentials" and isinstance(value, str):
                values[name] = value
            else:
                LOG.warning("Ignoring persisted attr of unexpected type", extra={"field": name})
        return cls.model_validate(values)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Wire names of every field, in declaration order."""

        return tuple(info.alias or name for name, info in cls.model_fields.items())

    @classmethod
    def attribute_for(cls, field: str) -> str:
        """Python attribute backing the given wire name."""

        for name, info in cls.model_fields.items():
            if (info.alias or name) == field:
                return name
        raise ValueError(f"Unknown connection field '{field}'.")

    def fields(self) -> dict[str, Any]:
        """Every field keyed by wire name."""

        return self.model_dump(by_alias=True, mode="json")

    def to_attrs(self) -> dict[str, Any]:
        """Minimal attrs needed to rebuild this config for its driver kind."""

        fields = self.fields()
        keys = DEFAULT_KEYS + driver_spec(self.driver).attribute_keys
        return {key: fields[key] for key in keys}


__all__ = ["ConnectionConfig", "DEFAULT_KEYS"]
