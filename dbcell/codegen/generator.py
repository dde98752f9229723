"""Per-driver templates turning a connection config into Elixir source."""

from __future__ import annotations

from typing import Callable, Mapping

from dbcell.drivers import DriverKind
from dbcell.models import ConnectionConfig

from .formatter import DEFAULT_LINE_LENGTH, Formatter
from .terms import (
    Term,
    alias,
    atom,
    call,
    keyword,
    keyword_list,
    list_of,
    literal,
    match,
    pipe,
    tuple_of,
    var,
)

Template = Callable[[ConnectionConfig], list[Term]]


def _start_child(variable: str, module: str) -> Term:
    return match(
        tuple_of(atom("ok"), var(variable)),
        call("Kino.start_child", tuple_of(alias(module), var("opts"))),
    )


def _shared_options(config: ConnectionConfig) -> Term:
    return keyword_list(
        [
            ("hostname", literal(config.hostname)),
            ("port", literal(config.port)),
            ("username", literal(config.username)),
            ("password", literal(config.password)),
            ("database", literal(config.database)),
        ]
    )


def _sqlite(config: ConnectionConfig) -> list[Term]:
    return [
        match(var("opts"), keyword_list([("database", literal(config.database_path))])),
        _start_child(config.variable, "Exqlite"),
    ]


def _postgres(config: ConnectionConfig) -> list[Term]:
    return [match(var("opts"), _shared_options(config)), _start_child(config.variable, "Postgrex")]


def _mysql(config: ConnectionConfig) -> list[Term]:
    return [match(var("opts"), _shared_options(config)), _start_child(config.variable, "MyXQL")]


def _bigquery(config: ConnectionConfig) -> list[Term]:
    # TODO: support Goth's :refresh_token and :metadata sources alongside service accounts.
    goth = alias("ReqBigQuery.Goth")
    options = keyword_list(
        [
            ("name", goth),
            ("http_client", var("&Req.request/1")),
            ("source", tuple_of(atom("service_account"), var("credentials"), list_of())),
        ]
    )
    request = pipe(
        call("Req.new", *keyword([("http_errors", atom("raise"))])),
        call(
            "ReqBigQuery.attach",
            *keyword(
                [
                    ("goth", goth),
                    ("project_id", literal(config.project_id)),
                    ("default_dataset_id", literal(config.default_dataset_id)),
                ]
            ),
        ),
    )
    return [
        match(var("credentials"), literal(config.credentials)),
        match(var("opts"), options),
        match(tuple_of(atom("ok"), var("_pid")), call("Kino.start_child", tuple_of(alias("Goth"), var("opts")))),
        match(var(config.variable), request),
        atom("ok"),
    ]


def _snowflake(config: ConnectionConfig) -> list[Term]:
    options = keyword_list(
        [
            ("host", literal(config.hostname)),
            ("username", literal(config.username)),
            ("password", literal(config.password)),
            ("database", literal(config.database)),
            ("schema", literal(config.db_schema)),
            ("account_name", literal(config.account_name)),
            ("role", literal(config.role)),
            ("warehouse", literal(config.warehouse)),
        ]
    )
    return [match(var("opts"), options), _start_child(config.variable, "SnowflakeEx")]


_TEMPLATES: Mapping[DriverKind, Template] = {
    DriverKind.POSTGRES: _postgres,
    DriverKind.MYSQL: _mysql,
    DriverKind.SQLITE: _sqlite,
    DriverKind.BIGQUERY: _bigquery,
    DriverKind.SNOWFLAKE: _snowflake,
}

_untemplated = [kind.value for kind in DriverKind if kind not in _TEMPLATES]
if _untemplated:  # pragma: no cover - guards future additions to DriverKind
    raise RuntimeError(f"Driver kinds missing a source template: {', '.join(_untemplated)}")


def to_terms(config: ConnectionConfig) -> list[Term]:
    """Statements of the snippet for the config's driver kind."""

    return _TEMPLATES[config.driver](config)


def generate(config: ConnectionConfig, *, line_length: int = DEFAULT_LINE_LENGTH) -> str:
    """Formatted Elixir source that starts the configured connection."""

    return Formatter(line_length).format_block(to_terms(config))


__all__ = ["Template", "generate", "to_terms"]
