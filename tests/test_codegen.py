"""Tests for Elixir snippet generation."""

from __future__ import annotations

import pytest

from dbcell.codegen import Formatter, generate, literal, quote_string
from dbcell.codegen.terms import call, keyword, keyword_list, match, pipe, var
from dbcell.drivers import DriverKind
from dbcell.models import ConnectionConfig


def _config(**attrs: object) -> ConnectionConfig:
    return ConnectionConfig.from_attrs(attrs)


def test_postgres_default_snippet() -> None:
    source = generate(_config(variable="conn"))

    assert source == (
        'opts = [hostname: "localhost", port: 5432, username: "", password: "", database: ""]\n'
        "{:ok, conn} = Kino.start_child({Postgrex, opts})"
    )


def test_mysql_options_break_when_too_long() -> None:
    source = generate(
        _config(
            variable="db",
            type="mysql",
            hostname="localhost",
            port=4444,
            username="admin",
            password="pass",
            database="default",
        )
    )

    assert source == (
        "opts = [\n"
        '  hostname: "localhost",\n'
        "  port: 4444,\n"
        '  username: "admin",\n'
        '  password: "pass",\n'
        '  database: "default"\n'
        "]\n"
        "\n"
        "{:ok, db} = Kino.start_child({MyXQL, opts})"
    )


def test_sqlite_snippet() -> None:
    source = generate(_config(variable="db", type="sqlite", database_path="/path/to/sqlite3.db"))

    assert source == (
        'opts = [database: "/path/to/sqlite3.db"]\n'
        "{:ok, db} = Kino.start_child({Exqlite, opts})"
    )


def test_bigquery_snippet_with_empty_credentials() -> None:
    source = generate(_config(variable="db", type="bigquery"))

    assert source == (
        "credentials = %{}\n"
        "\n"
        "opts = [\n"
        "  name: ReqBigQuery.Goth,\n"
        "  http_client: &Req.request/1,\n"
        "  source: {:service_account, credentials, []}\n"
        "]\n"
        "\n"
        "{:ok, _pid} = Kino.start_child({Goth, opts})\n"
        "\n"
        "db =\n"
        "  Req.new(http_errors: :raise)\n"
        '  |> ReqBigQuery.attach(goth: ReqBigQuery.Goth, project_id: "", default_dataset_id: "")\n'
        "\n"
        ":ok"
    )


def test_bigquery_credentials_are_sorted_and_broken_across_lines() -> None:
    source = generate(
        _config(
            variable="db",
            type="bigquery",
            project_id="my-project-with-a-rather-long-identifier",
            credentials={
                "type": "service_account",
                "client_email": "robot@my-project.iam.gserviceaccount.com",
                "private_key_id": "abc123",
            },
        )
    )

    assert source.startswith(
        "credentials = %{\n"
        '  "client_email" => "robot@my-project.iam.gserviceaccount.com",\n'
        '  "private_key_id" => "abc123",\n'
        '  "type" => "service_account"\n'
        "}\n\n"
    )
    assert source.endswith(
        "db =\n"
        "  Req.new(http_errors: :raise)\n"
        "  |> ReqBigQuery.attach(\n"
        "    goth: ReqBigQuery.Goth,\n"
        '    project_id: "my-project-with-a-rather-long-identifier",\n'
        '    default_dataset_id: ""\n'
        "  )\n"
        "\n"
        ":ok"
    )


def test_snowflake_snippet() -> None:
    source = generate(
        _config(
            variable="db",
            type="snowflake",
            hostname="https://example.com",
            username="admin",
            password="pass",
            database="default",
            schema="foobar",
        )
    )

    assert source == (
        "opts = [\n"
        '  host: "https://example.com",\n'
        '  username: "admin",\n'
        '  password: "pass",\n'
        '  database: "default",\n'
        '  schema: "foobar",\n'
        '  account_name: "",\n'
        '  role: "",\n'
        '  warehouse: ""\n'
        "]\n"
        "\n"
        "{:ok, db} = Kino.start_child({SnowflakeEx, opts})"
    )


def test_absent_port_renders_as_nil() -> None:
    config = _config(variable="conn")
    config.port = None

    assert "port: nil" in generate(config)


@pytest.mark.parametrize("kind", list(DriverKind))
def test_default_config_binds_variable_once(kind: DriverKind) -> None:
    config = ConnectionConfig.from_attrs({"type": kind, "variable": "my_conn"})

    source = generate(config)

    if kind is DriverKind.BIGQUERY:
        assert source.count("my_conn =") == 1
        assert source.endswith("\n:ok")
    else:
        assert source.count("{:ok, my_conn}") == 1
    assert generate(config) == source


def test_quote_string_escapes_elixir_specials() -> None:
    assert quote_string('p"a\\ss#{x}\n') == '"p\\"a\\\\ss\\#{x}\\n"'
    assert quote_string("tab\there") == '"tab\\there"'
    assert quote_string("\x01") == '"\\u0001"'
    assert quote_string("#hash {}") == '"#hash {}"'


def test_literal_scalars() -> None:
    formatter = Formatter()

    assert formatter.flat(literal(None)) == "nil"
    assert formatter.flat(literal(True)) == "true"
    assert formatter.flat(literal(7)) == "7"
    assert formatter.flat(literal(1.5)) == "1.5"
    assert formatter.flat(literal(1e-05)) == "1.0e-5"
    assert formatter.flat(literal(["a", 1])) == '["a", 1]'
    assert formatter.flat(literal({"b": {}, "a": None})) == '%{"a" => nil, "b" => %{}}'


def test_format_block_separates_multiline_statements() -> None:
    formatter = Formatter(line_length=20)
    statements = [
        match(var("a"), literal(1)),
        match(var("b"), keyword_list([("first", literal("x")), ("second", literal("y"))])),
        var(":ok"),
    ]

    assert formatter.format_block(statements) == (
        "a = 1\n"
        "\n"
        "b = [\n"
        '  first: "x",\n'
        '  second: "y"\n'
        "]\n"
        "\n"
        ":ok"
    )


def test_pipeline_stays_flat_when_it_fits() -> None:
    term = match(var("x"), pipe(call("Req.new"), call("Req.get!", *keyword([("url", literal("/"))]))))

    assert Formatter().render(term) == 'x = Req.new() |> Req.get!(url: "/")'


def test_line_length_counts_trailing_comma() -> None:
    formatter = Formatter(line_length=14)
    term = keyword_list([("key", literal("abcdef")), ("k", literal(1))])

    # '  key: "abcdef",' is 16 columns, so the value alone would not fit either.
    assert formatter.render(term) == '[\n  key: "abcdef",\n  k: 1\n]'
