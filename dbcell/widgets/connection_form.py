"""Form editing the connection fields one at a time."""

from __future__ import annotations

import json
from typing import Any, Callable

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Input, Label, Select

from dbcell.drivers import driver_spec, driver_specs
from dbcell.session import ConnectionSession, FieldsUpdated, SessionEvent

FIELD_LABELS: dict[str, str] = {
    "variable": "Assign to",
    "hostname": "Hostname",
    "port": "Port",
    "username": "User",
    "password": "Password",
    "database": "Database",
    "database_path": "Database path",
    "schema": "Schema",
    "account_name": "Account name",
    "warehouse": "Warehouse",
    "role": "Role",
    "project_id": "Project ID",
    "default_dataset_id": "Default dataset ID",
    "credentials": "Credentials (JSON)",
}


def display_value(field: str, value: Any) -> str:
    """Text shown in the input for a stored field value."""

    if value is None:
        return ""
    if field == "credentials":
        return json.dumps(value, sort_keys=True) if value else ""
    return str(value)


class ConnectionForm(VerticalScroll):
    """Driver selector plus one input per field relevant to the driver."""

    DEFAULT_CSS = """
    ConnectionForm {
        width: 1fr;
        padding: 1 2;
    }
    ConnectionForm .field-row {
        height: auto;
    }
    ConnectionForm Label {
        width: 20;
        padding: 1 1 0 0;
    }
    ConnectionForm Input {
        width: 1fr;
    }
    """

    def __init__(self, session: ConnectionSession) -> None:
        super().__init__(id="connection-form")
        self._session = session
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        fields = self._session.fields()
        yield Select(
            [(spec.label, spec.kind.value) for spec in driver_specs()],
            value=fields["type"],
            allow_blank=False,
            id="field-type",
        )
        for name, label in FIELD_LABELS.items():
            with Horizontal(classes="field-row", id=f"row-{name}"):
                yield Label(label)
                yield Input(
                    value=display_value(name, fields[name]),
                    password=name == "password",
                    id=f"field-{name}",
                )

    async def on_mount(self) -> None:
        self._apply_visibility(self._session.fields()["type"])
        self._unsubscribe = self._session.subscribe(self._handle_session_event)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    @on(Select.Changed, "#field-type")
    def driver_changed(self, event: Select.Changed) -> None:
        if event.value == self._session.fields()["type"]:
            return
        self._session.update_field("type", event.value)

    @on(Input.Changed)
    def input_changed(self, event: Input.Changed) -> None:
        field = (event.input.id or "").removeprefix("field-")
        # Partial JSON would be reverted on every keystroke; credentials apply on submit.
        if field not in FIELD_LABELS or field == "credentials":
            return
        self._push(field, event.value)

    @on(Input.Submitted, "#field-credentials")
    def credentials_submitted(self, event: Input.Submitted) -> None:
        self._push("credentials", event.value)

    def _push(self, field: str, value: str) -> None:
        if value == display_value(field, self._session.fields()[field]):
            return
        self._session.update_field(field, value)

    def _handle_session_event(self, event: SessionEvent) -> None:
        if not isinstance(event, FieldsUpdated):
            return
        for field, value in event.fields.items():
            if field == "type":
                select = self.query_one("#field-type", Select)
                if select.value != value:
                    select.value = value
                self._apply_visibility(value)
                continue
            field_input = self.query_one(f"#field-{field}", Input)
            text = display_value(field, value)
            if field_input.value != text:
                field_input.value = text

    def _apply_visibility(self, kind: str) -> None:
        relevant = {"variable", *driver_spec(kind).attribute_keys}
        for name in FIELD_LABELS:
            self.query_one(f"#row-{name}", Horizontal).display = name in relevant


__all__ = ["ConnectionForm", "FIELD_LABELS", "display_value"]
