"""Textual application entry point for dbcell."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Header

from .config import AppConfig, load_config, save_config
from .probes import probe_from_config
from .session import ConnectionSession
from .widgets import ConnectionForm, DependencyBanner, SourcePreview

LOG = logging.getLogger(__name__)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class ConnectionCellApp(App[None]):
    """Terminal editor for a single database connection cell."""

    TITLE = "Database connection"
    CSS = """
    Screen {
        layout: vertical;
    }
    #content {
        layout: horizontal;
        height: 1fr;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._config = _load_app_config()
        self._session = ConnectionSession(
            self._config.connection,
            probe=probe_from_config(self._config),
            variable_prefix=self._config.variable_prefix,
            line_length=self._config.line_length,
        )

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header(show_clock=True)
        yield DependencyBanner(self._session)
        yield Horizontal(ConnectionForm(self._session), SourcePreview(self._session), id="content")
        yield Footer()

    @property
    def session(self) -> ConnectionSession:
        """Expose the connection session for tests."""

        return self._session

    @property
    def config(self) -> AppConfig:
        return self._config

    def action_save(self) -> None:
        self.save_attrs()
        self.notify("Connection saved.", severity="information")

    def save_attrs(self) -> None:
        """Persist the session's minimal attrs into the config file."""

        self._config = self._config.with_connection(self._session.to_attrs())
        save_config(self._config)
        LOG.debug("Saved connection attrs", extra={"driver": self._config.connection.get("type")})


def main() -> None:
    """Invoke the Textual application."""

    ConnectionCellApp().run()


if __name__ == "__main__":
    main()
