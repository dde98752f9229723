"""Widgets mirroring the session's derived state."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from dbcell.session import ConnectionSession, DependencyChanged, SessionEvent, SourceUpdated


class DependencyBanner(Static):
    """Warns when the current driver's client library is missing."""

    DEFAULT_CSS = """
    DependencyBanner {
        height: auto;
        padding: 0 1;
        background: $warning-darken-2;
        color: $text;
    }
    """

    def __init__(self, session: ConnectionSession) -> None:
        super().__init__(_advice(session.missing_dependency), id="dependency-banner", markup=False)
        self._session = session
        self._unsubscribe: Callable[[], None] | None = None
        self.display = session.missing_dependency is not None

    async def on_mount(self) -> None:
        self._unsubscribe = self._session.subscribe(self._handle_session_event)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def show_dependency(self, dependency: str | None) -> None:
        self.display = dependency is not None
        if dependency is not None:
            self.update(_advice(dependency))

    def _handle_session_event(self, event: SessionEvent) -> None:
        if isinstance(event, DependencyChanged):
            self.show_dependency(event.missing_dependency)


def _advice(dependency: str | None) -> str:
    if dependency is None:
        return ""
    return f"To connect, add {dependency} to your dependencies and restart the runtime."


class SourcePreview(Static):
    """Read-only view of the generated snippet."""

    DEFAULT_CSS = """
    SourcePreview {
        height: 1fr;
        padding: 1 2;
        background: $surface-darken-1;
    }
    """

    def __init__(self, session: ConnectionSession) -> None:
        super().__init__(session.source, id="source-preview", markup=False)
        self._session = session
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._session.subscribe(self._handle_session_event)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_session_event(self, event: SessionEvent) -> None:
        if isinstance(event, SourceUpdated):
            self.update(event.source)


__all__ = ["DependencyBanner", "SourcePreview"]
