"""Configuration session keeping a connection config and its derived state."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Union

from .codegen import DEFAULT_LINE_LENGTH, generate
from .drivers import (
    AvailabilityProbe,
    default_driver_kind,
    missing_dependency,
    parse_driver_kind,
)
from .models import ConnectionConfig
from .normalizer import normalize
from .probes import no_dependencies

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DependencyChanged:
    """The client library advisory changed (``None`` once it is satisfied)."""

    missing_dependency: str | None

    def as_payload(self) -> dict[str, Any]:
        return {"dep": self.missing_dependency}


@dataclass(frozen=True, slots=True)
class FieldsUpdated:
    """Fields touched by an edit, including values reverted by normalization."""

    fields: Mapping[str, Any]

    def as_payload(self) -> dict[str, Any]:
        return {"fields": dict(self.fields)}


@dataclass(frozen=True, slots=True)
class SourceUpdated:
    """New persisted attrs and generated source after an edit."""

    attrs: Mapping[str, Any]
    source: str


SessionEvent = Union[DependencyChanged, FieldsUpdated, SourceUpdated]
SessionListener = Callable[[SessionEvent], None]


@dataclass(frozen=True, slots=True)
class FieldUpdateResult:
    """Outcome of a single field edit."""

    updates: Mapping[str, Any]
    dependency_changed: bool
    missing_dependency: str | None
    source: str
    events: tuple[SessionEvent, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Current fields and advisory, sent to a newly attached viewer."""

    fields: Mapping[str, Any]
    missing_dependency: str | None

    def as_payload(self) -> dict[str, Any]:
        return {"fields": dict(self.fields), "missing_dep": self.missing_dependency}


class ConnectionSession:
    """Owns one connection config and recomputes its advisory and source.

    Edits are applied one at a time under a re-entrant lock so listeners see
    notifications in the order the edits were applied.
    """

    def __init__(
        self,
        attrs: Mapping[str, Any] | None = None,
        *,
        probe: AvailabilityProbe = no_dependencies,
        variable_prefix: str = "conn",
        line_length: int = DEFAULT_LINE_LENGTH,
    ) -> None:
        self._probe = probe
        self._line_length = line_length
        self._lock = threading.RLock()
        self._listeners: set[SessionListener] = set()
        self._config = ConnectionConfig.from_attrs(
            attrs,
            default_driver=default_driver_kind(probe),
            variable_prefix=variable_prefix,
        )
        self._missing_dependency = missing_dependency(self._config.driver, probe)
        self._source = generate(self._config, line_length=line_length)
        LOG.debug(
            "Session initialized",
            extra={"driver": self._config.driver.value, "missing_dependency": self._missing_dependency},
        )

    @property
    def config(self) -> ConnectionConfig:
        """Copy of the current configuration."""

        with self._lock:
            return self._config.model_copy(deep=True)

    @property
    def missing_dependency(self) -> str | None:
        """Dependency to add for the current driver, if it is not available."""

        return self._missing_dependency

    @property
    def source(self) -> str:
        """Generated snippet for the current configuration."""

        return self._source

    def fields(self) -> dict[str, Any]:
        with self._lock:
            return self._config.fields()

    def to_attrs(self) -> dict[str, Any]:
        """Minimal attrs the host should persist for this cell."""

        with self._lock:
            return self._config.to_attrs()

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(fields=self._config.fields(), missing_dependency=self._missing_dependency)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Subscribe to session events; returns an unsubscribe handle."""

        self._listeners.add(listener)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def update_field(self, field: str, value: Any) -> FieldUpdateResult:
        """Apply a single user edit and broadcast the resulting events."""

        with self._lock:
            updates = normalize(self._config.fields(), field, value)
            self._merge(updates)

            events: list[SessionEvent] = []
            missing = missing_dependency(self._config.driver, self._probe)
            dependency_changed = missing != self._missing_dependency
            if dependency_changed:
                self._missing_dependency = missing
                events.append(DependencyChanged(missing))
            events.append(FieldsUpdated(updates))

            self._source = generate(self._config, line_length=self._line_length)
            events.append(SourceUpdated(self._config.to_attrs(), self._source))

            LOG.debug(
                "Applied field update",
                extra={"field": field, "updated": sorted(updates), "dependency_changed": dependency_changed},
            )
            for event in events:
                self._notify(event)
            return FieldUpdateResult(
                updates=updates,
                dependency_changed=dependency_changed,
                missing_dependency=missing,
                source=self._source,
                events=tuple(events),
            )

    def _merge(self, updates: Mapping[str, Any]) -> None:
        attributes = {name: ConnectionConfig.attribute_for(name) for name in updates}
        if "type" in updates:
            parse_driver_kind(updates["type"])
        # A rejected value must leave the current config untouched.
        candidate = self._config.model_copy(deep=True)
        for name, value in updates.items():
            setattr(candidate, attributes[name], value)
        self._config = candidate

    def _notify(self, event: SessionEvent) -> None:
        for listener in tuple(self._listeners):
            listener(event)


__all__ = [
    "ConnectionSession",
    "DependencyChanged",
    "FieldUpdateResult",
    "FieldsUpdated",
    "SessionEvent",
    "SessionListener",
    "SessionSnapshot",
    "SourceUpdated",
]
