"""Capability probes reporting which database clients the runtime provides."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from .drivers import AvailabilityProbe, DriverKind, driver_spec, parse_driver_kind

if TYPE_CHECKING:
    from .config import AppConfig

LOG = logging.getLogger(__name__)

_LOCK_ENTRY = re.compile(r'^\s*"(?P<package>[A-Za-z0-9_]+)"\s*:\s*\{', re.MULTILINE)


def no_dependencies(kind: DriverKind) -> bool:
    """Probe used when the host cannot tell which clients are installed."""

    return False


class StaticProbe:
    """Probe backed by a fixed set of available driver kinds."""

    def __init__(self, available: Iterable[DriverKind | str] = ()) -> None:
        self._available = frozenset(parse_driver_kind(kind) for kind in available)

    @property
    def available(self) -> frozenset[DriverKind]:
        return self._available

    def __call__(self, kind: DriverKind) -> bool:
        return kind in self._available


class MixLockProbe:
    """Report a driver as available when its package is pinned in a mix.lock."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._mtime: float | None = None
        self._packages: frozenset[str] = frozenset()

    @property
    def path(self) -> Path:
        return self._path

    def __call__(self, kind: DriverKind) -> bool:
        return driver_spec(kind).package in self.packages()

    def packages(self) -> frozenset[str]:
        """Top-level package names pinned in the lockfile."""

        try:
            mtime = self._path.stat().st_mtime
        except OSError:
            LOG.debug("Mix lockfile not found", extra={"path": str(self._path)})
            self._mtime = None
            self._packages = frozenset()
            return self._packages
        if mtime == self._mtime:
            return self._packages
        try:
            content = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            LOG.debug("Mix lockfile unreadable", extra={"path": str(self._path)})
            self._mtime = None
            self._packages = frozenset()
            return self._packages
        self._packages = frozenset(match.group("package") for match in _LOCK_ENTRY.finditer(content))
        self._mtime = mtime
        LOG.debug(
            "Loaded mix lockfile",
            extra={"path": str(self._path), "packages": len(self._packages)},
        )
        return self._packages


def probe_from_config(config: AppConfig) -> AvailabilityProbe:
    """Pick the probe described by the app configuration."""

    if config.available_drivers is not None:
        return StaticProbe(config.available_drivers)
    if config.mix_lock is not None:
        return MixLockProbe(config.mix_lock)
    return no_dependencies


__all__ = ["MixLockProbe", "StaticProbe", "no_dependencies", "probe_from_config"]
