"""Tests for dependency availability probes."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dbcell.config import AppConfig
from dbcell.drivers import DriverKind, UnsupportedDriverError
from dbcell.probes import MixLockProbe, StaticProbe, no_dependencies, probe_from_config

MIX_LOCK = """%{
  "db_connection": {:hex, :db_connection, "2.4.2", "f92e79aff2375299a16bcb069a14ee8615c3414863a6fccb3d3d7e8d47ac8f83", [:mix], [], "hexpm", "5cf4d1e8a1e3b5e0d2ed3bcd4aafe4a1e4e9ab1d5b2a9ce3f1f0e0c5a3b6d3c7"},
  "postgrex": {:hex, :postgrex, "0.16.3", "fac79a81a9a234b11c44235a4494d8565303fa4b9147acf57e48978a074971db", [:mix], [{:db_connection, "~> 2.1", [hex: :db_connection, repo: "hexpm", optional: false]}], "hexpm", "aeaae1d2d1322da4e5fe90d241b0a564ce03a3add09d7270fb85362166194590"},
  "req_bigquery": {:git, "https://github.com/livebook-dev/req_bigquery.git", "5e1f2ea07aea0dd2dae5d8b9c5f3cc7e16dbfa5d", []},
}
"""


def test_no_dependencies_reports_nothing_available() -> None:
    assert not any(no_dependencies(kind) for kind in DriverKind)


def test_static_probe_accepts_strings() -> None:
    probe = StaticProbe(["mysql", DriverKind.SQLITE])

    assert probe(DriverKind.MYSQL)
    assert probe(DriverKind.SQLITE)
    assert not probe(DriverKind.POSTGRES)
    assert probe.available == frozenset({DriverKind.MYSQL, DriverKind.SQLITE})


def test_static_probe_rejects_unknown_driver() -> None:
    with pytest.raises(UnsupportedDriverError):
        StaticProbe(["oracle"])


def test_mix_lock_probe_detects_pinned_packages(tmp_path: Path) -> None:
    lockfile = tmp_path / "mix.lock"
    lockfile.write_text(MIX_LOCK)

    probe = MixLockProbe(lockfile)

    assert probe(DriverKind.POSTGRES)
    assert probe(DriverKind.BIGQUERY)
    assert not probe(DriverKind.MYSQL)
    assert "db_connection" in probe.packages()


def test_mix_lock_probe_treats_missing_file_as_unavailable(tmp_path: Path) -> None:
    probe = MixLockProbe(tmp_path / "missing.lock")

    assert not any(probe(kind) for kind in DriverKind)


def test_mix_lock_probe_reloads_when_file_changes(tmp_path: Path) -> None:
    lockfile = tmp_path / "mix.lock"
    lockfile.write_text(MIX_LOCK)
    probe = MixLockProbe(lockfile)
    assert not probe(DriverKind.SQLITE)

    lockfile.write_text('%{\n  "exqlite": {:hex, :exqlite, "0.11.0", "abc", [:make, :mix], [], "hexpm", "def"},\n}\n')
    stat = lockfile.stat()
    os.utime(lockfile, (stat.st_atime, stat.st_mtime + 10))

    assert probe(DriverKind.SQLITE)
    assert not probe(DriverKind.POSTGRES)


def test_probe_from_config_prefers_explicit_driver_list(tmp_path: Path) -> None:
    config = AppConfig(available_drivers=[DriverKind.SNOWFLAKE], mix_lock=tmp_path / "mix.lock")

    probe = probe_from_config(config)

    assert isinstance(probe, StaticProbe)
    assert probe(DriverKind.SNOWFLAKE)


def test_probe_from_config_uses_mix_lock(tmp_path: Path) -> None:
    probe = probe_from_config(AppConfig(mix_lock=tmp_path / "mix.lock"))

    assert isinstance(probe, MixLockProbe)
    assert probe.path == tmp_path / "mix.lock"


def test_probe_from_config_defaults_to_nothing_available() -> None:
    assert probe_from_config(AppConfig()) is no_dependencies


def test_mix_lock_probe_forgets_packages_when_file_becomes_unreadable(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    lockfile = tmp_path / "mix.lock"
    lockfile.write_text(MIX_LOCK)
    probe = MixLockProbe(lockfile)
    assert probe(DriverKind.POSTGRES)
    loaded = lockfile.stat()

    def _unreadable(self: Path, *args: object, **kwargs: object) -> str:
        raise PermissionError(self)

    monkeypatch.setattr(Path, "read_text", _unreadable)
    os.utime(lockfile, (loaded.st_atime, loaded.st_mtime + 10))
    assert not probe(DriverKind.POSTGRES)

    os.utime(lockfile, (loaded.st_atime, loaded.st_mtime))

    assert not probe(DriverKind.POSTGRES)
