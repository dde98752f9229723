"""Database connection cells: typed config in, Elixir connection snippet out."""

from __future__ import annotations

from .codegen import generate
from .drivers import DriverKind, UnsupportedDriverError
from .models import ConnectionConfig
from .normalizer import normalize
from .session import (
    ConnectionSession,
    DependencyChanged,
    FieldUpdateResult,
    FieldsUpdated,
    SessionSnapshot,
    SourceUpdated,
)

__version__ = "0.1.0"

__all__ = [
    "ConnectionConfig",
    "ConnectionSession",
    "DependencyChanged",
    "DriverKind",
    "FieldUpdateResult",
    "FieldsUpdated",
    "SessionSnapshot",
    "SourceUpdated",
    "UnsupportedDriverError",
    "__version__",
    "generate",
    "normalize",
]
