"""Widget library for the Textual UI."""

from __future__ import annotations

from .connection_form import ConnectionForm
from .status import DependencyBanner, SourcePreview

__all__ = ["ConnectionForm", "DependencyBanner", "SourcePreview"]
