"""Errors raised while producing or delivering an export."""

from __future__ import annotations

__all__ = [
    "DependencyError",
    "ExportError",
    "MissingInputError",
    "OutputWriteError",
    "RenderBackendError",
    "UnsupportedFormatError",
]


class ExportError(RuntimeError):
    """Base class for export failures."""


class MissingInputError(ExportError):
    """Raised when no Markdown text was supplied."""


class UnsupportedFormatError(ExportError):
    """Raised when an export format is not registered."""


class OutputWriteError(ExportError):
    """Raised when a produced buffer cannot be written to disk."""


class DependencyError(ExportError):
    """Raised when an optional rendering backend cannot be imported."""


class RenderBackendError(ExportError):
    """Raised when a packaging or rendering backend fails."""
