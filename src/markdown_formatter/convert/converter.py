"""Conversion pipeline for turning Markdown files into export formats."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, cast

from markdown_formatter.exports.errors import ExportError
from markdown_formatter.exports.output import SavedOutput, deliver
from markdown_formatter.exports.registry import (
    FORMATS,
    RenderOptions,
    produce,
)
from markdown_formatter.rendering.document_tree import NumberingPolicy

from .config import CollisionPolicy

# Source files the batch converter reads as Markdown.
SOURCE_EXTENSIONS: frozenset[str] = frozenset({"md", "markdown", "txt"})


class ConversionError(RuntimeError):
    """Raised when a source file cannot be converted."""


class ConversionStatus(Enum):
    """Outcome status for a single conversion."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionOutcome:
    """Result of converting (or attempting to convert) one file to one format."""

    source: Path
    format: str
    status: ConversionStatus
    output_path: Optional[Path] = None
    size_bytes: Optional[int] = None
    reason: Optional[str] = None
    error: Optional[Exception] = None


def convert_file(
    source: Path,
    *,
    fmt: str,
    output_dir: Path,
    collision: CollisionPolicy,
    numbering: NumberingPolicy = NumberingPolicy.SHARED,
    title: Optional[str] = None,
    now: Callable[[], datetime] | None = None,
) -> ConversionOutcome:
    """Convert ``source`` into ``fmt`` according to ``collision`` policy.

    Missing or unreadable sources, empty documents, export backend errors and
    write failures become a ``FAILED`` outcome. Anything else raised while
    rendering is a bug and propagates.
    """

    try:
        return _convert_file(
            source,
            fmt=fmt,
            output_dir=output_dir,
            collision=collision,
            numbering=numbering,
            title=title,
            now=now or _default_now,
        )
    except (ConversionError, ExportError, OSError, UnicodeDecodeError) as exc:
        return ConversionOutcome(
            source=source,
            format=fmt,
            status=ConversionStatus.FAILED,
            reason=str(exc),
            error=exc,
        )


def _convert_file(
    source: Path,
    *,
    fmt: str,
    output_dir: Path,
    collision: CollisionPolicy,
    numbering: NumberingPolicy,
    title: Optional[str],
    now: Callable[[], datetime],
) -> ConversionOutcome:
    normalized_source = source.resolve()
    if not normalized_source.exists():
        raise ConversionError(f"Source file not found: {normalized_source}")
    if not normalized_source.is_file():
        raise ConversionError(
            f"Source path is not a file: {normalized_source}"
        )

    extension = normalized_source.suffix.lstrip(".").lower()
    if extension not in SOURCE_EXTENSIONS:
        raise ConversionError(
            f"Unsupported source extension '.{extension}' for conversion."
        )

    spec = FORMATS[fmt]
    base_output = output_dir / f"{normalized_source.stem}.{spec.extension}"
    target_path, status, reason = _resolve_output_path(
        base_output,
        collision=collision,
    )
    if status is ConversionStatus.SKIPPED:
        return ConversionOutcome(
            source=normalized_source,
            format=fmt,
            status=status,
            output_path=target_path,
            reason=reason,
        )

    markdown = normalized_source.read_text(encoding="utf-8")
    # Rendered in full before anything touches the disk.
    buffer = produce(
        fmt,
        markdown,
        title=title or normalized_source.stem,
        options=RenderOptions(numbering=numbering, now=now),
    )
    saved = cast(
        SavedOutput, deliver(buffer, fmt=fmt, output_path=target_path)
    )

    return ConversionOutcome(
        source=normalized_source,
        format=fmt,
        status=ConversionStatus.SUCCESS,
        output_path=saved.path,
        size_bytes=saved.size_bytes,
    )


def _default_now() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_output_path(
    base: Path,
    *,
    collision: CollisionPolicy,
) -> tuple[Path, Optional[ConversionStatus], Optional[str]]:
    if not base.exists():
        return base, None, None

    if collision is CollisionPolicy.SKIP:
        reason = (
            "Output already exists and collision policy is 'skip'."
        )
        return base, ConversionStatus.SKIPPED, reason

    if collision is CollisionPolicy.OVERWRITE:
        return base, None, None

    counter = 1
    while True:
        candidate = base.with_name(
            f"{base.stem}-{counter:02d}{base.suffix}"
        )
        if not candidate.exists():
            return candidate, None, None
        counter += 1


__all__ = [
    "ConversionError",
    "ConversionStatus",
    "ConversionOutcome",
    "convert_file",
    "SOURCE_EXTENSIONS",
]
