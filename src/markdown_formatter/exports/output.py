"""Deliver a produced buffer: save it to disk or describe it inline."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import OutputWriteError

__all__ = [
    "BinarySummary",
    "InlineOutput",
    "OutputResult",
    "PREVIEW_LENGTH",
    "SavedOutput",
    "deliver",
]

PREVIEW_LENGTH = 100

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedOutput:
    """Confirmation that a buffer was written to ``path``."""

    path: Path
    size_bytes: int
    format: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "saved": True,
            "path": str(self.path),
            "size_bytes": self.size_bytes,
            "format": self.format,
        }


@dataclass(frozen=True)
class InlineOutput:
    format: str
    text: str

    def to_payload(self) -> Dict[str, Any]:
        return {"format": self.format, "text": self.text}


@dataclass(frozen=True)
class BinarySummary:
    """Stand-in for a binary buffer that was not written anywhere."""

    format: str
    size_bytes: int
    description: str
    base64_preview: str
    full_base64_length: int
    hint: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "size_bytes": self.size_bytes,
            "description": self.description,
            "base64_preview": self.base64_preview,
            "full_base64_length": self.full_base64_length,
            "hint": self.hint,
        }


OutputResult = Union[SavedOutput, InlineOutput, BinarySummary]


def deliver(
    buffer: Union[str, bytes],
    *,
    fmt: str,
    output_path: Optional[Path] = None,
    description: Optional[str] = None,
) -> OutputResult:
    """Persist ``buffer`` when ``output_path`` is given, else describe it.

    Text buffers without a path come back verbatim. Binary buffers are never
    inlined raw; callers get a size, a truncated base64 preview and a hint
    to ask again with an output path.
    """

    if output_path is not None:
        return _save(buffer, fmt=fmt, output_path=Path(output_path))
    if isinstance(buffer, str):
        return InlineOutput(format=fmt, text=buffer)
    encoded = base64.b64encode(buffer).decode("ascii")
    preview = encoded[:PREVIEW_LENGTH]
    if len(encoded) > PREVIEW_LENGTH:
        preview += "..."
    return BinarySummary(
        format=fmt,
        size_bytes=len(buffer),
        description=description or f"{fmt.upper()} document",
        base64_preview=preview,
        full_base64_length=len(encoded),
        hint=(
            f"Binary {fmt} output is not shown inline. Provide an output "
            "path to save the file."
        ),
    )


def _save(
    buffer: Union[str, bytes], *, fmt: str, output_path: Path
) -> SavedOutput:
    target = output_path.expanduser()
    data = buffer.encode("utf-8") if isinstance(buffer, str) else buffer
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise OutputWriteError(
            f"Failed to write {fmt} output to {target}: {exc}"
        ) from exc
    _LOGGER.info(
        "Saved export",
        extra={"path": str(target), "format": fmt, "size_bytes": len(data)},
    )
    return SavedOutput(path=target, size_bytes=len(data), format=fmt)
