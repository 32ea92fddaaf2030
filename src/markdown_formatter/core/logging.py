"""JSON-lines logging for mdfmt commands.

Each command gets its own logger under ``markdown_formatter.*`` writing to a
rotating file in the workspace ``logs/`` directory. ``verbose`` mirrors the
records to stderr in a short human-readable form.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import date, datetime, timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]

_FILE_MARKER = "_mdfmt_file"
_CONSOLE_MARKER = "_mdfmt_console"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """Serialise a record and its ``extra`` fields as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS
        }
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Attach the JSON file handler (and optional console) to ``name``.

    Calling this again for the same logger reuses its handlers, swapping the
    file handler only when the target path changes. The log file defaults to
    the last dotted component of ``name`` (``markdown_formatter.convert`` logs
    to ``convert.log``).
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    log_path = _writable_log_path(
        log_dir, filename or name.rpartition(".")[2] + ".log"
    )

    def same_file(handler: Any) -> bool:
        return Path(handler.baseFilename) == log_path.resolve()

    file_handler = _managed_handler(
        logger,
        _FILE_MARKER,
        matches=same_file,
        build=lambda: _file_handler(log_path, max_bytes, backup_count),
    )
    file_handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))

    if verbose:
        _managed_handler(
            logger,
            _CONSOLE_MARKER,
            matches=lambda handler: True,
            build=_console_handler,
        )
    else:
        _drop_handlers(logger, _CONSOLE_MARKER)

    return logger, log_path


def _coerce_level(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _managed_handler(
    logger: logging.Logger,
    marker: str,
    *,
    matches: Callable[[Any], bool],
    build: Callable[[], logging.Handler],
) -> logging.Handler:
    for handler in logger.handlers:
        if getattr(handler, marker, False) and matches(handler):
            return handler
    _drop_handlers(logger, marker)
    handler = build()
    setattr(handler, marker, True)
    logger.addHandler(handler)
    return handler


def _drop_handlers(logger: logging.Logger, marker: str) -> None:
    for handler in [h for h in logger.handlers if getattr(h, marker, False)]:
        logger.removeHandler(handler)
        handler.close()


def _file_handler(
    path: Path, max_bytes: int, backup_count: int
) -> logging.Handler:
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setFormatter(JsonLogFormatter())
    return handler


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter("%(levelname)s %(name)s: %(message)s")
    )
    return handler


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Enum):
        return _jsonable(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return repr(value)


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "markdown-formatter-logs"


def _writable_log_path(log_dir: Path, filename: str) -> Path:
    try:
        return _touch_log(log_dir, filename)
    except PermissionError:
        return _touch_log(_fallback_log_dir(), filename)


def _touch_log(directory: Path, filename: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.touch(exist_ok=True)
    _restrict(directory, 0o700)
    _restrict(path, 0o600)
    return path


def _restrict(path: Path, mode: int) -> None:
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
