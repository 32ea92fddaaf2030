"""Runs `mdfmt convert`: every source file times every configured format."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple

from .config import ConvertConfig
from .converter import (
    SOURCE_EXTENSIONS,
    ConversionOutcome,
    ConversionStatus,
    convert_file,
)

__all__ = [
    "ExecutionSummary",
    "run_conversion",
]

_OUTCOME_LOG: Dict[ConversionStatus, Tuple[int, str]] = {
    ConversionStatus.SUCCESS: (logging.INFO, "Converted document"),
    ConversionStatus.SKIPPED: (logging.INFO, "Skipped document"),
    ConversionStatus.FAILED: (logging.ERROR, "Failed to convert document"),
}


@dataclass(frozen=True)
class ExecutionSummary:
    requested: tuple[Path, ...]
    processed: tuple[Path, ...]
    outcomes: tuple[ConversionOutcome, ...]
    _tally: Counter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        tally = Counter(outcome.status for outcome in self.outcomes)
        object.__setattr__(self, "_tally", tally)

    @property
    def success_count(self) -> int:
        return self._tally[ConversionStatus.SUCCESS]

    @property
    def skipped_count(self) -> int:
        return self._tally[ConversionStatus.SKIPPED]

    @property
    def failure_count(self) -> int:
        return self._tally[ConversionStatus.FAILED]

    @property
    def exit_code(self) -> int:
        return 1 if self.failure_count else 0


def run_conversion(
    inputs: Sequence[Path],
    *,
    config: ConvertConfig,
    logger: logging.Logger,
) -> ExecutionSummary:
    """Convert each Markdown source under ``inputs`` sequentially.

    Directories are searched recursively for ``.md``, ``.markdown`` and
    ``.txt`` files; a path named twice (directly or through a directory) is
    converted once. Failures are recorded and the run continues.
    """

    requested = tuple(_absolute(path) for path in inputs)
    logger.info(
        "Starting conversion run",
        extra={
            "input_count": len(requested),
            "formats": config.formats,
            "output_dir": config.output_dir,
            "numbering": config.numbering,
            "collision": config.collision,
        },
    )

    sources = tuple(_unique(_sources(requested)))
    logger.debug(
        "Collected sources", extra={"candidate_count": len(sources)}
    )

    outcomes: List[ConversionOutcome] = []
    for source in sources:
        for fmt in config.formats:
            outcome = convert_file(
                source,
                fmt=fmt,
                output_dir=config.output_dir,
                collision=config.collision,
                numbering=config.numbering,
                title=config.title,
            )
            _log_outcome(logger, outcome)
            outcomes.append(outcome)

    summary = ExecutionSummary(
        requested=requested, processed=sources, outcomes=tuple(outcomes)
    )
    logger.info(
        "Completed conversion run",
        extra={
            "success_count": summary.success_count,
            "skipped_count": summary.skipped_count,
            "failure_count": summary.failure_count,
        },
    )
    return summary


def _log_outcome(logger: logging.Logger, outcome: ConversionOutcome) -> None:
    level, message = _OUTCOME_LOG[outcome.status]
    details = {"source": outcome.source, "format": outcome.format}
    if outcome.status is ConversionStatus.SUCCESS:
        details["output_path"] = outcome.output_path
        details["size_bytes"] = outcome.size_bytes
    else:
        details["reason"] = outcome.reason
    logger.log(level, message, extra=details)


def _absolute(path: Path) -> Path:
    return path.expanduser().resolve(strict=False)


def _sources(paths: Sequence[Path]) -> Iterator[Path]:
    for path in sorted(paths, key=str):
        if not path.is_dir():
            yield path
            continue
        for child in sorted(path.rglob("*")):
            suffix = child.suffix.lstrip(".").lower()
            if child.is_file() and suffix in SOURCE_EXTENSIONS:
                yield child


def _unique(paths: Iterator[Path]) -> Iterator[Path]:
    seen: set[Path] = set()
    for path in paths:
        if path not in seen:
            seen.add(path)
            yield path
