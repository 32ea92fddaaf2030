"""Public APIs for batch Markdown conversion."""

from __future__ import annotations

from .converter import (
    ConversionError,
    ConversionOutcome,
    ConversionStatus,
    convert_file,
    SOURCE_EXTENSIONS,
)

from .executor import ExecutionSummary, run_conversion

from .config import (
    CollisionPolicy,
    ConfigOverrides,
    ConvertConfig,
    ConvertConfigError,
    LoadResult,
    load_config,
)

__all__ = [
    "ConversionError",
    "ConversionOutcome",
    "ConversionStatus",
    "convert_file",
    "SOURCE_EXTENSIONS",
    "CollisionPolicy",
    "ConfigOverrides",
    "ConvertConfig",
    "ConvertConfigError",
    "LoadResult",
    "load_config",
    "ExecutionSummary",
    "run_conversion",
]
