from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import WorkspaceBuilder  # noqa: E402

# Ensure src/ is importable when tests spawn subprocesses
ROOT = TESTS_DIR.parent
for extra in (ROOT / "src",):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

_ENV_KEYS = (
    "MDFMT_CONFIG",
    "MDFMT_OUTPUT_DIR",
    "MDFMT_FORMATS",
    "MDFMT_COLLISION",
    "MDFMT_NUMBERING",
    "MDFMT_TITLE",
    "MDFMT_LOG_LEVEL",
)

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep the caller's MDFMT_* settings and home directory out of tests."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("MDFMT_DATA_HOME", str(tmp_path / "default-home"))
    yield


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def fixed_now() -> Callable[[], datetime]:
    """A clock that always reports 2024-01-02T03:04:05Z."""

    return lambda: FIXED_NOW
