"""CLI entry point listing the registered export formats."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .registry import iter_formats


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mdfmt formats",
        description="List the formats `mdfmt render` and `mdfmt convert` accept.",
    )
    parser.parse_args(list(argv) if argv is not None else None)

    specs = iter_formats()
    width = max(len(spec.name) for spec in specs)
    lines = ["Available formats:"]
    for spec in specs:
        kind = "binary" if spec.binary else "text"
        lines.append(
            f"  {spec.name.ljust(width)}  .{spec.extension:<5} {kind:<6}  "
            f"{spec.description}"
        )
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
