"""Cron entry point for sweeping leaked ingest scratch files."""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass

from src.app.config import load_config
from src.app.media.scratch import ScratchSpace


@dataclass(slots=True)
class SweepSummary:
    scratch_removed: int
    dry_run: bool


def perform_sweep(*, dry_run: bool, now: float | None = None) -> SweepSummary:
    """Execute the sweep and return summary counters."""
    config = load_config()
    scratch = ScratchSpace(directory=config.asset_paths.scratch)
    reference = now if now is not None else time.time()

    if dry_run:
        stale = scratch.list_stale(config.scratch_ttl, now=reference)
        return SweepSummary(scratch_removed=len(stale), dry_run=True)

    removed = scratch.sweep_stale(config.scratch_ttl, now=reference)
    return SweepSummary(scratch_removed=removed, dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove stale ingest scratch files.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    try:
        summary = perform_sweep(dry_run=args.dry_run)
    except Exception as exc:
        print(f"scratch sweep failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"scratch sweep dry-run, scratch_stale={summary.scratch_removed}", file=sys.stdout)
    else:
        print(f"scratch sweep done, scratch_removed={summary.scratch_removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
