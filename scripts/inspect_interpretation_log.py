#!/usr/bin/env python3
"""
Interpretation Log Inspector

Prints statistics and recent records from the Scribe interpretation log.
Useful for spotting weak interpretations (low overall confidence).

Usage:
    python scripts/inspect_interpretation_log.py [--stats] [--tail 10] [--min-confidence 0.5]
"""

import sys
import argparse
import logging
from collections import deque
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def main():
    parser = argparse.ArgumentParser(description="Inspect the Scribe interpretation log")
    parser.add_argument("--log-dir", type=str, default=None, help="Log directory (default: from config)")
    parser.add_argument("--stats", action="store_true", help="Print segment and record counts")
    parser.add_argument("--tail", type=int, default=10, help="Number of most recent records to show")
    parser.add_argument(
        "--min-confidence", type=float, default=None,
        help="Only show records with overall confidence at or below this value",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    from adaptive_scribe.common.config import load_config
    from adaptive_scribe.common.schemas import render_record_summary
    from adaptive_scribe.interpretation import InterpretationLog

    config = load_config()
    if args.log_dir:
        config.audit_log.log_directory = args.log_dir

    log_dir = Path(config.audit_log.log_directory).expanduser()
    if not log_dir.is_dir():
        print(f"[Inspect] ERROR: Log directory not found: {log_dir}")
        sys.exit(1)

    log = InterpretationLog.from_config(config)

    if args.stats:
        stats = log.stats()
        print(f"[Inspect] Log: {log.active_segment_path}")
        print(f"[Inspect] Segments: {stats['segments']} ({stats['archived_segments']} archived)")
        print(f"[Inspect] Records: {stats['records']}")
        print(f"[Inspect] Size: {stats['total_bytes']} bytes")

    records = log.iter_records()
    if args.min_confidence is not None:
        records = (r for r in records if r.overall_confidence <= args.min_confidence)

    recent = deque(records, maxlen=max(args.tail, 0))
    if not recent:
        print("[Inspect] No matching records")
        return

    for record in recent:
        print(render_record_summary(record))


if __name__ == "__main__":
    main()
