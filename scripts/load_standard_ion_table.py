#!/usr/bin/env python3
"""
Load a curator-edited standard ion table into the database.

Every row whose MANUAL_PICK differs from the result's current manual pick
is recorded as a new curated ion and becomes the result's manual override.
All rows are applied in one transaction: the first bad row rolls back the
whole file.

Usage:
    python3 scripts/load_standard_ion_table.py -i <table.tsv> -a <author> [options]

Examples:
    # Apply edits
    python3 scripts/load_standard_ion_table.py -i edited.tsv -a alice

    # Show what would change, then roll back
    python3 scripts/load_standard_ion_table.py -i edited.tsv -a alice --dry-run

    # Probe the file (row count, columns, sample) without touching the database
    python3 scripts/load_standard_ion_table.py -i edited.tsv -a alice --probe-only

Exit status: 0 on success, 1 on any failure.
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Load an edited standard ion table: record changed manual picks in one transaction.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-i", "--input-file",
        required=True,
        type=Path,
        help="Path to the edited TSV table.",
    )
    parser.add_argument(
        "-a", "--author",
        required=True,
        help="Name recorded as the author of every new curated ion.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (database, vocabulary, source sections).",
    )
    parser.add_argument("--db-url", default=None, help="Database URL; overrides host/port/name/user/pass.")
    parser.add_argument("--db-host", default=None, help="Database host.")
    parser.add_argument("--db-port", default=None, help="Database port.")
    parser.add_argument("--db-name", default=None, help="Database name.")
    parser.add_argument("--db-user", default=None, help="Database user.")
    parser.add_argument("--db-pass", default=None, help="Database password.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run every row, report the changes, then roll back.",
    )
    parser.add_argument(
        "--probe-only",
        action="store_true",
        help="Probe the input file (row count, columns, sample rows) and exit. No DB access.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit debug-level structured logs on stderr.",
    )
    return parser.parse_args(argv)


def _config_overrides(args: argparse.Namespace) -> dict[str, object]:
    return {
        "database.url": args.db_url,
        "database.host": args.db_host,
        "database.port": args.db_port,
        "database.name": args.db_name,
        "database.user": args.db_user,
        "database.password": args.db_pass,
    }


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    source_path = args.input_file.resolve()
    if not source_path.is_file():
        print(f"ERROR: Unable to find input file at {source_path}", file=sys.stderr)
        return 1
    author = args.author.strip()
    if not author:
        print("ERROR: Author must not be empty.", file=sys.stderr)
        return 1

    # Lazy imports so we fail fast on args first
    from sqlalchemy.exc import SQLAlchemyError

    from lcms_config import get_active_config
    from lcms_ingestion.adapters import TsvSourceAdapter
    from lcms_ingestion.services import LoadService
    from lcms_kernel.db.engine import get_session_factory, init_engine_from_url
    from lcms_kernel.db.immutability import register_immutability_listeners
    from lcms_kernel.domain.clock import SystemClock
    from lcms_kernel.domain.edit_row import StandardIonHeader
    from lcms_kernel.exceptions import ConfigError, CurationError
    from lcms_kernel.logging_config import configure_logging

    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = get_active_config(args.config, overrides=_config_overrides(args))
    except (FileNotFoundError, ConfigError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        return 1

    if args.probe_only:
        try:
            probe = TsvSourceAdapter().probe(source_path, config.source.as_options())
        except (UnicodeDecodeError, csv.Error) as e:
            print(f"ERROR: Unable to read input file {source_path}: {e}", file=sys.stderr)
            return 1
        print(f"Rows: {probe.row_count}")
        print(f"Columns: {list(probe.columns)}")
        print("Sample (first 3):")
        for i, row in enumerate(probe.sample_rows[:3], 1):
            print(f"  {i}: {row}")
        missing = probe.missing_columns(
            (StandardIonHeader.STANDARD_ION_RESULT_ID.value, StandardIonHeader.MANUAL_PICK.value)
        )
        if missing:
            print(f"ERROR: Missing required columns: {', '.join(missing)}", file=sys.stderr)
            return 1
        return 0

    try:
        init_engine_from_url(config.database.connection_url(), **config.database.engine_kwargs())
    except (SQLAlchemyError, ImportError) as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1
    register_immutability_listeners()

    service = LoadService(
        get_session_factory(),
        config.vocabulary.build(),
        clock=SystemClock(),
        source_options=config.source.as_options(),
    )

    print(f"Loading {source_path} as {author}...")
    try:
        result = service.load_file(source_path, author, dry_run=args.dry_run)
    except CurationError as e:
        print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
        return 1
    except SQLAlchemyError as e:
        print(f"ERROR: Database failure: {e}", file=sys.stderr)
        return 1

    for outcome in result.applied:
        print(
            f"  Row {outcome.source_row}: result {outcome.result_id} "
            f"{outcome.previous_value} -> {outcome.manual_pick}"
        )

    if result.failure is not None:
        err = result.failure.error
        print(f"ERROR [{err.code}] row {result.failure.source_row}: {err}", file=sys.stderr)
        print("Rolled back; no changes were saved.", file=sys.stderr)
        return 1

    print(f"  Applied: {len(result.applied)}, Unchanged: {len(result.skipped)}")
    if result.dry_run:
        print("Dry run: rolled back, no changes were saved.")
    else:
        print("Committed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
