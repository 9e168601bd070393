#!/usr/bin/env python3
"""
Export the standard ion table for curators to edit.

MANUAL_PICK holds each result's current manual pick (NULL when there is
none), so loading the file back unedited changes nothing.

Usage:
    python3 scripts/export_standard_ion_table.py -o <table.tsv> [options]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export standard ion results with their current manual picks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-o", "--output-file",
        required=True,
        type=Path,
        help="Path of the TSV file to write.",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file.")
    parser.add_argument("--db-url", default=None, help="Database URL; overrides host/port/name/user/pass.")
    parser.add_argument("--db-host", default=None, help="Database host.")
    parser.add_argument("--db-port", default=None, help="Database port.")
    parser.add_argument("--db-name", default=None, help="Database name.")
    parser.add_argument("--db-user", default=None, help="Database user.")
    parser.add_argument("--db-pass", default=None, help="Database password.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    output_path = args.output_file.resolve()
    if not output_path.parent.is_dir():
        print(f"ERROR: Output directory does not exist: {output_path.parent}", file=sys.stderr)
        return 1

    from sqlalchemy.exc import SQLAlchemyError

    from lcms_config import get_active_config
    from lcms_ingestion.services import ExportService
    from lcms_kernel.db.engine import get_session, init_engine_from_url
    from lcms_kernel.exceptions import ConfigError
    from lcms_kernel.logging_config import configure_logging

    configure_logging()

    overrides = {
        "database.url": args.db_url,
        "database.host": args.db_host,
        "database.port": args.db_port,
        "database.name": args.db_name,
        "database.user": args.db_user,
        "database.password": args.db_pass,
    }
    try:
        config = get_active_config(args.config, overrides=overrides)
    except (FileNotFoundError, ConfigError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        return 1

    try:
        init_engine_from_url(config.database.connection_url(), **config.database.engine_kwargs())
    except (SQLAlchemyError, ImportError) as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    session = get_session()
    try:
        count = ExportService(session, config.source.as_options()).export_file(output_path)
    except SQLAlchemyError as e:
        print(f"ERROR: Export failed: {e}", file=sys.stderr)
        return 1
    finally:
        session.rollback()
        session.close()

    print(f"Exported {count} standard ion results to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
