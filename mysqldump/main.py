#!/usr/bin/env python3
"""
MySQL Dump - CLI Entry Point
============================
Exports the schema and, optionally, the rows of a MySQL database as a SQL
script that can be replayed to rebuild it.
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import Optional

import yaml

from .config import ConfigLoader, parse_dsn
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .models import DumpOptions
from .utils import open_output_file, print_dry_run_info, setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description='MySQL Dump - export a database as a replayable SQL script'
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to YAML configuration file'
    )
    parser.add_argument(
        '--dsn',
        help="Connection DSN, e.g. 'user:pass@tcp(localhost:3306)/shop' (overrides config)"
    )
    parser.add_argument(
        '-t', '--tables',
        nargs='+',
        metavar='TABLE',
        help='Dump only these tables (takes precedence over --ignore-tables)'
    )
    parser.add_argument(
        '-x', '--ignore-tables',
        nargs='+',
        metavar='TABLE',
        help="Skip these tables; wildcard patterns like 'tmp_*' are allowed"
    )
    parser.add_argument(
        '--data',
        action='store_true',
        default=None,
        help='Include table rows as INSERT statements'
    )
    parser.add_argument(
        '--drop-table',
        action='store_true',
        default=None,
        help='Emit DROP TABLE IF EXISTS before each table'
    )
    parser.add_argument(
        '--insert-ignore',
        action='store_true',
        default=None,
        help='Use INSERT IGNORE so duplicate keys are skipped on replay'
    )
    parser.add_argument(
        '-o', '--output',
        help='Write the script to this file instead of standard output'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show which tables would be dumped without writing SQL'
    )
    return parser


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Load configuration
    config = None
    if args.config:
        try:
            config = ConfigLoader(args.config)
        except FileNotFoundError:
            print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
            sys.exit(1)
        except yaml.YAMLError as e:
            print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
            sys.exit(1)

    # Setup logging
    log_settings = dict(config.get_logging_settings()) if config else {}
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    overrides = {
        'data': args.data,
        'tables': args.tables,
        'ignore_tables': args.ignore_tables,
        'drop_table': args.drop_table,
        'insert_ignore': args.insert_ignore,
    }
    try:
        if config:
            settings = config.get_connection_settings(args.dsn)
            options = config.get_dump_options(**overrides)
            output_file = args.output or config.get_output_settings().get('file')
        elif args.dsn:
            settings = parse_dsn(args.dsn)
            options = DumpOptions.from_config({}, **overrides)
            output_file = args.output
        else:
            print("Error: either --config or --dsn is required", file=sys.stderr)
            sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        with ExitStack() as stack:
            conn = stack.enter_context(DatabaseConnection.from_settings(settings))
            dumper = DatabaseDumper(conn, options)

            # Dry run mode
            if args.dry_run:
                logging.info("DRY RUN MODE - No SQL will be written")
                print_dry_run_info(settings.database, dumper.resolve_tables(), options)
                return

            if output_file:
                options.writer = stack.enter_context(open_output_file(output_file))
            stats = dumper.run()

        # Print summary
        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {len(stats.tables)}")
        logging.info(f"Total Rows: {stats.total_rows}")
        logging.info(f"Elapsed: {stats.elapsed:.3f}s")

    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
