"""Command-line entry point: scan every database listed in a CSV file.

The CSV holds one connection per line::

    type,schema,dsn,user,password[,audit_users]

where ``type`` is MYSQL, ORACLE or MSSQL. Lines with any other first field
(such as a header) are ignored. When ``schema`` is empty, the schemas are
discovered with the tool itself and every one of them is reported on.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .batch import BatchDriver
from .config import DEFAULT_BINARY, RunConfig, build_run_config, load_defaults, resolve_binary
from .dsnlist import read_dsn_list
from .errors import MigscanError, ScannerConfigError

LOG = logging.getLogger(__name__)

EPILOG = """\
examples:
  migscan -l dbs.csv -o scan_output
  migscan -l dbs.csv -o scan_output -f json -u 10 -c /etc/ora2pg/ora2pg.conf
  migscan -l dbs.csv -o scan_output --test
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migscan",
        description=__doc__,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-l", "--list", dest="list_file", required=True, help="CSV file listing the databases to scan")
    parser.add_argument("-o", "--outdir", required=True, help="Directory the reports are written to (must not exist)")
    parser.add_argument("-c", "--config", help="Configuration file passed to the assessment tool")
    parser.add_argument(
        "-b",
        "--binpath",
        help=f"Path to the {DEFAULT_BINARY} binary, or the directory holding it",
    )
    parser.add_argument("-f", "--format", dest="report_format", help="Detail report format: html (default) or json")
    parser.add_argument("-u", "--unit", type=int, help="Migration cost unit value in minutes (default 5)")
    parser.add_argument("-t", "--test", action="store_true", help="Dry run: print the commands instead of running them")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each tool invocation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: list[str] | None) -> argparse.Namespace | int:
    """Parse arguments; on usage errors show help and return the exit code."""

    parser = build_parser()
    try:
        return parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code == 2:
            parser.print_help(sys.stderr)
            return 0
        return exc.code if isinstance(exc.code, int) else 0


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def make_run_config(args: argparse.Namespace) -> RunConfig:
    """Merge arguments over the user defaults and validate the result."""

    defaults = load_defaults()
    if args.config is not None and not Path(args.config).is_file():
        raise ScannerConfigError(f"Configuration file '{args.config}' does not exist")
    config = build_run_config(
        input_file=args.list_file,
        output_dir=args.outdir,
        report_format=args.report_format or defaults.report_format,
        dry_run=args.test,
        cost_unit=args.unit if args.unit is not None else defaults.cost_unit,
        binary=defaults.binary,
        config_file=args.config,
        timeout=args.timeout if args.timeout is not None else defaults.timeout,
    )
    binary = resolve_binary(args.binpath, config.binary)
    return config.model_copy(update={"binary": binary})


def prepare_output_dir(config: RunConfig) -> None:
    """Create the output directory; a dry run never touches the filesystem."""

    if config.dry_run:
        return
    if config.output_dir.exists():
        raise ScannerConfigError(f"Output directory '{config.output_dir}' already exists")
    try:
        config.output_dir.mkdir(parents=True)
    except OSError as exc:
        raise ScannerConfigError(f"Cannot create output directory '{config.output_dir}': {exc}") from exc


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if isinstance(args, int):
        return args
    configure_logging(args.verbose)
    try:
        config = make_run_config(args)
        records = read_dsn_list(config.input_file)
        prepare_output_dir(config)
    except MigscanError as exc:
        LOG.error("%s", exc)
        return 1
    LOG.debug("Loaded DSN list", extra={"records": len(records), "dry_run": config.dry_run})
    BatchDriver(config).run(records)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
