"""CLI entrypoint for Susbot scanner."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from susbot import __version__
from susbot.config import load_config
from susbot.constants.branding import CLI_DESCRIPTION
from susbot.exceptions import ConfigError, InvalidAddressError, SusbotError
from susbot.reporting.stdout import StdoutReporter
from susbot.reporting.writer import write_scan_report
from susbot.scanner import scan_address
from susbot.validation import validate_address


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="susbot",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Scan a deployed contract and print its trust score")
    scan.add_argument("address", help="Contract address (0x followed by 40 hex characters)")
    scan.add_argument("-c", "--config", type=Path, help="Explicit config file")
    scan.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the text-generation service and use the fallback summary",
    )
    scan.add_argument("--json", action="store_true", help="Print the scan result as JSON instead of the text report")
    scan.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the detailed JSON report to this path",
    )
    scan.add_argument(
        "--fail-below",
        type=int,
        default=None,
        metavar="SCORE",
        help="Exit with status 1 when the trust score is below SCORE",
    )
    scan.add_argument("--no-color", action="store_true", help="Disable colored output")
    scan.add_argument("-v", "--verbose", action="store_true", help="Show debug logging and scan metadata")

    validate = subparsers.add_parser("validate-config", help="Validate configuration without scanning")
    validate.add_argument("-c", "--config", type=Path, help="Explicit config file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    if args.command == "validate-config":
        return _handle_validate_config(args)

    if args.command != "scan":
        parser.error(f"Unsupported command: {args.command}")

    if args.fail_below is not None and not 0 <= args.fail_below <= 100:
        print("Configuration error: --fail-below must be between 0 and 100", file=sys.stderr)
        return 2

    try:
        validate_address(args.address)
        config = load_config(args.config)
        report = scan_address(args.address, config=config, use_ai=not args.no_ai)
    except InvalidAddressError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except SusbotError as exc:
        print(f"Scanner error: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        try:
            write_scan_report(args.output, report, include_details=True)
        except OSError as exc:
            print(f"Could not write report to {args.output}: {exc}", file=sys.stderr)
            return 1

    if args.json:
        print(json.dumps(report.result.to_dict(), indent=2))
    else:
        use_color = not args.no_color and sys.stdout.isatty()
        reporter = StdoutReporter(report, color=use_color, verbose=args.verbose, fail_below=args.fail_below)
        print(reporter.render())

    if args.fail_below is not None and report.result.score < args.fail_below:
        return 1
    return 0


def _handle_validate_config(args: argparse.Namespace) -> int:
    """Load the config and report whether it is valid."""
    try:
        load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
