#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Callable, Sequence

from receiptag.domain.labels import LOCALES
from receiptag.runtime import DEFAULT_OCR_URL, configure_logging, set_log_level


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receiptag",
        description="Receipt scanning and tagging CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse [file|-]             Extract fields from receipt text
  scan <image>               OCR a receipt image, review and save it
  serve [--port]             Start receipt upload server
  list                       List saved receipts
  status                     Show storage and OCR service status

Notes:
  Saved receipts live in receipts/<project>/ unless LOCAL_STORAGE_PATH
  or receiptag.toml says otherwise.
""",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Extract fields from receipt text")
    parse_parser.add_argument("file", nargs="?", default="-", help="Text file to parse (default: stdin)")
    parse_parser.add_argument("--json", action="store_true", help="Print the parsed receipt as JSON")
    parse_parser.add_argument("--locale", choices=LOCALES, default="en", help="Label language (default: en)")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="OCR a receipt image, review and save it")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--ocr-url", default=None, help=f"OCR service URL (default: {DEFAULT_OCR_URL})")
    scan_parser.add_argument("--locale", choices=LOCALES, default=None, help="UI locale; selects the OCR language")
    scan_parser.add_argument("--project", default=None, help="Project name to file the receipt under")
    scan_parser.add_argument("--subject", default=None, help="Subject category")
    scan_parser.add_argument("--no-save", action="store_true", help="Print the tagged fields without saving")
    scan_parser.add_argument("--interactive", action="store_true", help="Review fields and form before saving")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start receipt upload server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")

    subparsers.add_parser("list", help="List saved receipts")
    subparsers.add_parser("status", help="Show storage and OCR service status")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging()
    if args.verbose:
        set_log_level(logging.DEBUG)

    if args.command == "parse":
        from receiptag.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "scan":
        from receiptag.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    elif args.command == "serve":
        from receiptag.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)
    elif args.command == "list":
        from receiptag.cli.receipt import cmd_list

        return _run_command(cmd_list, args)
    elif args.command == "status":
        from receiptag.cli.receipt import cmd_status

        return _run_command(cmd_status, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
