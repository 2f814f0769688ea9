"""Command-line interface for RecordSmith."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from .config import settings
from .export import (
    ExportValidationError,
    ProfileImportError,
    download_file_name,
    load_profiles,
    render_export,
)
from .ingest import FileEncoding, FormatError, HeaderPolicy, parse_bytes

SEPARATOR_ALIASES = {"tab": "\t", "\\t": "\t", "semicolon": ";", "comma": ",", "pipe": "|"}


def _separator(value: str) -> str:
    return SEPARATOR_ALIASES.get(value.lower(), value)


def _add_load_options(parser: argparse.ArgumentParser):
    parser.add_argument("file", type=Path, help="Delimited or JSON file to load")
    parser.add_argument(
        "--separator",
        "-s",
        type=_separator,
        default=settings.default_separator,
        help="Separator, 'auto', 'json', or one of tab/semicolon/comma/pipe (default: auto)",
    )
    parser.add_argument(
        "--encoding",
        "-e",
        choices=[e.value for e in FileEncoding],
        default=settings.default_encoding,
        help="Encoding of the input file (default: UTF-8)",
    )
    parser.add_argument(
        "--header",
        choices=[p.value for p in HeaderPolicy],
        default=settings.default_header_policy,
        help="Header handling for delimited files (default: auto)",
    )


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="RecordSmith - load delimited or JSON records and export them through profiles"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help="Host to bind to (default: 127.0.0.1)"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help="Port to bind to (default: 8000)"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect", help="Detect the format of a file and show its first records"
    )
    _add_load_options(inspect_parser)
    inspect_parser.add_argument(
        "--limit", "-n", type=int, default=3, help="Number of records to show (default: 3)"
    )

    # Export command
    export_parser = subparsers.add_parser(
        "export", help="Export a file's records through an export profile"
    )
    _add_load_options(export_parser)
    export_parser.add_argument(
        "--profile", "-p", type=Path, required=True, help="Profile bundle (JSON array of profiles)"
    )
    export_parser.add_argument(
        "--profile-name", help="Name of the profile to use (default: first in the bundle)"
    )
    export_parser.add_argument(
        "--format", "-f", choices=["csv", "json"], default="csv", help="Output format (default: csv)"
    )
    export_parser.add_argument(
        "--output", "-o", type=Path, help="Output path (default: derived from file and profile name)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "inspect":
        sys.exit(run_inspect(args))
    elif args.command == "export":
        sys.exit(run_export(args))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "recordsmith.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def _load(args):
    raw = args.file.read_bytes()
    return parse_bytes(raw, args.file.name, args.separator, args.encoding, args.header)


def run_inspect(args) -> int:
    """Print detection results and the first records of a file."""
    try:
        result = _load(args)
    except (OSError, FormatError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    detection = result.detection
    print(f"File: {result.file_name}")
    print(f"Separator: {detection.separator_display}")
    print(f"Header row: {'yes' if detection.header_present else 'no'}")
    print(f"Encoding: {detection.encoding.value}")
    print(f"Columns ({len(result.headers)}): {', '.join(result.headers)}")
    print(f"Records: {result.record_count}")
    for warning in result.warnings:
        print(f"Warning: {warning.message}")

    for index, record in enumerate(result.records[: max(args.limit, 0)], start=1):
        print(f"\n#{index}")
        for header in result.headers:
            print(f"  {header}: {record.get(header, '')}")
    return 0


def run_export(args) -> int:
    """Export every record of a file through a profile from a bundle."""
    try:
        profiles = load_profiles(args.profile.read_text(encoding="utf-8"))
    except (OSError, ProfileImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.profile_name:
        matches = [p for p in profiles if p.name == args.profile_name]
        if not matches:
            print(f"Error: no profile named '{args.profile_name}'", file=sys.stderr)
            return 1
        profile = matches[0]
    elif profiles:
        profile = profiles[0]
    else:
        print("Error: the profile bundle is empty", file=sys.stderr)
        return 1

    try:
        result = _load(args)
        payload = render_export(profile, result.records, args.format)
    except (OSError, FormatError, ExportValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = args.output or args.file.with_name(
        download_file_name(args.file.name, profile.name, payload.extension)
    )
    output.write_bytes(payload.content)
    print(f"Wrote {result.record_count} records to {output} ({payload.charset})")
    return 0


if __name__ == "__main__":
    main()
