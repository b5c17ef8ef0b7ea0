#!/usr/bin/env python3
"""
Unified CLI for the lubricant sample log.

Commands:
  lookup   - Look up a sample code and add it to the log
  history  - Show the logged samples, most recent first
  export   - Export the log as XLSX or tab-delimited text
  remove   - Remove one sample from the log
  clear    - Remove every sample from the log
  login    - Check and save lookup service credentials
  fields   - Show where each column is read from in lookup payloads
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from tabulate import tabulate
from typing import Any, List, Sequence

import httpx

from samples import (
    ApiError,
    HistoryStore,
    S360Client,
    SampleRow,
    YamlFileStore,
    build_workbook_export,
    load_credentials,
    normalize,
    save_credentials,
    to_delimited_text,
)
from samples import config
from samples.export import COLUMNS, header_labels, row_cells
from samples.normalizer import candidate_table

# =============================================================================
# Formatting helpers
# =============================================================================


def truncate(text: str, max_len: int = 24) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def make_history_table(rows: Sequence[SampleRow]) -> List[List[str]]:
    """Convert logged rows to table rows, one column per export column."""
    return [[truncate(cell) for cell in row_cells(row)] for row in rows]


def make_detail_table(row: SampleRow) -> List[List[str]]:
    """Label/value pairs for a single sample."""
    return [[label, value] for label, value in zip(header_labels(), row_cells(row))]


def open_history(args) -> HistoryStore:
    return HistoryStore(YamlFileStore(args.store))


# =============================================================================
# Lookup command
# =============================================================================


def read_payload(path: Path) -> Any:
    """Read a saved lookup response from a JSON file."""
    with open(path, "r") as fp:
        return json.load(fp)


async def resolve_credentials(args):
    username, password = config.env_credentials()
    if username and password:
        return username, password
    return await load_credentials(YamlFileStore(args.store))


def fetch_payload(code: str, username: str, password: str) -> Any:
    with S360Client() as client:
        session = client.login(username, password)
        return client.fetch_sample(session, code)


def cmd_lookup(args):
    """Look up a sample code and add it to the log."""
    code = args.code.strip()
    if not code:
        print("Error: Empty sample code")
        return 1

    if args.payload:
        if not args.payload.exists():
            print(f"Error: File not found: {args.payload}")
            return 1
        try:
            payload = read_payload(args.payload)
        except ValueError as e:
            print(f"Error: Invalid JSON in {args.payload}: {e}")
            return 1
    else:
        username, password = asyncio.run(resolve_credentials(args))
        if not (username and password):
            print("Error: No credentials. Run 'login' or set S360_USERNAME/S360_PASSWORD")
            return 1
        print(f"Looking up sample {code}...")
        try:
            payload = fetch_payload(code, username, password)
        except (ApiError, httpx.HTTPError) as e:
            print(f"Error: {e}")
            return 1

    row = normalize(payload, code)
    print(tabulate(make_detail_table(row), tablefmt="simple"))
    print()

    if args.dry_run:
        print("(dry run - not added to the log)")
        return 0

    if not row.is_valid:
        print("Error: No sample code in the response; nothing added to the log")
        return 1

    async def add():
        history = open_history(args)
        await history.upsert(row)
        return len(history)

    count = asyncio.run(add())
    print(f"Sample {row.code} added to the log ({count} total).")
    return 0


# =============================================================================
# History command
# =============================================================================


def cmd_history(args):
    """Show the logged samples."""
    rows = asyncio.run(open_history(args).load())

    if args.limit is not None:
        rows = rows[: args.limit]

    if not rows:
        print("No samples logged.")
        return 0

    print(f"Samples: {len(rows)}")
    print()
    print(tabulate(make_history_table(rows), headers=header_labels(), tablefmt="simple"))
    return 0


# =============================================================================
# Export command
# =============================================================================


def cmd_export(args):
    """Export the log as XLSX or tab-delimited text."""
    rows = asyncio.run(open_history(args).load())

    if not rows:
        print("Nothing to export.")
        return 1

    if args.format == "tsv":
        sys.stdout.write(to_delimited_text(rows))
        return 0

    export = build_workbook_export(rows)
    args.output.mkdir(parents=True, exist_ok=True)
    path = args.output / export.filename
    path.write_bytes(export.content)
    print(f"Exported {len(rows)} samples to {path} ({export.mime_type})")
    return 0


# =============================================================================
# Remove / Clear commands
# =============================================================================


def cmd_remove(args):
    """Remove one sample from the log."""
    removed = asyncio.run(open_history(args).remove(args.code.strip()))
    if not removed:
        print(f"Error: Sample {args.code} is not in the log")
        return 1
    print(f"Sample {args.code} removed.")
    return 0


def cmd_clear(args):
    """Remove every sample from the log."""
    if not args.yes:
        print("Refusing to clear the log without --yes")
        return 1
    asyncio.run(open_history(args).clear())
    print("Log cleared.")
    return 0


# =============================================================================
# Login command
# =============================================================================


def cmd_login(args):
    """Check credentials against the lookup service and save them."""
    try:
        with S360Client() as client:
            client.login(args.username, args.password)
    except (ApiError, httpx.HTTPError) as e:
        print(f"Error: {e}")
        return 1

    asyncio.run(save_credentials(YamlFileStore(args.store), args.username, args.password))
    print(f"Logged in as {args.username}. Credentials saved to {args.store}")
    return 0


# =============================================================================
# Fields command
# =============================================================================


def cmd_fields(args):
    """Show the payload paths each column is read from."""
    labels = dict(COLUMNS)
    rows = [[labels[field], paths] for field, paths in candidate_table()]
    print(tabulate(rows, headers=["Column", "Payload paths (first match wins)"], tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lubricant sample log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s lookup 123456
  %(prog)s lookup 123456 --payload response.json
  %(prog)s history --limit 20
  %(prog)s export --format xlsx --output exports/
  %(prog)s export --format tsv | pbcopy
""",
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=config.store_path(),
        help="Path to the YAML store file (default: $SAMPLELOG_STORE or ~/.samplelog/store.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show informational log messages"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Lookup subcommand
    lookup_parser = subparsers.add_parser(
        "lookup", help="Look up a sample code and add it to the log"
    )
    lookup_parser.add_argument("code", type=str, help="Sample code (typed or scanned)")
    lookup_parser.add_argument(
        "--payload",
        type=Path,
        help="Read the lookup response from a JSON file instead of the service",
    )
    lookup_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the normalized sample without logging it",
    )

    # History subcommand
    history_parser = subparsers.add_parser("history", help="Show logged samples")
    history_parser.add_argument(
        "--limit", type=int, help="Show only the N most recent samples"
    )

    # Export subcommand
    export_parser = subparsers.add_parser("export", help="Export the log")
    export_parser.add_argument(
        "--format",
        choices=["xlsx", "tsv"],
        default="xlsx",
        help="Output format (default: xlsx)",
    )
    export_parser.add_argument(
        "--output",
        type=Path,
        default=Path("."),
        help="Directory for the XLSX file (default: current directory)",
    )

    # Remove subcommand
    remove_parser = subparsers.add_parser("remove", help="Remove a sample from the log")
    remove_parser.add_argument("code", type=str, help="Sample code")

    # Clear subcommand
    clear_parser = subparsers.add_parser("clear", help="Remove every sample from the log")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm clearing")

    # Login subcommand
    login_parser = subparsers.add_parser(
        "login", help="Check and save lookup service credentials"
    )
    login_parser.add_argument("username", type=str, help="Service username")
    login_parser.add_argument("--password", type=str, required=True, help="Password")

    # Fields subcommand
    subparsers.add_parser("fields", help="Show payload paths per column")

    return parser


COMMANDS = {
    "lookup": cmd_lookup,
    "history": cmd_history,
    "export": cmd_export,
    "remove": cmd_remove,
    "clear": cmd_clear,
    "login": cmd_login,
    "fields": cmd_fields,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
