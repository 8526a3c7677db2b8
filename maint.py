#!/usr/bin/env python3
"""
Unified CLI for RV maintenance records.

Commands:
  summary   - Show completed/upcoming/overdue counts and next items
  history   - List records, optionally filtered by status
  log       - Add a maintenance record (optionally recurring)
  complete  - Mark a record as completed
  series    - List occurrences generated from a recurring record
  calendar  - Show per-month status for a year
  types     - List the default maintenance types
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from rvmaint import (
    DEFAULT_OCCURRENCE_CAP,
    DEFAULT_SUMMARY_LIMIT,
    MAINTENANCE_TYPES,
    MaintenanceError,
    MaintenanceInput,
    MaintenanceLifecycleService,
    MaintenanceRecord,
    RecurrenceUnit,
    Status,
    YamlRecordStore,
    describe_due,
    filter_by_status,
    month_status,
    preview_occurrences,
    records_for_month,
    sort_history,
    summarize,
)
from rvmaint.loader import parse_date
from rvmaint.service import validate_input

logger = logging.getLogger("maint")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_date(value) -> str:
    """Format a record date for display (day precision)."""
    if value is None:
        return "-"
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def make_record_table(records: List[MaintenanceRecord], now) -> List[List[str]]:
    """Convert records to table rows."""
    rows = []
    for record in records:
        rows.append(
            [
                record.id or "-",
                format_date(record.date),
                record.title,
                record.type_label,
                record.status(now).label,
                describe_due(record.date, record.type_label, now),
                truncate(record.notes),
            ]
        )
    return rows


RECORD_HEADERS = ["ID", "Date", "Title", "Type", "Status", "Due", "Notes"]


def _today(args) -> date:
    return args.today or date.today()


def _service(args) -> MaintenanceLifecycleService:
    today = _today(args)
    cap = getattr(args, "cap", None)
    return MaintenanceLifecycleService(
        YamlRecordStore(args.records_file),
        occurrence_cap=DEFAULT_OCCURRENCE_CAP if cap is None else cap,
        clock=lambda: today,
    )


async def _load(args) -> List[MaintenanceRecord]:
    return await YamlRecordStore(args.records_file).list(rv_id=args.rv)


# =============================================================================
# Summary command
# =============================================================================


def cmd_summary(args):
    """Show counts per status and the next few records in each bucket."""
    now = _today(args)
    records = asyncio.run(_load(args))
    summary = summarize(records, now, limit=args.limit)

    print(f"Records: {len(records)} (as of {now.isoformat()})")
    print(
        f"Completed: {summary.completed}  "
        f"Upcoming: {summary.upcoming}  "
        f"Overdue: {summary.overdue}"
    )
    print()

    sections = [
        ("OVERDUE:", summary.most_overdue),
        ("UPCOMING:", summary.next_upcoming),
        ("RECENTLY COMPLETED:", summary.recent_completed),
    ]
    for heading, bucket in sections:
        if bucket:
            print(heading)
            print(tabulate(make_record_table(bucket, now), headers=RECORD_HEADERS, tablefmt="simple"))
            print()

    return 0


# =============================================================================
# History command
# =============================================================================


def cmd_history(args):
    """List records, newest first unless --asc."""
    now = _today(args)
    records = asyncio.run(_load(args))
    status = Status[args.status.upper()] if args.status else None

    entries = sort_history(filter_by_status(records, status, now), reverse=not args.asc)

    print(f"Total records: {len(records)}")
    if status:
        print(f"Showing: {len(entries)} ({status.label.lower()})")
    print()

    if not entries:
        print("No maintenance records found.")
        return 0

    print(tabulate(make_record_table(entries, now), headers=RECORD_HEADERS, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def build_input(args) -> MaintenanceInput:
    """Build a MaintenanceInput from parsed log arguments."""
    return MaintenanceInput(
        title=args.title,
        date=args.date or _today(args),
        type_label=args.type,
        rv_id=args.rv,
        notes=args.notes,
        photos=args.photo or [],
        is_recurring=args.recurring is not None,
        recurring_type=args.recurring,
        recurring_interval=args.every,
        recurring_end_date=args.until,
    )


def cmd_log(args):
    """Add a maintenance record, expanding recurring ones."""
    data = build_input(args)
    validate_input(data, _today(args))

    print(f"Adding maintenance record to {args.records_file}:")
    print(f"  Title:   {data.title}")
    print(f"  Date:    {format_date(data.date)}")
    print(f"  Type:    {data.type_label}")
    if data.notes:
        print(f"  Notes:   {data.notes}")
    if data.is_recurring:
        unit = RecurrenceUnit.parse(data.recurring_type)
        print(f"  Repeats: every {data.recurring_interval} {unit.noun} until {format_date(data.recurring_end_date)}")
        upcoming = preview_occurrences(data.date, unit, data.recurring_interval)
        print(f"  Next:    {', '.join(format_date(d) for d in upcoming)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    result = asyncio.run(_service(args).create_record(data))
    print(f"Record saved: {result.parent.id}")
    if data.is_recurring:
        print(f"Occurrences created: {len(result.created)} of {result.scheduled}")
        for failure in result.failed:
            print(f"  Failed: {format_date(failure.date)} ({failure.error})")

    return 0


# =============================================================================
# Complete command
# =============================================================================


def cmd_complete(args):
    """Mark a record as completed."""
    record = asyncio.run(
        _service(args).mark_completed(args.record_id, date=args.date, notes=args.notes)
    )
    print(f"Completed: {record.title} ({format_date(record.date)})")
    return 0


# =============================================================================
# Series command
# =============================================================================


def cmd_series(args):
    """List occurrences generated from a recurring record."""
    now = _today(args)
    occurrences = asyncio.run(_service(args).list_occurrences(args.parent_id))

    if not occurrences:
        print(f"No occurrences found for record {args.parent_id}.")
        return 0

    print(f"Occurrences of {args.parent_id}: {len(occurrences)}")
    print()
    print(tabulate(make_record_table(occurrences, now), headers=RECORD_HEADERS, tablefmt="simple"))
    return 0


# =============================================================================
# Calendar command
# =============================================================================


def make_calendar_table(records: List[MaintenanceRecord], year: int, now) -> List[List[str]]:
    """One row per month: name, record count, month status."""
    rows = []
    for month in range(1, 13):
        in_month = records_for_month(records, year, month)
        status = month_status(in_month, year, month, now)
        rows.append(
            [
                date(year, month, 1).strftime("%B"),
                str(len(in_month)) if in_month else "-",
                status.label if status else "-",
            ]
        )
    return rows


def cmd_calendar(args):
    """Show per-month maintenance status for a year."""
    now = _today(args)
    year = args.year or now.year
    records = asyncio.run(_load(args))

    print(f"Maintenance calendar {year}")
    print()
    print(tabulate(make_calendar_table(records, year, now), headers=["Month", "Records", "Status"], tablefmt="simple"))
    return 0


# =============================================================================
# Types command
# =============================================================================


def cmd_types(args):
    """List default maintenance types."""
    for label in MAINTENANCE_TYPES:
        print(f"  {label}")
    return 0


# =============================================================================
# Main
# =============================================================================


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1, got {number}")
    return number


def _date_arg(value: str):
    try:
        return parse_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}' (expected YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="RV maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s records.yaml summary
  %(prog)s records.yaml history --status overdue
  %(prog)s records.yaml log "Roof sealant" --type Inspection --date 2025-04-01 \\
      --recurring monthly --every 3 --until 2026-04-01
  %(prog)s records.yaml complete 3f1c...
  %(prog)s records.yaml calendar --year 2025
""",
    )
    parser.add_argument(
        "records_file",
        type=Path,
        help="Path to records YAML file",
    )
    parser.add_argument(
        "--today",
        type=_date_arg,
        help="Evaluate statuses as of this date (default: today)",
    )
    parser.add_argument(
        "--rv",
        type=str,
        help="Limit to records of one RV id",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Summary subcommand
    summary_parser = subparsers.add_parser(
        "summary", help="Show completed, upcoming and overdue counts"
    )
    summary_parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_SUMMARY_LIMIT,
        help=f"Records shown per status (default: {DEFAULT_SUMMARY_LIMIT})",
    )

    # History subcommand
    history_parser = subparsers.add_parser("history", help="List maintenance records")
    history_parser.add_argument(
        "--status",
        choices=["upcoming", "overdue", "completed"],
        help="Only show records with this status",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Oldest first instead of newest first",
    )

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Add a maintenance record")
    log_parser.add_argument("title", type=str, help="Record title (e.g., 'Roof sealant')")
    log_parser.add_argument(
        "--type",
        type=str,
        default=MAINTENANCE_TYPES[0],
        help=f"Maintenance type (default: {MAINTENANCE_TYPES[0]})",
    )
    log_parser.add_argument(
        "--date",
        type=_date_arg,
        help="Record date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument("--notes", type=str, help="Notes about the maintenance")
    log_parser.add_argument(
        "--photo",
        action="append",
        help="Stored photo reference (repeatable)",
    )
    log_parser.add_argument(
        "--recurring",
        choices=[u.value for u in RecurrenceUnit],
        help="Repeat unit for recurring maintenance",
    )
    log_parser.add_argument(
        "--every",
        type=_positive_int,
        default=1,
        help="Repeat every N units (default: 1)",
    )
    log_parser.add_argument(
        "--until",
        type=_date_arg,
        help="Last date of the recurring series (YYYY-MM-DD)",
    )
    log_parser.add_argument(
        "--cap",
        type=_positive_int,
        help=f"Maximum occurrences to create (default: {DEFAULT_OCCURRENCE_CAP})",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Complete subcommand
    complete_parser = subparsers.add_parser("complete", help="Mark a record as completed")
    complete_parser.add_argument("record_id", type=str, help="Record id")
    complete_parser.add_argument(
        "--date",
        type=_date_arg,
        help="Completion date (default: keep record date)",
    )
    complete_parser.add_argument("--notes", type=str, help="Completion notes")

    # Series subcommand
    series_parser = subparsers.add_parser(
        "series", help="List occurrences of a recurring record"
    )
    series_parser.add_argument("parent_id", type=str, help="Recurring record id")

    # Calendar subcommand
    calendar_parser = subparsers.add_parser("calendar", help="Per-month status for a year")
    calendar_parser.add_argument("--year", type=int, help="Calendar year (default: current)")

    # Types subcommand
    subparsers.add_parser("types", help="List default maintenance types")

    return parser


COMMANDS = {
    "summary": cmd_summary,
    "history": cmd_history,
    "log": cmd_log,
    "complete": cmd_complete,
    "series": cmd_series,
    "calendar": cmd_calendar,
    "types": cmd_types,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # New records files are created on first write
    if args.command not in ("log", "types") and not args.records_file.exists():
        print(f"Error: File not found: {args.records_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except MaintenanceError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
