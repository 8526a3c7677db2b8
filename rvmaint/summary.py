"""Dashboard and history views derived from a record collection."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Union

from .calculations import to_day
from .record import MaintenanceRecord
from .status import Status

DateLike = Union[date, datetime]

# Records shown per bucket on the dashboard.
DEFAULT_SUMMARY_LIMIT = 2


@dataclass
class MaintenanceSummary:
    """Counts and top-N records per status bucket."""

    completed: int = 0
    upcoming: int = 0
    overdue: int = 0
    next_upcoming: List[MaintenanceRecord] = field(default_factory=list)
    most_overdue: List[MaintenanceRecord] = field(default_factory=list)
    recent_completed: List[MaintenanceRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.completed + self.upcoming + self.overdue

    def counts(self) -> dict:
        return {
            "completed": self.completed,
            "upcoming": self.upcoming,
            "overdue": self.overdue,
        }


def _sort_key(record: MaintenanceRecord):
    # Plain dates sort as midnight so date and datetime values mix.
    value = record.date
    clock = value.time() if isinstance(value, datetime) else time.min
    return to_day(value), clock


def summarize(
    records: Iterable[MaintenanceRecord],
    now: DateLike,
    limit: int = DEFAULT_SUMMARY_LIMIT,
) -> MaintenanceSummary:
    """
    Aggregate records into counts and top-N lists.

    Upcoming is soonest first, overdue is oldest first, completed keeps
    input order.
    """
    upcoming: List[MaintenanceRecord] = []
    overdue: List[MaintenanceRecord] = []
    completed: List[MaintenanceRecord] = []
    for record in records:
        status = record.status(now)
        if status == Status.COMPLETED:
            completed.append(record)
        elif status == Status.OVERDUE:
            overdue.append(record)
        else:
            upcoming.append(record)

    return MaintenanceSummary(
        completed=len(completed),
        upcoming=len(upcoming),
        overdue=len(overdue),
        next_upcoming=sorted(upcoming, key=_sort_key)[:limit],
        most_overdue=sorted(overdue, key=_sort_key)[:limit],
        recent_completed=completed[:limit],
    )


def filter_by_status(
    records: Iterable[MaintenanceRecord], status: Optional[Status], now: DateLike
) -> List[MaintenanceRecord]:
    """Records in the given status bucket; all records when status is None."""
    if status is None:
        return list(records)
    return [r for r in records if r.status(now) == status]


def sort_history(
    records: Iterable[MaintenanceRecord], reverse: bool = True
) -> List[MaintenanceRecord]:
    """Records by date, newest first by default."""
    return sorted(records, key=_sort_key, reverse=reverse)


def records_for_month(
    records: Iterable[MaintenanceRecord], year: int, month: int
) -> List[MaintenanceRecord]:
    """Records whose date falls in the given calendar month."""
    return [
        r for r in records if to_day(r.date).year == year and to_day(r.date).month == month
    ]


def month_status(
    records: Iterable[MaintenanceRecord], year: int, month: int, now: DateLike
) -> Optional[Status]:
    """
    Calendar status for a month.

    Any overdue record wins, then any upcoming, then completed.
    None when the month has no records.
    """
    statuses = {r.status(now) for r in records_for_month(records, year, month)}
    for status in (Status.OVERDUE, Status.UPCOMING, Status.COMPLETED):
        if status in statuses:
            return status
    return None
