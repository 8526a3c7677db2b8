"""Helper functions for status classification and recurrence expansion."""

from datetime import date, datetime
from typing import List, Union

from dateutil.relativedelta import relativedelta

from .recurrence import Recurrence, RecurrenceUnit
from .status import COMPLETED_SENTINEL, Status, is_completed_label

DateLike = Union[date, datetime]

# Maximum number of occurrences materialized for one recurring record.
DEFAULT_OCCURRENCE_CAP = 10


def to_day(value: DateLike) -> date:
    """Drop time-of-day so comparisons happen at midnight."""
    if isinstance(value, datetime):
        return value.date()
    return value


def classify(record_date: DateLike, type_label: str, now: DateLike) -> Status:
    """
    Derive a record's status.

    - Completed label wins regardless of date
    - Date before today: OVERDUE
    - Today or later: UPCOMING
    """
    if is_completed_label(type_label):
        return Status.COMPLETED
    if to_day(record_date) < to_day(now):
        return Status.OVERDUE
    return Status.UPCOMING


def occurrence_at(base_date: DateLike, unit: RecurrenceUnit, steps: int) -> DateLike:
    """
    Advance base_date by `steps` units.

    Months and years are added to the base date in one go, so the base
    day-of-month survives short months (Jan 31 -> Feb 28 -> Mar 31).
    """
    if unit == RecurrenceUnit.DAILY:
        return base_date + relativedelta(days=steps)
    if unit == RecurrenceUnit.WEEKLY:
        return base_date + relativedelta(weeks=steps)
    if unit == RecurrenceUnit.MONTHLY:
        return base_date + relativedelta(months=steps)
    return base_date + relativedelta(years=steps)


def expand(
    base_date: DateLike, rule: Recurrence, cap: int = DEFAULT_OCCURRENCE_CAP
) -> List[DateLike]:
    """
    List future occurrence dates for a recurring record.

    The base date itself is never included. Stops at the first occurrence
    after rule.end_date, or once `cap` dates have been produced.
    """
    occurrences: List[DateLike] = []
    end_day = to_day(rule.end_date)
    k = 1
    while len(occurrences) < cap:
        current = occurrence_at(base_date, rule.unit, rule.interval * k)
        if to_day(current) > end_day:
            break
        occurrences.append(current)
        k += 1
    return occurrences


def preview_occurrences(
    base_date: DateLike, unit: RecurrenceUnit, interval: int, count: int = 3
) -> List[DateLike]:
    """Next `count` occurrences, ignoring any end date."""
    return [occurrence_at(base_date, unit, interval * k) for k in range(1, count + 1)]


def days_until(record_date: DateLike, now: DateLike) -> int:
    """Calendar days from now to record_date (negative when in the past)."""
    return (to_day(record_date) - to_day(now)).days


def _plural_days(days: int) -> str:
    return f"{days} {'day' if days == 1 else 'days'}"


def describe_due(record_date: DateLike, type_label: str, now: DateLike) -> str:
    """Human-readable relative due text, e.g. 'Overdue by 3 days (2025-01-12)'."""
    day = to_day(record_date).isoformat()
    status = classify(record_date, type_label, now)
    if status == Status.COMPLETED:
        return f"{COMPLETED_SENTINEL} on {day}"
    delta = days_until(record_date, now)
    if status == Status.OVERDUE:
        return f"Overdue by {_plural_days(-delta)} ({day})"
    if delta == 0:
        return f"Due today ({day})"
    return f"Due in {_plural_days(delta)} ({day})"
