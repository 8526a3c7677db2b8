"""Recurrence rule attached to a parent maintenance record."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Union

DateLike = Union[date, datetime]


class RecurrenceUnit(Enum):
    """Step unit for a recurring maintenance series."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Union[str, "RecurrenceUnit"]) -> "RecurrenceUnit":
        """Accept an enum member or its name/value in any case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown recurrence unit '{value}'") from None

    @property
    def noun(self) -> str:
        """Display unit for 'repeat every N ...'."""
        return {
            RecurrenceUnit.DAILY: "day(s)",
            RecurrenceUnit.WEEKLY: "week(s)",
            RecurrenceUnit.MONTHLY: "month(s)",
            RecurrenceUnit.YEARLY: "year(s)",
        }[self]


@dataclass(frozen=True)
class Recurrence:
    """Repeat every `interval` units until `end_date` (inclusive)."""

    unit: RecurrenceUnit
    interval: int
    end_date: DateLike

    @property
    def description(self) -> str:
        return f"every {self.interval} {self.unit.noun} until {_iso_day(self.end_date)}"


def _iso_day(value: DateLike) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
