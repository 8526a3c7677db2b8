"""MaintenanceRecord dataclass for stored maintenance entries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

from .recurrence import Recurrence
from .calculations import classify
from .status import Status, is_completed_label

DateLike = Union[date, datetime]


@dataclass
class MaintenanceRecord:
    """A maintenance event or reminder for an RV.

    Status is never stored; call `status(now)` on every read.
    """

    title: str
    date: DateLike
    type_label: str
    rv_id: Optional[str] = None
    notes: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    id: Optional[str] = None
    owner_id: Optional[str] = None
    parent_record_id: Optional[str] = None
    recurrence: Optional[Recurrence] = None

    @property
    def is_completed(self) -> bool:
        return is_completed_label(self.type_label)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def is_occurrence(self) -> bool:
        """Generated from a recurring parent."""
        return self.parent_record_id is not None

    def status(self, now: DateLike) -> Status:
        return classify(self.date, self.type_label, now)
