"""Create and complete maintenance records against a record store."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from .calculations import DEFAULT_OCCURRENCE_CAP, expand, to_day
from .errors import StoreError, ValidationError
from .record import MaintenanceRecord
from .recurrence import Recurrence, RecurrenceUnit
from .status import COMPLETED_SENTINEL
from .store import RecordStore

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

# Photos allowed on a single maintenance record.
MAX_PHOTOS = 5

MAINTENANCE_TYPES = [
    "Regular Service",
    "Repair",
    "Inspection",
    "Upgrade",
    "Replacement",
    "Cleaning",
    COMPLETED_SENTINEL,
    "Other",
]


@dataclass
class MaintenanceInput:
    """A maintenance instruction as submitted by the owner."""

    title: str = ""
    date: Optional[DateLike] = None
    type_label: str = ""
    rv_id: Optional[str] = None
    notes: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    owner_id: Optional[str] = None
    is_recurring: bool = False
    recurring_type: Optional[Union[str, RecurrenceUnit]] = None
    recurring_interval: int = 1
    recurring_end_date: Optional[DateLike] = None


@dataclass
class FailedOccurrence:
    """An occurrence the store refused to create."""

    date: DateLike
    error: StoreError


@dataclass
class CreateResult:
    """Outcome of create_record: the parent plus a best-effort child batch."""

    parent: MaintenanceRecord
    created: List[MaintenanceRecord] = field(default_factory=list)
    failed: List[FailedOccurrence] = field(default_factory=list)

    @property
    def scheduled(self) -> int:
        """Occurrences the expansion asked for."""
        return len(self.created) + len(self.failed)

    @property
    def complete(self) -> bool:
        return not self.failed

    @property
    def records(self) -> List[MaintenanceRecord]:
        return [self.parent] + self.created


def _check_photos(photos: Optional[List[str]]) -> None:
    if photos is not None and len(photos) > MAX_PHOTOS:
        raise ValidationError(
            "photos", f"A maintenance record can hold at most {MAX_PHOTOS} photos"
        )


def validate_input(data: MaintenanceInput, now: DateLike) -> Optional[Recurrence]:
    """
    Check a maintenance instruction before anything is written.

    Returns the recurrence rule for recurring input, None otherwise.
    Raises ValidationError naming the first offending field.
    """
    if not (data.title or "").strip():
        raise ValidationError("title", "Title is required")
    if data.date is None:
        raise ValidationError("date", "Date is required")
    if not isinstance(data.date, date):
        raise ValidationError("date", f"Expected a date, got {data.date!r}")
    if not (data.type_label or "").strip():
        raise ValidationError("type_label", "Type is required")
    _check_photos(data.photos)

    if not data.is_recurring:
        return None

    if not data.recurring_type:
        raise ValidationError("recurring_type", "Frequency is required for recurring maintenance")
    if data.recurring_end_date is None:
        raise ValidationError("recurring_end_date", "End date is required for recurring maintenance")
    try:
        unit = RecurrenceUnit.parse(data.recurring_type)
    except ValueError as e:
        raise ValidationError("recurring_type", str(e))
    if not isinstance(data.recurring_end_date, date):
        raise ValidationError(
            "recurring_end_date", f"Expected a date, got {data.recurring_end_date!r}"
        )
    interval = data.recurring_interval
    # bool is an int subclass
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise ValidationError("recurring_interval", f"Interval must be a whole number, got {interval!r}")
    if interval < 1:
        raise ValidationError("recurring_interval", "Interval must be at least 1")

    end_day = to_day(data.recurring_end_date)
    if end_day <= to_day(now):
        raise ValidationError("recurring_end_date", "End date must be in the future")
    if end_day <= to_day(data.date):
        raise ValidationError("recurring_end_date", "End date must be after the first occurrence")

    return Recurrence(
        unit=unit,
        interval=interval,
        end_date=data.recurring_end_date,
    )


class MaintenanceLifecycleService:
    """
    Orchestrates the maintenance record lifecycle.

    The parent write is strict: a StoreError aborts create_record. Occurrence
    writes are best-effort: each failure is logged and reported in
    CreateResult.failed while the remaining occurrences are still attempted.
    """

    def __init__(
        self,
        store: RecordStore,
        occurrence_cap: int = DEFAULT_OCCURRENCE_CAP,
        clock: Optional[Callable[[], DateLike]] = None,
    ):
        self.store = store
        self.occurrence_cap = occurrence_cap
        self.clock = clock or datetime.now

    def now(self) -> DateLike:
        return self.clock()

    async def create_record(self, data: MaintenanceInput) -> CreateResult:
        """Validate, persist the parent, then materialize its occurrences."""
        recurrence = validate_input(data, self.now())

        parent = await self.store.create(
            MaintenanceRecord(
                title=data.title,
                date=data.date,
                type_label=data.type_label,
                rv_id=data.rv_id,
                notes=data.notes,
                photos=list(data.photos or []),
                owner_id=data.owner_id,
                recurrence=recurrence,
            )
        )
        result = CreateResult(parent=parent)
        if recurrence is None:
            return result

        dates = expand(parent.date, recurrence, self.occurrence_cap)
        if not dates:
            logger.debug("Record %s has no occurrences before %s", parent.id, recurrence.end_date)
            return result

        for occurrence_date in dates:
            child = MaintenanceRecord(
                title=parent.title,
                date=occurrence_date,
                type_label=parent.type_label,
                rv_id=parent.rv_id,
                notes=parent.notes,
                owner_id=parent.owner_id,
                parent_record_id=parent.id,
            )
            try:
                result.created.append(await self.store.create(child))
            except StoreError as e:
                logger.exception(
                    "Failed to create occurrence %s of record %s",
                    occurrence_date.isoformat(),
                    parent.id,
                )
                result.failed.append(FailedOccurrence(date=occurrence_date, error=e))

        logger.info(
            "Created %d of %d occurrences for record %s",
            len(result.created),
            result.scheduled,
            parent.id,
        )
        return result

    async def mark_completed(
        self,
        record_id: str,
        date: Optional[DateLike] = None,
        notes: Optional[str] = None,
        photos: Optional[List[str]] = None,
    ) -> MaintenanceRecord:
        """
        Rewrite a record's type to the completed sentinel.

        Other supplied fields go out in the same write. Completing an
        already-completed record simply reasserts the sentinel.
        """
        _check_photos(photos)
        fields = {"type_label": COMPLETED_SENTINEL}
        if date is not None:
            fields["date"] = date
        if notes is not None:
            fields["notes"] = notes
        if photos is not None:
            fields["photos"] = list(photos)
        record = await self.store.update(record_id, fields)
        logger.info("Marked record %s completed", record_id)
        return record

    async def list_occurrences(self, parent_id: str) -> List[MaintenanceRecord]:
        """Occurrences generated from a recurring record, in date order."""
        children = await self.store.list(parent_id=parent_id)
        return sorted(children, key=lambda r: to_day(r.date))
