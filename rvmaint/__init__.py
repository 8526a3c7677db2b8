"""
RV maintenance lifecycle engine.

This package provides the rules for tracking RV maintenance:
- Status: derived record state (OVERDUE, UPCOMING, COMPLETED)
- Recurrence: repeat rule carried by a parent record
- MaintenanceRecord: stored maintenance entry
- classify / expand: status and occurrence calculations
- summarize: dashboard counts and top-N lists
- RecordStore: async persistence contract (memory and YAML implementations)
- MaintenanceLifecycleService: create and complete records
"""

from .status import Status, COMPLETED_SENTINEL, is_completed_label
from .recurrence import Recurrence, RecurrenceUnit
from .record import MaintenanceRecord
from .errors import MaintenanceError, ValidationError, StoreError
from .calculations import (
    DEFAULT_OCCURRENCE_CAP,
    classify,
    expand,
    preview_occurrences,
    days_until,
    describe_due,
)
from .summary import (
    DEFAULT_SUMMARY_LIMIT,
    MaintenanceSummary,
    summarize,
    filter_by_status,
    sort_history,
    records_for_month,
    month_status,
)
from .store import RecordStore, MemoryRecordStore
from .loader import YamlRecordStore, create_records_file
from .service import (
    MAINTENANCE_TYPES,
    MAX_PHOTOS,
    CreateResult,
    FailedOccurrence,
    MaintenanceInput,
    MaintenanceLifecycleService,
)

__all__ = [
    "Status",
    "COMPLETED_SENTINEL",
    "is_completed_label",
    "Recurrence",
    "RecurrenceUnit",
    "MaintenanceRecord",
    "MaintenanceError",
    "ValidationError",
    "StoreError",
    "DEFAULT_OCCURRENCE_CAP",
    "classify",
    "expand",
    "preview_occurrences",
    "days_until",
    "describe_due",
    "DEFAULT_SUMMARY_LIMIT",
    "MaintenanceSummary",
    "summarize",
    "filter_by_status",
    "sort_history",
    "records_for_month",
    "month_status",
    "RecordStore",
    "MemoryRecordStore",
    "YamlRecordStore",
    "create_records_file",
    "MAINTENANCE_TYPES",
    "MAX_PHOTOS",
    "CreateResult",
    "FailedOccurrence",
    "MaintenanceInput",
    "MaintenanceLifecycleService",
]
