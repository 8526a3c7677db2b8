"""Status enum for derived maintenance record states."""

from enum import Enum

# Free-text type label that marks a record as done.
COMPLETED_SENTINEL = "Completed"


class Status(Enum):
    """Maintenance record status. Lower value = more urgent."""

    OVERDUE = 1
    UPCOMING = 2
    COMPLETED = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


def is_completed_label(type_label: str) -> bool:
    """True when the type label carries the completed sentinel (any case)."""
    return "completed" in (type_label or "").lower()
