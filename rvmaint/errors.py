"""Exceptions raised by the maintenance lifecycle engine."""

from typing import Optional


class MaintenanceError(Exception):
    """Base class for engine errors."""


class ValidationError(MaintenanceError):
    """Malformed or incomplete input, tied to the offending field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StoreError(MaintenanceError):
    """The record store rejected a read or write."""

    def __init__(self, message: str, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id
