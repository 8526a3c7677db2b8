"""Record store contract and an in-memory implementation."""

import copy
import dataclasses
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .errors import StoreError
from .record import MaintenanceRecord

# Fields the store assigns or that never change after creation.
IMMUTABLE_FIELDS = ("id",)


class RecordStore(ABC):
    """Async persistence collaborator for maintenance records."""

    @abstractmethod
    async def create(self, record: MaintenanceRecord) -> MaintenanceRecord:
        """Persist a new record and return it with an assigned id."""

    @abstractmethod
    async def update(self, record_id: str, fields: Dict[str, Any]) -> MaintenanceRecord:
        """Rewrite the given fields of an existing record."""

    @abstractmethod
    async def list(
        self, parent_id: Optional[str] = None, rv_id: Optional[str] = None
    ) -> List[MaintenanceRecord]:
        """Records matching every given filter; empty when nothing matches."""

    async def get(self, record_id: str) -> MaintenanceRecord:
        """Look up a single record by id."""
        for record in await self.list():
            if record.id == record_id:
                return record
        raise StoreError(f"Record {record_id} not found", record_id)


def apply_fields(record: MaintenanceRecord, fields: Dict[str, Any]) -> MaintenanceRecord:
    """Return a copy of record with fields replaced; id is left untouched."""
    for name in IMMUTABLE_FIELDS:
        if name in fields and fields[name] != record.id:
            raise StoreError(f"Field '{name}' cannot be changed", record.id)
    changes = {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS}
    try:
        return dataclasses.replace(record, **changes)
    except TypeError as e:
        raise StoreError(f"Invalid update for record {record.id}: {e}", record.id)


def matches(
    record: MaintenanceRecord, parent_id: Optional[str], rv_id: Optional[str]
) -> bool:
    if parent_id is not None and record.parent_record_id != parent_id:
        return False
    if rv_id is not None and record.rv_id != rv_id:
        return False
    return True


class MemoryRecordStore(RecordStore):
    """Keeps records in a dict keyed by id, in insertion order."""

    def __init__(self):
        self._records: Dict[str, MaintenanceRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def _new_id(self) -> str:
        return str(uuid.uuid4())

    async def create(self, record: MaintenanceRecord) -> MaintenanceRecord:
        stored = dataclasses.replace(copy.deepcopy(record), id=self._new_id())
        self._records[stored.id] = stored
        return copy.deepcopy(stored)

    async def update(self, record_id: str, fields: Dict[str, Any]) -> MaintenanceRecord:
        existing = self._records.get(record_id)
        if existing is None:
            raise StoreError(f"Record {record_id} not found", record_id)
        updated = apply_fields(existing, copy.deepcopy(fields))
        self._records[record_id] = updated
        return copy.deepcopy(updated)

    async def list(
        self, parent_id: Optional[str] = None, rv_id: Optional[str] = None
    ) -> List[MaintenanceRecord]:
        return [
            copy.deepcopy(r)
            for r in self._records.values()
            if matches(r, parent_id, rv_id)
        ]
