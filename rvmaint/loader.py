"""YAML-backed record store for maintenance records."""

import dataclasses
import logging
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import StoreError
from .record import MaintenanceRecord
from .recurrence import Recurrence, RecurrenceUnit
from .store import RecordStore, apply_fields, matches

logger = logging.getLogger(__name__)


def parse_date(value: Union[str, date, datetime]) -> Union[date, datetime]:
    """Parse 'YYYY-MM-DD' into a date and full ISO timestamps into a datetime."""
    if isinstance(value, (date, datetime)):
        return value
    text = str(value).strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_date(value: Union[date, datetime]) -> str:
    return value.isoformat()


def record_from_dict(dct: Dict[str, Any]) -> MaintenanceRecord:
    """Parse a camelCase YAML mapping into a MaintenanceRecord."""
    recurrence = None
    if dct.get("isRecurring"):
        recurrence = Recurrence(
            unit=RecurrenceUnit.parse(dct["recurringType"]),
            interval=int(dct.get("recurringInterval") or 1),
            end_date=parse_date(dct["recurringEndDate"]),
        )
    return MaintenanceRecord(
        id=dct.get("id"),
        title=dct["title"],
        date=parse_date(dct["date"]),
        type_label=dct["type"],
        rv_id=dct.get("rvId"),
        notes=dct.get("notes"),
        photos=list(dct.get("photos") or []),
        owner_id=dct.get("ownerId"),
        parent_record_id=dct.get("parentRecordId"),
        recurrence=recurrence,
    )


def record_to_dict(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a MaintenanceRecord to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": record.id,
        "title": record.title,
        "date": format_date(record.date),
        "type": record.type_label,
    }
    if record.rv_id is not None:
        d["rvId"] = record.rv_id
    if record.notes:
        d["notes"] = record.notes
    if record.photos:
        d["photos"] = list(record.photos)
    if record.owner_id is not None:
        d["ownerId"] = record.owner_id
    if record.parent_record_id is not None:
        d["parentRecordId"] = record.parent_record_id
    if record.recurrence is not None:
        d["isRecurring"] = True
        d["recurringType"] = record.recurrence.unit.value
        d["recurringInterval"] = record.recurrence.interval
        d["recurringEndDate"] = format_date(record.recurrence.end_date)
    return d


def create_records_file(filename: Union[str, Path]) -> None:
    """Create an empty records YAML file."""
    _write(filename, {"records": []})


def _read(filename: Union[str, Path]) -> Dict[str, Any]:
    path = Path(filename)
    if not path.exists():
        return {"records": []}
    try:
        with open(path, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
    except (OSError, yaml.YAMLError) as e:
        raise StoreError(f"Cannot read records file {path}: {e}")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise StoreError(f"Records file {path} must contain a mapping, got {type(data).__name__}")
    if data.get("records") is None:
        data["records"] = []
    if not isinstance(data["records"], list):
        raise StoreError(f"'records' in {path} must be a list")
    return data


def _write(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    try:
        with open(filename, "w") as fp:
            yaml.dump(
                data,
                fp,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                width=120,
            )
    except OSError as e:
        raise StoreError(f"Cannot write records file {filename}: {e}")


class YamlRecordStore(RecordStore):
    """
    Record store persisted to a single YAML file.

    Every call loads the raw YAML, applies the change and writes the whole
    file back. A missing file reads as an empty store.
    """

    def __init__(self, filename: Union[str, Path]):
        self.filename = Path(filename)

    def _parse(self, raw: Any) -> MaintenanceRecord:
        try:
            return record_from_dict(raw)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise StoreError(f"Malformed record in {self.filename}: {e!r}")

    def _load_records(self) -> List[MaintenanceRecord]:
        return [self._parse(d) for d in _read(self.filename)["records"]]

    async def create(self, record: MaintenanceRecord) -> MaintenanceRecord:
        data = _read(self.filename)
        stored = dataclasses.replace(record, id=str(uuid.uuid4()))
        data["records"].append(record_to_dict(stored))
        _write(self.filename, data)
        logger.debug("Created record %s in %s", stored.id, self.filename)
        return stored

    async def update(self, record_id: str, fields: Dict[str, Any]) -> MaintenanceRecord:
        data = _read(self.filename)
        for index, raw in enumerate(data["records"]):
            if isinstance(raw, dict) and raw.get("id") == record_id:
                updated = apply_fields(self._parse(raw), fields)
                data["records"][index] = record_to_dict(updated)
                _write(self.filename, data)
                return updated
        raise StoreError(f"Record {record_id} not found", record_id)

    async def list(
        self, parent_id: Optional[str] = None, rv_id: Optional[str] = None
    ) -> List[MaintenanceRecord]:
        return [r for r in self._load_records() if matches(r, parent_id, rv_id)]

