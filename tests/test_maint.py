#!/usr/bin/env python3
"""Tests for maint CLI formatting, tables and commands."""
from datetime import date, datetime

import pytest
import yaml

from rvmaint import MaintenanceRecord
from maint import (
    format_date,
    truncate,
    make_record_table,
    make_calendar_table,
    main,
)

NOW = date(2025, 1, 15)


def load_records(path):
    return yaml.safe_load(path.read_text())["records"]


class TestFormatDate:
    """Tests for format_date."""

    def test_date(self):
        assert format_date(date(2025, 4, 1)) == "2025-04-01"

    def test_datetime_drops_time(self):
        assert format_date(datetime(2025, 4, 1, 9, 30)) == "2025-04-01"

    def test_none_returns_dash(self):
        assert format_date(None) == "-"


class TestTruncate:
    """Tests for truncate."""

    def test_none_returns_dash(self):
        assert truncate(None) == "-"
        assert truncate("") == "-"

    def test_short_text_unchanged(self):
        assert truncate("short") == "short"

    def test_long_text_truncated_with_ellipsis(self):
        assert truncate("this is a very long note", max_len=15) == "this is a ve..."


class TestMakeRecordTable:
    """Tests for make_record_table."""

    def test_empty_list_returns_empty_rows(self):
        assert make_record_table([], NOW) == []

    def test_single_record_row(self):
        record = MaintenanceRecord(
            "Roof sealant", date(2025, 1, 12), "Inspection", id="r-1", notes="Check seams"
        )
        rows = make_record_table([record], NOW)
        assert rows == [
            [
                "r-1",
                "2025-01-12",
                "Roof sealant",
                "Inspection",
                "Overdue",
                "Overdue by 3 days (2025-01-12)",
                "Check seams",
            ]
        ]


class TestMakeCalendarTable:
    """Tests for make_calendar_table."""

    def test_twelve_months(self):
        records = [
            MaintenanceRecord("a", date(2025, 1, 2), "Repair"),
            MaintenanceRecord("b", date(2025, 3, 2), "Repair"),
            MaintenanceRecord("c", date(2025, 3, 9), "Completed"),
        ]
        rows = make_calendar_table(records, 2025, NOW)
        assert len(rows) == 12
        assert rows[0] == ["January", "1", "Overdue"]
        assert rows[1] == ["February", "-", "-"]
        assert rows[2] == ["March", "2", "Upcoming"]


class TestCommands:
    """End-to-end tests for CLI commands against a records file."""

    @pytest.fixture
    def records_file(self, tmp_path):
        return tmp_path / "records.yaml"

    def run(self, records_file, *args):
        return main([str(records_file), "--today", NOW.isoformat(), *args])

    def test_log_single(self, records_file, capsys):
        assert self.run(records_file, "log", "Roof sealant", "--type", "Inspection", "--date", "2025-02-01") == 0
        records = load_records(records_file)
        assert len(records) == 1
        assert records[0]["title"] == "Roof sealant"
        assert records[0]["date"] == "2025-02-01"
        assert "Record saved:" in capsys.readouterr().out

    def test_log_recurring(self, records_file, capsys):
        code = self.run(
            records_file,
            "log", "Flush tanks",
            "--type", "Cleaning",
            "--date", "2025-02-01",
            "--recurring", "monthly",
            "--until", "2025-05-01",
        )
        assert code == 0
        records = load_records(records_file)
        assert len(records) == 4
        parent_id = records[0]["id"]
        assert [r.get("parentRecordId") for r in records[1:]] == [parent_id] * 3
        assert [r["date"] for r in records[1:]] == ["2025-03-01", "2025-04-01", "2025-05-01"]
        out = capsys.readouterr().out
        assert "Next:    2025-03-01, 2025-04-01, 2025-05-01" in out
        assert "Occurrences created: 3 of 3" in out

    def test_log_cap(self, records_file):
        self.run(
            records_file,
            "log", "Check tire pressure",
            "--recurring", "daily",
            "--until", "2025-12-31",
            "--cap", "4",
        )
        assert len(load_records(records_file)) == 5

    def test_log_cap_one(self, records_file):
        self.run(
            records_file,
            "log", "Check tire pressure",
            "--recurring", "daily",
            "--until", "2025-12-31",
            "--cap", "1",
        )
        assert len(load_records(records_file)) == 2

    @pytest.mark.parametrize("option", ["--cap", "--every"])
    @pytest.mark.parametrize("value", ["0", "-1", "two"])
    def test_log_rejects_non_positive_numbers(self, records_file, option, value):
        with pytest.raises(SystemExit) as exc:
            self.run(
                records_file,
                "log", "Check tire pressure",
                "--recurring", "daily",
                "--until", "2025-12-31",
                option, value,
            )
        assert exc.value.code == 2
        assert not records_file.exists()

    def test_log_dry_run(self, records_file, capsys):
        assert self.run(records_file, "log", "Roof sealant", "--dry-run") == 0
        assert not records_file.exists()
        assert "dry run" in capsys.readouterr().out

    def test_log_validation_error(self, records_file, capsys):
        assert self.run(records_file, "log", "Flush tanks", "--recurring", "weekly") == 1
        assert not records_file.exists()
        assert "Error: recurring_end_date" in capsys.readouterr().out

    def test_complete(self, records_file, capsys):
        self.run(records_file, "log", "Roof sealant", "--type", "Inspection", "--date", "2025-01-10")
        record_id = load_records(records_file)[0]["id"]

        assert self.run(records_file, "complete", record_id, "--notes", "Resealed") == 0
        record = load_records(records_file)[0]
        assert record["type"] == "Completed"
        assert record["notes"] == "Resealed"
        assert "Completed: Roof sealant" in capsys.readouterr().out

    def test_complete_unknown_record(self, records_file, capsys):
        self.run(records_file, "log", "Roof sealant")
        assert self.run(records_file, "complete", "missing") == 1
        assert "Error: Record missing not found" in capsys.readouterr().out

    def test_complete_malformed_file(self, records_file, capsys):
        records_file.write_text("records:\n  - id: r-1\n    title: no type\n    date: '2025-01-10'\n")
        assert self.run(records_file, "complete", "r-1") == 1
        assert "Error: Malformed record" in capsys.readouterr().out

    def test_missing_file(self, records_file, capsys):
        assert self.run(records_file, "summary") == 1
        assert "File not found" in capsys.readouterr().out

    def test_summary(self, records_file, capsys):
        self.run(records_file, "log", "Old repair", "--type", "Repair", "--date", "2025-01-10")
        self.run(records_file, "log", "Next repair", "--type", "Repair", "--date", "2025-01-18")
        self.run(records_file, "log", "Service", "--type", "Completed Service", "--date", "2025-01-14")
        capsys.readouterr()

        assert self.run(records_file, "summary") == 0
        out = capsys.readouterr().out
        assert "Completed: 1  Upcoming: 1  Overdue: 1" in out
        assert "OVERDUE:" in out
        assert "Old repair" in out

    def test_history_filter(self, records_file, capsys):
        self.run(records_file, "log", "Old repair", "--date", "2025-01-10")
        self.run(records_file, "log", "Next repair", "--date", "2025-01-18")
        capsys.readouterr()

        assert self.run(records_file, "history", "--status", "overdue") == 0
        out = capsys.readouterr().out
        assert "Showing: 1 (overdue)" in out
        assert "Old repair" in out
        assert "Next repair" not in out

    def test_series(self, records_file, capsys):
        self.run(
            records_file,
            "log", "Flush tanks",
            "--date", "2025-02-01",
            "--recurring", "weekly",
            "--until", "2025-02-15",
        )
        parent_id = load_records(records_file)[0]["id"]
        capsys.readouterr()

        assert self.run(records_file, "series", parent_id) == 0
        out = capsys.readouterr().out
        assert f"Occurrences of {parent_id}: 2" in out
        assert "2025-02-08" in out and "2025-02-15" in out

    def test_calendar(self, records_file, capsys):
        self.run(records_file, "log", "Winterize", "--date", "2025-11-01")
        capsys.readouterr()
        assert self.run(records_file, "calendar") == 0
        out = capsys.readouterr().out
        assert "Maintenance calendar 2025" in out
        assert "November" in out

    def test_types(self, records_file, capsys):
        assert self.run(records_file, "types") == 0
        assert "Regular Service" in capsys.readouterr().out
