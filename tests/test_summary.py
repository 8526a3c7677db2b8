#!/usr/bin/env python3
"""Tests for summary, history and calendar views."""
from datetime import date, datetime, timedelta

import pytest

from rvmaint import (
    MaintenanceRecord,
    Status,
    filter_by_status,
    month_status,
    records_for_month,
    sort_history,
    summarize,
)

NOW = datetime(2025, 6, 15, 9, 0)


def rec(title, days, type_label="Repair"):
    return MaintenanceRecord(title, NOW + timedelta(days=days), type_label)


class TestSummarize:
    """Tests for summarize."""

    def test_sample_counts(self):
        records = [
            rec("old repair", -5),
            rec("next repair", 3),
            rec("service", -1, "Completed Service"),
        ]
        summary = summarize(records, NOW)
        assert summary.counts() == {"completed": 1, "upcoming": 1, "overdue": 1}
        assert summary.total == 3

    def test_empty(self):
        summary = summarize([], NOW)
        assert summary.counts() == {"completed": 0, "upcoming": 0, "overdue": 0}
        assert summary.next_upcoming == []

    def test_upcoming_soonest_first(self):
        records = [rec("c", 30), rec("a", 1), rec("b", 7)]
        summary = summarize(records, NOW)
        assert [r.title for r in summary.next_upcoming] == ["a", "b"]

    def test_overdue_oldest_first(self):
        records = [rec("recent", -1), rec("oldest", -40), rec("middle", -10)]
        summary = summarize(records, NOW)
        assert [r.title for r in summary.most_overdue] == ["oldest", "middle"]

    def test_completed_keeps_input_order(self):
        records = [
            rec("first", 10, "Completed"),
            rec("second", -10, "Completed"),
            rec("third", 0, "Completed"),
        ]
        summary = summarize(records, NOW)
        assert [r.title for r in summary.recent_completed] == ["first", "second"]

    def test_limit_parameter(self):
        records = [rec(str(i), i + 1) for i in range(6)]
        assert len(summarize(records, NOW, limit=4).next_upcoming) == 4
        assert summarize(records, NOW, limit=4).upcoming == 6

    def test_mixed_date_and_datetime(self):
        records = [
            MaintenanceRecord("dt", datetime(2025, 6, 20, 8, 0), "Repair"),
            MaintenanceRecord("d", date(2025, 6, 20), "Repair"),
        ]
        summary = summarize(records, NOW)
        assert [r.title for r in summary.next_upcoming] == ["d", "dt"]


class TestFilterAndSort:
    """Tests for filter_by_status and sort_history."""

    @pytest.fixture
    def records(self):
        return [
            rec("overdue", -3),
            rec("upcoming", 3),
            rec("done", -20, "Completed"),
        ]

    def test_filter_each_status(self, records):
        assert [r.title for r in filter_by_status(records, Status.OVERDUE, NOW)] == ["overdue"]
        assert [r.title for r in filter_by_status(records, Status.UPCOMING, NOW)] == ["upcoming"]
        assert [r.title for r in filter_by_status(records, Status.COMPLETED, NOW)] == ["done"]

    def test_filter_none_returns_all(self, records):
        assert len(filter_by_status(records, None, NOW)) == 3

    def test_sort_newest_first(self, records):
        assert [r.title for r in sort_history(records)] == ["upcoming", "overdue", "done"]

    def test_sort_oldest_first(self, records):
        assert [r.title for r in sort_history(records, reverse=False)] == [
            "done",
            "overdue",
            "upcoming",
        ]


class TestMonthStatus:
    """Tests for records_for_month and month_status."""

    def test_records_for_month(self):
        records = [
            MaintenanceRecord("june", date(2025, 6, 1), "Repair"),
            MaintenanceRecord("june late", datetime(2025, 6, 30, 22, 0), "Repair"),
            MaintenanceRecord("july", date(2025, 7, 1), "Repair"),
            MaintenanceRecord("june last year", date(2024, 6, 10), "Repair"),
        ]
        assert [r.title for r in records_for_month(records, 2025, 6)] == ["june", "june late"]

    def test_empty_month(self):
        assert month_status([], 2025, 6, NOW) is None

    def test_overdue_wins(self):
        records = [
            MaintenanceRecord("done", date(2025, 6, 1), "Completed"),
            MaintenanceRecord("late", date(2025, 6, 2), "Repair"),
            MaintenanceRecord("soon", date(2025, 6, 20), "Repair"),
        ]
        assert month_status(records, 2025, 6, NOW) == Status.OVERDUE

    def test_upcoming_before_completed(self):
        records = [
            MaintenanceRecord("done", date(2025, 6, 1), "Completed"),
            MaintenanceRecord("soon", date(2025, 6, 20), "Repair"),
        ]
        assert month_status(records, 2025, 6, NOW) == Status.UPCOMING

    def test_all_completed(self):
        records = [MaintenanceRecord("done", date(2025, 6, 1), "Completed")]
        assert month_status(records, 2025, 6, NOW) == Status.COMPLETED
