from __future__ import annotations

from datetime import datetime, timedelta

from app.domain.models import Scaffold, SmartReminderSortKey, SortDirection, TagColor
from app.domain.smart_reminders import (
    SortConfig,
    derive_smart_reminders,
    derive_with_config,
    evaluate_scaffold,
)

NOW = datetime(2024, 7, 22, 10, 0)


def _scaffold(scaffold_id: str, days_ago: int, color: TagColor, unit: str = "U1") -> Scaffold:
    return Scaffold(
        id=scaffold_id,
        inspector_id="inspector-1",
        unit=unit,
        inspection_date=NOW - timedelta(days=days_ago),
        tag_color=color,
    )


def test_green_scaffold_45_days_old_is_15_days_overdue() -> None:
    result = derive_smart_reminders([_scaffold("s1", 45, TagColor.GREEN)], NOW)
    assert len(result) == 1
    assert result[0].requires_inspection is True
    assert result[0].overdue_days == 15
    assert result[0].scaffold.id == "s1"


def test_yellow_scaffold_inside_window_produces_no_reminder() -> None:
    assert derive_smart_reminders([_scaffold("s1", 5, TagColor.YELLOW)], NOW) == []


def test_result_is_subset_of_overdue_scaffolds() -> None:
    scaffolds = [
        _scaffold("a", 45, TagColor.GREEN),
        _scaffold("b", 10, TagColor.GREEN),
        _scaffold("c", 9, TagColor.YELLOW),
        _scaffold("d", 400, TagColor.RED),
        _scaffold("e", -3, TagColor.YELLOW),
    ]
    result = derive_smart_reminders(scaffolds, NOW)
    assert {item.scaffold.id for item in result} == {"a", "c"}
    assert all(item.requires_inspection and item.overdue_days > 0 for item in result)
    assert evaluate_scaffold(scaffolds[3], NOW).requires_inspection is False


def test_default_sort_is_overdue_days_descending() -> None:
    scaffolds = [
        _scaffold("a", 31, TagColor.GREEN),
        _scaffold("b", 20, TagColor.YELLOW),
        _scaffold("c", 60, TagColor.GREEN),
    ]
    result = derive_smart_reminders(scaffolds, NOW)
    assert [item.overdue_days for item in result] == [30, 13, 1]


def test_ties_are_ordered_by_scaffold_id_in_both_directions() -> None:
    scaffolds = [
        _scaffold("b", 45, TagColor.GREEN),
        _scaffold("a", 45, TagColor.GREEN),
        _scaffold("c", 50, TagColor.GREEN),
    ]
    descending = derive_smart_reminders(scaffolds, NOW, SmartReminderSortKey.OVERDUE_DAYS, SortDirection.DESCENDING)
    ascending = derive_smart_reminders(scaffolds, NOW, SmartReminderSortKey.OVERDUE_DAYS, SortDirection.ASCENDING)
    assert [item.scaffold.id for item in descending] == ["c", "a", "b"]
    assert [item.scaffold.id for item in ascending] == ["a", "b", "c"]


def test_sort_by_unit() -> None:
    scaffolds = [
        _scaffold("a", 45, TagColor.GREEN, unit="Unit C"),
        _scaffold("b", 45, TagColor.GREEN, unit="Unit A"),
        _scaffold("c", 45, TagColor.GREEN, unit="Unit B"),
    ]
    result = derive_with_config(scaffolds, NOW, SortConfig(SmartReminderSortKey.UNIT, SortDirection.ASCENDING))
    assert [item.scaffold.unit for item in result] == ["Unit A", "Unit B", "Unit C"]


def test_request_sort_toggles_same_key_and_resets_on_new_key() -> None:
    config = SortConfig()
    assert config.key == SmartReminderSortKey.OVERDUE_DAYS
    assert config.direction == SortDirection.DESCENDING

    toggled = config.request_sort(SmartReminderSortKey.OVERDUE_DAYS)
    assert toggled.direction == SortDirection.ASCENDING
    assert toggled.request_sort(SmartReminderSortKey.OVERDUE_DAYS).direction == SortDirection.DESCENDING

    by_unit = toggled.request_sort(SmartReminderSortKey.UNIT)
    assert by_unit == SortConfig(SmartReminderSortKey.UNIT, SortDirection.ASCENDING)
    assert config.direction == SortDirection.DESCENDING
