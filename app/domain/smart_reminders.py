"""Reminders derived from tag colour and time since the last inspection.

Nothing here is persisted: every call recomputes the overdue set from the
scaffolds it is given and the reference instant.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.domain.calendar import days_between, to_local_naive
from app.domain.models import Scaffold, SmartReminderSortKey, SortDirection
from app.domain.tag_policy import evaluate


@dataclass(frozen=True)
class SmartReminder:
    scaffold: Scaffold
    requires_inspection: bool
    overdue_days: int


@dataclass(frozen=True)
class SortConfig:
    key: SmartReminderSortKey = SmartReminderSortKey.OVERDUE_DAYS
    direction: SortDirection = SortDirection.DESCENDING

    def request_sort(self, key: SmartReminderSortKey) -> SortConfig:
        """Same key flips the direction; a new key starts ascending."""
        if key == self.key:
            return SortConfig(key=key, direction=self.direction.toggled())
        return SortConfig(key=key, direction=SortDirection.ASCENDING)


def evaluate_scaffold(scaffold: Scaffold, now: datetime) -> SmartReminder:
    days = days_between(scaffold.inspection_date, now)
    result = evaluate(scaffold.tag_color, days)
    return SmartReminder(
        scaffold=scaffold,
        requires_inspection=result.requires_inspection,
        overdue_days=result.overdue_days,
    )


def _primary_key(key: SmartReminderSortKey) -> Callable[[SmartReminder], Any]:
    if key == SmartReminderSortKey.UNIT:
        return lambda item: item.scaffold.unit
    return lambda item: item.overdue_days


def sort_smart_reminders(
    reminders: Iterable[SmartReminder],
    key: SmartReminderSortKey,
    direction: SortDirection,
) -> list[SmartReminder]:
    # Sort by id first; the stable primary sort then keeps id order among ties
    # in both directions.
    by_id = sorted(reminders, key=lambda item: item.scaffold.id)
    return sorted(by_id, key=_primary_key(key), reverse=direction == SortDirection.DESCENDING)


def derive_smart_reminders(
    scaffolds: Iterable[Scaffold],
    now: datetime,
    sort_key: SmartReminderSortKey = SmartReminderSortKey.OVERDUE_DAYS,
    sort_direction: SortDirection = SortDirection.DESCENDING,
) -> list[SmartReminder]:
    reference = to_local_naive(now)
    overdue = [
        reminder
        for reminder in (evaluate_scaffold(scaffold, reference) for scaffold in scaffolds)
        if reminder.requires_inspection
    ]
    return sort_smart_reminders(overdue, sort_key, sort_direction)


def derive_with_config(scaffolds: Iterable[Scaffold], now: datetime, config: SortConfig) -> list[SmartReminder]:
    return derive_smart_reminders(scaffolds, now, config.key, config.direction)
