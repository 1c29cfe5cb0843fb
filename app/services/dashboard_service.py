from __future__ import annotations

from datetime import datetime

from app.domain.aggregation import (
    group_unit_counts,
    overdue_smart_count,
    pending_manual_count,
    scaffolds_in_scope,
    tag_color_distribution,
)
from app.domain.models import (
    BadgeCountsRead,
    DashboardSummaryRead,
    ReminderRead,
    ScaffoldRead,
    SmartReminderRead,
    Snapshot,
    UnitCountRead,
)
from app.domain.permissions import Scope, scope_inspector_id
from app.domain.reminder_filters import pending_due_now
from app.domain.smart_reminders import SmartReminder, SortConfig, derive_with_config
from app.infra.store import RecordStore


def to_smart_reminder_read(item: SmartReminder) -> SmartReminderRead:
    return SmartReminderRead(
        scaffold=ScaffoldRead.model_validate(item.scaffold),
        requires_inspection=item.requires_inspection,
        overdue_days=item.overdue_days,
    )


class DashboardService:
    def __init__(self) -> None:
        self._store = RecordStore()

    def _snapshot(self) -> Snapshot:
        return self._store.load_snapshot()

    def smart_reminders(self, scope: Scope, now: datetime, sort: SortConfig) -> list[SmartReminder]:
        snapshot = self._snapshot()
        return derive_with_config(scaffolds_in_scope(snapshot, scope), now, sort)

    def badges(self, scope: Scope, now: datetime) -> BadgeCountsRead:
        snapshot = self._snapshot()
        return BadgeCountsRead(
            overdue_smart_count=overdue_smart_count(snapshot, scope, now),
            pending_manual_count=pending_manual_count(snapshot, scope, now),
        )

    def summary(self, scope: Scope, now: datetime, sort: SortConfig) -> DashboardSummaryRead:
        snapshot = self._snapshot()
        scaffolds = scaffolds_in_scope(snapshot, scope)
        reminders = [item for item in snapshot.reminders if scope.includes(item.inspector_id)]
        smart = derive_with_config(scaffolds, now, sort)
        due = pending_due_now(reminders, now)
        return DashboardSummaryRead(
            inspector_id=scope_inspector_id(scope),
            total_scaffolds=len(scaffolds),
            tag_distribution=tag_color_distribution(scaffolds),
            unit_counts=[UnitCountRead(unit=unit, count=count) for unit, count in group_unit_counts(scaffolds)],
            smart_reminders=[to_smart_reminder_read(item) for item in smart],
            pending_manual_reminders=[ReminderRead.model_validate(item) for item in due],
            overdue_smart_count=len(smart),
            pending_manual_count=len(due),
            sort_key=sort.key,
            sort_direction=sort.direction,
        )
