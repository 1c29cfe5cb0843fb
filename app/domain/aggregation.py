from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from app.domain.calendar import to_local_naive
from app.domain.models import Inspector, ReportPeriod, Scaffold, Snapshot, TagColor
from app.domain.permissions import Scope
from app.domain.reminder_filters import pending_due_now
from app.domain.smart_reminders import evaluate_scaffold

REPORT_PERIOD_DAYS: dict[ReportPeriod, int] = {
    ReportPeriod.WEEKLY: 7,
    ReportPeriod.MONTHLY: 30,
}

UNKNOWN_INSPECTOR_NAME = "unknown"


def scaffolds_in_scope(snapshot: Snapshot, scope: Scope) -> list[Scaffold]:
    return [item for item in snapshot.scaffolds if scope.includes(item.inspector_id)]


def overdue_smart_count(snapshot: Snapshot, scope: Scope, now: datetime) -> int:
    reference = to_local_naive(now)
    return sum(
        1 for scaffold in scaffolds_in_scope(snapshot, scope) if evaluate_scaffold(scaffold, reference).requires_inspection
    )


def pending_manual_count(snapshot: Snapshot, scope: Scope, now: datetime) -> int:
    scoped = [item for item in snapshot.reminders if scope.includes(item.inspector_id)]
    return len(pending_due_now(scoped, now))


def per_inspector_scaffold_counts(
    scaffolds: Iterable[Scaffold],
    inspectors: Sequence[Inspector],
) -> list[tuple[Inspector, int]]:
    counts = Counter(item.inspector_id for item in scaffolds)
    return [(inspector, counts.get(inspector.id, 0)) for inspector in inspectors]


def group_unit_counts(scaffolds: Iterable[Scaffold]) -> list[tuple[str, int]]:
    # dict preserves first-occurrence order
    counts: dict[str, int] = {}
    for scaffold in scaffolds:
        counts[scaffold.unit] = counts.get(scaffold.unit, 0) + 1
    return list(counts.items())


def tag_color_distribution(scaffolds: Iterable[Scaffold]) -> dict[TagColor, int]:
    counts = Counter(TagColor(item.tag_color) for item in scaffolds)
    return {color: counts.get(color, 0) for color in TagColor}


def search_scaffolds(scaffolds: Iterable[Scaffold], text: str | None) -> list[Scaffold]:
    needle = (text or "").strip().lower()
    if not needle:
        return list(scaffolds)
    return [
        item
        for item in scaffolds
        if any(
            needle in value.lower()
            for value in (item.unit, item.location, item.tag_number, item.permit_number)
        )
    ]


def report_window_start(now: datetime, period: ReportPeriod) -> datetime:
    return to_local_naive(now) - timedelta(days=REPORT_PERIOD_DAYS[period])


def scaffolds_in_period(scaffolds: Iterable[Scaffold], now: datetime, period: ReportPeriod) -> list[Scaffold]:
    end = to_local_naive(now)
    start = report_window_start(end, period)
    return [item for item in scaffolds if start <= to_local_naive(item.inspection_date) <= end]


def inspector_report(
    snapshot: Snapshot,
    now: datetime,
    period: ReportPeriod,
) -> list[tuple[str, str, list[Scaffold]]]:
    """Group the period's scaffolds by owning inspector, in inspector order.

    Inspectors without scaffolds in the window are left out. Scaffolds whose
    inspector is missing from the snapshot are grouped under ``unknown``.
    """
    in_period = scaffolds_in_period(snapshot.scaffolds, now, period)
    grouped: dict[str, list[Scaffold]] = {}
    for scaffold in in_period:
        grouped.setdefault(scaffold.inspector_id, []).append(scaffold)

    names = {inspector.id: inspector.name for inspector in snapshot.inspectors}
    ordered_ids = [inspector.id for inspector in snapshot.inspectors if inspector.id in grouped]
    ordered_ids.extend(inspector_id for inspector_id in grouped if inspector_id not in names)
    return [
        (inspector_id, names.get(inspector_id, UNKNOWN_INSPECTOR_NAME), grouped[inspector_id])
        for inspector_id in ordered_ids
    ]
