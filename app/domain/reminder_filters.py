from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from app.domain.calendar import to_local_naive
from app.domain.models import Inspector, Reminder


def _chronological(reminders: Iterable[Reminder]) -> list[Reminder]:
    return sorted(reminders, key=lambda item: (to_local_naive(item.target_datetime), item.id))


def pending_due_now(reminders: Iterable[Reminder], now: datetime) -> list[Reminder]:
    """Open reminders whose target has passed, earliest first."""
    reference = to_local_naive(now)
    return _chronological(
        item for item in reminders if not item.is_completed and to_local_naive(item.target_datetime) <= reference
    )


def pending_upcoming(reminders: Iterable[Reminder]) -> list[Reminder]:
    """Every open reminder, past-due included, earliest first."""
    return _chronological(item for item in reminders if not item.is_completed)


def with_inspector_names(
    reminders: Iterable[Reminder],
    inspectors: Iterable[Inspector],
    unknown: str = "unknown",
) -> list[tuple[Reminder, str]]:
    names = {inspector.id: inspector.name for inspector in inspectors}
    return [(item, names.get(item.inspector_id, unknown)) for item in pending_upcoming(reminders)]
