from __future__ import annotations

from dataclasses import dataclass

from app.domain.models import TagColor

GREEN_THRESHOLD_DAYS = 30
YELLOW_THRESHOLD_DAYS = 7

# Red tags mark out-of-service scaffolds and are never scheduled.
TAG_THRESHOLDS: dict[TagColor, int | None] = {
    TagColor.GREEN: GREEN_THRESHOLD_DAYS,
    TagColor.YELLOW: YELLOW_THRESHOLD_DAYS,
    TagColor.RED: None,
}


@dataclass(frozen=True)
class TagPolicyResult:
    requires_inspection: bool
    overdue_days: int


NOT_DUE = TagPolicyResult(requires_inspection=False, overdue_days=0)


def evaluate(tag_color: TagColor | str, days_since_inspection: int) -> TagPolicyResult:
    threshold = TAG_THRESHOLDS[TagColor(tag_color)]
    if threshold is None or days_since_inspection <= threshold:
        return NOT_DUE
    return TagPolicyResult(
        requires_inspection=True,
        overdue_days=days_since_inspection - threshold,
    )
