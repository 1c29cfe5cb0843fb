from __future__ import annotations

import pytest

from app.domain.models import TagColor
from app.domain.tag_policy import NOT_DUE, TagPolicyResult, evaluate


@pytest.mark.parametrize(
    ("color", "days", "expected"),
    [
        (TagColor.GREEN, 0, NOT_DUE),
        (TagColor.GREEN, 30, NOT_DUE),
        (TagColor.GREEN, 31, TagPolicyResult(requires_inspection=True, overdue_days=1)),
        (TagColor.GREEN, 45, TagPolicyResult(requires_inspection=True, overdue_days=15)),
        (TagColor.YELLOW, 7, NOT_DUE),
        (TagColor.YELLOW, 8, TagPolicyResult(requires_inspection=True, overdue_days=1)),
        (TagColor.YELLOW, 5, NOT_DUE),
    ],
)
def test_threshold_is_strictly_greater_than(color: TagColor, days: int, expected: TagPolicyResult) -> None:
    assert evaluate(color, days) == expected


def test_red_tag_is_never_due() -> None:
    assert evaluate(TagColor.RED, 10_000) == NOT_DUE


def test_future_inspection_is_not_overdue() -> None:
    assert evaluate(TagColor.GREEN, -5) == NOT_DUE
    assert evaluate(TagColor.YELLOW, -1) == NOT_DUE


def test_accepts_plain_color_strings() -> None:
    assert evaluate("green", 40).overdue_days == 10
    with pytest.raises(ValueError):
        evaluate("blue", 40)
