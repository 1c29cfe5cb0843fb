from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from app.domain.models import ChecklistItem, ChecklistStatus

CHECKLIST_QUESTIONS: tuple[str, ...] = (
    "Base plates and sole boards are in place on firm, level ground",
    "Standards are plumb and spaced as designed",
    "Ledgers and transoms are secured at every lift",
    "Longitudinal and ledger bracing is complete",
    "Ties to the structure are installed at the required intervals",
    "Working platforms are fully boarded without gaps",
    "Guardrails, midrails and toe boards are fitted on open sides",
    "Safe access by ladder or stair tower is provided",
    "Couplers and fittings are tight and undamaged",
    "Clearance from overhead power lines is maintained",
    "Platform loads are within the rated capacity",
    "Scaffold tag is displayed and legible at every access point",
)


class ChecklistValidationError(ValueError):
    pass


def new_checklist() -> list[dict[str, Any]]:
    """Build a fresh all-"na" checklist, one entry per standard question."""
    return [
        ChecklistItem(question_id=index, status=ChecklistStatus.NA).model_dump(mode="json")
        for index in range(1, len(CHECKLIST_QUESTIONS) + 1)
    ]


def is_complete(checklist: Sequence[dict[str, Any]] | None) -> bool:
    if not checklist or len(checklist) != len(CHECKLIST_QUESTIONS):
        return False
    ids = {item.get("question_id") for item in checklist}
    return ids == set(range(1, len(CHECKLIST_QUESTIONS) + 1))


def ensure_checklist(checklist: Sequence[dict[str, Any]] | None) -> list[dict[str, Any]]:
    if checklist is not None and is_complete(checklist):
        return [dict(item) for item in checklist]
    return new_checklist()


def validate_submission(items: Iterable[ChecklistItem]) -> list[dict[str, Any]]:
    rows = list(items)
    expected = len(CHECKLIST_QUESTIONS)
    if len(rows) != expected:
        raise ChecklistValidationError(f"checklist must contain {expected} items, got {len(rows)}")
    seen: set[int] = set()
    for item in rows:
        if not 1 <= item.question_id <= expected:
            raise ChecklistValidationError(f"question_id {item.question_id} out of range 1..{expected}")
        if item.question_id in seen:
            raise ChecklistValidationError(f"duplicate question_id {item.question_id}")
        seen.add(item.question_id)
    ordered = sorted(rows, key=lambda item: item.question_id)
    return [item.model_dump(mode="json") for item in ordered]
