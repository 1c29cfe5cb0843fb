from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import get_current_claims, get_scope, require_perm
from app.domain.models import ReminderCreate, ReminderRead, now_local
from app.domain.permissions import PERM_REMINDER_READ, PERM_REMINDER_WRITE, Scope
from app.services.reminder_service import (
    NotFoundError,
    ReferentialIntegrityError,
    ReminderService,
    ValidationError,
)

router = APIRouter()


def get_reminder_service() -> ReminderService:
    return ReminderService()


Claims = Annotated[dict[str, Any], Depends(get_current_claims)]
Service = Annotated[ReminderService, Depends(get_reminder_service)]
ScopeDep = Annotated[Scope, Depends(get_scope)]


def _handle_reminder_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if isinstance(exc, ReferentialIntegrityError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    raise exc


@router.post(
    "",
    response_model=ReminderRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_perm(PERM_REMINDER_WRITE))],
)
def create_reminder(payload: ReminderCreate, claims: Claims, service: Service) -> ReminderRead:
    owner_id = payload.inspector_id if claims.get("inspector_id") is None else claims["inspector_id"]
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="inspector_id is required",
        )
    try:
        row = service.add(
            owner_id,
            payload.date,
            payload.time,
            unit=payload.unit,
            tag_number=payload.tag_number,
            notes=payload.notes,
            actor_id=claims.get("sub"),
        )
        return ReminderRead.model_validate(row)
    except (NotFoundError, ValidationError, ReferentialIntegrityError) as exc:
        _handle_reminder_error(exc)
        raise


@router.get(
    "",
    response_model=list[ReminderRead],
    dependencies=[Depends(require_perm(PERM_REMINDER_READ))],
)
def list_reminders(scope: ScopeDep, service: Service) -> list[ReminderRead]:
    return [ReminderRead.model_validate(item) for item in service.list_reminders(scope)]


@router.get(
    "/due",
    response_model=list[ReminderRead],
    dependencies=[Depends(require_perm(PERM_REMINDER_READ))],
)
def list_due_reminders(scope: ScopeDep, service: Service) -> list[ReminderRead]:
    return [ReminderRead.model_validate(item) for item in service.due_now(scope, now_local())]


@router.get(
    "/upcoming",
    response_model=list[ReminderRead],
    dependencies=[Depends(require_perm(PERM_REMINDER_READ))],
)
def list_upcoming_reminders(scope: ScopeDep, service: Service) -> list[ReminderRead]:
    return [ReminderRead.model_validate(item) for item in service.upcoming(scope)]


@router.post(
    "/{reminder_id}/complete",
    response_model=ReminderRead,
    dependencies=[Depends(require_perm(PERM_REMINDER_WRITE))],
)
def complete_reminder(reminder_id: str, scope: ScopeDep, claims: Claims, service: Service) -> ReminderRead:
    try:
        row = service.mark_completed(scope, reminder_id, actor_id=claims.get("sub"))
        return ReminderRead.model_validate(row)
    except (NotFoundError, ValidationError, ReferentialIntegrityError) as exc:
        _handle_reminder_error(exc)
        raise


@router.delete(
    "/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_perm(PERM_REMINDER_WRITE))],
)
def delete_reminder(reminder_id: str, scope: ScopeDep, claims: Claims, service: Service) -> Response:
    service.remove(scope, reminder_id, actor_id=claims.get("sub"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
