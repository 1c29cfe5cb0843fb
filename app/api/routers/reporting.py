from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import require_perm
from app.domain.models import (
    ActiveReminderRead,
    InspectorScaffoldCountRead,
    PeriodReportRead,
    ReportPeriod,
    now_local,
)
from app.domain.permissions import PERM_REPORTING_READ, AllInspectors
from app.services.reminder_service import ReminderService
from app.services.reporting_service import ReportingService

router = APIRouter()


def get_reporting_service() -> ReportingService:
    return ReportingService()


def get_reminder_service() -> ReminderService:
    return ReminderService()


Service = Annotated[ReportingService, Depends(get_reporting_service)]
Reminders = Annotated[ReminderService, Depends(get_reminder_service)]


@router.get(
    "/inspectors",
    response_model=list[InspectorScaffoldCountRead],
    dependencies=[Depends(require_perm(PERM_REPORTING_READ))],
)
def inspector_counts(service: Service) -> list[InspectorScaffoldCountRead]:
    return service.inspector_counts()


@router.get(
    "/scaffolds",
    response_model=PeriodReportRead,
    dependencies=[Depends(require_perm(PERM_REPORTING_READ))],
)
def period_report(
    service: Service,
    period: Annotated[ReportPeriod, Query()] = ReportPeriod.WEEKLY,
) -> PeriodReportRead:
    return service.period_report(period, now_local())


@router.get(
    "/reminders",
    response_model=list[ActiveReminderRead],
    dependencies=[Depends(require_perm(PERM_REPORTING_READ))],
)
def active_reminders(reminders: Reminders) -> list[ActiveReminderRead]:
    return [
        ActiveReminderRead.model_validate({**item.model_dump(), "inspector_name": name})
        for item, name in reminders.active_with_names(AllInspectors())
    ]
