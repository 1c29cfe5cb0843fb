from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_scope, require_perm
from app.domain.models import (
    BadgeCountsRead,
    DashboardSummaryRead,
    SmartReminderRead,
    SmartReminderSortKey,
    SortDirection,
    now_local,
)
from app.domain.permissions import PERM_DASHBOARD_READ, Scope
from app.domain.smart_reminders import SortConfig
from app.services.dashboard_service import DashboardService, to_smart_reminder_read

router = APIRouter()


def get_dashboard_service() -> DashboardService:
    return DashboardService()


Service = Annotated[DashboardService, Depends(get_dashboard_service)]
ScopeDep = Annotated[Scope, Depends(get_scope)]


def get_sort_config(
    sort_key: Annotated[SmartReminderSortKey, Query()] = SmartReminderSortKey.OVERDUE_DAYS,
    sort_direction: Annotated[SortDirection, Query()] = SortDirection.DESCENDING,
) -> SortConfig:
    return SortConfig(key=sort_key, direction=sort_direction)


Sort = Annotated[SortConfig, Depends(get_sort_config)]


@router.get(
    "/summary",
    response_model=DashboardSummaryRead,
    dependencies=[Depends(require_perm(PERM_DASHBOARD_READ))],
)
def get_summary(scope: ScopeDep, sort: Sort, service: Service) -> DashboardSummaryRead:
    return service.summary(scope, now_local(), sort)


@router.get(
    "/smart-reminders",
    response_model=list[SmartReminderRead],
    dependencies=[Depends(require_perm(PERM_DASHBOARD_READ))],
)
def list_smart_reminders(scope: ScopeDep, sort: Sort, service: Service) -> list[SmartReminderRead]:
    return [to_smart_reminder_read(item) for item in service.smart_reminders(scope, now_local(), sort)]


@router.get(
    "/badges",
    response_model=BadgeCountsRead,
    dependencies=[Depends(require_perm(PERM_DASHBOARD_READ))],
)
def get_badges(scope: ScopeDep, service: Service) -> BadgeCountsRead:
    return service.badges(scope, now_local())
