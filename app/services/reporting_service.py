from __future__ import annotations

from datetime import datetime

from app.domain.aggregation import inspector_report, per_inspector_scaffold_counts, report_window_start
from app.domain.models import (
    InspectorPeriodReportRead,
    InspectorScaffoldCountRead,
    PeriodReportRead,
    ReportPeriod,
    ScaffoldRead,
)
from app.infra.store import RecordStore


class ReportingService:
    """Cross-inspector views for the super admin panel and the export feed."""

    def __init__(self) -> None:
        self._store = RecordStore()

    def inspector_counts(self) -> list[InspectorScaffoldCountRead]:
        snapshot = self._store.load_snapshot()
        return [
            InspectorScaffoldCountRead(inspector_id=inspector.id, name=inspector.name, scaffold_count=count)
            for inspector, count in per_inspector_scaffold_counts(snapshot.scaffolds, snapshot.inspectors)
        ]

    def period_report(self, period: ReportPeriod, now: datetime) -> PeriodReportRead:
        snapshot = self._store.load_snapshot()
        groups = inspector_report(snapshot, now, period)
        return PeriodReportRead(
            period=period,
            generated_at=now,
            window_start=report_window_start(now, period),
            total_scaffolds=sum(len(scaffolds) for _, _, scaffolds in groups),
            inspectors=[
                InspectorPeriodReportRead(
                    inspector_id=inspector_id,
                    name=name,
                    scaffolds=[ScaffoldRead.model_validate(item) for item in scaffolds],
                )
                for inspector_id, name, scaffolds in groups
            ],
        )
