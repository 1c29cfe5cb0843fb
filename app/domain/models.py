from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic import Field as PydanticField
from sqlalchemy import JSON, Column, DateTime, ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from app.domain.calendar import format_jalali_date, format_jalali_datetime


def now_utc() -> datetime:
    return datetime.now(UTC)


def now_local() -> datetime:
    return datetime.now()


class TagColor(StrEnum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class ChecklistStatus(StrEnum):
    YES = "yes"
    NO = "no"
    NA = "na"


class Role(StrEnum):
    INSPECTOR = "inspector"
    SUPER_ADMIN = "super_admin"


class SmartReminderSortKey(StrEnum):
    UNIT = "unit"
    OVERDUE_DAYS = "overdue_days"


class SortDirection(StrEnum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def toggled(self) -> SortDirection:
        if self == SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


class ReportPeriod(StrEnum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EventRecord(SQLModel, table=True):
    __tablename__ = "events"

    event_id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    event_type: str = Field(index=True)
    inspector_id: str | None = Field(default=None, index=True)
    ts: datetime = Field(
        default_factory=now_utc,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    actor_id: str | None = Field(default=None, index=True)
    payload: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )


class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_logs"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    role: str = Field(index=True)
    actor_id: str | None = Field(default=None, index=True)
    action: str
    resource: str
    method: str
    status_code: int
    ts: datetime = Field(
        default_factory=now_utc,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    detail: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )


class Inspector(SQLModel, table=True):
    __tablename__ = "inspectors"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=200, index=True)
    created_at: datetime = Field(
        default_factory=now_utc,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )


class Scaffold(SQLModel, table=True):
    __tablename__ = "scaffolds"
    __table_args__ = (
        ForeignKeyConstraint(
            ["inspector_id"],
            ["inspectors.id"],
            ondelete="CASCADE",
        ),
        Index("ix_scaffolds_inspector_unit", "inspector_id", "unit"),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    inspector_id: str = Field(index=True)
    unit: str = Field(default="", max_length=200)
    location: str = Field(default="", max_length=200)
    tag_number: str = Field(default="", max_length=100, index=True)
    permit_number: str = Field(default="", max_length=100)
    # naive local wall-clock instant
    inspection_date: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False, index=True))
    tag_color: TagColor = Field(default=TagColor.GREEN, index=True)
    checklist: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime = Field(
        default_factory=now_utc,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )


class Reminder(SQLModel, table=True):
    __tablename__ = "reminders"
    __table_args__ = (
        ForeignKeyConstraint(
            ["inspector_id"],
            ["inspectors.id"],
            ondelete="CASCADE",
        ),
        Index("ix_reminders_inspector_completed", "inspector_id", "is_completed"),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    inspector_id: str = Field(index=True)
    # naive local wall-clock instant
    target_datetime: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False, index=True))
    unit: str = Field(default="", max_length=200)
    tag_number: str = Field(default="", max_length=100)
    notes: str = ""
    is_completed: bool = Field(default=False, index=True)
    created_at: datetime = Field(
        default_factory=now_utc,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )


@dataclass(frozen=True)
class Snapshot:
    """A consistent view of every stored record, handed to the pure core functions."""

    inspectors: tuple[Inspector, ...] = ()
    scaffolds: tuple[Scaffold, ...] = ()
    reminders: tuple[Reminder, ...] = ()


class EventEnvelope(BaseModel):
    event_id: str = PydanticField(default_factory=lambda: str(uuid4()))
    event_type: str
    inspector_id: str | None = None
    ts: datetime = PydanticField(default_factory=now_utc)
    actor_id: str | None = None
    payload: dict[str, Any]


class ORMReadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    role: Role
    inspector_id: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
    inspector_id: str | None = None
    permissions: list[str] = PydanticField(default_factory=list)


class InspectorCreate(BaseModel):
    name: str


class InspectorRead(ORMReadModel):
    id: str
    name: str
    created_at: datetime


class ChecklistItem(BaseModel):
    question_id: int
    status: ChecklistStatus = ChecklistStatus.NA
    description: str = ""


class ChecklistQuestionRead(BaseModel):
    question_id: int
    text: str


class ChecklistSubmit(BaseModel):
    items: list[ChecklistItem]


class ScaffoldCreate(BaseModel):
    inspector_id: str | None = None
    unit: str
    location: str = ""
    tag_number: str = ""
    permit_number: str = ""
    inspection_date: str
    tag_color: TagColor = TagColor.GREEN


class ScaffoldUpdate(BaseModel):
    unit: str | None = None
    location: str | None = None
    tag_number: str | None = None
    permit_number: str | None = None
    inspection_date: str | None = None
    tag_color: TagColor | None = None


class ScaffoldRead(ORMReadModel):
    id: str
    inspector_id: str
    unit: str
    location: str
    tag_number: str
    permit_number: str
    inspection_date: datetime
    tag_color: TagColor
    checklist: list[ChecklistItem]
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def inspection_date_jalali(self) -> str:
        return format_jalali_date(self.inspection_date)


class ReminderCreate(BaseModel):
    inspector_id: str | None = None
    date: str
    time: str
    unit: str = ""
    tag_number: str = ""
    notes: str = ""


class ReminderRead(ORMReadModel):
    id: str
    inspector_id: str
    target_datetime: datetime
    unit: str
    tag_number: str
    notes: str
    is_completed: bool
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def target_jalali(self) -> str:
        return format_jalali_datetime(self.target_datetime)


class ActiveReminderRead(ReminderRead):
    inspector_name: str


class SmartReminderRead(BaseModel):
    scaffold: ScaffoldRead
    requires_inspection: bool
    overdue_days: int


class UnitCountRead(BaseModel):
    unit: str
    count: int


class InspectorScaffoldCountRead(BaseModel):
    inspector_id: str
    name: str
    scaffold_count: int


class BadgeCountsRead(BaseModel):
    overdue_smart_count: int
    pending_manual_count: int


class DashboardSummaryRead(BaseModel):
    inspector_id: str | None
    total_scaffolds: int
    tag_distribution: dict[TagColor, int]
    unit_counts: list[UnitCountRead]
    smart_reminders: list[SmartReminderRead]
    pending_manual_reminders: list[ReminderRead]
    overdue_smart_count: int
    pending_manual_count: int
    sort_key: SmartReminderSortKey
    sort_direction: SortDirection


class InspectorPeriodReportRead(BaseModel):
    inspector_id: str
    name: str
    scaffolds: list[ScaffoldRead]


class PeriodReportRead(BaseModel):
    period: ReportPeriod
    generated_at: datetime
    window_start: datetime
    total_scaffolds: int
    inspectors: list[InspectorPeriodReportRead]
