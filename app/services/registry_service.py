from __future__ import annotations

import logging
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.domain.aggregation import search_scaffolds
from app.domain.calendar import CalendarValidationError, parse_jalali_date
from app.domain.checklist import ChecklistValidationError, ensure_checklist, new_checklist, validate_submission
from app.domain.models import (
    ChecklistItem,
    Inspector,
    Reminder,
    Scaffold,
    ScaffoldCreate,
    ScaffoldUpdate,
    Snapshot,
)
from app.domain.permissions import Scope, SingleInspector
from app.infra.db import get_engine
from app.infra.events import event_bus
from app.infra.store import RecordStore

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    pass


class NotFoundError(RegistryError):
    pass


class ValidationError(RegistryError):
    pass


class ReferentialIntegrityError(RegistryError):
    pass


class RegistryService:
    def __init__(self) -> None:
        self._store = RecordStore()

    def _session(self) -> Session:
        return Session(get_engine(), expire_on_commit=False)

    def _ensure_inspector(self, session: Session, inspector_id: str) -> Inspector:
        inspector = session.get(Inspector, inspector_id)
        if inspector is None:
            raise ReferentialIntegrityError(f"inspector {inspector_id} does not exist")
        return inspector

    def _get_scoped_scaffold(self, session: Session, scope: Scope, scaffold_id: str) -> Scaffold:
        scaffold = session.get(Scaffold, scaffold_id)
        if scaffold is None or not scope.includes(scaffold.inspector_id):
            raise NotFoundError("scaffold not found")
        return scaffold

    def _parse_inspection_date(self, text: str) -> datetime:
        try:
            return parse_jalali_date(text)
        except CalendarValidationError as exc:
            logger.warning("rejected inspection date %r", text)
            raise ValidationError(str(exc)) from exc

    def create_inspector(self, name: str) -> Inspector:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("inspector name must not be empty")
        with self._session() as session:
            inspector = Inspector(name=cleaned)
            session.add(inspector)
            session.commit()
            session.refresh(inspector)
        logger.info("inspector %s registered", inspector.id)
        event_bus.publish_dict(
            "inspector.created",
            inspector.id,
            {"inspector_id": inspector.id, "name": inspector.name},
        )
        return inspector

    def list_inspectors(self) -> list[Inspector]:
        with self._session() as session:
            statement = select(Inspector).order_by(col(Inspector.created_at), col(Inspector.id))
            return list(session.exec(statement).all())

    def get_inspector(self, inspector_id: str) -> Inspector:
        with self._session() as session:
            inspector = session.get(Inspector, inspector_id)
            if inspector is None:
                raise NotFoundError("inspector not found")
            return inspector

    def delete_inspector(self, inspector_id: str, actor_id: str | None = None) -> dict[str, int]:
        """Remove the inspector with every scaffold and reminder it owns, in one transaction.

        Deleting an unknown inspector is a no-op and reports zero removals.
        """
        with self._session() as session:
            inspector = session.get(Inspector, inspector_id)
            if inspector is None:
                return {"inspectors": 0, "scaffolds": 0, "reminders": 0}
            try:
                scaffolds = session.execute(sa.delete(Scaffold).where(col(Scaffold.inspector_id) == inspector_id))
                reminders = session.execute(sa.delete(Reminder).where(col(Reminder.inspector_id) == inspector_id))
                session.delete(inspector)
                session.commit()
            except Exception:
                session.rollback()
                raise
        removed = {
            "inspectors": 1,
            "scaffolds": int(getattr(scaffolds, "rowcount", 0) or 0),
            "reminders": int(getattr(reminders, "rowcount", 0) or 0),
        }
        logger.info("inspector %s deleted with %s", inspector_id, removed)
        event_bus.publish_dict("inspector.deleted", inspector_id, removed, actor_id=actor_id)
        return removed

    def reset(self, actor_id: str | None = None) -> None:
        self._store.replace_all(Snapshot())
        logger.warning("all inspectors, scaffolds and reminders were removed")
        event_bus.publish_dict("registry.reset", None, {}, actor_id=actor_id)

    def create_scaffold(self, inspector_id: str, payload: ScaffoldCreate, actor_id: str | None = None) -> Scaffold:
        inspection_date = self._parse_inspection_date(payload.inspection_date)
        with self._session() as session:
            self._ensure_inspector(session, inspector_id)
            scaffold = Scaffold(
                inspector_id=inspector_id,
                unit=payload.unit.strip(),
                location=payload.location.strip(),
                tag_number=payload.tag_number.strip(),
                permit_number=payload.permit_number.strip(),
                inspection_date=inspection_date,
                tag_color=payload.tag_color,
                checklist=new_checklist(),
            )
            session.add(scaffold)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ReferentialIntegrityError(f"inspector {inspector_id} does not exist") from exc
            session.refresh(scaffold)
        event_bus.publish_dict(
            "scaffold.created",
            inspector_id,
            {"scaffold_id": scaffold.id, "tag_number": scaffold.tag_number, "tag_color": scaffold.tag_color},
            actor_id=actor_id,
        )
        return scaffold

    def list_scaffolds(self, scope: Scope, query: str | None = None) -> list[Scaffold]:
        with self._session() as session:
            statement = select(Scaffold).order_by(col(Scaffold.created_at), col(Scaffold.id))
            if isinstance(scope, SingleInspector):
                statement = statement.where(Scaffold.inspector_id == scope.inspector_id)
            rows = list(session.exec(statement).all())
        return search_scaffolds(rows, query)

    def get_scaffold(self, scope: Scope, scaffold_id: str) -> Scaffold:
        with self._session() as session:
            return self._get_scoped_scaffold(session, scope, scaffold_id)

    def update_scaffold(
        self,
        scope: Scope,
        scaffold_id: str,
        payload: ScaffoldUpdate,
        actor_id: str | None = None,
    ) -> Scaffold:
        inspection_date = None
        if payload.inspection_date is not None:
            inspection_date = self._parse_inspection_date(payload.inspection_date)
        with self._session() as session:
            scaffold = self._get_scoped_scaffold(session, scope, scaffold_id)
            if payload.unit is not None:
                scaffold.unit = payload.unit.strip()
            if payload.location is not None:
                scaffold.location = payload.location.strip()
            if payload.tag_number is not None:
                scaffold.tag_number = payload.tag_number.strip()
            if payload.permit_number is not None:
                scaffold.permit_number = payload.permit_number.strip()
            if inspection_date is not None:
                scaffold.inspection_date = inspection_date
            if payload.tag_color is not None:
                scaffold.tag_color = payload.tag_color
            # rows written before the question list changed get a fresh checklist
            scaffold.checklist = ensure_checklist(scaffold.checklist)
            session.add(scaffold)
            session.commit()
            session.refresh(scaffold)
        event_bus.publish_dict(
            "scaffold.updated",
            scaffold.inspector_id,
            {"scaffold_id": scaffold.id, "tag_color": scaffold.tag_color},
            actor_id=actor_id,
        )
        return scaffold

    def submit_checklist(
        self,
        scope: Scope,
        scaffold_id: str,
        items: list[ChecklistItem],
        actor_id: str | None = None,
    ) -> Scaffold:
        try:
            checklist = validate_submission(items)
        except ChecklistValidationError as exc:
            raise ValidationError(str(exc)) from exc
        with self._session() as session:
            scaffold = self._get_scoped_scaffold(session, scope, scaffold_id)
            scaffold.checklist = checklist
            session.add(scaffold)
            session.commit()
            session.refresh(scaffold)
        failed = [item["question_id"] for item in checklist if item["status"] == "no"]
        event_bus.publish_dict(
            "scaffold.inspected",
            scaffold.inspector_id,
            {"scaffold_id": scaffold.id, "failed_questions": failed},
            actor_id=actor_id,
        )
        return scaffold

    def delete_scaffold(self, scope: Scope, scaffold_id: str, actor_id: str | None = None) -> None:
        with self._session() as session:
            scaffold = session.get(Scaffold, scaffold_id)
            if scaffold is None or not scope.includes(scaffold.inspector_id):
                return
            inspector_id = scaffold.inspector_id
            session.delete(scaffold)
            session.commit()
        event_bus.publish_dict(
            "scaffold.deleted",
            inspector_id,
            {"scaffold_id": scaffold_id},
            actor_id=actor_id,
        )
