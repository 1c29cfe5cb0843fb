from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.domain.calendar import CalendarValidationError, parse_jalali_datetime, to_local_naive
from app.domain.models import Inspector, Reminder
from app.domain.permissions import Scope, SingleInspector
from app.domain.reminder_filters import pending_due_now, pending_upcoming, with_inspector_names
from app.infra.db import get_engine
from app.infra.events import event_bus

logger = logging.getLogger(__name__)


class ReminderError(Exception):
    pass


class NotFoundError(ReminderError):
    pass


class ValidationError(ReminderError):
    pass


class ReferentialIntegrityError(ReminderError):
    pass


class ReminderService:
    def _session(self) -> Session:
        return Session(get_engine(), expire_on_commit=False)

    def _get_scoped_reminder(self, session: Session, scope: Scope, reminder_id: str) -> Reminder:
        reminder = session.get(Reminder, reminder_id)
        if reminder is None or not scope.includes(reminder.inspector_id):
            raise NotFoundError("reminder not found")
        return reminder

    def _scoped_rows(self, session: Session, scope: Scope) -> list[Reminder]:
        statement = select(Reminder).order_by(col(Reminder.created_at), col(Reminder.id))
        if isinstance(scope, SingleInspector):
            statement = statement.where(Reminder.inspector_id == scope.inspector_id)
        return list(session.exec(statement).all())

    def add(
        self,
        inspector_id: str,
        date_text: str,
        time_text: str,
        unit: str = "",
        tag_number: str = "",
        notes: str = "",
        actor_id: str | None = None,
    ) -> Reminder:
        """Schedule a reminder from Jalali ``yyyy/MM/dd`` and ``HH:mm`` input."""
        try:
            target = parse_jalali_datetime(date_text, time_text)
        except CalendarValidationError as exc:
            logger.warning("rejected reminder date/time %r %r", date_text, time_text)
            raise ValidationError(str(exc)) from exc
        return self.add_at(
            inspector_id,
            target,
            unit=unit,
            tag_number=tag_number,
            notes=notes,
            actor_id=actor_id,
        )

    def add_at(
        self,
        inspector_id: str,
        target_datetime: datetime,
        unit: str = "",
        tag_number: str = "",
        notes: str = "",
        actor_id: str | None = None,
    ) -> Reminder:
        with self._session() as session:
            if session.get(Inspector, inspector_id) is None:
                raise ReferentialIntegrityError(f"inspector {inspector_id} does not exist")
            reminder = Reminder(
                inspector_id=inspector_id,
                target_datetime=to_local_naive(target_datetime),
                unit=unit.strip(),
                tag_number=tag_number.strip(),
                notes=notes.strip(),
            )
            session.add(reminder)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ReferentialIntegrityError(f"inspector {inspector_id} does not exist") from exc
            session.refresh(reminder)
        logger.info("reminder %s scheduled for %s", reminder.id, reminder.target_datetime.isoformat())
        event_bus.publish_dict(
            "reminder.created",
            inspector_id,
            {"reminder_id": reminder.id, "target_datetime": reminder.target_datetime.isoformat()},
            actor_id=actor_id,
        )
        return reminder

    def mark_completed(self, scope: Scope, reminder_id: str, actor_id: str | None = None) -> Reminder:
        """Complete a reminder. Completing it again is a successful no-op."""
        with self._session() as session:
            reminder = self._get_scoped_reminder(session, scope, reminder_id)
            if reminder.is_completed:
                return reminder
            reminder.is_completed = True
            session.add(reminder)
            session.commit()
            session.refresh(reminder)
        event_bus.publish_dict(
            "reminder.completed",
            reminder.inspector_id,
            {"reminder_id": reminder.id},
            actor_id=actor_id,
        )
        return reminder

    def remove(self, scope: Scope, reminder_id: str, actor_id: str | None = None) -> None:
        with self._session() as session:
            reminder = session.get(Reminder, reminder_id)
            if reminder is None or not scope.includes(reminder.inspector_id):
                return
            inspector_id = reminder.inspector_id
            session.delete(reminder)
            session.commit()
        event_bus.publish_dict("reminder.deleted", inspector_id, {"reminder_id": reminder_id}, actor_id=actor_id)

    def list_reminders(self, scope: Scope) -> list[Reminder]:
        with self._session() as session:
            return self._scoped_rows(session, scope)

    def due_now(self, scope: Scope, now: datetime) -> list[Reminder]:
        return pending_due_now(self.list_reminders(scope), now)

    def upcoming(self, scope: Scope) -> list[Reminder]:
        return pending_upcoming(self.list_reminders(scope))

    def active_with_names(self, scope: Scope) -> list[tuple[Reminder, str]]:
        with self._session() as session:
            reminders = self._scoped_rows(session, scope)
            inspectors = list(session.exec(select(Inspector)).all())
        return with_inspector_names(reminders, inspectors)
