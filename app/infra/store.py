from __future__ import annotations

import logging

import sqlalchemy as sa
from sqlmodel import Session, col, select

from app.domain.models import Inspector, Reminder, Scaffold, Snapshot
from app.infra.db import get_engine

logger = logging.getLogger(__name__)


class RecordStore:
    """Load-all / replace-all boundary over the inspector, scaffold and reminder tables."""

    def _session(self) -> Session:
        return Session(get_engine(), expire_on_commit=False)

    def load_snapshot(self) -> Snapshot:
        with self._session() as session:
            inspectors = session.exec(
                select(Inspector).order_by(col(Inspector.created_at), col(Inspector.id))
            ).all()
            scaffolds = session.exec(
                select(Scaffold).order_by(col(Scaffold.created_at), col(Scaffold.id))
            ).all()
            reminders = session.exec(
                select(Reminder).order_by(col(Reminder.created_at), col(Reminder.id))
            ).all()
            return Snapshot(
                inspectors=tuple(inspectors),
                scaffolds=tuple(scaffolds),
                reminders=tuple(reminders),
            )

    def replace_all(self, snapshot: Snapshot) -> None:
        with self._session() as session:
            try:
                for model in (Reminder, Scaffold, Inspector):
                    session.execute(sa.delete(model))
                session.add_all(Inspector(**item.model_dump()) for item in snapshot.inspectors)
                session.flush()
                session.add_all(Scaffold(**item.model_dump()) for item in snapshot.scaffolds)
                session.add_all(Reminder(**item.model_dump()) for item in snapshot.reminders)
                session.commit()
            except Exception:
                session.rollback()
                raise
        logger.info(
            "store replaced: %d inspectors, %d scaffolds, %d reminders",
            len(snapshot.inspectors),
            len(snapshot.scaffolds),
            len(snapshot.reminders),
        )
