from __future__ import annotations

import logging
from typing import Any

from sqlmodel import Session

from app.domain.models import EventEnvelope, EventRecord
from app.infra.db import engine

logger = logging.getLogger(__name__)


class EventBus:
    """Persists domain events to the `events` table."""

    def publish(self, event: EventEnvelope, session: Session | None = None) -> None:
        should_commit = session is None
        if session is None:
            session = Session(engine)
        try:
            record = EventRecord(
                event_id=event.event_id,
                event_type=event.event_type,
                inspector_id=event.inspector_id,
                ts=event.ts,
                actor_id=event.actor_id,
                payload=event.payload,
            )
            session.add(record)
            if should_commit:
                session.commit()
        finally:
            if should_commit:
                session.close()

        logger.debug("event %s published for inspector %s", event.event_type, event.inspector_id)

    def publish_dict(
        self,
        event_type: str,
        inspector_id: str | None,
        payload: dict[str, Any],
        actor_id: str | None = None,
    ) -> EventEnvelope:
        event = EventEnvelope(
            event_type=event_type,
            inspector_id=inspector_id,
            actor_id=actor_id,
            payload=payload,
        )
        self.publish(event)
        return event


event_bus = EventBus()
