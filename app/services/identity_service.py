from __future__ import annotations

import logging

from sqlmodel import Session

from app.domain.models import Inspector, Role
from app.domain.permissions import ROLE_PERMISSIONS
from app.infra.db import get_engine

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    pass


class NotFoundError(IdentityError):
    pass


class ValidationError(IdentityError):
    pass


class IdentityService:
    """Local role switch: no passwords, the caller picks a role and, for inspectors, an identity."""

    def _session(self) -> Session:
        return Session(get_engine(), expire_on_commit=False)

    def login(self, role: Role, inspector_id: str | None) -> tuple[str | None, list[str]]:
        if role == Role.SUPER_ADMIN:
            logger.info("super admin session opened")
            return None, list(ROLE_PERMISSIONS[role])
        if not inspector_id:
            raise ValidationError("inspector_id is required for the inspector role")
        with self._session() as session:
            if session.get(Inspector, inspector_id) is None:
                raise NotFoundError("inspector not found")
        logger.info("inspector %s session opened", inspector_id)
        return inspector_id, list(ROLE_PERMISSIONS[role])
