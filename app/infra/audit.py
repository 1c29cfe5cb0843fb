from __future__ import annotations

import logging
from typing import Any

from sqlmodel import Session
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.domain.models import AuditLog, now_utc
from app.infra.db import engine

logger = logging.getLogger(__name__)

WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
UNAUDITED_PATHS = {"/healthz", "/readyz", "/api/identity/login"}
AUDIT_CONTEXT_STATE_KEY = "_audit_context"


def write_audit_log(
    *,
    role: str,
    actor_id: str | None,
    action: str,
    resource: str,
    method: str,
    status_code: int,
    detail: dict[str, Any] | None = None,
) -> None:
    log = AuditLog(
        role=role,
        actor_id=actor_id,
        action=action,
        resource=resource,
        method=method,
        status_code=status_code,
        detail=detail or {},
    )
    with Session(engine) as session:
        session.add(log)
        session.commit()


def _status_outcome(status_code: int) -> str:
    if status_code >= 500:
        return "error"
    if status_code in {401, 403, 404}:
        return "denied"
    if status_code >= 400:
        return "rejected"
    return "success"


def set_audit_context(
    request: Request,
    *,
    action: str | None = None,
    resource: str | None = None,
    detail: dict[str, Any] | None = None,
) -> None:
    context_raw = getattr(request.state, AUDIT_CONTEXT_STATE_KEY, {})
    context = dict(context_raw) if isinstance(context_raw, dict) else {}

    if action is not None:
        context["action"] = action
    if resource is not None:
        context["resource"] = resource
    if detail:
        previous_detail = context.get("detail")
        merged = dict(previous_detail) if isinstance(previous_detail, dict) else {}
        merged.update(detail)
        context["detail"] = merged

    setattr(request.state, AUDIT_CONTEXT_STATE_KEY, context)


class AuditMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        path = request.url.path
        method = request.method
        if path in UNAUDITED_PATHS or method not in WRITE_METHODS:
            return response

        context_raw = getattr(request.state, AUDIT_CONTEXT_STATE_KEY, {})
        context = context_raw if isinstance(context_raw, dict) else {}
        claims = getattr(request.state, "claims", {})
        role = claims.get("role", "anonymous")
        actor_id = claims.get("inspector_id")
        raw_action = context.get("action")
        raw_resource = context.get("resource")
        action: str = raw_action if isinstance(raw_action, str) else f"{method}:{path}"
        resource: str = raw_resource if isinstance(raw_resource, str) else path

        detail: dict[str, Any] = {
            "who": {"role": role, "actor_id": actor_id},
            "when": {"request_ts": now_utc().isoformat()},
            "where": {"path": path, "query": request.url.query},
            "result": {
                "status_code": response.status_code,
                "outcome": _status_outcome(response.status_code),
            },
        }
        context_detail = context.get("detail")
        if isinstance(context_detail, dict):
            detail["context"] = context_detail

        try:
            write_audit_log(
                role=role,
                actor_id=actor_id,
                action=action,
                resource=resource,
                method=method,
                status_code=response.status_code,
                detail=detail,
            )
        except Exception:
            # Audit must not block request flow.
            logger.exception("audit log write failed for %s %s", method, path)
        return response
