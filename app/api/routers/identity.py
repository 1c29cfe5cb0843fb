from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.domain.models import LoginRequest, TokenResponse
from app.infra.auth import create_access_token
from app.services.identity_service import IdentityService, NotFoundError, ValidationError

router = APIRouter()


def get_identity_service() -> IdentityService:
    return IdentityService()


Service = Annotated[IdentityService, Depends(get_identity_service)]


def _handle_identity_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    raise exc


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, service: Service) -> TokenResponse:
    try:
        inspector_id, permissions = service.login(payload.role, payload.inspector_id)
    except (NotFoundError, ValidationError) as exc:
        _handle_identity_error(exc)
        raise
    token = create_access_token(
        role=payload.role,
        inspector_id=inspector_id,
        permissions=permissions,
    )
    return TokenResponse(
        access_token=token,
        role=payload.role,
        inspector_id=inspector_id,
        permissions=permissions,
    )
