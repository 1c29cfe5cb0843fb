from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer

from app.domain.permissions import Scope, has_permission, resolve_scope
from app.infra.auth import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/identity/login")


def get_current_claims(
    request: Request,
    token: str = Depends(oauth2_scheme),
) -> dict[str, Any]:
    try:
        claims = decode_access_token(token)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        ) from exc
    request.state.claims = claims
    return claims


def require_perm(permission: str) -> Callable[[dict[str, Any]], dict[str, Any]]:
    def _checker(
        claims: Annotated[dict[str, Any], Depends(get_current_claims)],
    ) -> dict[str, Any]:
        if not has_permission(claims, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {permission}",
            )
        return claims

    return _checker


def get_scope(
    claims: Annotated[dict[str, Any], Depends(get_current_claims)],
    inspector_id: Annotated[str | None, Query()] = None,
) -> Scope:
    try:
        return resolve_scope(claims, inspector_id)
    except PermissionError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
