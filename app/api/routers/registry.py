from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from app.api.deps import get_current_claims, get_scope, require_perm
from app.domain.checklist import CHECKLIST_QUESTIONS
from app.domain.models import (
    ChecklistQuestionRead,
    ChecklistSubmit,
    InspectorCreate,
    InspectorRead,
    ScaffoldCreate,
    ScaffoldRead,
    ScaffoldUpdate,
)
from app.domain.permissions import PERM_ADMIN, PERM_REGISTRY_READ, PERM_REGISTRY_WRITE, Scope, has_permission
from app.infra.audit import set_audit_context
from app.services.registry_service import (
    NotFoundError,
    ReferentialIntegrityError,
    RegistryService,
    ValidationError,
)

router = APIRouter()


def get_registry_service() -> RegistryService:
    return RegistryService()


Claims = Annotated[dict[str, Any], Depends(get_current_claims)]
Service = Annotated[RegistryService, Depends(get_registry_service)]
ScopeDep = Annotated[Scope, Depends(get_scope)]
RegistryErrors = (NotFoundError, ValidationError, ReferentialIntegrityError)


def _handle_registry_error(exc: Exception) -> None:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ValidationError):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if isinstance(exc, ReferentialIntegrityError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    raise exc


@router.post("/inspectors", response_model=InspectorRead, status_code=status.HTTP_201_CREATED)
def create_inspector(payload: InspectorCreate, service: Service) -> InspectorRead:
    try:
        row = service.create_inspector(payload.name)
        return InspectorRead.model_validate(row)
    except RegistryErrors as exc:
        _handle_registry_error(exc)
        raise


@router.get("/inspectors", response_model=list[InspectorRead])
def list_inspectors(service: Service) -> list[InspectorRead]:
    return [InspectorRead.model_validate(item) for item in service.list_inspectors()]


@router.get("/inspectors/{inspector_id}", response_model=InspectorRead)
def get_inspector(inspector_id: str, service: Service) -> InspectorRead:
    try:
        return InspectorRead.model_validate(service.get_inspector(inspector_id))
    except RegistryErrors as exc:
        _handle_registry_error(exc)
        raise


@router.delete(
    "/inspectors/{inspector_id}",
    dependencies=[Depends(require_perm(PERM_REGISTRY_WRITE))],
)
def delete_inspector(inspector_id: str, request: Request, claims: Claims, service: Service) -> dict[str, int]:
    if not has_permission(claims, PERM_ADMIN) and claims.get("inspector_id") != inspector_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="inspectors may only delete their own record",
        )
    removed = service.delete_inspector(inspector_id, actor_id=claims.get("sub"))
    set_audit_context(request, action="inspector.delete", resource=inspector_id, detail={"removed": removed})
    return removed


@router.post(
    "/reset",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_perm(PERM_ADMIN))],
)
def reset_registry(request: Request, claims: Claims, service: Service) -> Response:
    service.reset(actor_id=claims.get("sub"))
    set_audit_context(request, action="registry.reset", resource="registry")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/checklist-questions", response_model=list[ChecklistQuestionRead])
def list_checklist_questions() -> list[ChecklistQuestionRead]:
    return [
        ChecklistQuestionRead(question_id=index, text=text)
        for index, text in enumerate(CHECKLIST_QUESTIONS, start=1)
    ]


@router.post(
    "/scaffolds",
    response_model=ScaffoldRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_perm(PERM_REGISTRY_WRITE))],
)
def create_scaffold(payload: ScaffoldCreate, claims: Claims, service: Service) -> ScaffoldRead:
    owner_id = payload.inspector_id if claims.get("inspector_id") is None else claims["inspector_id"]
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="inspector_id is required",
        )
    try:
        row = service.create_scaffold(owner_id, payload, actor_id=claims.get("sub"))
        return ScaffoldRead.model_validate(row)
    except RegistryErrors as exc:
        _handle_registry_error(exc)
        raise


@router.get(
    "/scaffolds",
    response_model=list[ScaffoldRead],
    dependencies=[Depends(require_perm(PERM_REGISTRY_READ))],
)
def list_scaffolds(
    scope: ScopeDep,
    service: Service,
    q: Annotated[str | None, Query(max_length=200)] = None,
) -> list[ScaffoldRead]:
    return [ScaffoldRead.model_validate(item) for item in service.list_scaffolds(scope, q)]


@router.get(
    "/scaffolds/{scaffold_id}",
    response_model=ScaffoldRead,
    dependencies=[Depends(require_perm(PERM_REGISTRY_READ))],
)
def get_scaffold(scaffold_id: str, scope: ScopeDep, service: Service) -> ScaffoldRead:
    try:
        return ScaffoldRead.model_validate(service.get_scaffold(scope, scaffold_id))
    except RegistryErrors as exc:
        _handle_registry_error(exc)
        raise


@router.put(
    "/scaffolds/{scaffold_id}",
    response_model=ScaffoldRead,
    dependencies=[Depends(require_perm(PERM_REGISTRY_WRITE))],
)
def update_scaffold(
    scaffold_id: str,
    payload: ScaffoldUpdate,
    scope: ScopeDep,
    claims: Claims,
    service: Service,
) -> ScaffoldRead:
    try:
        row = service.update_scaffold(scope, scaffold_id, payload, actor_id=claims.get("sub"))
        return ScaffoldRead.model_validate(row)
    except RegistryErrors as exc:
        _handle_registry_error(exc)
        raise


@router.put(
    "/scaffolds/{scaffold_id}/checklist",
    response_model=ScaffoldRead,
    dependencies=[Depends(require_perm(PERM_REGISTRY_WRITE))],
)
def submit_checklist(
    scaffold_id: str,
    payload: ChecklistSubmit,
    scope: ScopeDep,
    claims: Claims,
    service: Service,
) -> ScaffoldRead:
    try:
        row = service.submit_checklist(scope, scaffold_id, payload.items, actor_id=claims.get("sub"))
        return ScaffoldRead.model_validate(row)
    except RegistryErrors as exc:
        _handle_registry_error(exc)
        raise


@router.delete(
    "/scaffolds/{scaffold_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_perm(PERM_REGISTRY_WRITE))],
)
def delete_scaffold(scaffold_id: str, scope: ScopeDep, claims: Claims, service: Service) -> Response:
    service.delete_scaffold(scope, scaffold_id, actor_id=claims.get("sub"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
