"""Audit log router (admin only)."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from staff_api.dependencies import get_audit_service
from staff_api.models.dto.audit import AuditLogListResponse
from staff_api.routers.admin_headers import admin_response_headers
from staff_api.security.auth import require_admin
from staff_api.security.rate_limit import ADMIN_OPERATION_LIMIT, get_actor_or_client_ip, limiter
from staff_api.services.audit_service import AuditAction, AuditService
from staff_api.utils.validation import validate_against_whitelist

router = APIRouter(dependencies=[Depends(require_admin), Depends(admin_response_headers)])

ALLOWED_ACTIONS = {
    AuditAction.CREATE_EMPLOYEE,
    AuditAction.UPDATE_EMPLOYEE,
    AuditAction.DELETE_EMPLOYEE,
}


@router.get("", response_model=AuditLogListResponse)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def list_audit_logs(
    request: Request,
    service: Annotated[AuditService, Depends(get_audit_service)],
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    action: str | None = Query(None, max_length=50),
    resource_id: UUID | None = Query(None, alias="resourceId"),
) -> AuditLogListResponse:
    """List audit entries, newest first. Unknown actions are ignored."""
    return await service.list_entries(
        page=page,
        page_size=limit,
        action=validate_against_whitelist(action, ALLOWED_ACTIONS),
        resource_id=resource_id,
    )
