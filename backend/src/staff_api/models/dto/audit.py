"""Audit log DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from staff_api.models.dto.base import CamelModel


class AuditLogResponse(CamelModel):
    """Audit log entry response."""

    id: UUID
    actor_id: UUID | None
    actor_username: str | None
    action: str
    resource_type: str
    resource_id: UUID | None
    payload: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime


class AuditLogListResponse(CamelModel):
    """Paginated audit log list response."""

    items: list[AuditLogResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
