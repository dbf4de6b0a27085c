"""Audit service for recording successful employee mutations."""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from staff_api.models.domain.user import User
from staff_api.models.dto.audit import AuditLogListResponse, AuditLogResponse
from staff_api.repositories.audit_repository import AuditRepository
from staff_api.security.rate_limit import get_real_client_ip
from staff_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)


class AuditAction:
    """Standard audit action types."""

    CREATE_EMPLOYEE = "CREATE_EMPLOYEE"
    UPDATE_EMPLOYEE = "UPDATE_EMPLOYEE"
    DELETE_EMPLOYEE = "DELETE_EMPLOYEE"
    READ_EMPLOYEES = "READ_EMPLOYEES"
    READ_EMPLOYEE = "READ_EMPLOYEE"
    READ_EMPLOYEE_STATS = "READ_EMPLOYEE_STATS"


class ResourceType:
    """Standard resource types."""

    EMPLOYEE = "employee"


# Actions whose request body is stored with the entry
PAYLOAD_ACTIONS = frozenset({AuditAction.CREATE_EMPLOYEE, AuditAction.UPDATE_EMPLOYEE})


@dataclass(frozen=True)
class AuditContext:
    """Actor and request provenance attached to an audit entry."""

    actor: User | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    @classmethod
    def from_request(cls, request: Request, actor: User | None) -> "AuditContext":
        """Build the context from request state set by ``AuditMiddleware``.

        Args:
            request: Incoming request
            actor: Authenticated user, if any

        Returns:
            AuditContext
        """
        ip_address = getattr(request.state, "client_ip", None) or get_real_client_ip(request)
        user_agent = getattr(request.state, "user_agent", None)
        if user_agent is None:
            user_agent = request.headers.get("user-agent", "")
        return cls(actor=actor, ip_address=ip_address, user_agent=user_agent)


class AuditService:
    """Service for audit logging operations.

    Entries are written after the audited operation succeeded. A failed
    write is logged and never propagates to the caller.
    """

    # Sensitive fields that should be masked in audit logs
    SENSITIVE_FIELDS = frozenset({
        "password",
        "token",
        "secret",
        "session",
        "session_id",
        "sessionid",
        "api_key",
        "apikey",
        "access_token",
        "refresh_token",
    })

    def __init__(self, session: AsyncSession) -> None:
        """Initialize audit service.

        Args:
            session: Database session
        """
        self.session = session
        self.audit_repo = AuditRepository(session)

    @classmethod
    def _mask_sensitive_data(cls, data: dict[str, Any] | None) -> dict[str, Any] | None:
        """Replace values of sensitive keys with ``[REDACTED]``, recursively."""
        if data is None:
            return None

        masked: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in cls.SENSITIVE_FIELDS:
                masked[key] = "[REDACTED]"
            elif isinstance(value, dict):
                masked[key] = cls._mask_sensitive_data(value)
            elif isinstance(value, list):
                masked[key] = [
                    cls._mask_sensitive_data(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                masked[key] = value
        return masked

    async def record_success(
        self,
        context: AuditContext,
        action: str,
        resource_id: UUID | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Record one successful mutation.

        The entry is written inside a SAVEPOINT so a failure leaves the
        surrounding transaction, and the audited change, intact.

        Args:
            context: Actor and request provenance
            action: Action tag (use AuditAction constants)
            resource_id: ID of the affected employee
            payload: Sanitized request body; kept for create and update only
        """
        actor = context.actor
        stored_payload = self._mask_sensitive_data(payload) if action in PAYLOAD_ACTIONS else None

        try:
            async with self.session.begin_nested():
                await self.audit_repo.log(
                    action=action,
                    resource_type=ResourceType.EMPLOYEE,
                    resource_id=resource_id,
                    actor_id=actor.id if actor else None,
                    actor_username=actor.username if actor else None,
                    payload=stored_payload,
                    ip_address=context.ip_address,
                    user_agent=context.user_agent,
                )
        except Exception as e:
            # Never fail the main operation due to audit logging
            log_error(logger, f"Failed to write audit log: action={action} resource={resource_id}", e)
            return

        logger.info(
            "AUDIT: action=%s resource=%s actor=%s ip=%s",
            action,
            resource_id,
            actor.username if actor else "anonymous",
            context.ip_address,
        )

    def log_read(self, context: AuditContext, action: str, resource_id: UUID | None = None) -> None:
        """Log a read access. Reads are logged only, never persisted."""
        actor = context.actor
        logger.info(
            "AUDIT: action=%s resource=%s actor=%s ip=%s",
            action,
            resource_id,
            actor.username if actor else "anonymous",
            context.ip_address,
        )

    async def list_entries(
        self,
        page: int = 1,
        page_size: int = 50,
        action: str | None = None,
        resource_id: UUID | None = None,
    ) -> AuditLogListResponse:
        """Get a page of audit entries, newest first.

        Args:
            page: Page number (1-indexed)
            page_size: Entries per page
            action: Filter by action tag
            resource_id: Filter by affected employee

        Returns:
            AuditLogListResponse
        """
        offset = (page - 1) * page_size
        logs, total = await self.audit_repo.get_recent(
            limit=page_size,
            offset=offset,
            action=action,
            resource_id=resource_id,
        )
        total_pages = (total + page_size - 1) // page_size if total else 0
        return AuditLogListResponse(
            items=[AuditLogResponse.model_validate(log) for log in logs],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )
