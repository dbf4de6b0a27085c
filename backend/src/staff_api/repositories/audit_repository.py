"""Audit log repository."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import and_, func, select

from staff_api.models.orm.audit_log import AuditLogORM
from staff_api.repositories.base import BaseRepository


class AuditRepository(BaseRepository[AuditLogORM]):
    """Repository for audit log operations."""

    model = AuditLogORM

    async def log(
        self,
        action: str,
        resource_type: str,
        resource_id: UUID | None = None,
        actor_id: UUID | None = None,
        actor_username: str | None = None,
        payload: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLogORM:
        """Create an audit log entry.

        Args:
            action: Action tag (CREATE_EMPLOYEE, ...)
            resource_type: Type of resource affected
            resource_id: ID of affected resource
            actor_id: ID of the acting user
            actor_username: Username of the acting user
            payload: Sanitized request body
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Created AuditLogORM
        """
        log_entry = AuditLogORM(
            id=uuid4(),
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            actor_id=actor_id,
            actor_username=actor_username,
            payload=payload,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=datetime.now(UTC),
        )
        self.session.add(log_entry)
        await self.session.flush()
        return log_entry

    async def get_recent(
        self,
        limit: int = 50,
        offset: int = 0,
        action: str | None = None,
        resource_id: UUID | None = None,
    ) -> tuple[list[AuditLogORM], int]:
        """Get recent audit logs with optional filters, newest first.

        Args:
            limit: Maximum results
            offset: Pagination offset
            action: Filter by action
            resource_id: Filter by affected resource

        Returns:
            Tuple of (logs, total_count)
        """
        conditions = []
        if action:
            conditions.append(AuditLogORM.action == action)
        if resource_id:
            conditions.append(AuditLogORM.resource_id == resource_id)

        query = select(AuditLogORM)
        count_query = select(func.count()).select_from(AuditLogORM)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        query = query.order_by(AuditLogORM.created_at.desc(), AuditLogORM.id).offset(offset).limit(limit)

        result = await self.session.execute(query)
        logs = list(result.scalars().all())

        count_result = await self.session.execute(count_query)
        return logs, count_result.scalar_one()
