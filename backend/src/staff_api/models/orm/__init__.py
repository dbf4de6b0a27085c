"""SQLAlchemy ORM models package."""

from staff_api.models.orm.audit_log import AuditLogORM
from staff_api.models.orm.base import Base
from staff_api.models.orm.employee import EmployeeORM
from staff_api.models.orm.user import UserORM, UserSessionORM

__all__ = [
    "Base",
    "AuditLogORM",
    "EmployeeORM",
    "UserORM",
    "UserSessionORM",
]
