"""Data access repositories."""

from staff_api.repositories.audit_repository import AuditRepository
from staff_api.repositories.employee_repository import EmployeeRepository
from staff_api.repositories.user_repository import SessionRepository, UserRepository

__all__ = [
    "AuditRepository",
    "EmployeeRepository",
    "SessionRepository",
    "UserRepository",
]
