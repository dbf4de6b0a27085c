"""Service factories for FastAPI dependency injection."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staff_api.database import get_db
from staff_api.services.audit_service import AuditService
from staff_api.services.employee_service import EmployeeService


def get_audit_service(db: AsyncSession = Depends(get_db)) -> AuditService:
    """Get AuditService instance."""
    return AuditService(db)


def get_employee_service(db: AsyncSession = Depends(get_db)) -> EmployeeService:
    """Get EmployeeService instance."""
    return EmployeeService(db)
