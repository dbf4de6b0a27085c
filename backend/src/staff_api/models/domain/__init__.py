"""Domain models package."""

from staff_api.models.domain.employee import Department, EmployeeStatus, EmploymentType
from staff_api.models.domain.user import User, UserRole

__all__ = [
    "Department",
    "EmployeeStatus",
    "EmploymentType",
    "User",
    "UserRole",
]
