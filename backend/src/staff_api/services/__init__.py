"""Services package."""

from staff_api.services.audit_service import AuditService
from staff_api.services.employee_service import EmployeeService
from staff_api.services.manager_assignment import ManagerAssignmentValidator

__all__ = [
    "AuditService",
    "EmployeeService",
    "ManagerAssignmentValidator",
]
