"""Domain-specific exceptions for the staff records API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses. The error handler middleware maps each family to a
status code and a uniform ``{message, errors}`` body.
"""

from typing import Any
from uuid import UUID


class StaffAPIError(Exception):
    """Base exception for all staff API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(StaffAPIError):
    """Base class for resource not found errors."""

    pass


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee cannot be found."""

    def __init__(self, employee_id: UUID | str | None = None) -> None:
        details = {"employee_id": str(employee_id)} if employee_id else {}
        super().__init__("Employee not found", details)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(StaffAPIError):
    """Base class for validation errors."""

    pass


class ValidationFailedError(ValidationError):
    """Raised when one or more request fields are invalid.

    Carries every field error collected by the validation pipeline so the
    client can fix all problems in one round trip.
    """

    def __init__(self, errors: list[Any]) -> None:
        self.errors = list(errors)
        super().__init__("Validation failed", {"error_count": len(self.errors)})


class InvalidIdFormatError(ValidationError):
    """Raised when a path identifier does not match the store's id shape."""

    def __init__(self, value: str | None = None) -> None:
        details = {"value": value} if value is not None else {}
        super().__init__("Invalid employee ID format", details)


class InvalidManagerAssignmentError(ValidationError):
    """Base class for rejected manager assignments."""

    reason = "Invalid manager assignment"

    def __init__(self, manager_id: UUID | str | None = None) -> None:
        self.manager_id = manager_id
        details = {"reason": self.reason}
        if manager_id is not None:
            details["manager_id"] = str(manager_id)
        super().__init__("Invalid manager assignment", details)


class ManagerNotFoundError(InvalidManagerAssignmentError):
    """The candidate manager does not exist."""

    reason = "Specified manager does not exist"


class ManagerInactiveError(InvalidManagerAssignmentError):
    """The candidate manager is not active."""

    reason = "Specified manager is not active"


class SelfReferenceError(InvalidManagerAssignmentError):
    """The employee was assigned as their own manager."""

    reason = "Employee cannot be their own manager"


class CyclicHierarchyError(InvalidManagerAssignmentError):
    """The assignment would close a loop in the reporting chain."""

    reason = "This assignment would create a circular management hierarchy"


class HasDependentsError(ValidationError):
    """Raised when deleting an employee other employees report to."""

    def __init__(self, dependents: int) -> None:
        self.dependents = dependents
        super().__init__(
            "Cannot delete employee who is managing other employees",
            {"managed_employees": dependents},
        )


# =============================================================================
# Conflict Errors (reported as 400)
# =============================================================================


class ConflictError(StaffAPIError):
    """Base class for uniqueness conflicts."""

    pass


class DuplicateEmployeeIdError(ConflictError):
    """Raised when an employee ID is already taken."""

    def __init__(self, employee_id: str | None = None) -> None:
        details = {"employee_id": employee_id} if employee_id else {}
        super().__init__("Employee ID already exists", details)


class DuplicateEmailError(ConflictError):
    """Raised when an employee email is already taken."""

    def __init__(self, email: str | None = None, on_update: bool = False) -> None:
        message = (
            "Another employee with this email already exists"
            if on_update
            else "Employee with this email already exists"
        )
        details = {"email": email} if email else {}
        super().__init__(message, details)


class EmployeeIdSequenceExhaustedError(ConflictError):
    """Raised when no sequential employee ID is left to issue."""

    def __init__(self) -> None:
        super().__init__("Employee ID sequence exhausted")
