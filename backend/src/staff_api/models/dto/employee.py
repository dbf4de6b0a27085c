"""Employee DTOs."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from staff_api.constants.validation import DEFAULT_COUNTRY
from staff_api.models.domain.employee import Department, EmployeeStatus, EmploymentType
from staff_api.models.dto.base import CamelModel

# =============================================================================
# Requests
# =============================================================================


class AddressInput(CamelModel):
    """Postal address supplied on create or update."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class PersonalInfoCreate(CamelModel):
    """Personal info block for a new employee."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    date_of_birth: date | None = None
    address: AddressInput | None = None


class JobInfoCreate(CamelModel):
    """Job info block for a new employee."""

    title: str
    department: Department
    manager: UUID | None = None
    start_date: date
    salary: Decimal | None = None
    employment_type: EmploymentType = EmploymentType.FULL_TIME


class EmployeeCreate(CamelModel):
    """DTO for creating an employee.

    ``employee_id`` is optional; a sequential ``EMP####`` id is issued when it
    is absent, malformed or already taken.
    """

    employee_id: str | None = None
    personal_info: PersonalInfoCreate
    job_info: JobInfoCreate
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class PersonalInfoUpdate(CamelModel):
    """Personal info block for a partial update."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    address: AddressInput | None = None


class JobInfoUpdate(CamelModel):
    """Job info block for a partial update."""

    title: str | None = None
    department: Department | None = None
    manager: UUID | None = None
    start_date: date | None = None
    salary: Decimal | None = None
    employment_type: EmploymentType | None = None


class EmployeeUpdate(CamelModel):
    """DTO for a partial employee update.

    Only keys present in the request are applied. ``employee_id`` is
    accepted for compatibility but never changes the stored value.
    """

    employee_id: str | None = None
    personal_info: PersonalInfoUpdate | None = None
    job_info: JobInfoUpdate | None = None
    status: EmployeeStatus | None = None


# =============================================================================
# Responses
# =============================================================================


class ManagerSummary(CamelModel):
    """Manager reference populated into employee responses."""

    id: UUID
    employee_id: str
    first_name: str
    last_name: str


class UserSummary(CamelModel):
    """Acting user shown as ``createdBy`` / ``updatedBy``."""

    id: UUID
    username: str


class AddressResponse(CamelModel):
    """Postal address."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = DEFAULT_COUNTRY


class PersonalInfoResponse(CamelModel):
    """Personal info block."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    date_of_birth: date | None = None
    address: AddressResponse


class JobInfoResponse(CamelModel):
    """Job info block with the manager populated."""

    title: str
    department: str
    manager: ManagerSummary | None = None
    start_date: date
    salary: float | None = None
    employment_type: str


class EmployeeResponse(CamelModel):
    """Employee response DTO."""

    id: UUID
    employee_id: str
    personal_info: PersonalInfoResponse
    job_info: JobInfoResponse
    status: str
    full_name: str
    years_of_service: int = 0
    created_by: UserSummary | None = None
    updated_by: UserSummary | None = None
    created_at: datetime
    updated_at: datetime


class Pagination(CamelModel):
    """Pagination block of a list response."""

    current_page: int
    total_pages: int
    total_employees: int
    has_next_page: bool
    has_prev_page: bool


class EmployeeListResponse(CamelModel):
    """Employee list response DTO."""

    employees: list[EmployeeResponse]
    pagination: Pagination


class DeletedEmployeeSummary(CamelModel):
    """Identity of a deleted employee."""

    id: UUID
    employee_id: str
    full_name: str


class EmployeeDeleteResponse(CamelModel):
    """Delete confirmation."""

    message: str = "Employee deleted successfully"
    deleted_employee: DeletedEmployeeSummary


class StatsOverview(CamelModel):
    """Headcount totals."""

    total_employees: int
    active_employees: int
    inactive_employees: int
    terminated_employees: int
    recent_hires: int


class DepartmentCount(CamelModel):
    """Headcount for one department."""

    department: str
    count: int


class EmploymentTypeCount(CamelModel):
    """Headcount for one employment type."""

    employment_type: str
    count: int


class EmployeeStatsResponse(CamelModel):
    """Aggregated employee statistics."""

    overview: StatsOverview
    department_stats: list[DepartmentCount] = Field(default_factory=list)
    employment_type_stats: list[EmploymentTypeCount] = Field(default_factory=list)
