"""Employee lifecycle service.

Every mutation runs the same ordered stages: sanitize the body, validate its
fields, apply business rules (manager assignment, uniqueness), persist, and
finally record an audit entry.
"""

import logging
import math
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staff_api.config import get_settings
from staff_api.constants.validation import (
    DEFAULT_COUNTRY,
    DEFAULT_EMPLOYEE_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    EMPLOYEE_ID_DIGITS,
    EMPLOYEE_ID_PATTERN,
    EMPLOYEE_ID_PREFIX,
    EMPLOYEE_SORT_FIELDS,
)
from staff_api.exceptions import (
    DuplicateEmailError,
    DuplicateEmployeeIdError,
    EmployeeIdSequenceExhaustedError,
    EmployeeNotFoundError,
    HasDependentsError,
    InvalidIdFormatError,
    ValidationFailedError,
)
from staff_api.models.domain.employee import EmployeeStatus
from staff_api.models.dto.employee import (
    AddressResponse,
    DeletedEmployeeSummary,
    DepartmentCount,
    EmployeeCreate,
    EmployeeDeleteResponse,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeStatsResponse,
    EmployeeUpdate,
    EmploymentTypeCount,
    JobInfoResponse,
    ManagerSummary,
    Pagination,
    PersonalInfoResponse,
    StatsOverview,
    UserSummary,
)
from staff_api.models.orm.employee import EmployeeORM
from staff_api.models.orm.user import UserORM
from staff_api.repositories.employee_repository import EmployeeRepository
from staff_api.repositories.user_repository import UserRepository
from staff_api.services.audit_service import AuditAction, AuditContext, AuditService
from staff_api.services.manager_assignment import ManagerAssignmentValidator
from staff_api.services.request_validation import (
    EMPLOYEE_CREATE_PIPELINE,
    EMPLOYEE_UPDATE_PIPELINE,
    FieldError,
    ValidationPipeline,
    parse_iso_date,
    intern_salary_cap,
)
from staff_api.services.sanitizer import sanitize_payload
from staff_api.utils.validation import sanitize_search, validate_sort_by

logger = logging.getLogger(__name__)

ADDRESS_COLUMNS = ("street", "city", "state", "zip_code", "country")
# Constraint names (PostgreSQL) and column paths (SQLite) in unique-violation messages
EMAIL_CONSTRAINT_MARKERS = ("uq_employees_email", "employees.email")
EMPLOYEE_ID_CONSTRAINT_MARKERS = ("uq_employees_employee_id", "employees.employee_id")
DATE_PATHS = (("personalInfo", "dateOfBirth"), ("jobInfo", "startDate"))


def parse_employee_id(value: str) -> UUID:
    """Parse a path identifier into the store's id shape.

    Raises:
        InvalidIdFormatError: If ``value`` is not a UUID
    """
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdFormatError(value) from None


def years_of_service(start_date: date | None, on: date | None = None) -> int:
    """Whole years of service, counting 365.25 days per year."""
    if start_date is None:
        return 0
    on = on or datetime.now(UTC).date()
    days = (on - start_date).days
    if days <= 0:
        return 0
    return math.floor(days / 365.25)


def _normalize_dates(body: dict[str, Any]) -> dict[str, Any]:
    """Reduce ISO datetimes in date fields to plain dates."""
    normalized = dict(body)
    for section, key in DATE_PATHS:
        block = normalized.get(section)
        if isinstance(block, dict) and isinstance(block.get(key), str):
            parsed = parse_iso_date(block[key])
            if parsed is not None:
                normalized[section] = {**block, key: parsed.isoformat()}
    return normalized


def _pydantic_errors(exc: PydanticValidationError) -> list[FieldError]:
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        value = error.get("input")
        if isinstance(value, (dict, list)):
            value = None
        errors.append(FieldError(field or "body", error.get("msg", "Invalid value"), value))
    return errors


class EmployeeService:
    """Service for the employee lifecycle."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.employee_repo = EmployeeRepository(session)
        self.user_repo = UserRepository(session)
        self.audit_service = AuditService(session)
        self.manager_validator = ManagerAssignmentValidator(self.employee_repo)

    # =========================================================================
    # Response building
    # =========================================================================

    async def _build_employee_responses(self, employees: list[EmployeeORM]) -> list[EmployeeResponse]:
        """Build responses with managers and acting users populated.

        Managers and users are loaded in one batch query each.
        """
        manager_ids = [e.manager_id for e in employees if e.manager_id]
        user_ids = [uid for e in employees for uid in (e.created_by, e.updated_by) if uid]

        managers = await self.employee_repo.get_by_ids(manager_ids)
        users = await self.user_repo.get_by_ids(user_ids)

        return [self._build_employee_response(e, managers, users) for e in employees]

    @staticmethod
    def _build_employee_response(
        employee: EmployeeORM,
        managers: dict[UUID, EmployeeORM],
        users: dict[UUID, UserORM],
    ) -> EmployeeResponse:
        manager = managers.get(employee.manager_id) if employee.manager_id else None
        created_by = users.get(employee.created_by) if employee.created_by else None
        updated_by = users.get(employee.updated_by) if employee.updated_by else None

        return EmployeeResponse(
            id=employee.id,
            employee_id=employee.employee_id,
            personal_info=PersonalInfoResponse(
                first_name=employee.first_name,
                last_name=employee.last_name,
                email=employee.email,
                phone=employee.phone,
                date_of_birth=employee.date_of_birth,
                address=AddressResponse(
                    street=employee.street,
                    city=employee.city,
                    state=employee.state,
                    zip_code=employee.zip_code,
                    country=employee.country,
                ),
            ),
            job_info=JobInfoResponse(
                title=employee.title,
                department=employee.department,
                manager=ManagerSummary.model_validate(manager) if manager else None,
                start_date=employee.start_date,
                salary=float(employee.salary) if employee.salary is not None else None,
                employment_type=employee.employment_type,
            ),
            status=employee.status,
            full_name=employee.full_name,
            years_of_service=years_of_service(employee.start_date),
            created_by=UserSummary.model_validate(created_by) if created_by else None,
            updated_by=UserSummary.model_validate(updated_by) if updated_by else None,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )

    # =========================================================================
    # Pipeline stages
    # =========================================================================

    @staticmethod
    def _validate(pipeline: ValidationPipeline, body: Any) -> None:
        errors = pipeline.run(body)
        if errors:
            raise ValidationFailedError(errors)

    @staticmethod
    def _parse_create(body: dict[str, Any]) -> EmployeeCreate:
        try:
            return EmployeeCreate.model_validate(_normalize_dates(body))
        except PydanticValidationError as e:
            raise ValidationFailedError(_pydantic_errors(e)) from None

    @staticmethod
    def _parse_update(body: dict[str, Any]) -> EmployeeUpdate:
        try:
            return EmployeeUpdate.model_validate(_normalize_dates(body))
        except PydanticValidationError as e:
            raise ValidationFailedError(_pydantic_errors(e)) from None

    async def _get_or_404(self, employee_id: str) -> EmployeeORM:
        employee = await self.employee_repo.get_by_id(parse_employee_id(employee_id))
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def _next_employee_id(self) -> str:
        """Next sequential ``EMP####`` after the highest stored one.

        Raises:
            EmployeeIdSequenceExhaustedError: If the highest id is EMP9999
        """
        highest = await self.employee_repo.get_max_employee_id()
        number = 1
        if highest and EMPLOYEE_ID_PATTERN.match(highest):
            number = int(highest[len(EMPLOYEE_ID_PREFIX):]) + 1
        if number >= 10**EMPLOYEE_ID_DIGITS:
            raise EmployeeIdSequenceExhaustedError()
        return f"{EMPLOYEE_ID_PREFIX}{number:0{EMPLOYEE_ID_DIGITS}d}"

    async def _assign_employee_id(self, requested: Any) -> str:
        """Use a well-formed unused requested id, else issue the next one."""
        if isinstance(requested, str) and requested.strip():
            candidate = requested.strip().upper()
            if EMPLOYEE_ID_PATTERN.match(candidate):
                if await self.employee_repo.get_by_employee_id(candidate) is None:
                    return candidate
                logger.info("Requested employee ID %s is taken, issuing the next one", candidate)
            else:
                logger.info("Requested employee ID is malformed, issuing the next one")
        return await self._next_employee_id()

    async def _write_translating_conflicts(self, apply: Callable[[], None], on_update: bool = False) -> None:
        """Apply in-memory changes and flush them inside a SAVEPOINT.

        A unique violation raised by the store (a concurrent writer won the
        race past the pre-checks) is mapped to the constraint that fired.

        Raises:
            DuplicateEmployeeIdError: If the employee ID constraint fired
            DuplicateEmailError: If the email constraint fired
            IntegrityError: For any other integrity violation
        """
        try:
            async with self.session.begin_nested():
                apply()
                await self.session.flush()
        except IntegrityError as e:
            message = str(e.orig).lower()
            if any(name in message for name in EMAIL_CONSTRAINT_MARKERS):
                raise DuplicateEmailError(on_update=on_update) from e
            if any(name in message for name in EMPLOYEE_ID_CONSTRAINT_MARKERS):
                raise DuplicateEmployeeIdError() from e
            raise

    # =========================================================================
    # Operations
    # =========================================================================

    async def list_employees(
        self,
        page: int = 1,
        limit: int | None = None,
        department: str | None = None,
        status: str | None = None,
        search: str | None = None,
        sort_by: str = DEFAULT_EMPLOYEE_SORT_FIELD,
        sort_order: str = DEFAULT_SORT_ORDER,
        context: AuditContext | None = None,
    ) -> EmployeeListResponse:
        """List employees with filtering, sorting and pagination.

        Args:
            page: Page number (1-indexed)
            limit: Page size; capped at the configured maximum
            department: Filter by department
            status: Filter by status
            search: Case-insensitive substring over names, email and employee ID
            sort_by: Public sort key
            sort_order: asc or desc
            context: Acting user; the read is logged when given

        Returns:
            EmployeeListResponse
        """
        settings = get_settings()
        page = max(page, 1)
        limit = min(max(limit or settings.default_page_size, 1), settings.max_page_size)

        employees, total = await self.employee_repo.get_all_with_filters(
            department=department,
            status=status,
            search=sanitize_search(search),
            sort_by=validate_sort_by(sort_by, EMPLOYEE_SORT_FIELDS, DEFAULT_EMPLOYEE_SORT_FIELD),
            sort_dir=sort_order,
            offset=(page - 1) * limit,
            limit=limit,
        )
        if context is not None:
            self.audit_service.log_read(context, AuditAction.READ_EMPLOYEES)

        total_pages = math.ceil(total / limit) if total else 0
        return EmployeeListResponse(
            employees=await self._build_employee_responses(employees),
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_employees=total,
                has_next_page=page < total_pages,
                has_prev_page=page > 1,
            ),
        )

    async def get_employee(self, employee_id: str, context: AuditContext | None = None) -> EmployeeResponse:
        """Get one employee.

        Raises:
            InvalidIdFormatError: If the id is not a UUID
            EmployeeNotFoundError: If no employee has this id
        """
        employee = await self._get_or_404(employee_id)
        if context is not None:
            self.audit_service.log_read(context, AuditAction.READ_EMPLOYEE, resource_id=employee.id)
        return (await self._build_employee_responses([employee]))[0]

    async def create_employee(self, body: Any, context: AuditContext) -> EmployeeResponse:
        """Create an employee.

        Args:
            body: Raw request body
            context: Acting user and request provenance

        Returns:
            Created EmployeeResponse

        Raises:
            ValidationFailedError: If any field is invalid
            InvalidManagerAssignmentError: If the manager cannot be assigned
            DuplicateEmailError: If the email is taken
            DuplicateEmployeeIdError: If a concurrent create took the same ID
            EmployeeIdSequenceExhaustedError: If no ID is left to issue
        """
        body = sanitize_payload(body)
        self._validate(EMPLOYEE_CREATE_PIPELINE, body)
        data = self._parse_create(body)

        if data.job_info.manager is not None:
            await self.manager_validator.validate(None, data.job_info.manager)

        email = data.personal_info.email.strip().lower()
        if await self.employee_repo.get_by_email(email) is not None:
            raise DuplicateEmailError(email)

        employee_code = await self._assign_employee_id(body.get("employeeId"))

        actor_id = context.actor.id if context.actor else None
        address = data.personal_info.address
        now = datetime.now(UTC)

        employee = EmployeeORM(
            employee_id=employee_code,
            first_name=data.personal_info.first_name,
            last_name=data.personal_info.last_name,
            email=email,
            phone=data.personal_info.phone,
            date_of_birth=data.personal_info.date_of_birth,
            street=address.street if address else None,
            city=address.city if address else None,
            state=address.state if address else None,
            zip_code=address.zip_code if address else None,
            country=(address.country if address and address.country else DEFAULT_COUNTRY),
            title=data.job_info.title,
            department=data.job_info.department.value,
            manager_id=data.job_info.manager,
            start_date=data.job_info.start_date,
            salary=data.job_info.salary,
            employment_type=data.job_info.employment_type.value,
            status=data.status.value,
            created_by=actor_id,
            updated_by=actor_id,
            created_at=now,
            updated_at=now,
        )
        await self._write_translating_conflicts(lambda: self.session.add(employee))
        await self.session.refresh(employee)

        logger.info("Created employee %s (%s)", employee.employee_id, employee.id)

        await self.audit_service.record_success(
            context, AuditAction.CREATE_EMPLOYEE, resource_id=employee.id, payload=body
        )
        return (await self._build_employee_responses([employee]))[0]

    async def update_employee(self, employee_id: str, body: Any, context: AuditContext) -> EmployeeResponse:
        """Apply a partial update. Keys absent from the body are left untouched.

        ``employeeId`` in the body is ignored; the business identifier never
        changes after creation.

        Args:
            employee_id: Employee UUID from the path
            body: Raw request body
            context: Acting user and request provenance

        Returns:
            Updated EmployeeResponse

        Raises:
            InvalidIdFormatError: If the id is not a UUID
            EmployeeNotFoundError: If no employee has this id
            ValidationFailedError: If any provided field is invalid
            InvalidManagerAssignmentError: If the manager cannot be assigned
            DuplicateEmailError: If another employee has the email
        """
        employee = await self._get_or_404(employee_id)

        body = sanitize_payload(body)
        self._validate(EMPLOYEE_UPDATE_PIPELINE, body)
        data = self._parse_update(body)

        changes = self._collect_changes(data)

        if changes.get("manager_id") is not None:
            await self.manager_validator.validate(employee.id, changes["manager_id"])

        if "email" in changes:
            if await self.employee_repo.get_by_email(changes["email"], exclude_id=employee.id) is not None:
                raise DuplicateEmailError(changes["email"], on_update=True)

        if "salary" in changes or "employment_type" in changes:
            self._check_intern_salary(employee, changes)

        changes["updated_by"] = context.actor.id if context.actor else None
        changes["updated_at"] = datetime.now(UTC)

        def apply() -> None:
            for column, value in changes.items():
                setattr(employee, column, value)

        await self._write_translating_conflicts(apply, on_update=True)
        await self.session.refresh(employee)

        logger.info("Updated employee %s fields=%s", employee.employee_id, sorted(changes))

        await self.audit_service.record_success(
            context, AuditAction.UPDATE_EMPLOYEE, resource_id=employee.id, payload=body
        )
        return (await self._build_employee_responses([employee]))[0]

    @staticmethod
    def _check_intern_salary(employee: EmployeeORM, changes: dict[str, Any]) -> None:
        """Apply the intern pay cap to the record as it will be stored."""
        salary = changes.get("salary", employee.salary)
        merged = {"jobInfo": {"employmentType": changes.get("employment_type", employee.employment_type)}}
        message = intern_salary_cap(salary, merged)
        if message:
            raise ValidationFailedError([FieldError("jobInfo.salary", message, float(salary))])

    @staticmethod
    def _collect_changes(data: EmployeeUpdate) -> dict[str, Any]:
        """Flatten the keys present in an update into column assignments."""
        changes: dict[str, Any] = {}

        personal = data.personal_info if "personal_info" in data.model_fields_set else None
        if personal is not None:
            for field in personal.model_fields_set:
                if field == "address":
                    address = personal.address
                    if address is None:
                        changes.update(dict.fromkeys(ADDRESS_COLUMNS))
                    else:
                        for column in address.model_fields_set:
                            changes[column] = getattr(address, column)
                elif field == "email":
                    changes["email"] = personal.email.strip().lower()
                else:
                    changes[field] = getattr(personal, field)

        job = data.job_info if "job_info" in data.model_fields_set else None
        if job is not None:
            for field in job.model_fields_set:
                value = getattr(job, field)
                if field == "manager":
                    changes["manager_id"] = value
                elif field in ("department", "employment_type"):
                    changes[field] = value.value
                else:
                    changes[field] = value

        if "status" in data.model_fields_set and data.status is not None:
            changes["status"] = data.status.value

        return changes

    async def delete_employee(self, employee_id: str, context: AuditContext) -> EmployeeDeleteResponse:
        """Delete an employee nobody reports to.

        Args:
            employee_id: Employee UUID from the path
            context: Acting user and request provenance

        Returns:
            EmployeeDeleteResponse summarizing the deleted employee

        Raises:
            InvalidIdFormatError: If the id is not a UUID
            EmployeeNotFoundError: If no employee has this id
            HasDependentsError: If any employee reports to this one
        """
        employee = await self._get_or_404(employee_id)

        dependents = await self.employee_repo.count_direct_reports(employee.id)
        if dependents:
            raise HasDependentsError(dependents)

        summary = DeletedEmployeeSummary(
            id=employee.id,
            employee_id=employee.employee_id,
            full_name=employee.full_name,
        )

        await self.session.delete(employee)
        await self.session.flush()

        logger.info("Deleted employee %s (%s)", summary.employee_id, summary.id)

        await self.audit_service.record_success(context, AuditAction.DELETE_EMPLOYEE, resource_id=summary.id)
        return EmployeeDeleteResponse(deleted_employee=summary)

    async def get_statistics(self, context: AuditContext | None = None) -> EmployeeStatsResponse:
        """Aggregate headcounts by status, department and employment type.

        Recent hires are employees whose start date falls within the
        configured window (30 days by default).
        """
        if context is not None:
            self.audit_service.log_read(context, AuditAction.READ_EMPLOYEE_STATS)

        by_status = await self.employee_repo.count_by_status()
        since = datetime.now(UTC).date() - timedelta(days=get_settings().recent_hire_days)

        overview = StatsOverview(
            total_employees=sum(by_status.values()),
            active_employees=by_status.get(EmployeeStatus.ACTIVE, 0),
            inactive_employees=by_status.get(EmployeeStatus.INACTIVE, 0),
            terminated_employees=by_status.get(EmployeeStatus.TERMINATED, 0),
            recent_hires=await self.employee_repo.count_started_since(since),
        )

        return EmployeeStatsResponse(
            overview=overview,
            department_stats=[
                DepartmentCount(department=department, count=count)
                for department, count in await self.employee_repo.count_by_department()
            ],
            employment_type_stats=[
                EmploymentTypeCount(employment_type=employment_type, count=count)
                for employment_type, count in await self.employee_repo.count_by_employment_type()
            ],
        )
