"""Employee repository."""

from datetime import date
from uuid import UUID

from sqlalchemy import func, or_, select

from staff_api.constants.validation import EMPLOYEE_ID_PREFIX, EMPLOYEE_SORT_FIELDS
from staff_api.models.orm.employee import EmployeeORM
from staff_api.repositories.base import BaseRepository
from staff_api.utils.validation import escape_like_wildcards

# Columns a client may sort by; anything else falls back to created_at
VALID_SORT_COLUMNS = frozenset(EMPLOYEE_SORT_FIELDS.values())


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee operations."""

    model = EmployeeORM

    async def get_by_email(self, email: str, exclude_id: UUID | None = None) -> EmployeeORM | None:
        """Get employee by email, case-insensitively.

        Args:
            email: Employee email address
            exclude_id: Employee to ignore (the one being updated)

        Returns:
            EmployeeORM or None if not found
        """
        query = select(EmployeeORM).where(func.lower(EmployeeORM.email) == email.lower())
        if exclude_id is not None:
            query = query.where(EmployeeORM.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def get_by_employee_id(self, employee_id: str) -> EmployeeORM | None:
        """Get employee by business identifier (``EMP####``).

        Args:
            employee_id: Business identifier

        Returns:
            EmployeeORM or None if not found
        """
        result = await self.session.execute(
            select(EmployeeORM).where(EmployeeORM.employee_id == employee_id)
        )
        return result.scalar_one_or_none()

    async def get_manager_id(self, id: UUID) -> UUID | None:
        """Get the manager link of an employee without loading the row.

        Args:
            id: Employee UUID

        Returns:
            Manager UUID, or None for a root or an unknown employee
        """
        result = await self.session.execute(
            select(EmployeeORM.manager_id).where(EmployeeORM.id == id)
        )
        return result.scalar_one_or_none()

    async def get_max_employee_id(self) -> str | None:
        """Get the highest issued business identifier.

        Identifiers are fixed-width, so lexical order equals numeric order.

        Returns:
            Highest ``EMP####`` value or None when no employee exists
        """
        result = await self.session.execute(
            select(func.max(EmployeeORM.employee_id)).where(
                EmployeeORM.employee_id.like(f"{EMPLOYEE_ID_PREFIX}%")
            )
        )
        return result.scalar_one_or_none()

    async def count_direct_reports(self, manager_id: UUID) -> int:
        """Count employees whose manager is ``manager_id``, in any status."""
        result = await self.session.execute(
            select(func.count()).select_from(EmployeeORM).where(EmployeeORM.manager_id == manager_id)
        )
        return result.scalar_one()

    async def get_all_with_filters(
        self,
        department: str | None = None,
        status: str | None = None,
        search: str | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[EmployeeORM], int]:
        """Get employees with optional filters.

        Args:
            department: Filter by department
            status: Filter by status
            search: Case-insensitive substring over names, email and employee ID
            sort_by: Column to sort by
            sort_dir: Sort direction (asc or desc)
            offset: Pagination offset
            limit: Pagination limit

        Returns:
            Tuple of (employees, total_count)
        """
        query = select(EmployeeORM)
        count_query = select(func.count()).select_from(EmployeeORM)

        if department:
            query = query.where(EmployeeORM.department == department)
            count_query = count_query.where(EmployeeORM.department == department)

        if status:
            query = query.where(EmployeeORM.status == status)
            count_query = count_query.where(EmployeeORM.status == status)

        if search:
            # Escape LIKE wildcards to prevent pattern injection
            pattern = f"%{escape_like_wildcards(search)}%"
            search_filter = or_(
                EmployeeORM.first_name.ilike(pattern, escape="\\"),
                EmployeeORM.last_name.ilike(pattern, escape="\\"),
                EmployeeORM.email.ilike(pattern, escape="\\"),
                EmployeeORM.employee_id.ilike(pattern, escape="\\"),
            )
            query = query.where(search_filter)
            count_query = count_query.where(search_filter)

        if sort_by not in VALID_SORT_COLUMNS:
            sort_by = "created_at"
        if sort_dir not in ("asc", "desc"):
            sort_dir = "desc"

        sort_column = getattr(EmployeeORM, sort_by)
        if sort_dir == "desc":
            query = query.order_by(sort_column.desc(), EmployeeORM.id.desc())
        else:
            query = query.order_by(sort_column.asc(), EmployeeORM.id.asc())

        query = query.offset(offset).limit(limit)

        result = await self.session.execute(query)
        employees = list(result.scalars().all())

        count_result = await self.session.execute(count_query)
        total = count_result.scalar_one()

        return employees, total

    async def count_by_status(self) -> dict[str, int]:
        """Count employees grouped by status."""
        result = await self.session.execute(
            select(EmployeeORM.status, func.count()).group_by(EmployeeORM.status)
        )
        return {status: count for status, count in result.all()}

    async def count_started_since(self, since: date) -> int:
        """Count employees whose start date is on or after ``since``."""
        result = await self.session.execute(
            select(func.count()).select_from(EmployeeORM).where(EmployeeORM.start_date >= since)
        )
        return result.scalar_one()

    async def count_by_department(self) -> list[tuple[str, int]]:
        """Count employees per department, largest first."""
        count_col = func.count().label("count")
        result = await self.session.execute(
            select(EmployeeORM.department, count_col)
            .group_by(EmployeeORM.department)
            .order_by(count_col.desc(), EmployeeORM.department)
        )
        return [(department, count) for department, count in result.all()]

    async def count_by_employment_type(self) -> list[tuple[str, int]]:
        """Count employees per employment type, largest first."""
        count_col = func.count().label("count")
        result = await self.session.execute(
            select(EmployeeORM.employment_type, count_col)
            .group_by(EmployeeORM.employment_type)
            .order_by(count_col.desc(), EmployeeORM.employment_type)
        )
        return [(employment_type, count) for employment_type, count in result.all()]
