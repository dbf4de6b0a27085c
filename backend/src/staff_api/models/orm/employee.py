"""Employee ORM model."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staff_api.constants.validation import (
    DEFAULT_COUNTRY,
    DEFAULT_EMPLOYEE_STATUS,
    DEFAULT_EMPLOYMENT_TYPE,
)
from staff_api.models.orm.base import Base, TimestampMixin, UUIDMixin


class EmployeeORM(Base, UUIDMixin, TimestampMixin):
    """Employee database model.

    ``manager_id`` is a weak reference: no cascade, no ownership. Deletion of
    a referenced manager is blocked by the service layer.
    """

    __tablename__ = "employees"

    employee_id: Mapped[str] = mapped_column(String(7), nullable=False)

    # Personal info
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(17), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    street: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(50), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    country: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default=DEFAULT_COUNTRY
    )

    # Job info
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(50), nullable=False)
    manager_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id"), nullable=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    employment_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_EMPLOYMENT_TYPE
    )

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_EMPLOYEE_STATUS)

    # Audit attribution
    created_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    updated_by: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", name="uq_employees_employee_id"),
        UniqueConstraint("email", name="uq_employees_email"),
        Index("idx_employees_department", "department"),
        Index("idx_employees_status", "status"),
        Index("idx_employees_manager_id", "manager_id"),
        Index("idx_employees_start_date", "start_date"),
    )

    @property
    def full_name(self) -> str:
        """First and last name joined."""
        return f"{self.first_name} {self.last_name}"
