"""Employee domain enums."""

from enum import StrEnum


class EmployeeStatus(StrEnum):
    """Employee status enum.

    Transitions between values are unrestricted.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class EmploymentType(StrEnum):
    """Employment type enum."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERN = "intern"


class Department(StrEnum):
    """Department enum."""

    ENGINEERING = "Engineering"
    MARKETING = "Marketing"
    SALES = "Sales"
    HR = "HR"
    FINANCE = "Finance"
    OPERATIONS = "Operations"
    CUSTOMER_SERVICE = "Customer Service"
    IT = "IT"
    LEGAL = "Legal"
    OTHER = "Other"
