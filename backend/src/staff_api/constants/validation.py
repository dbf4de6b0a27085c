"""Centralized validation constants for the staff API.

This module provides a single source of truth for all validation whitelists,
patterns, default values, and limits used across routers and services.
"""

import re
from typing import Final

# =============================================================================
# Employee Enumerations
# =============================================================================

DEPARTMENTS: Final[tuple[str, ...]] = (
    "Engineering",
    "Marketing",
    "Sales",
    "HR",
    "Finance",
    "Operations",
    "Customer Service",
    "IT",
    "Legal",
    "Other",
)

EMPLOYMENT_TYPES: Final[tuple[str, ...]] = ("full-time", "part-time", "contract", "intern")

EMPLOYEE_STATUSES: Final[tuple[str, ...]] = ("active", "inactive", "terminated")

DEFAULT_EMPLOYMENT_TYPE: Final[str] = "full-time"
DEFAULT_EMPLOYEE_STATUS: Final[str] = "active"
DEFAULT_COUNTRY: Final[str] = "United States"

# =============================================================================
# Employee ID
# =============================================================================

EMPLOYEE_ID_PREFIX: Final[str] = "EMP"
EMPLOYEE_ID_DIGITS: Final[int] = 4
EMPLOYEE_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^EMP\d{4}$")

# =============================================================================
# Field Patterns
# =============================================================================

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[\w.+-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*\.[A-Za-z]{2,}$"
)
PHONE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\+?[1-9]\d{0,15}$")
ZIP_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d{5}(-\d{4})?$")
NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z\s\-']+$")
CITY_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z\s\-'.]+$")

# =============================================================================
# Field Limits
# =============================================================================

NAME_MIN_LENGTH: Final[int] = 2
NAME_MAX_LENGTH: Final[int] = 50
EMAIL_MAX_LENGTH: Final[int] = 100
STREET_MAX_LENGTH: Final[int] = 100
CITY_MAX_LENGTH: Final[int] = 50
STATE_MAX_LENGTH: Final[int] = 50
COUNTRY_MAX_LENGTH: Final[int] = 50
TITLE_MAX_LENGTH: Final[int] = 100

SALARY_MIN: Final[int] = 0
SALARY_MAX: Final[int] = 10_000_000
INTERN_SALARY_MAX: Final[int] = 50_000

MIN_EMPLOYEE_AGE: Final[int] = 16
MAX_EMPLOYEE_AGE: Final[int] = 100

# =============================================================================
# Listing
# =============================================================================

# Public sort keys mapped to ORM column names
EMPLOYEE_SORT_FIELDS: Final[dict[str, str]] = {
    "employeeId": "employee_id",
    "personalInfo.firstName": "first_name",
    "personalInfo.lastName": "last_name",
    "jobInfo.title": "title",
    "jobInfo.department": "department",
    "jobInfo.startDate": "start_date",
    "createdAt": "created_at",
}

DEFAULT_EMPLOYEE_SORT_FIELD: Final[str] = "createdAt"
DEFAULT_SORT_ORDER: Final[str] = "desc"

MAX_SEARCH_LENGTH: Final[int] = 100
