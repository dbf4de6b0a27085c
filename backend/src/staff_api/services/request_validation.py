"""Field-level validation of employee request bodies.

A check is a pure function ``(value, body) -> message | None``. Rules bind
checks to a dotted path in the body; a pipeline runs every rule in order
and collects all field errors so a client can fix every problem in one
round trip.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from re import Pattern
from types import MappingProxyType
from typing import Any
from uuid import UUID

from staff_api.constants.validation import (
    CITY_MAX_LENGTH,
    CITY_PATTERN,
    COUNTRY_MAX_LENGTH,
    DEPARTMENTS,
    EMAIL_MAX_LENGTH,
    EMAIL_PATTERN,
    EMPLOYEE_STATUSES,
    EMPLOYMENT_TYPES,
    INTERN_SALARY_MAX,
    MAX_EMPLOYEE_AGE,
    MIN_EMPLOYEE_AGE,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    NAME_PATTERN,
    PHONE_PATTERN,
    SALARY_MAX,
    SALARY_MIN,
    STATE_MAX_LENGTH,
    STREET_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    ZIP_CODE_PATTERN,
)


class _Missing:
    """Marker for a path that is absent from the body."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

Check = Callable[[Any, Mapping[str, Any]], str | None]


@dataclass(frozen=True)
class FieldError:
    """A rejected field."""

    field: str
    message: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


def resolve_path(body: Any, path: str) -> Any:
    """Resolve a dotted path in a nested mapping.

    Args:
        body: Request body
        path: Dotted path such as ``personalInfo.address.zipCode``

    Returns:
        The value, or ``MISSING`` if any segment is absent or not a mapping
    """
    current = body
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def today() -> date:
    """Current UTC date."""
    return datetime.now(UTC).date()


def parse_iso_date(value: Any) -> date | None:
    """Parse an ISO 8601 date or datetime string, returning None on failure."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_number(value: Any) -> Decimal | None:
    """Parse a JSON number or numeric string, returning None on failure.

    Booleans are rejected even though they subclass ``int``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    elif isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return number if number.is_finite() else None


def age_on(birth_date: date, on: date) -> int:
    """Whole years between ``birth_date`` and ``on``."""
    before_birthday = (on.month, on.day) < (birth_date.month, birth_date.day)
    return on.year - birth_date.year - int(before_birthday)


# =============================================================================
# Checks
# =============================================================================


def length_between(min_length: int, max_length: int, message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        if not isinstance(value, str) or not min_length <= len(value.strip()) <= max_length:
            return message
        return None

    return check


def matches(pattern: Pattern[str], message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        if not isinstance(value, str) or not pattern.match(value):
            return message
        return None

    return check


def one_of(allowed: Sequence[str], message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        if not isinstance(value, str) or value not in allowed:
            return message
        return None

    return check


def is_object(message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        return None if isinstance(value, Mapping) else message

    return check


def iso_date(message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        return None if parse_iso_date(value) is not None else message

    return check


def uuid_shape(message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        if not isinstance(value, str):
            return message
        try:
            UUID(value)
        except ValueError:
            return message
        return None

    return check


def numeric_between(minimum: int, maximum: int, type_message: str, range_message: str) -> Check:
    def check(value: Any, body: Mapping[str, Any]) -> str | None:
        number = parse_number(value)
        if number is None:
            return type_message
        if number < minimum or number > maximum:
            return range_message
        return None

    return check


def birth_date_in_past(value: Any, body: Mapping[str, Any]) -> str | None:
    birth_date = parse_iso_date(value)
    if birth_date is not None and birth_date > today():
        return "Date of birth cannot be in the future"
    return None


def age_in_range(value: Any, body: Mapping[str, Any]) -> str | None:
    birth_date = parse_iso_date(value)
    if birth_date is None:
        return None
    age = age_on(birth_date, today())
    if age < MIN_EMPLOYEE_AGE:
        return f"Employee must be at least {MIN_EMPLOYEE_AGE} years old"
    if age > MAX_EMPLOYEE_AGE:
        return "Please verify the date of birth"
    return None


def start_date_window(value: Any, body: Mapping[str, Any]) -> str | None:
    start_date = parse_iso_date(value)
    if start_date is None:
        return None
    current = today()
    if start_date > current + timedelta(days=365):
        return "Start date cannot be more than one year in the future"
    if start_date > current:
        return "Start date cannot be in the future"
    return None


def intern_salary_cap(value: Any, body: Mapping[str, Any]) -> str | None:
    """Interns cannot be paid more than the intern cap."""
    if resolve_path(body, "jobInfo.employmentType") != "intern":
        return None
    salary = parse_number(value)
    if salary is not None and salary > INTERN_SALARY_MAX:
        return f"Intern salary cannot exceed ${INTERN_SALARY_MAX:,}"
    return None


# =============================================================================
# Rules and pipeline
# =============================================================================


@dataclass(frozen=True)
class FieldRule:
    """Checks bound to one field of the body.

    Attributes:
        path: Dotted path of the field
        checks: Checks run in order; the first failure is reported
        required: Absent, null or blank values are rejected
        required_message: Message reported for a missing required value
        nullable: Null is accepted and clears the stored value
        partial: Absent values are skipped even when required (updates)
    """

    path: str
    checks: tuple[Check, ...]
    required: bool = False
    required_message: str = "This field is required"
    nullable: bool = True
    partial: bool = False

    def evaluate(self, body: Mapping[str, Any]) -> FieldError | None:
        value = resolve_path(body, self.path)

        if value is MISSING:
            if self.required and not self.partial:
                return FieldError(self.path, self.required_message, None)
            return None

        if value is None:
            if self.required or not self.nullable:
                return FieldError(self.path, self.required_message, None)
            return None

        if self.required and not self.partial and isinstance(value, str) and not value.strip():
            return FieldError(self.path, self.required_message, value)

        for check in self.checks:
            message = check(value, body)
            if message is not None:
                return FieldError(self.path, message, value)
        return None


class ValidationPipeline:
    """Ordered list of field rules evaluated against one request body."""

    def __init__(self, rules: Sequence[FieldRule]) -> None:
        self.rules = tuple(rules)

    def run(self, body: Mapping[str, Any]) -> list[FieldError]:
        """Evaluate every rule and collect the failures in rule order.

        Args:
            body: Sanitized request body

        Returns:
            Field errors; empty when the body is valid
        """
        if not isinstance(body, Mapping):
            return [FieldError("body", "Request body must be a JSON object", None)]

        snapshot = MappingProxyType(dict(body))
        errors = []
        for rule in self.rules:
            error = rule.evaluate(snapshot)
            if error is not None:
                errors.append(error)
        return errors


def _employee_rules(partial: bool) -> list[FieldRule]:
    def rule(
        path: str,
        *checks: Check,
        required: bool = False,
        nullable: bool = True,
        required_message: str = "",
    ) -> FieldRule:
        return FieldRule(
            path=path,
            checks=checks,
            required=required,
            required_message=required_message or "This field is required",
            nullable=nullable,
            partial=partial,
        )

    title_message = (
        "Job title cannot exceed 100 characters"
        if partial
        else "Job title is required and cannot exceed 100 characters"
    )

    return [
        rule("personalInfo", is_object("Personal info must be an object"),
             required=True, required_message="Personal info is required"),
        rule(
            "personalInfo.firstName",
            length_between(NAME_MIN_LENGTH, NAME_MAX_LENGTH, "First name must be between 2 and 50 characters"),
            matches(NAME_PATTERN, "First name can only contain letters, spaces, hyphens, and apostrophes"),
            required=True,
            required_message="First name is required",
        ),
        rule(
            "personalInfo.lastName",
            length_between(NAME_MIN_LENGTH, NAME_MAX_LENGTH, "Last name must be between 2 and 50 characters"),
            matches(NAME_PATTERN, "Last name can only contain letters, spaces, hyphens, and apostrophes"),
            required=True,
            required_message="Last name is required",
        ),
        rule(
            "personalInfo.email",
            length_between(1, EMAIL_MAX_LENGTH, "Email cannot exceed 100 characters"),
            matches(EMAIL_PATTERN, "Please provide a valid email address"),
            required=True,
            required_message="Email is required",
        ),
        rule("personalInfo.phone", matches(PHONE_PATTERN, "Please provide a valid phone number")),
        rule(
            "personalInfo.dateOfBirth",
            iso_date("Date of birth must be a valid date"),
            birth_date_in_past,
            age_in_range,
        ),
        rule("personalInfo.address", is_object("Address must be an object")),
        rule(
            "personalInfo.address.street",
            length_between(0, STREET_MAX_LENGTH, "Street address cannot exceed 100 characters"),
        ),
        rule(
            "personalInfo.address.city",
            length_between(0, CITY_MAX_LENGTH, "City cannot exceed 50 characters"),
            matches(CITY_PATTERN, "City can only contain letters, spaces, hyphens, apostrophes, and periods"),
        ),
        rule(
            "personalInfo.address.state",
            length_between(0, STATE_MAX_LENGTH, "State cannot exceed 50 characters"),
        ),
        rule("personalInfo.address.zipCode", matches(ZIP_CODE_PATTERN, "Please enter a valid ZIP code")),
        rule(
            "personalInfo.address.country",
            length_between(0, COUNTRY_MAX_LENGTH, "Country cannot exceed 50 characters"),
        ),
        rule("jobInfo", is_object("Job info must be an object"),
             required=True, required_message="Job info is required"),
        rule(
            "jobInfo.title",
            length_between(1, TITLE_MAX_LENGTH, title_message),
            required=True,
            required_message=title_message,
        ),
        rule(
            "jobInfo.department",
            one_of(DEPARTMENTS, "Please select a valid department"),
            required=True,
            required_message="Please select a valid department",
        ),
        rule("jobInfo.manager", uuid_shape("Manager must be a valid employee ID")),
        rule(
            "jobInfo.startDate",
            iso_date("Start date must be a valid date"),
            start_date_window,
            required=True,
            required_message="Start date is required",
        ),
        rule(
            "jobInfo.salary",
            numeric_between(
                SALARY_MIN, SALARY_MAX, "Salary must be a number", "Salary must be between 0 and 10,000,000"
            ),
            intern_salary_cap,
        ),
        rule(
            "jobInfo.employmentType",
            one_of(EMPLOYMENT_TYPES, "Please select a valid employment type"),
            nullable=False,
            required_message="Please select a valid employment type",
        ),
        rule(
            "status",
            one_of(EMPLOYEE_STATUSES, "Please select a valid status"),
            nullable=False,
            required_message="Please select a valid status",
        ),
    ]


EMPLOYEE_CREATE_PIPELINE = ValidationPipeline(_employee_rules(partial=False))
EMPLOYEE_UPDATE_PIPELINE = ValidationPipeline(_employee_rules(partial=True))
