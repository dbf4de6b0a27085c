"""SQL injection prevention tests.

SQLAlchemy parameterizes every query the repositories build; that is the
primary protection. These tests cover the input narrowing layered on top:
search sanitization, whitelisted sort keys and filters, and LIKE escaping.
"""

import os
from uuid import UUID, uuid4

import pytest

from staff_api.constants.validation import (
    DEFAULT_EMPLOYEE_SORT_FIELD,
    EMPLOYEE_SORT_FIELDS,
    EMPLOYEE_STATUSES,
    MAX_SEARCH_LENGTH,
)
from staff_api.services.audit_service import AuditAction
from staff_api.utils.validation import (
    escape_like_wildcards,
    sanitize_search,
    validate_against_whitelist,
    validate_sort_by,
)

SQL_INJECTION_PAYLOADS = [
    # Classic
    "'; DROP TABLE employees; --",
    "1' OR '1'='1",
    "1; DELETE FROM employees WHERE '1'='1",
    "' UNION SELECT * FROM users --",
    # Blind
    "1' AND (SELECT COUNT(*) FROM users) > 0 --",
    "1'; SELECT pg_sleep(5) --",
    # Stacked
    "1'; UPDATE users SET role = 'admin' WHERE username = 'victim'; --",
    # Encoding and comment variations
    "%27%20OR%201%3D1%20--",
    "1'/**/OR/**/1=1--",
    "ʼ; DROP TABLE users; --",
    "$$; DROP TABLE employees; $$",
    "1'\x00 OR 1=1 --",
]


class TestSearchSanitization:
    """Tests for free-text search input."""

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_statement_separators_removed(self, payload: str) -> None:
        result = sanitize_search(payload)

        if result is not None:
            assert ";" not in result
            assert "--" not in result

    def test_length_capped(self) -> None:
        assert len(sanitize_search("A" * 1000)) == MAX_SEARCH_LENGTH

    def test_empty_and_none(self) -> None:
        assert sanitize_search(None) is None
        assert sanitize_search("") is None
        assert sanitize_search("  ; -- ") is None

    def test_plain_terms_kept(self) -> None:
        assert sanitize_search("  O'Neil ") == "O'Neil"


class TestWhitelists:
    """Tests for enumeration inputs."""

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_sort_key_whitelist(self, payload: str) -> None:
        result = validate_sort_by(payload, EMPLOYEE_SORT_FIELDS, DEFAULT_EMPLOYEE_SORT_FIELD)

        assert result == "created_at"

    def test_sort_key_mapped_to_column(self) -> None:
        assert validate_sort_by("jobInfo.startDate", EMPLOYEE_SORT_FIELDS, DEFAULT_EMPLOYEE_SORT_FIELD) == "start_date"
        assert validate_sort_by(None, EMPLOYEE_SORT_FIELDS, DEFAULT_EMPLOYEE_SORT_FIELD) == "created_at"

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_status_whitelist(self, payload: str) -> None:
        assert validate_against_whitelist(payload, EMPLOYEE_STATUSES) is None

    @pytest.mark.parametrize("payload", SQL_INJECTION_PAYLOADS)
    def test_audit_action_whitelist(self, payload: str) -> None:
        allowed_actions = {
            v for k, v in vars(AuditAction).items()
            if not k.startswith("_") and isinstance(v, str)
        }

        assert validate_against_whitelist(payload, allowed_actions) is None

    def test_whitelisted_value_kept(self) -> None:
        assert validate_against_whitelist(" terminated ", EMPLOYEE_STATUSES) == "terminated"


class TestLikeEscaping:
    """Tests for LIKE pattern escaping."""

    def test_wildcards_escaped(self) -> None:
        assert escape_like_wildcards("test%value") == r"test\%value"
        assert escape_like_wildcards("test_value") == r"test\_value"
        assert escape_like_wildcards("test\\value") == r"test\\value"

    def test_injection_wildcards_neutralized(self) -> None:
        escaped = escape_like_wildcards("test%'; DROP TABLE employees; --")

        assert r"\%" in escaped
        assert "%" not in escaped.replace(r"\%", "")


class TestIdentifiers:
    """Tests for identifier parsing."""

    @pytest.mark.parametrize("value", ["'; DROP TABLE users; --", "1 OR 1=1", "EMP0001", ""])
    def test_non_uuid_rejected(self, value: str) -> None:
        with pytest.raises(ValueError):
            UUID(value)

    def test_uuid_round_trip(self) -> None:
        value = uuid4()
        assert UUID(str(value)) == value


class TestNoRawSQL:
    """Repositories build queries through the ORM only."""

    def test_no_text_in_repositories(self) -> None:
        repo_dir = os.path.join(os.path.dirname(__file__), "..", "src", "staff_api", "repositories")

        for filename in os.listdir(repo_dir):
            if not filename.endswith(".py"):
                continue
            with open(os.path.join(repo_dir, filename)) as f:
                content = f.read()
            assert "text(" not in content, f"raw SQL in {filename}"


class TestSQLAlchemyParameterization:
    """The ORM binds values instead of interpolating them."""

    def test_filter_and_like_are_parameterized(self) -> None:
        from sqlalchemy import select

        from staff_api.models.orm import EmployeeORM

        malicious = "'; DROP TABLE employees; --"
        statement = select(EmployeeORM).where(
            EmployeeORM.email == malicious,
            EmployeeORM.last_name.ilike(f"%{escape_like_wildcards(malicious)}%", escape="\\"),
        )

        sql = str(statement.compile())
        assert malicious not in sql
        assert ":email_1" in sql
