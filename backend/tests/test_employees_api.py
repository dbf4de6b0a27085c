"""HTTP API tests for the admin employee routes."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from conftest import employee_payload, seed_session_token, seed_user, session_cookie
from staff_api.models.domain.user import UserRole
from staff_api.routers.admin_headers import ADMIN_RESPONSE_HEADERS

EMPLOYEES = "/api/v1/employees"
MISSING_ID = "00000000-0000-4000-8000-000000000000"


async def _create(client: AsyncClient, headers: dict[str, str], **job) -> dict:
    body = employee_payload()
    body["jobInfo"].update(job)
    response = await client.post(EMPLOYEES, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthorization:
    """Tests for authentication and role gating."""

    async def test_missing_cookie(self, client) -> None:
        response = await client.get(EMPLOYEES)

        assert response.status_code == 401
        assert response.json() == {"message": "Authentication required"}

    async def test_unknown_session(self, client) -> None:
        response = await client.get(EMPLOYEES, headers=session_cookie("forged"))

        assert response.status_code == 401

    async def test_expired_session(self, client, session_maker) -> None:
        async with session_maker() as session:
            user = await seed_user(session, "stale-admin")
            token = await seed_session_token(session, user, expires_in=timedelta(minutes=-1))
            await session.commit()

        response = await client.get(EMPLOYEES, headers=session_cookie(token))

        assert response.status_code == 401

    async def test_inactive_user(self, client, session_maker) -> None:
        async with session_maker() as session:
            user = await seed_user(session, "gone-admin", is_active=False)
            token = await seed_session_token(session, user)
            await session.commit()

        response = await client.get(EMPLOYEES, headers=session_cookie(token))

        assert response.status_code == 401

    async def test_non_admin_forbidden(self, client, session_maker) -> None:
        async with session_maker() as session:
            user = await seed_user(session, "plain-user", role=UserRole.USER)
            token = await seed_session_token(session, user)
            await session.commit()

        response = await client.post(EMPLOYEES, json=employee_payload(), headers=session_cookie(token))

        assert response.status_code == 403
        assert response.json() == {"message": "Admin access required"}

    async def test_admin_headers_present(self, client, admin_headers) -> None:
        response = await client.get(EMPLOYEES, headers=admin_headers)

        assert response.status_code == 200
        for name, value in ADMIN_RESPONSE_HEADERS.items():
            assert response.headers[name] == value
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    async def test_health_is_public(self, client) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestEmployeeRoutes:
    """Tests for the employee lifecycle over HTTP."""

    async def test_create_returns_201_camel_case(self, client, admin_headers) -> None:
        data = await _create(client, admin_headers)

        assert data["employeeId"] == "EMP0001"
        assert data["fullName"] == "Avery Stone"
        assert data["personalInfo"]["address"]["zipCode"] == "62701"
        assert data["jobInfo"]["employmentType"] == "full-time"
        assert data["createdBy"]["username"] == "root-admin"
        assert "yearsOfService" in data

    async def test_create_validation_error_shape(self, client, admin_headers) -> None:
        body = employee_payload()
        body["personalInfo"]["firstName"] = "J"
        body["jobInfo"]["salary"] = -5

        response = await client.post(EMPLOYEES, json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {
            "message": "Validation failed",
            "errors": [
                {
                    "field": "personalInfo.firstName",
                    "message": "First name must be between 2 and 50 characters",
                    "value": "J",
                },
                {
                    "field": "jobInfo.salary",
                    "message": "Salary must be between 0 and 10,000,000",
                    "value": -5,
                },
            ],
        }

    async def test_non_object_body(self, client, admin_headers) -> None:
        response = await client.post(EMPLOYEES, json=[1, 2], headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == "Request body must be a JSON object"

    async def test_duplicate_email(self, client, admin_headers) -> None:
        await _create(client, admin_headers)

        response = await client.post(EMPLOYEES, json=employee_payload(), headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Employee with this email already exists"}

    async def test_manager_error_shape(self, client, admin_headers) -> None:
        response = await client.post(
            EMPLOYEES,
            json=employee_payload(jobInfo={**employee_payload()["jobInfo"], "manager": MISSING_ID}),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {
            "message": "Invalid manager assignment",
            "errors": [
                {"field": "jobInfo.manager", "message": "Specified manager does not exist", "value": MISSING_ID}
            ],
        }

    async def test_get_invalid_id(self, client, admin_headers) -> None:
        response = await client.get(f"{EMPLOYEES}/not-a-uuid", headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid employee ID format"}

    async def test_get_missing(self, client, admin_headers) -> None:
        response = await client.get(f"{EMPLOYEES}/{MISSING_ID}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "Employee not found"}

    async def test_stats_route_not_captured_by_id(self, client, admin_headers) -> None:
        await _create(client, admin_headers)

        response = await client.get(f"{EMPLOYEES}/stats", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["overview"]["totalEmployees"] == 1
        assert data["departmentStats"] == [{"department": "Engineering", "count": 1}]
        assert data["employmentTypeStats"] == [{"employmentType": "full-time", "count": 1}]

    async def test_update_and_fetch(self, client, admin_headers) -> None:
        created = await _create(client, admin_headers)

        response = await client.put(
            f"{EMPLOYEES}/{created['id']}", json={"jobInfo": {"title": "Principal"}}, headers=admin_headers
        )

        assert response.status_code == 200
        fetched = await client.get(f"{EMPLOYEES}/{created['id']}", headers=admin_headers)
        assert fetched.json()["jobInfo"]["title"] == "Principal"
        assert fetched.json()["personalInfo"] == created["personalInfo"]

    async def test_cyclic_update_rejected(self, client, admin_headers) -> None:
        a = await _create(client, admin_headers)
        body = employee_payload()
        body["personalInfo"]["email"] = "bob@acme.io"
        body["jobInfo"]["manager"] = a["id"]
        b = (await client.post(EMPLOYEES, json=body, headers=admin_headers)).json()

        response = await client.put(
            f"{EMPLOYEES}/{a['id']}", json={"jobInfo": {"manager": b["id"]}}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"] == (
            "This assignment would create a circular management hierarchy"
        )

    async def test_delete_flow(self, client, admin_headers) -> None:
        manager = await _create(client, admin_headers)
        body = employee_payload()
        body["personalInfo"]["email"] = "report@acme.io"
        body["jobInfo"]["manager"] = manager["id"]
        report = (await client.post(EMPLOYEES, json=body, headers=admin_headers)).json()

        refused = await client.delete(f"{EMPLOYEES}/{manager['id']}", headers=admin_headers)
        assert refused.status_code == 400
        assert refused.json() == {
            "message": "Cannot delete employee who is managing other employees",
            "managedEmployees": 1,
        }

        deleted = await client.delete(f"{EMPLOYEES}/{report['id']}", headers=admin_headers)
        assert deleted.status_code == 200
        assert deleted.json() == {
            "message": "Employee deleted successfully",
            "deletedEmployee": {
                "id": report["id"],
                "employeeId": report["employeeId"],
                "fullName": report["fullName"],
            },
        }

        gone = await client.get(f"{EMPLOYEES}/{report['id']}", headers=admin_headers)
        assert gone.status_code == 404


class TestListQuery:
    """Tests for list query parameters."""

    async def test_pagination_block(self, client, admin_headers) -> None:
        await _create(client, admin_headers)

        response = await client.get(EMPLOYEES, params={"limit": 5}, headers=admin_headers)

        assert response.json()["pagination"] == {
            "currentPage": 1,
            "totalPages": 1,
            "totalEmployees": 1,
            "hasNextPage": False,
            "hasPrevPage": False,
        }

    @pytest.mark.parametrize(
        ("params", "field"),
        [
            ({"page": 0}, "page"),
            ({"limit": 0}, "limit"),
            ({"department": "Space"}, "department"),
            ({"status": "retired"}, "status"),
            ({"sortBy": "salary"}, "sortBy"),
            ({"sortOrder": "sideways"}, "sortOrder"),
            ({"search": "x" * 101}, "search"),
        ],
    )
    async def test_invalid_query_reported_as_field_error(self, client, admin_headers, params, field) -> None:
        response = await client.get(EMPLOYEES, params=params, headers=admin_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation failed"
        assert [error["field"] for error in data["errors"]] == [field]

    async def test_large_limit_capped(self, client, admin_headers) -> None:
        response = await client.get(EMPLOYEES, params={"limit": 500}, headers=admin_headers)

        assert response.status_code == 200


class TestAuditRoute:
    """Tests for the audit listing route."""

    async def test_mutations_listed(self, client, admin_headers) -> None:
        created = await _create(client, admin_headers)
        await client.put(f"{EMPLOYEES}/{created['id']}", json={"status": "inactive"}, headers=admin_headers)

        response = await client.get("/api/v1/audit", params={"resourceId": created["id"]}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["action"] for item in data["items"]] == ["UPDATE_EMPLOYEE", "CREATE_EMPLOYEE"]
        assert data["items"][0]["actorUsername"] == "root-admin"
        assert data["items"][0]["ipAddress"] == "127.0.0.1"

    async def test_requires_admin(self, client) -> None:
        response = await client.get("/api/v1/audit")

        assert response.status_code == 401
