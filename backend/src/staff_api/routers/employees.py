"""Employee management router (admin only)."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Body, Depends, Query, Request, status

from staff_api.constants.validation import DEFAULT_EMPLOYEE_SORT_FIELD, DEFAULT_SORT_ORDER, MAX_SEARCH_LENGTH
from staff_api.dependencies import get_employee_service
from staff_api.models.domain.employee import Department, EmployeeStatus
from staff_api.models.domain.user import User
from staff_api.models.dto.employee import (
    EmployeeDeleteResponse,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeStatsResponse,
)
from staff_api.routers.admin_headers import admin_response_headers
from staff_api.security.auth import require_admin
from staff_api.security.rate_limit import ADMIN_OPERATION_LIMIT, get_actor_or_client_ip, limiter
from staff_api.services.audit_service import AuditContext
from staff_api.services.employee_service import EmployeeService

router = APIRouter(dependencies=[Depends(require_admin), Depends(admin_response_headers)])

SortField = Literal[
    "employeeId",
    "personalInfo.firstName",
    "personalInfo.lastName",
    "jobInfo.title",
    "jobInfo.department",
    "jobInfo.startDate",
    "createdAt",
]


@router.get("", response_model=EmployeeListResponse)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def list_employees(
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    department: Department | None = Query(None),
    status_filter: EmployeeStatus | None = Query(None, alias="status"),
    sort_by: SortField = Query(DEFAULT_EMPLOYEE_SORT_FIELD, alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(DEFAULT_SORT_ORDER, alias="sortOrder"),
    search: str | None = Query(None, max_length=MAX_SEARCH_LENGTH),
) -> EmployeeListResponse:
    """List employees with filtering, sorting and pagination. Limit is capped at 100."""
    return await service.list_employees(
        page=page,
        limit=limit,
        department=department.value if department else None,
        status=status_filter.value if status_filter else None,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        context=AuditContext.from_request(request, current_user),
    )


@router.get("/stats", response_model=EmployeeStatsResponse)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def get_employee_stats(
    request: Request,
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeStatsResponse:
    """Headcounts by status, department and employment type, plus recent hires."""
    return await service.get_statistics(AuditContext.from_request(request, current_user))


@router.get("/{employee_id}", response_model=EmployeeResponse)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def get_employee(
    request: Request,
    employee_id: str,
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Get one employee with manager and acting users populated."""
    return await service.get_employee(employee_id, AuditContext.from_request(request, current_user))


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def create_employee(
    request: Request,
    body: Annotated[Any, Body()],
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Create an employee. An ``EMP####`` id is issued when none is usable."""
    return await service.create_employee(body, AuditContext.from_request(request, current_user))


@router.put("/{employee_id}", response_model=EmployeeResponse)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def update_employee(
    request: Request,
    employee_id: str,
    body: Annotated[Any, Body()],
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeResponse:
    """Partially update an employee. Only keys present in the body change."""
    return await service.update_employee(
        employee_id, body, AuditContext.from_request(request, current_user)
    )


@router.delete("/{employee_id}", response_model=EmployeeDeleteResponse)
@limiter.limit(ADMIN_OPERATION_LIMIT, key_func=get_actor_or_client_ip)
async def delete_employee(
    request: Request,
    employee_id: str,
    current_user: Annotated[User, Depends(require_admin)],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
) -> EmployeeDeleteResponse:
    """Delete an employee. Refused while anyone reports to them."""
    return await service.delete_employee(employee_id, AuditContext.from_request(request, current_user))
