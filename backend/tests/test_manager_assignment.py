"""Manager assignment validation tests."""

from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from staff_api.exceptions import (
    CyclicHierarchyError,
    InvalidManagerAssignmentError,
    ManagerInactiveError,
    ManagerNotFoundError,
    SelfReferenceError,
)
from staff_api.services.manager_assignment import ManagerAssignmentValidator


class FakeEmployeeRepository:
    """In-memory stand-in exposing the two lookups the validator uses."""

    def __init__(self) -> None:
        self.rows: dict[UUID, SimpleNamespace] = {}
        self.manager_lookups = 0

    def add(self, status: str = "active", manager_id: UUID | None = None) -> UUID:
        employee_id = uuid4()
        self.rows[employee_id] = SimpleNamespace(id=employee_id, status=status, manager_id=manager_id)
        return employee_id

    async def get_by_id(self, id: UUID) -> SimpleNamespace | None:
        return self.rows.get(id)

    async def get_manager_id(self, id: UUID) -> UUID | None:
        self.manager_lookups += 1
        row = self.rows.get(id)
        return row.manager_id if row else None


@pytest.fixture
def repo() -> FakeEmployeeRepository:
    return FakeEmployeeRepository()


@pytest.fixture
def validator(repo: FakeEmployeeRepository) -> ManagerAssignmentValidator:
    return ManagerAssignmentValidator(repo)


class TestManagerAssignmentValidator:
    """Tests for manager assignment rules."""

    async def test_missing_manager(self, validator) -> None:
        with pytest.raises(ManagerNotFoundError) as exc_info:
            await validator.validate(None, uuid4())
        assert exc_info.value.reason == "Specified manager does not exist"

    async def test_inactive_manager(self, validator, repo) -> None:
        manager = repo.add(status="terminated")

        with pytest.raises(ManagerInactiveError) as exc_info:
            await validator.validate(None, manager)
        assert exc_info.value.manager_id == manager

    async def test_existence_checked_before_self_reference(self, validator, repo) -> None:
        ghost = uuid4()
        with pytest.raises(ManagerNotFoundError):
            await validator.validate(ghost, ghost)

    async def test_self_reference(self, validator, repo) -> None:
        employee = repo.add()

        with pytest.raises(SelfReferenceError) as exc_info:
            await validator.validate(employee, employee)
        assert exc_info.value.reason == "Employee cannot be their own manager"

    async def test_new_employee_skips_cycle_walk(self, validator, repo) -> None:
        manager = repo.add()

        await validator.validate(None, manager)

        assert repo.manager_lookups == 0

    async def test_direct_cycle(self, validator, repo) -> None:
        # A reports to nobody, B reports to A; A -> B would close a loop
        a = repo.add()
        b = repo.add(manager_id=a)

        with pytest.raises(CyclicHierarchyError) as exc_info:
            await validator.validate(a, b)
        assert exc_info.value.reason == "This assignment would create a circular management hierarchy"

    async def test_deep_cycle(self, validator, repo) -> None:
        top = repo.add()
        current = top
        for _ in range(50):
            current = repo.add(manager_id=current)

        with pytest.raises(CyclicHierarchyError):
            await validator.validate(top, current)

    async def test_valid_chain(self, validator, repo) -> None:
        ceo = repo.add()
        cto = repo.add(manager_id=ceo)
        engineer = repo.add(manager_id=cto)
        newcomer = repo.add()

        await validator.validate(newcomer, engineer)
        await validator.validate(engineer, ceo)

    async def test_dangling_reference_is_a_root(self, validator, repo) -> None:
        manager = repo.add(manager_id=uuid4())
        employee = repo.add()

        await validator.validate(employee, manager)

    async def test_corrupt_loop_terminates(self, validator, repo) -> None:
        # X and Y already point at each other; walking from X never meets Z
        x = repo.add()
        y = repo.add(manager_id=x)
        repo.rows[x].manager_id = y
        z = repo.add()

        with pytest.raises(CyclicHierarchyError):
            await validator.validate(z, x)

    async def test_all_rejections_share_a_base(self, validator) -> None:
        with pytest.raises(InvalidManagerAssignmentError):
            await validator.validate(None, uuid4())
