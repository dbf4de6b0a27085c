"""Manager assignment validation.

Keeps the reporting graph well formed: every manager reference points to an
existing active employee, nobody manages themselves, and no chain of
manager links loops back on itself.
"""

import logging
from uuid import UUID

from staff_api.exceptions import (
    CyclicHierarchyError,
    ManagerInactiveError,
    ManagerNotFoundError,
    SelfReferenceError,
)
from staff_api.models.domain.employee import EmployeeStatus
from staff_api.repositories.employee_repository import EmployeeRepository

logger = logging.getLogger(__name__)


class ManagerAssignmentValidator:
    """Read-only checks for a proposed ``employee -> manager`` link."""

    def __init__(self, employee_repo: EmployeeRepository) -> None:
        self.employee_repo = employee_repo

    async def validate(self, employee_id: UUID | None, manager_id: UUID) -> None:
        """Validate assigning ``manager_id`` as the manager of ``employee_id``.

        Checks run in order and stop at the first failure.

        Args:
            employee_id: Employee being updated, or None for a new employee
            manager_id: Proposed manager

        Raises:
            ManagerNotFoundError: If the manager does not exist
            ManagerInactiveError: If the manager is not active
            SelfReferenceError: If the employee would manage themselves
            CyclicHierarchyError: If the employee is reachable from the manager
        """
        manager = await self.employee_repo.get_by_id(manager_id)
        if manager is None:
            raise ManagerNotFoundError(manager_id)

        if manager.status != EmployeeStatus.ACTIVE:
            raise ManagerInactiveError(manager_id)

        # A new employee has no reports yet, so it cannot close a loop
        if employee_id is None:
            return

        if employee_id == manager_id:
            raise SelfReferenceError(manager_id)

        if await self.creates_cycle(employee_id, manager_id):
            logger.info("Rejected cyclic manager assignment %s -> %s", employee_id, manager_id)
            raise CyclicHierarchyError(manager_id)

    async def creates_cycle(self, employee_id: UUID, manager_id: UUID) -> bool:
        """Walk up the chain from ``manager_id`` looking for ``employee_id``.

        The walk stops at a root (no manager, or a reference to a record that
        no longer exists). Revisiting any node means the stored chain already
        loops; that is treated as a cycle so corrupt data cannot hang the walk.
        """
        visited: set[UUID] = set()
        current: UUID | None = manager_id

        while current is not None:
            if current == employee_id or current in visited:
                return True
            visited.add(current)
            current = await self.employee_repo.get_manager_id(current)

        return False
