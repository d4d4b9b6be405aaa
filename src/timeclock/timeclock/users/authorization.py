from __future__ import annotations

from typing import Protocol

from ..core.enums import Role
from .repository import UserRepository


class ManagementAuthorization(Protocol):
    """Collaborator deciding whether a reviewer may decide on a requester's requests."""

    def is_manager_of(self, reviewer_id: int, requester_id: int) -> bool:
        raise NotImplementedError


class RoleHierarchyAuthorization(ManagementAuthorization):
    """Direct managers may review their reports; HR and above may review anyone.

    Nobody reviews their own requests.
    """

    def __init__(self, users: UserRepository, *, global_reviewer_role: Role = Role.HR):
        self._users = users
        self._global_reviewer_role = global_reviewer_role

    def is_manager_of(self, reviewer_id: int, requester_id: int) -> bool:
        if int(reviewer_id) == int(requester_id):
            return False

        reviewer = self._users.get_by_id(int(reviewer_id))
        if not reviewer or not reviewer.is_active:
            return False
        if reviewer.role.at_least(self._global_reviewer_role):
            return True
        if not reviewer.role.at_least(Role.MANAGER):
            return False

        requester = self._users.get_by_id(int(requester_id))
        return bool(requester and requester.manager_id == reviewer.user_id)
