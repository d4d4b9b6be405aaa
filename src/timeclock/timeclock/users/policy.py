from __future__ import annotations

from typing import Protocol

from ..core.constants import DEFAULT_EXPECTED_DAILY_MINUTES
from .department_repository import DepartmentRepository
from .repository import UserRepository


class ExpectedMinutesPolicy(Protocol):
    def get_expected_daily_minutes(self, user_id: int) -> int:
        raise NotImplementedError


class DepartmentExpectedMinutesPolicy(ExpectedMinutesPolicy):
    """Expected minutes per worked day, taken from the user's department.

    Falls back to the injected default when the user has no department or the
    department leaves the value empty.
    """

    def __init__(
        self,
        users: UserRepository,
        departments: DepartmentRepository,
        *,
        default_minutes: int = DEFAULT_EXPECTED_DAILY_MINUTES,
    ):
        self._users = users
        self._departments = departments
        self._default = int(default_minutes)

    def get_expected_daily_minutes(self, user_id: int) -> int:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.dept_id:
            return self._default

        dept = self._departments.get_by_id(int(user.dept_id))
        if not dept or dept.expected_daily_minutes is None:
            return self._default
        return int(dept.expected_daily_minutes)
