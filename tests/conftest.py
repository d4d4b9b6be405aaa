from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.timeclock.timeclock.core.enums import Role
from tests.fakes import (
    FakeAdjustmentsRepo,
    FakeBalancesRepo,
    FakeDepartmentsRepo,
    FakePunchesRepo,
    FakeUsersRepo,
    make_department,
    make_user,
)

EMPLOYEE_ID = 1
MANAGER_ID = 2
HR_ID = 3
OTHER_EMPLOYEE_ID = 4


@pytest.fixture
def tz():
    return ZoneInfo("America/Sao_Paulo")


@pytest.fixture
def fixed_now():
    # 2024-03-01 12:00 in Sao Paulo (UTC-3)
    return datetime(2024, 3, 1, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def users_repo():
    return FakeUsersRepo(
        [
            make_user(EMPLOYEE_ID, dept_id=10, manager_id=MANAGER_ID),
            make_user(MANAGER_ID, role=Role.MANAGER, dept_id=10),
            make_user(HR_ID, role=Role.HR, dept_id=20),
            make_user(OTHER_EMPLOYEE_ID, dept_id=20),
        ]
    )


@pytest.fixture
def departments_repo():
    return FakeDepartmentsRepo(
        [
            make_department(10, "Operations", 480),
            make_department(20, "People", 360),
        ]
    )


@pytest.fixture
def punches_repo():
    return FakePunchesRepo()


@pytest.fixture
def balances_repo():
    return FakeBalancesRepo()


@pytest.fixture
def adjustments_repo():
    return FakeAdjustmentsRepo()
