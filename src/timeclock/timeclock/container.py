from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .accounting.mysql_balance_repository import MySQLBalanceRepository
from .accounting.report_service import TeamReportService
from .accounting.repository import BalanceRepository
from .accounting.service import BalanceService
from .adjustments.mysql_adjustment_repository import MySQLAdjustmentRepository
from .adjustments.repository import AdjustmentRepository
from .adjustments.service import AdjustmentService
from .common.datetime_utils import load_timezone
from .core.constants import DEFAULT_EXPECTED_DAILY_MINUTES, DEFAULT_PROGRESS_CAP_PERCENT, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchRepository
from .punches.service import PunchService
from .users.authorization import RoleHierarchyAuthorization
from .users.department_repository import DepartmentRepository
from .users.mysql_department_repository import MySQLDepartmentRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.policy import DepartmentExpectedMinutesPolicy
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    tz: tzinfo
    progress_cap: int

    users_repo: UserRepository
    departments_repo: DepartmentRepository
    punches_repo: PunchRepository
    balances_repo: BalanceRepository
    adjustments_repo: AdjustmentRepository

    auth_service: AuthService
    punch_service: PunchService
    balance_service: BalanceService
    team_report_service: TeamReportService
    adjustment_service: AdjustmentService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    users_repo: UserRepository,
    departments_repo: DepartmentRepository,
    punches_repo: PunchRepository,
    balances_repo: BalanceRepository,
    adjustments_repo: AdjustmentRepository,
    timezone_name: str = DEFAULT_TIMEZONE,
    default_expected_minutes: int = DEFAULT_EXPECTED_DAILY_MINUTES,
    progress_cap: int = DEFAULT_PROGRESS_CAP_PERCENT,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""
    tz = load_timezone(timezone_name)
    policy = DepartmentExpectedMinutesPolicy(users_repo, departments_repo, default_minutes=default_expected_minutes)
    authorization = RoleHierarchyAuthorization(users_repo)

    return Container(
        tz=tz,
        progress_cap=int(progress_cap),
        users_repo=users_repo,
        departments_repo=departments_repo,
        punches_repo=punches_repo,
        balances_repo=balances_repo,
        adjustments_repo=adjustments_repo,
        auth_service=AuthService(users_repo),
        punch_service=PunchService(punches_repo, users_repo, tz=tz),
        balance_service=BalanceService(punches_repo, balances_repo, policy, tz=tz),
        team_report_service=TeamReportService(punches_repo, users_repo, departments_repo, policy, tz=tz),
        adjustment_service=AdjustmentService(adjustments_repo, punches_repo, authorization, tz=tz),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    timezone_name: str = DEFAULT_TIMEZONE,
    default_expected_minutes: int = DEFAULT_EXPECTED_DAILY_MINUTES,
    progress_cap: int = DEFAULT_PROGRESS_CAP_PERCENT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        punches_repo=MySQLPunchRepository(conn),
        balances_repo=MySQLBalanceRepository(conn),
        adjustments_repo=MySQLAdjustmentRepository(conn),
        timezone_name=timezone_name,
        default_expected_minutes=default_expected_minutes,
        progress_cap=progress_cap,
        conn=conn,
    )
