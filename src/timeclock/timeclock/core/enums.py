from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles, ordered by capability level (employee < manager < hr < admin)."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    ADMIN = "admin"

    @property
    def level(self) -> int:
        return _ROLE_LEVELS[self]

    def at_least(self, other: "Role") -> bool:
        return self.level >= other.level


_ROLE_LEVELS = {
    Role.EMPLOYEE: 1,
    Role.MANAGER: 2,
    Role.HR: 3,
    Role.ADMIN: 4,
}


class PunchKind(str, Enum):
    IN = "in"
    OUT = "out"

    @property
    def opposite(self) -> "PunchKind":
        return PunchKind.OUT if self is PunchKind.IN else PunchKind.IN


class CaptureMethod(str, Enum):
    """How a punch was captured. Stored as a tag only."""

    APP = "app"
    BIOMETRIC = "biometric"
    QR = "qr"
    MANUAL = "manual"


class AdjustmentStatus(str, Enum):
    """Approval workflow state: PENDING -> APPROVED | REJECTED."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not AdjustmentStatus.PENDING


class WorkStatus(str, Enum):
    WORKING = "working"
    OFF_DUTY = "off_duty"
