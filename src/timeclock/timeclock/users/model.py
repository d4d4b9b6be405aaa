from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee account.

    Plain data object (no DB access code).
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    dept_id: Optional[int]
    manager_id: Optional[int]
    is_active: bool = True
