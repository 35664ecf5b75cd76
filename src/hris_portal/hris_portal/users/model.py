from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as seen by the HR engines.

    Plain data only; the directory behind it belongs to the auth/profile
    collaborator.
    """

    employee_id: str
    full_name: str
    role: Role
    division: Optional[str]
    position: Optional[str] = None
    employee_number: Optional[str] = None
    is_active: bool = True
