"""Role → permission → capability resolution.

Role names are only looked at here. Everything downstream asks about
``Permission`` (what an actor may do in general) or ``Capability`` (what an
actor may do to one particular form).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from ..core.enums import Capability, FormKind, Permission, Role
from ..users.model import Employee

_EVERYONE = frozenset({Permission.FILE_OWN_FORMS, Permission.VIEW_OWN_RECORDS})

_HR_MANAGER = _EVERYONE | frozenset(
    {
        Permission.ENCODE_DTR,
        Permission.VIEW_ALL_DTR,
        Permission.REVIEW_FORMS,
        Permission.FINALIZE_FORMS,
        Permission.VIEW_ALL_FORMS,
        Permission.MANAGE_OFFICE_FORMS,
        Permission.APPROVE_OFFICE_FORMS,
    }
)

ROLE_PERMISSIONS: dict[Role, FrozenSet[Permission]] = {
    Role.HEAD_OF_OFFICE: _HR_MANAGER,
    Role.ADMIN_STAFF: _HR_MANAGER,
    Role.DIVISION_CHIEF: _EVERYONE
    | frozenset(
        {
            Permission.VIEW_DIVISION_DTR,
            Permission.REVIEW_FORMS,
            Permission.VIEW_DIVISION_FORMS,
        }
    ),
    Role.PROJECT_STAFF: _EVERYONE,
}


@dataclass(frozen=True)
class Actor:
    """The current user, with permissions resolved once."""

    actor_id: str
    role: Role
    division: Optional[str]
    permissions: FrozenSet[Permission]

    def has(self, permission: Permission) -> bool:
        return permission in self.permissions


def resolve_actor(employee: Employee) -> Actor:
    return Actor(
        actor_id=employee.employee_id,
        role=employee.role,
        division=employee.division,
        permissions=ROLE_PERMISSIONS.get(employee.role, frozenset()),
    )


def _same_division(actor: Actor, division: Optional[str]) -> bool:
    return actor.division is not None and actor.division == division


def resolve_form_capabilities(
    actor: Actor,
    *,
    kind: FormKind,
    owner_id: str,
    owner_division: Optional[str],
) -> FrozenSet[Capability]:
    """Capabilities ``actor`` holds on one form.

    Office forms belong to the office as a whole, so whoever manages them acts
    as owner.
    """
    caps: set[Capability] = set()

    if kind == FormKind.DPCR:
        if actor.has(Permission.MANAGE_OFFICE_FORMS):
            caps.add(Capability.OWNER)
        if actor.has(Permission.APPROVE_OFFICE_FORMS):
            caps.add(Capability.FINALIZER)
        return frozenset(caps)

    if actor.actor_id == owner_id:
        caps.add(Capability.OWNER)
    if actor.has(Permission.REVIEW_FORMS) and (
        actor.has(Permission.VIEW_ALL_FORMS) or _same_division(actor, owner_division)
    ):
        caps.add(Capability.REVIEWER)
    if actor.has(Permission.FINALIZE_FORMS):
        caps.add(Capability.FINALIZER)
    return frozenset(caps)


def can_view_dtr(actor: Actor, *, employee_id: str, employee_division: Optional[str]) -> bool:
    if actor.actor_id == employee_id:
        return True
    if actor.has(Permission.VIEW_ALL_DTR):
        return True
    return actor.has(Permission.VIEW_DIVISION_DTR) and _same_division(actor, employee_division)


def can_view_form(
    actor: Actor,
    *,
    kind: FormKind,
    owner_id: str,
    owner_division: Optional[str],
) -> bool:
    if kind == FormKind.DPCR:
        return actor.has(Permission.MANAGE_OFFICE_FORMS) or actor.has(Permission.APPROVE_OFFICE_FORMS)
    if actor.actor_id == owner_id:
        return True
    if actor.has(Permission.VIEW_ALL_FORMS):
        return True
    return actor.has(Permission.VIEW_DIVISION_FORMS) and _same_division(actor, owner_division)
