"""Account roles and the RoleGate policy used to authorize routes."""

from dataclasses import dataclass
from enum import Enum


class AccountRole(str, Enum):
    """Roles within the association."""

    PRESIDENT = "PRESIDENT"
    VICE_PRESIDENT = "VICE_PRESIDENT"
    SECRETARY = "SECRETARY"
    TREASURER = "TREASURER"
    AMBASSADOR = "AMBASSADOR"
    MEMBER = "MEMBER"
    ALUMNI = "ALUMNI"
    GUEST = "GUEST"


# Elevated roles granted administrative visibility.
OFFICE_ROLES: frozenset[AccountRole] = frozenset(
    {
        AccountRole.PRESIDENT,
        AccountRole.VICE_PRESIDENT,
        AccountRole.SECRETARY,
        AccountRole.TREASURER,
    }
)

FORBIDDEN_ROLE_MESSAGE = (
    "Forbidden, you do not have the required role to access this resource."
)


class GateMode(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def parse_role(value: object) -> AccountRole | None:
    """Return the AccountRole for value, or None when it is missing or unknown."""
    if isinstance(value, AccountRole):
        return value
    if not isinstance(value, str):
        return None
    try:
        return AccountRole(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class RoleGate:
    """
    Role membership policy.

    ALLOW admits only roles in `roles`; DENY admits every known role except those
    in `roles`. A missing or unknown role is always rejected.
    """

    mode: GateMode
    roles: frozenset[AccountRole]

    @classmethod
    def whitelist(cls, *roles: AccountRole) -> "RoleGate":
        return cls(mode=GateMode.ALLOW, roles=frozenset(roles))

    @classmethod
    def blacklist(cls, *roles: AccountRole) -> "RoleGate":
        return cls(mode=GateMode.DENY, roles=frozenset(roles))

    def allows(self, role: object) -> bool:
        parsed = parse_role(role)
        if parsed is None:
            return False
        if self.mode is GateMode.ALLOW:
            return parsed in self.roles
        return parsed not in self.roles


OFFICE_GATE = RoleGate.whitelist(*OFFICE_ROLES)
