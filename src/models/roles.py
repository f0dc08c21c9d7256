"""
System roles and the caller context attached to each request.
"""

from dataclasses import dataclass
from enum import Enum


class SystemRole(str, Enum):
    """Privilege tiers, lowest first."""

    RESPONSIBLE = "RESPONSIBLE"
    DIRECTIVE = "DIRECTIVE"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def satisfies(self, required: "SystemRole") -> bool:
        """True if this role is at least as privileged as `required`."""
        return self.rank >= required.rank


_ROLE_RANK = {
    SystemRole.RESPONSIBLE: 1,
    SystemRole.DIRECTIVE: 2,
}


@dataclass(frozen=True)
class CallerContext:
    """Authenticated caller: their role and the database instance in use."""

    role: SystemRole
    instance: str

    def authorize(self, required: SystemRole) -> bool:
        return self.role.satisfies(required)
