"""Access grants attached to items."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PrincipalType(str, Enum):
    USER = "user"
    TEAM = "team"
    LINK = "link"


class Role(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


@dataclass(slots=True, frozen=True)
class Permission:
    """A single grant: who (principal) may do what (role) on an item."""

    principal_id: str
    principal_type: PrincipalType
    role: Role

    @property
    def key(self) -> tuple[PrincipalType, str]:
        """Identity of the grant; an item holds at most one grant per key."""
        return (self.principal_type, self.principal_id)
