"""Role to capability mapping consulted by the authorization gate."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

ROLE_USER = "user"
ROLE_ADMIN = "admin"

CAP_GET_USERS = "getUsers"
CAP_MANAGE_USERS = "manageUsers"
CAP_MANAGE_CATEGORIES = "manageCategories"
CAP_MANAGE_PRODUCTS = "manageProducts"

# Order matters: the first entry is the default role for new users.
DEFAULT_ROLE_CAPABILITIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (ROLE_USER, ()),
    (ROLE_ADMIN, (CAP_GET_USERS, CAP_MANAGE_USERS, CAP_MANAGE_CATEGORIES, CAP_MANAGE_PRODUCTS)),
)


class UnknownRoleError(LookupError):
    """Raised when a role name is not part of the configured enumeration."""

    def __init__(self, role: str):
        super().__init__(f"Unknown role: {role!r}")
        self.role = role


@dataclass(frozen=True)
class RoleTable:
    """Immutable, ordered mapping of role name to its capability set."""

    roles: tuple[str, ...]
    rights: Mapping[str, frozenset[str]]

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Iterable[str]]]) -> "RoleTable":
        ordered: dict[str, frozenset[str]] = {}
        for name, capabilities in pairs:
            if name in ordered:
                raise ValueError(f"Role {name!r} configured twice")
            ordered[name] = frozenset(capabilities)
        return cls(roles=tuple(ordered), rights=MappingProxyType(ordered))

    def capabilities_of(self, role: str) -> frozenset[str]:
        try:
            return self.rights[role]
        except KeyError:
            raise UnknownRoleError(role) from None

    def is_known(self, role: str | None) -> bool:
        return role in self.rights

    def allows(self, role: str, capability: str) -> bool:
        return capability in self.capabilities_of(role)


def load_role_table() -> RoleTable:
    """Build the process-wide role table. Call once at startup and inject the result."""
    return RoleTable.from_pairs(DEFAULT_ROLE_CAPABILITIES)
