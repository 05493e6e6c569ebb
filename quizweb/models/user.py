from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

log = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "ROLE_ADMIN"
    USER = "ROLE_USER"

    @classmethod
    def parse(cls, raw: str) -> "Role | None":
        try:
            return cls(raw)
        except ValueError:
            return None


def parse_roles(raw_roles) -> frozenset[Role]:
    """Turn the backend's free-form role strings into a closed set of Role values."""
    roles = set()
    for raw in raw_roles or []:
        role = Role.parse(raw)
        if role is None:
            log.debug("ignoring unknown role %r", raw)
            continue
        roles.add(role)
    return frozenset(roles)


@dataclass(frozen=True)
class User:
    id: int
    email: str
    roles: frozenset[Role] = field(default_factory=frozenset)
    first_name: str | None = None
    last_name: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            email=data["email"],
            roles=parse_roles(data.get("roles")),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
        )

    def has_role(self, role: Role | str) -> bool:
        if not isinstance(role, Role):
            role = Role.parse(role)
        return role is not None and role in self.roles

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.email

    def __repr__(self):
        return f"<User {self.email}>"
