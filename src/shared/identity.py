# src/shared/identity.py
"""
Caller identity.
The gateway authenticates the bearer token and forwards the result as
X-Auth-User / X-Auth-Role; downstream services trust these headers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Header

from src.common.constants import AUTH_ROLE_HEADER, AUTH_USER_HEADER
from src.common.exceptions import AuthenticationError


@dataclass(frozen=True)
class Identity:
    username: str
    roles: tuple[str, ...] = field(default_factory=tuple)

    def as_headers(self) -> dict[str, str]:
        """Headers to forward on peer calls made on behalf of this caller."""
        return {
            AUTH_USER_HEADER: self.username,
            AUTH_ROLE_HEADER: ",".join(self.roles),
        }

    @classmethod
    def from_headers(cls, username: str | None, roles: str | None) -> "Identity | None":
        if not username or not username.strip():
            return None
        parsed = tuple(r.strip() for r in (roles or "").split(",") if r.strip())
        return cls(username=username.strip(), roles=parsed)


async def get_identity(
    x_auth_user: str | None = Header(default=None, alias=AUTH_USER_HEADER),
    x_auth_role: str | None = Header(default=None, alias=AUTH_ROLE_HEADER),
) -> Identity:
    """FastAPI dependency for endpoints that need a caller, 401 without one."""
    identity = Identity.from_headers(x_auth_user, x_auth_role)
    if identity is None:
        raise AuthenticationError("Authentication required")
    return identity
