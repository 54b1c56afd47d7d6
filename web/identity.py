"""
Request Identity - Acting user and role for each API call

Authentication happens upstream; the gateway forwards the resolved user
in two headers:
- X-User-Id: integer user id
- X-User-Role: one of the UserRole values

Routes take the identity as a dependency and gate on its role.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException

from core.models import UserRole


USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


@dataclass(frozen=True)
class Identity:
    """The acting user of a request."""

    user_id: Optional[int]
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# =============================================================================
# Dependencies
# =============================================================================


def get_identity(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Identity:
    """
    Dependency that resolves the acting user from request headers.

    Raises HTTPException(401) if the role header is missing or unknown,
    the user id is not an integer, or a client omits the user id.
    """
    role = UserRole.from_string(x_user_role) if x_user_role else None
    if role is None:
        raise HTTPException(status_code=401, detail="A valid X-User-Role header is required")

    user_id = None
    if x_user_id:
        try:
            user_id = int(x_user_id)
        except ValueError:
            raise HTTPException(status_code=401, detail="X-User-Id must be an integer") from None

    if role == UserRole.CLIENT and user_id is None:
        raise HTTPException(status_code=401, detail="Clients must send an X-User-Id header")

    return Identity(user_id=user_id, role=role)


def require_roles(identity: Identity, *roles: UserRole) -> Identity:
    """
    Reject the request unless the identity holds one of the roles.

    Raises HTTPException(403) otherwise.
    """
    if identity.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise HTTPException(
            status_code=403,
            detail=f"Role '{identity.role.value}' cannot perform this action (requires: {allowed})",
        )
    return identity


def role_guard(*roles: UserRole) -> Callable[..., Identity]:
    """Build a dependency that requires one of the roles."""

    def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        return require_roles(identity, *roles)

    return dependency
