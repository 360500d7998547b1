"""HTTP Basic Auth for the partner portal API.

Two shared passwords: ADMIN_WEB_PASSWORD grants the admin view,
PARTNER_PORTAL_PASSWORD grants a partner view scoped to the partner
whose token identifier is the Basic Auth username.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel

from src.config import settings
from src.models.enums import UserRole

security = HTTPBasic()


class Viewer(BaseModel):
    """The authenticated caller, passed explicitly to the engines."""

    username: str
    role: UserRole

    @property
    def is_privileged(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def partner_id(self) -> str | None:
        """Token identifier the viewer's deals are scoped to (None for admins)."""
        return None if self.is_privileged else self.username


def _matches(supplied: str, expected: str) -> bool:
    if not expected:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


async def get_viewer(
    credentials: HTTPBasicCredentials = Depends(security),  # noqa: B008
) -> Viewer:
    """FastAPI dependency — resolve HTTP Basic credentials to a Viewer.

    Raises 503 when no password is configured, 401 on a mismatch.
    """
    admin_password = settings.security.admin_web_password
    partner_password = settings.security.partner_portal_password
    if not admin_password and not partner_password:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Portal passwords not configured",
        )

    if _matches(credentials.password, admin_password):
        return Viewer(username=credentials.username, role=UserRole.ADMIN)

    if credentials.username and _matches(credentials.password, partner_password):
        return Viewer(username=credentials.username, role=UserRole.PARTNER)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Basic"},
    )


async def require_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:  # noqa: B008
    if not viewer.is_privileged:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return viewer
