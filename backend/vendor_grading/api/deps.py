from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from vendor_grading.config import get_settings
from vendor_grading.db.session import get_db
from vendor_grading.core.roles import RoleResolver
from vendor_grading.core.security import decode_access_token

security = HTTPBearer(auto_error=False)


def get_role_resolver() -> RoleResolver:
    settings = get_settings()
    return RoleResolver(settings.admin_email_list, settings.due_diligence_email_list)


async def get_current_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    sub = payload.get("sub")
    if not sub or "@" not in sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return sub.strip().lower()


async def require_admin(
    email: str = Depends(get_current_email),
    roles: RoleResolver = Depends(get_role_resolver),
) -> str:
    if not roles.is_admin(email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return email


async def require_reviewer(
    email: str = Depends(get_current_email),
    db: AsyncSession = Depends(get_db),
    roles: RoleResolver = Depends(get_role_resolver),
) -> str:
    """Admins pass; anyone else needs at least one reviewer assignment."""
    if roles.is_admin(email):
        return email
    if not await roles.is_reviewer(db, email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Reviewer access required")
    return email


async def require_due_diligence(
    email: str = Depends(get_current_email),
    roles: RoleResolver = Depends(get_role_resolver),
) -> str:
    """Only configured verifiers; admins assign verifications but do not perform them."""
    if not roles.is_due_diligence(email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Due diligence access required")
    return email
