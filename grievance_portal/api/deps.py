from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.config import settings
from grievance_portal.core.security import decode_access_token
from grievance_portal.crud.user import get_user
from grievance_portal.db.session import get_db
from grievance_portal.models import User, UserRole
from grievance_portal.services import identity

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


def credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    The user behind the bearer token, None for anonymous requests.
    A token that is present but invalid is rejected.
    """
    if not token:
        return None
    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception()
    user = await get_user(db, id=user_id)
    if user is None:
        raise credentials_exception()
    return user


def allow_anonymous() -> bool:
    return settings.ALLOW_DEFAULT_IDENTITIES


async def get_acting_officer(
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    The official accepting or working on a grievance.
    """
    if current_user is not None:
        if current_user.role != UserRole.OFFICIAL:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only officials can accept grievances",
            )
        return current_user
    if not allow_anonymous():
        raise credentials_exception("Not authenticated")
    return await identity.get_default_officer(db)


async def get_acting_verifier(
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    The community member verifying a resolution.
    """
    if current_user is not None:
        return current_user
    if not allow_anonymous():
        raise credentials_exception("Not authenticated")
    return await identity.get_default_verifier(db)
