"""
Stand-in identities used when ALLOW_DEFAULT_IDENTITIES is enabled.

The first portal release had no login: acceptances were attributed to a
shared "panchayat-officer" account, verifications to a shared
"community-verifier" account, and citizens were identified by the contact
details they submitted with their grievance. Those accounts are created on
first use.
"""
import secrets
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.logging import get_logger
from grievance_portal.crud.user import create_user, get_user_by_username
from grievance_portal.models import User, UserRole

logger = get_logger("grievance_portal.identity")

DEFAULT_OFFICER = {
    "username": "panchayat-officer",
    "full_name": "Panchayat Officer",
    "mobile_number": "+919999999999",
    "email": "officer@panchayat.gov.in",
    "village_name": "Demo Village",
    "role": UserRole.OFFICIAL,
}

DEFAULT_VERIFIER = {
    "username": "community-verifier",
    "full_name": "Community Verifier",
    "mobile_number": "+919888888888",
    "email": "verifier@community.local",
    "village_name": "Demo Village",
    "role": UserRole.CITIZEN,
}


async def _get_or_create(db: AsyncSession, profile: dict) -> User:
    user = await get_user_by_username(db, username=profile["username"])
    if user:
        return user
    # Nobody can log in as a stand-in account
    user = await create_user(db, {**profile, "password": secrets.token_urlsafe(32)})
    logger.info(f"Created default identity: username={user.username}, user_id={user.id}")
    return user


async def get_default_officer(db: AsyncSession) -> User:
    return await _get_or_create(db, DEFAULT_OFFICER)


async def get_default_verifier(db: AsyncSession) -> User:
    return await _get_or_create(db, DEFAULT_VERIFIER)


async def get_or_create_citizen(
    db: AsyncSession,
    full_name: str,
    mobile_number: str,
    email: Optional[str] = None,
    village_name: Optional[str] = None,
) -> User:
    """
    Reuse the citizen account registered under a mobile number, or create one.
    """
    return await _get_or_create(
        db,
        {
            "username": mobile_number,
            "full_name": full_name,
            "mobile_number": mobile_number,
            "email": email,
            "village_name": village_name,
            "role": UserRole.CITIZEN,
        },
    )
