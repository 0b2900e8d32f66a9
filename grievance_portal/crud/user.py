from typing import Any, Dict, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.security import get_password_hash, verify_password
from grievance_portal.models import User, UserRole
from grievance_portal.schemas import UserCreate


async def get_user(db: AsyncSession, id: str) -> Optional[User]:
    """
    Get a user by ID.
    """
    result = await db.execute(select(User).filter(User.id == id))
    return result.scalars().first()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    """
    Get a user by username.
    """
    result = await db.execute(select(User).filter(User.username == username))
    return result.scalars().first()


async def create_user(db: AsyncSession, obj_in: Union[UserCreate, Dict[str, Any]]) -> User:
    """
    Create a new user. The caller owns the transaction.
    """
    if isinstance(obj_in, dict):
        create_data = dict(obj_in)
    else:
        create_data = obj_in.model_dump()

    db_obj = User(
        username=create_data["username"],
        password_hash=get_password_hash(create_data["password"]),
        full_name=create_data["full_name"],
        mobile_number=create_data["mobile_number"],
        email=create_data.get("email"),
        village_name=create_data.get("village_name"),
        role=create_data.get("role") or UserRole.CITIZEN,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj


async def authenticate_user(db: AsyncSession, username: str, password: str) -> Optional[User]:
    """
    Authenticate a user by username and password.
    """
    user = await get_user_by_username(db, username=username)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
