from typing import Any, Dict
import traceback

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.errors import GrievanceError, InternalError, ValidationError
from grievance_portal.core.logging import get_logger
from grievance_portal.crud.user import create_user, get_user_by_username
from grievance_portal.db.session import get_db, unit_of_work
from grievance_portal.schemas import User as UserSchema, UserCreate

logger = get_logger("grievance_portal.users")

router = APIRouter()


@router.post("/users", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Register a new user.
    """
    try:
        try:
            user_in = UserCreate.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        logger.info(f"Registration attempt: username={user_in.username}")
        async with unit_of_work(db):
            existing_user = await get_user_by_username(db, username=user_in.username)
            if existing_user:
                logger.warning(f"Registration failed - username already registered: username={user_in.username}")
                raise ValidationError.for_field(
                    "username", "Username already registered", "unique"
                )
            user = await create_user(db, obj_in=user_in)
        logger.info(f"Registration successful: username={user.username}, user_id={user.id}, role={user.role.value}")
        return user
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Registration error: error={e}\n{traceback.format_exc()}")
        raise InternalError("Failed to create user")
