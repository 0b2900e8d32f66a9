from datetime import timedelta
from typing import Any
import traceback

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.config import settings
from grievance_portal.core.errors import InternalError
from grievance_portal.core.logging import get_logger
from grievance_portal.core.security import create_access_token
from grievance_portal.crud.user import authenticate_user
from grievance_portal.db.session import get_db
from grievance_portal.schemas import Token

logger = get_logger("grievance_portal.auth")

router = APIRouter()


@router.post("/auth/login", response_model=Token)
async def login_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Get access token for user from login credentials.
    """
    try:
        logger.info(f"Login attempt: username={form_data.username}")
        user = await authenticate_user(db, username=form_data.username, password=form_data.password)

        if not user:
            logger.warning(f"Login failed - incorrect credentials: username={form_data.username}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        token = create_access_token(subject=user.id, expires_delta=access_token_expires)

        logger.info(f"Login successful: username={form_data.username}, user_id={user.id}")
        return {
            "access_token": token,
            "token_type": "bearer",
        }
    except HTTPException:
        raise
    except Exception as e:
        error_details = traceback.format_exc()
        logger.error(f"Login error: username={form_data.username}, error={str(e)}\n{error_details}")
        raise InternalError("An unexpected error occurred during login")
