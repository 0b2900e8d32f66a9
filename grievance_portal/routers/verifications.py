from typing import Any, Dict, List
import traceback

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.api.deps import get_acting_verifier
from grievance_portal.core.errors import GrievanceError, InternalError
from grievance_portal.core.logging import get_logger
from grievance_portal.db.session import get_db
from grievance_portal.models import User
from grievance_portal.schemas import Verification as VerificationSchema
from grievance_portal.services import grievances as lifecycle_service

logger = get_logger("grievance_portal.verifications")

router = APIRouter()


@router.post("/verifications", response_model=VerificationSchema, status_code=status.HTTP_201_CREATED)
async def create_verification(
    payload: Dict[str, Any] = Body(...),
    verifier: User = Depends(get_acting_verifier),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Verify or dispute the resolution of a grievance.
    """
    try:
        return await lifecycle_service.record_verification(db, payload, verifier=verifier)
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error creating verification: {e}\n{traceback.format_exc()}")
        raise InternalError("Failed to create verification")


@router.get("/verifications/{grievance_id}", response_model=List[VerificationSchema])
async def read_verifications(grievance_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    """
    Retrieve the verifications recorded for a grievance.
    """
    try:
        return await lifecycle_service.list_verifications_for(db, grievance_id)
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error fetching verifications: grievance_id={grievance_id}, error={e}\n{traceback.format_exc()}")
        raise InternalError("Failed to fetch verifications")
