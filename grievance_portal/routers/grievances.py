from typing import Any, Dict, List, Optional
import re
import traceback

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.api.deps import (
    allow_anonymous,
    credentials_exception,
    get_acting_officer,
    get_current_user_optional,
)
from grievance_portal.core.errors import GrievanceError, InternalError, ValidationError
from grievance_portal.core.logging import get_logger
from grievance_portal.db.session import get_db
from grievance_portal.models import User
from grievance_portal.schemas import Grievance as GrievanceSchema
from grievance_portal.schemas import GrievanceStatusUpdate
from grievance_portal.schemas.user import MOBILE_NUMBER_PATTERN
from grievance_portal.services import grievances as lifecycle_service
from grievance_portal.services import identity

logger = get_logger("grievance_portal.grievances")

router = APIRouter()

# Contact details travel with the grievance form but belong to the owner
CONTACT_FIELDS = ("fullName", "mobileNumber", "email")


@router.get("/grievances", response_model=List[GrievanceSchema])
async def read_grievances(db: AsyncSession = Depends(get_db)) -> Any:
    """
    Retrieve all grievances, newest first.
    """
    try:
        return await lifecycle_service.list_all(db)
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error fetching grievances: {e}\n{traceback.format_exc()}")
        raise InternalError("Failed to fetch grievances")


@router.get("/grievances/assigned", response_model=List[GrievanceSchema])
async def read_assignable_grievances(db: AsyncSession = Depends(get_db)) -> Any:
    """
    Retrieve the officer work queue: pending and in-progress grievances.
    """
    try:
        return await lifecycle_service.list_assignable(db)
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error fetching assigned grievances: {e}\n{traceback.format_exc()}")
        raise InternalError("Failed to fetch assigned grievances")


@router.get("/grievances/{grievance_id}", response_model=GrievanceSchema)
async def read_grievance(grievance_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    """
    Get grievance by ID.
    """
    try:
        return await lifecycle_service.get_by_id(db, grievance_id)
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error fetching grievance: id={grievance_id}, error={e}\n{traceback.format_exc()}")
        raise InternalError("Failed to fetch grievance")


@router.post("/grievances", response_model=GrievanceSchema, status_code=status.HTTP_201_CREATED)
async def create_grievance(
    payload: Dict[str, Any] = Body(...),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Submit a new grievance.

    The body carries the grievance fields plus the submitter's fullName,
    mobileNumber and optional email. Without a bearer token the submitter is
    identified by mobile number (demo mode only).
    """
    grievance_data = {k: v for k, v in payload.items() if k not in CONTACT_FIELDS}
    full_name = payload.get("fullName")
    mobile_number = payload.get("mobileNumber")
    email = payload.get("email") or None

    try:
        lifecycle_service.validate_grievance(grievance_data)
        if not full_name or not mobile_number:
            raise ValidationError.for_field(
                "fullName" if not full_name else "mobileNumber",
                "Full name and mobile number are required",
                "missing",
            )
        if not isinstance(mobile_number, str) or not re.match(MOBILE_NUMBER_PATTERN, mobile_number):
            raise ValidationError.for_field("mobileNumber", "Invalid mobile number format")

        if current_user is not None:
            owner = current_user
        elif allow_anonymous():
            owner = await identity.get_or_create_citizen(
                db,
                full_name=full_name,
                mobile_number=mobile_number,
                email=email,
                village_name=grievance_data.get("villageName"),
            )
        else:
            raise credentials_exception("Not authenticated")

        return await lifecycle_service.create(db, grievance_data, owner=owner)
    except (GrievanceError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Error creating grievance: {e}\n{traceback.format_exc()}")
        raise InternalError("Failed to create grievance")


@router.post("/grievances/{grievance_id}/accept", response_model=GrievanceSchema)
async def accept_grievance(
    grievance_id: str,
    payload: Dict[str, Any] = Body(...),
    officer: User = Depends(get_acting_officer),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Accept a grievance and commit to a resolution timeline in days.
    """
    resolution_timeline = payload.get("resolutionTimeline")
    try:
        if resolution_timeline is None:
            raise ValidationError.for_field(
                "resolutionTimeline", "Resolution timeline is required", "missing"
            )
        return await lifecycle_service.accept(
            db, grievance_id, officer=officer, resolution_timeline=resolution_timeline
        )
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error accepting grievance: id={grievance_id}, error={e}\n{traceback.format_exc()}")
        raise InternalError("Failed to accept grievance")


@router.patch("/grievances/{grievance_id}/status", response_model=GrievanceSchema)
async def update_grievance_status(
    grievance_id: str,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Update a grievance's status. Requesting "resolved" submits the resolution
    for community verification.
    """
    try:
        if not payload.get("status"):
            raise ValidationError.for_field("status", "Status is required", "missing")
        try:
            update = GrievanceStatusUpdate.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        return await lifecycle_service.update_status(
            db,
            grievance_id,
            update.status,
            resolution_notes=update.resolution_notes,
            resolution_evidence=update.resolution_evidence,
        )
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(
            f"Error updating grievance status: id={grievance_id}, error={e}\n{traceback.format_exc()}"
        )
        raise InternalError("Failed to update grievance status")
