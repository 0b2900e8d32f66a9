from typing import Any, List
import traceback

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.errors import GrievanceError, InternalError
from grievance_portal.core.logging import get_logger
from grievance_portal.db.session import get_db
from grievance_portal.schemas import BlockchainRecord as BlockchainRecordSchema
from grievance_portal.services import grievances as lifecycle_service

logger = get_logger("grievance_portal.blockchain")

router = APIRouter()


@router.get("/blockchain/{grievance_id}", response_model=List[BlockchainRecordSchema])
async def read_blockchain_records(grievance_id: str, db: AsyncSession = Depends(get_db)) -> Any:
    """
    Retrieve the audit trail of a grievance, oldest entry first.
    """
    try:
        return await lifecycle_service.list_blockchain_records_for(db, grievance_id)
    except GrievanceError:
        raise
    except Exception as e:
        logger.error(f"Error fetching blockchain records: grievance_id={grievance_id}, error={e}\n{traceback.format_exc()}")
        raise InternalError("Failed to fetch blockchain records")
