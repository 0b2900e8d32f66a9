from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.models import Verification
from grievance_portal.schemas import VerificationCreate


async def get_verifications_by_grievance(db: AsyncSession, grievance_id: str) -> List[Verification]:
    """
    Get all verifications for a grievance, oldest first.
    """
    result = await db.execute(
        select(Verification)
        .filter(Verification.grievance_id == grievance_id)
        .order_by(Verification.created_at.asc(), Verification.id)
    )
    return list(result.scalars().all())


async def create_verification(
    db: AsyncSession, obj_in: VerificationCreate, user_id: str
) -> Verification:
    """
    Create a new verification by ``user_id``.
    """
    db_obj = Verification(
        grievance_id=obj_in.grievance_id,
        user_id=user_id,
        verification_type=obj_in.verification_type,
        status=obj_in.status,
        comments=obj_in.comments,
        evidence_files=list(obj_in.evidence_files),
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj
