from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.models import Grievance, GrievanceStatus
from grievance_portal.schemas import GrievanceCreate


async def get_grievance(
    db: AsyncSession, id: str, for_update: bool = False
) -> Optional[Grievance]:
    """
    Get a grievance by ID, optionally locking the row for the rest of the
    transaction.
    """
    query = select(Grievance).filter(Grievance.id == id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return result.scalars().first()


async def get_grievance_by_number(db: AsyncSession, grievance_number: str) -> Optional[Grievance]:
    """
    Get a grievance by its public grievance number.
    """
    result = await db.execute(
        select(Grievance).filter(Grievance.grievance_number == grievance_number)
    )
    return result.scalars().first()


async def get_grievances(
    db: AsyncSession, statuses: Optional[Sequence[GrievanceStatus]] = None
) -> List[Grievance]:
    """
    Get all grievances, newest first, optionally restricted to some statuses.
    """
    query = select(Grievance)
    if statuses:
        query = query.filter(Grievance.status.in_(list(statuses)))
    result = await db.execute(query.order_by(Grievance.created_at.desc(), Grievance.id))
    return list(result.scalars().all())


async def create_grievance(
    db: AsyncSession, obj_in: GrievanceCreate, grievance_number: str, user_id: str
) -> Grievance:
    """
    Create a new pending grievance owned by ``user_id``.
    """
    db_obj = Grievance(
        grievance_number=grievance_number,
        user_id=user_id,
        title=obj_in.title,
        category=obj_in.category,
        description=obj_in.description,
        village_name=obj_in.village_name,
        priority=obj_in.priority,
        evidence_files=list(obj_in.evidence_files),
        voice_recording_url=obj_in.voice_recording_url,
        voice_transcription=obj_in.voice_transcription,
        status=GrievanceStatus.PENDING,
    )
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj


async def accept_grievance(
    db: AsyncSession, db_obj: Grievance, officer_id: str, timeline_days: int
) -> Grievance:
    """
    Assign a grievance to an officer with a resolution timeline in days.
    """
    now = datetime.utcnow()
    db_obj.assigned_to = officer_id
    db_obj.resolution_timeline = timeline_days
    db_obj.due_date = now + timedelta(days=timeline_days)
    db_obj.status = GrievanceStatus.IN_PROGRESS
    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj


async def update_grievance_status(
    db: AsyncSession,
    db_obj: Grievance,
    status: GrievanceStatus,
    updates: Optional[Dict[str, Any]] = None,
) -> Grievance:
    """
    Set a grievance's status and merge any extra fields.
    """
    for field, value in (updates or {}).items():
        setattr(db_obj, field, value)
    db_obj.status = status

    db.add(db_obj)
    await db.flush()
    await db.refresh(db_obj)
    return db_obj
