from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.models import BlockchainRecord


async def get_blockchain_records_by_grievance(
    db: AsyncSession, grievance_id: str
) -> List[BlockchainRecord]:
    """
    Get the audit trail of a grievance in the order it was written.
    """
    result = await db.execute(
        select(BlockchainRecord)
        .filter(BlockchainRecord.grievance_id == grievance_id)
        .order_by(BlockchainRecord.timestamp.asc(), BlockchainRecord.block_number.asc())
    )
    records = list(result.scalars().all())
    # block_number is text; order numerically so entry 10 follows entry 9
    records.sort(key=lambda record: int(record.block_number or 0))
    return records


async def get_latest_blockchain_record(
    db: AsyncSession, grievance_id: str
) -> Optional[BlockchainRecord]:
    """
    Get the most recent audit entry of a grievance.
    """
    records = await get_blockchain_records_by_grievance(db, grievance_id=grievance_id)
    return records[-1] if records else None


async def create_blockchain_record(
    db: AsyncSession,
    grievance_id: str,
    transaction_hash: str,
    block_number: str,
    event_type: str,
    event_data: str,
    timestamp: datetime,
) -> BlockchainRecord:
    """
    Append an audit entry. Entries are never updated or deleted.
    """
    db_obj = BlockchainRecord(
        grievance_id=grievance_id,
        transaction_hash=transaction_hash,
        block_number=block_number,
        event_type=event_type,
        event_data=event_data,
        timestamp=timestamp,
    )
    db.add(db_obj)
    await db.flush()
    return db_obj
