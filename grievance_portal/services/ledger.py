import hashlib
import json
from datetime import datetime
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.crud.blockchain import create_blockchain_record, get_latest_blockchain_record
from grievance_portal.models import BlockchainRecord, LedgerEventType

GENESIS_HASH = "0x" + "0" * 64


def serialize_event(data: Dict[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


def compute_transaction_hash(
    previous_hash: str,
    grievance_id: str,
    event_type: str,
    event_data: str,
    timestamp: datetime,
) -> str:
    digest = hashlib.sha256()
    for part in (previous_hash, grievance_id, event_type, event_data, timestamp.isoformat()):
        digest.update(part.encode("utf-8"))
        digest.update(b"|")
    return "0x" + digest.hexdigest()


async def append_event(
    db: AsyncSession,
    grievance_id: str,
    event_type: LedgerEventType,
    data: Dict[str, Any],
) -> BlockchainRecord:
    """
    Append a lifecycle event to the grievance's audit trail.

    Each entry's hash covers the previous entry's hash, so rewriting any
    earlier entry breaks every hash after it.
    """
    previous = await get_latest_blockchain_record(db, grievance_id=grievance_id)
    previous_hash = previous.transaction_hash if previous else GENESIS_HASH
    block_number = int(previous.block_number or 0) + 1 if previous else 1

    timestamp = datetime.utcnow()
    event_data = serialize_event(data)
    transaction_hash = compute_transaction_hash(
        previous_hash, grievance_id, event_type.value, event_data, timestamp
    )
    return await create_blockchain_record(
        db,
        grievance_id=grievance_id,
        transaction_hash=transaction_hash,
        block_number=str(block_number),
        event_type=event_type.value,
        event_data=event_data,
        timestamp=timestamp,
    )
