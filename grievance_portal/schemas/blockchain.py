from typing import Optional
from datetime import datetime

from grievance_portal.schemas.base import CamelModel


class BlockchainRecord(CamelModel):
    id: str
    grievance_id: str
    transaction_hash: str
    block_number: Optional[str] = None
    event_type: str
    event_data: str
    timestamp: datetime
