from sqlalchemy import Column, String, ForeignKey, Text, DateTime
import enum
from sqlalchemy.orm import relationship
from datetime import datetime

from grievance_portal.db.base_class import Base


class LedgerEventType(str, enum.Enum):
    GRIEVANCE_SUBMITTED = "GRIEVANCE_SUBMITTED"
    GRIEVANCE_ACCEPTED = "GRIEVANCE_ACCEPTED"
    STATUS_UPDATED = "STATUS_UPDATED"
    RESOLUTION_SUBMITTED = "RESOLUTION_SUBMITTED"
    VERIFICATION_RECORDED = "VERIFICATION_RECORDED"


class BlockchainRecord(Base):
    """Append-only audit entry for a grievance lifecycle event."""

    transaction_hash = Column(String(66), unique=True, nullable=False)  # 0x + sha256 hex
    block_number = Column(String(32), nullable=True)
    event_type = Column(String(64), nullable=False)
    event_data = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    grievance_id = Column(String(36), ForeignKey("grievances.id"), nullable=False, index=True)
    grievance = relationship("Grievance", back_populates="blockchain_records")
