from sqlalchemy import Column, String, ForeignKey, Text, DateTime, JSON
import enum
from sqlalchemy.orm import relationship
from datetime import datetime

from grievance_portal.db.base_class import Base, enum_type


class VerificationType(str, enum.Enum):
    VERIFY = "verify"
    DISPUTE = "dispute"


class VerificationStatus(str, enum.Enum):
    VERIFIED = "verified"
    DISPUTED = "disputed"


class Verification(Base):
    verification_type = Column(enum_type(VerificationType), nullable=False)
    status = Column(enum_type(VerificationStatus), nullable=False)
    comments = Column(Text, nullable=True)
    evidence_files = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    grievance_id = Column(String(36), ForeignKey("grievances.id"), nullable=False, index=True)
    grievance = relationship("Grievance", back_populates="verifications")

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    user = relationship("User", back_populates="verifications")
