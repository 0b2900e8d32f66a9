from sqlalchemy import Column, String, Integer, ForeignKey, Text, DateTime, Boolean, JSON
import enum
from sqlalchemy.orm import relationship
from datetime import datetime

from grievance_portal.db.base_class import Base, enum_type


class GrievanceStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    PENDING_VERIFICATION = "pending_verification"
    RESOLVED = "resolved"


class GrievanceCategory(str, enum.Enum):
    WATER_SUPPLY = "Water Supply"
    ROAD_INFRASTRUCTURE = "Road & Infrastructure"
    ELECTRICITY = "Electricity"
    SANITATION = "Sanitation & Waste Management"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    AGRICULTURE = "Agriculture Support"
    SOCIAL_WELFARE = "Social Welfare Schemes"
    OTHER = "Other"


class GrievancePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Grievance(Base):
    grievance_number = Column(String(32), unique=True, index=True, nullable=False)
    title = Column(String(255), nullable=False)
    category = Column(enum_type(GrievanceCategory), nullable=False)
    description = Column(Text, nullable=False)
    village_name = Column(String(255), nullable=False)
    status = Column(
        enum_type(GrievanceStatus), default=GrievanceStatus.PENDING, nullable=False, index=True
    )
    priority = Column(enum_type(GrievancePriority), default=GrievancePriority.MEDIUM, nullable=False)
    evidence_files = Column(JSON, default=list, nullable=False)
    voice_recording_url = Column(String(1024), nullable=True)
    voice_transcription = Column(Text, nullable=True)

    # Set on acceptance
    resolution_timeline = Column(Integer, nullable=True)  # days
    due_date = Column(DateTime, nullable=True)

    # Set when the official marks the work resolved
    resolved_at = Column(DateTime, nullable=True)
    resolution_notes = Column(Text, nullable=True)
    resolution_evidence = Column(JSON, default=list, nullable=False)
    verification_deadline = Column(DateTime, nullable=True)

    is_escalated = Column(Boolean, default=False, nullable=False)
    escalated_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    version = Column(Integer, nullable=False)

    # Relationships
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    owner = relationship("User", back_populates="grievances", foreign_keys=[user_id])

    assigned_to = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    assignee = relationship("User", back_populates="assigned_grievances", foreign_keys=[assigned_to])

    verifications = relationship("Verification", back_populates="grievance")
    blockchain_records = relationship("BlockchainRecord", back_populates="grievance")

    __mapper_args__ = {"version_id_col": version}
