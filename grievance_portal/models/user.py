from sqlalchemy import Column, String, DateTime
import enum
from sqlalchemy.orm import relationship
from datetime import datetime

from grievance_portal.db.base_class import Base, enum_type


class UserRole(str, enum.Enum):
    CITIZEN = "citizen"
    OFFICIAL = "official"


class User(Base):
    username = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(enum_type(UserRole), default=UserRole.CITIZEN, nullable=False)
    mobile_number = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)
    village_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    grievances = relationship(
        "Grievance", back_populates="owner", foreign_keys="Grievance.user_id"
    )
    assigned_grievances = relationship(
        "Grievance", back_populates="assignee", foreign_keys="Grievance.assigned_to"
    )
    verifications = relationship("Verification", back_populates="user")
