from typing import Optional, List
from pydantic import Field
from datetime import datetime

from grievance_portal.models.verification import VerificationStatus, VerificationType
from grievance_portal.schemas.base import CamelModel


# Shared properties
class VerificationBase(CamelModel):
    grievance_id: str = Field(..., min_length=1)
    verification_type: VerificationType
    status: VerificationStatus
    comments: Optional[str] = None
    evidence_files: List[str] = []


# Properties to receive on verification creation. The verifier is the acting
# principal; a client-supplied userId is ignored.
class VerificationCreate(VerificationBase):
    pass


# Properties to return to client
class Verification(VerificationBase):
    id: str
    user_id: str
    created_at: datetime
