from typing import Optional, List
from pydantic import Field
from datetime import datetime

from grievance_portal.models.grievance import GrievanceCategory, GrievancePriority, GrievanceStatus
from grievance_portal.schemas.base import CamelModel


# Shared properties
class GrievanceBase(CamelModel):
    title: str = Field(..., min_length=10, max_length=255)
    category: GrievanceCategory
    description: str = Field(..., min_length=50)
    village_name: str = Field(..., min_length=1, max_length=255)
    priority: GrievancePriority = GrievancePriority.MEDIUM
    evidence_files: List[str] = []
    voice_recording_url: Optional[str] = None
    voice_transcription: Optional[str] = None


# Properties to receive on grievance creation.
# Server-assigned fields (number, status, owner, assignment, resolution
# bookkeeping, escalation, timestamps) are not accepted from the client.
class GrievanceCreate(GrievanceBase):
    pass


# Properties to receive on a status change
class GrievanceStatusUpdate(CamelModel):
    status: str
    resolution_notes: Optional[str] = None
    resolution_evidence: Optional[List[str]] = None


# Properties to return to client
class Grievance(GrievanceBase):
    id: str
    grievance_number: str
    user_id: str
    status: GrievanceStatus
    evidence_files: List[str] = []
    assigned_to: Optional[str] = None
    resolution_timeline: Optional[int] = None
    due_date: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None
    resolution_evidence: List[str] = []
    verification_deadline: Optional[datetime] = None
    is_escalated: bool = False
    escalated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
