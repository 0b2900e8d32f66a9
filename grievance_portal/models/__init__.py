from grievance_portal.models.user import User, UserRole
from grievance_portal.models.grievance import (
    Grievance,
    GrievanceCategory,
    GrievancePriority,
    GrievanceStatus,
)
from grievance_portal.models.verification import Verification, VerificationStatus, VerificationType
from grievance_portal.models.blockchain import BlockchainRecord, LedgerEventType
