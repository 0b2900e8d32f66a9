from grievance_portal.schemas.user import User, UserCreate, Token
from grievance_portal.schemas.grievance import Grievance, GrievanceCreate, GrievanceStatusUpdate
from grievance_portal.schemas.verification import Verification, VerificationCreate
from grievance_portal.schemas.blockchain import BlockchainRecord
