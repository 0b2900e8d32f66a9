"""
Grievance lifecycle operations.

Every operation runs as one unit of work. Mutations lock the grievance row,
are guarded by its version column, and append an audit entry in the same
transaction, so a lifecycle change and its ledger record commit together.
"""
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from grievance_portal.core.config import settings
from grievance_portal.core.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from grievance_portal.core.logging import get_logger
from grievance_portal.crud import blockchain as blockchain_crud
from grievance_portal.crud import grievance as grievance_crud
from grievance_portal.crud import verification as verification_crud
from grievance_portal.db.session import unit_of_work
from grievance_portal.models import (
    BlockchainRecord,
    Grievance,
    GrievanceStatus,
    LedgerEventType,
    User,
    Verification,
    VerificationStatus,
    VerificationType,
)
from grievance_portal.schemas import GrievanceCreate, VerificationCreate
from grievance_portal.services import lifecycle
from grievance_portal.services.ledger import append_event

logger = get_logger("grievance_portal.lifecycle")

GRIEVANCE_NOT_FOUND = "Grievance not found"


def validate_grievance(payload: Dict[str, Any]) -> GrievanceCreate:
    try:
        return GrievanceCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def validate_verification(payload: Dict[str, Any]) -> VerificationCreate:
    try:
        return VerificationCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def validate_resolution_timeline(value: Any) -> int:
    # bool is an int subclass; True is not a timeline
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError.for_field(
            "resolutionTimeline", "Resolution timeline must be a positive integer number of days"
        )
    return value


def generate_grievance_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.utcnow()
    return f"GRV-{now.year}-{secrets.token_hex(3).upper()}"


async def _allocate_grievance_number(db: AsyncSession) -> str:
    for _ in range(settings.GRIEVANCE_NUMBER_ATTEMPTS):
        candidate = generate_grievance_number()
        if await grievance_crud.get_grievance_by_number(db, candidate) is None:
            return candidate
        logger.warning(f"Grievance number collision, regenerating: number={candidate}")
    raise ConflictError("Could not allocate a unique grievance number, please retry")


async def _get_for_update(db: AsyncSession, grievance_id: str) -> Grievance:
    grievance = await grievance_crud.get_grievance(db, id=grievance_id, for_update=True)
    if grievance is None:
        raise NotFoundError(GRIEVANCE_NOT_FOUND)
    return grievance


async def create(db: AsyncSession, payload: Dict[str, Any], owner: User) -> Grievance:
    """
    Validate and file a new grievance for ``owner``. It starts out pending
    with a freshly allocated grievance number.
    """
    obj_in = validate_grievance(payload)
    async with unit_of_work(db):
        number = await _allocate_grievance_number(db)
        grievance = await grievance_crud.create_grievance(
            db, obj_in=obj_in, grievance_number=number, user_id=owner.id
        )
        await append_event(
            db,
            grievance.id,
            LedgerEventType.GRIEVANCE_SUBMITTED,
            {
                "grievanceNumber": grievance.grievance_number,
                "userId": owner.id,
                "category": grievance.category.value,
                "villageName": grievance.village_name,
            },
        )
    logger.info(
        f"Grievance submitted: number={grievance.grievance_number}, id={grievance.id}, user_id={owner.id}"
    )
    return grievance


async def accept(
    db: AsyncSession, grievance_id: str, officer: User, resolution_timeline: Any
) -> Grievance:
    """
    Assign a pending grievance to ``officer`` with a resolution timeline in
    days and start work on it. In permissive mode an already accepted
    grievance is silently reassigned.
    """
    timeline = validate_resolution_timeline(resolution_timeline)
    async with unit_of_work(db):
        grievance = await _get_for_update(db, grievance_id)
        # Only a pending grievance can be accepted; reopening goes through a dispute
        if not settings.PERMISSIVE_STATUS_TRANSITIONS and grievance.status != GrievanceStatus.PENDING:
            raise ConflictError("Grievance has already been accepted")
        grievance = await grievance_crud.accept_grievance(
            db, db_obj=grievance, officer_id=officer.id, timeline_days=timeline
        )
        await append_event(
            db,
            grievance.id,
            LedgerEventType.GRIEVANCE_ACCEPTED,
            {
                "assignedTo": officer.id,
                "resolutionTimeline": timeline,
                "dueDate": grievance.due_date,
            },
        )
    logger.info(
        f"Grievance accepted: id={grievance.id}, officer_id={officer.id}, timeline_days={timeline}"
    )
    return grievance


async def update_status(
    db: AsyncSession,
    grievance_id: str,
    status: str,
    resolution_notes: Optional[str] = None,
    resolution_evidence: Optional[List[str]] = None,
) -> Grievance:
    """
    Change a grievance's status.

    A request for ``resolved`` does not close the grievance: it moves it to
    ``pending_verification``, stamps ``resolved_at`` and opens a verification
    window of VERIFICATION_WINDOW_DAYS. Asking for ``pending_verification``
    directly is refused in strict mode. Resolution notes and evidence are
    merged in whenever they are supplied.
    """
    requested = lifecycle.parse_status(status)
    updates: Dict[str, Any] = {}
    if resolution_notes:
        updates["resolution_notes"] = resolution_notes
    if resolution_evidence:
        updates["resolution_evidence"] = list(resolution_evidence)

    target = requested
    event_type = LedgerEventType.STATUS_UPDATED
    if requested == GrievanceStatus.RESOLVED:
        now = datetime.utcnow()
        target = GrievanceStatus.PENDING_VERIFICATION
        updates["resolved_at"] = now
        updates["verification_deadline"] = now + timedelta(days=settings.VERIFICATION_WINDOW_DAYS)
        event_type = LedgerEventType.RESOLUTION_SUBMITTED

    async with unit_of_work(db):
        grievance = await _get_for_update(db, grievance_id)
        previous = GrievanceStatus(grievance.status)
        # Only a resolution request opens the verification window
        if (
            not settings.PERMISSIVE_STATUS_TRANSITIONS
            and requested == GrievanceStatus.PENDING_VERIFICATION
        ):
            raise InvalidTransitionError(previous.value, requested.value)
        lifecycle.ensure_transition(previous, target)
        if (
            not settings.PERMISSIVE_STATUS_TRANSITIONS
            and target == GrievanceStatus.IN_PROGRESS
            and grievance.assigned_to is None
        ):
            raise ConflictError("Grievance must be accepted before work can start")
        grievance = await grievance_crud.update_grievance_status(
            db, db_obj=grievance, status=target, updates=updates
        )
        await append_event(
            db,
            grievance.id,
            event_type,
            {
                "from": previous.value,
                "to": target.value,
                **{to_camel(key): value for key, value in updates.items()},
            },
        )
    logger.info(
        f"Grievance status updated: id={grievance.id}, from={previous.value}, to={target.value}"
    )
    return grievance


def outcome_status(obj_in: VerificationCreate) -> Optional[GrievanceStatus]:
    """
    The grievance status implied by a verification, or None when the type and
    status disagree and the grievance should be left alone.
    """
    if (
        obj_in.verification_type == VerificationType.VERIFY
        and obj_in.status == VerificationStatus.VERIFIED
    ):
        return GrievanceStatus.RESOLVED
    if (
        obj_in.verification_type == VerificationType.DISPUTE
        and obj_in.status == VerificationStatus.DISPUTED
    ):
        return GrievanceStatus.IN_PROGRESS
    return None


async def record_verification(
    db: AsyncSession, payload: Dict[str, Any], verifier: User
) -> Verification:
    """
    Store a community verification and apply its outcome to the grievance:
    a confirmed resolution closes it, a dispute reopens it with the same
    assignee and timeline.
    """
    obj_in = validate_verification(payload)
    target = outcome_status(obj_in)
    async with unit_of_work(db):
        grievance = await _get_for_update(db, obj_in.grievance_id)
        previous = GrievanceStatus(grievance.status)
        if target is not None:
            lifecycle.ensure_transition(previous, target)
        verification = await verification_crud.create_verification(
            db, obj_in=obj_in, user_id=verifier.id
        )
        if target is not None:
            await grievance_crud.update_grievance_status(db, db_obj=grievance, status=target)
        await append_event(
            db,
            grievance.id,
            LedgerEventType.VERIFICATION_RECORDED,
            {
                "verificationId": verification.id,
                "userId": verifier.id,
                "verificationType": obj_in.verification_type.value,
                "status": obj_in.status.value,
                "grievanceStatus": (target or previous).value,
            },
        )
    logger.info(
        f"Verification recorded: grievance_id={grievance.id}, verifier_id={verifier.id}, "
        f"type={obj_in.verification_type.value}, status={obj_in.status.value}"
    )
    return verification


async def list_all(db: AsyncSession) -> List[Grievance]:
    async with unit_of_work(db):
        return await grievance_crud.get_grievances(db)


async def list_assignable(db: AsyncSession) -> List[Grievance]:
    """Grievances an officer can pick up or is working on, in list order."""
    async with unit_of_work(db):
        return await grievance_crud.get_grievances(db, statuses=lifecycle.ASSIGNABLE_STATUSES)


async def get_by_id(db: AsyncSession, grievance_id: str) -> Grievance:
    async with unit_of_work(db):
        grievance = await grievance_crud.get_grievance(db, id=grievance_id)
    if grievance is None:
        raise NotFoundError(GRIEVANCE_NOT_FOUND)
    return grievance


async def list_verifications_for(db: AsyncSession, grievance_id: str) -> List[Verification]:
    async with unit_of_work(db):
        return await verification_crud.get_verifications_by_grievance(db, grievance_id=grievance_id)


async def list_blockchain_records_for(db: AsyncSession, grievance_id: str) -> List[BlockchainRecord]:
    async with unit_of_work(db):
        return await blockchain_crud.get_blockchain_records_by_grievance(
            db, grievance_id=grievance_id
        )
