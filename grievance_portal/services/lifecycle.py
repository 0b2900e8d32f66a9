"""
Grievance state machine.

    pending -> in_progress -> pending_verification -> resolved
                    ^                  |
                    +---- dispute -----+

Acceptance is the only way out of ``pending``; a resolution request moves the
grievance to ``pending_verification``; the community verification either
closes it (``resolved``) or reopens it (``in_progress``).
"""
from typing import Dict, FrozenSet

from grievance_portal.core.config import settings
from grievance_portal.core.errors import InvalidTransitionError, ValidationError
from grievance_portal.models import GrievanceStatus

TRANSITIONS: Dict[GrievanceStatus, FrozenSet[GrievanceStatus]] = {
    GrievanceStatus.PENDING: frozenset({GrievanceStatus.IN_PROGRESS}),
    GrievanceStatus.IN_PROGRESS: frozenset({GrievanceStatus.PENDING_VERIFICATION}),
    GrievanceStatus.PENDING_VERIFICATION: frozenset(
        {GrievanceStatus.RESOLVED, GrievanceStatus.IN_PROGRESS}
    ),
    GrievanceStatus.RESOLVED: frozenset(),
}

# Officers are listed these grievances to pick up or keep working on
ASSIGNABLE_STATUSES = (GrievanceStatus.PENDING, GrievanceStatus.IN_PROGRESS)


def parse_status(value: str) -> GrievanceStatus:
    try:
        return GrievanceStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in GrievanceStatus)
        raise ValidationError.for_field(
            "status", f"Unknown status '{value}', expected one of: {allowed}", "enum"
        )


def is_allowed(current: GrievanceStatus, target: GrievanceStatus) -> bool:
    if settings.PERMISSIVE_STATUS_TRANSITIONS:
        return True
    return target in TRANSITIONS[current]


def ensure_transition(current: GrievanceStatus, target: GrievanceStatus) -> None:
    if not is_allowed(current, target):
        raise InvalidTransitionError(GrievanceStatus(current).value, target.value)
