from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError


class GrievanceError(Exception):
    """Base class for errors raised by the grievance lifecycle."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(GrievanceError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, details: List[Dict[str, Any]], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        return cls(details)

    @classmethod
    def for_field(cls, field: str, message: str, type_: str = "value_error") -> "ValidationError":
        return cls([{"field": field, "message": message, "type": type_}], message=message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class NotFoundError(GrievanceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(GrievanceError):
    status_code = 409
    default_message = "The record was modified by another request, please retry"


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move grievance from '{current}' to '{requested}'")


class PersistenceUnavailableError(GrievanceError):
    status_code = 503
    default_message = "Storage is temporarily unavailable, please retry"


class InternalError(GrievanceError):
    status_code = 500
