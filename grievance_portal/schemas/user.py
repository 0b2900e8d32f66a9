from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
import re

from grievance_portal.models.user import UserRole
from grievance_portal.schemas.base import CamelModel


MOBILE_NUMBER_PATTERN = r"^\+?[0-9]{10,15}$"


# Shared properties
class UserBase(CamelModel):
    username: str = Field(..., min_length=3, max_length=150)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.CITIZEN
    mobile_number: str
    village_name: Optional[str] = None

    @field_validator("mobile_number")
    @classmethod
    def validate_mobile_number(cls, v):
        if not re.match(MOBILE_NUMBER_PATTERN, v):
            raise ValueError("Invalid mobile number format")
        return v


# Properties to receive on user creation
class UserCreate(UserBase):
    password: str = Field(..., min_length=4)
    email: Optional[EmailStr] = None


# Properties to return to client. The password hash is never exposed.
class User(UserBase):
    id: str
    email: Optional[str] = None
    created_at: datetime


# Token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
