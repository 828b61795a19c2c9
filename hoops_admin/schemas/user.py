from datetime import datetime
from typing import Optional

from pydantic import BaseModel, validator

from hoops_admin.models.user import UserRole


class CoachCreate(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None

    @validator('email')
    def validate_email(cls, v):
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()


class CoachUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
