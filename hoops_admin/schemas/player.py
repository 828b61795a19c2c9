from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, validator

from hoops_admin.models.package import PackageStatus


# Схема для создания игрока
class PlayerCreate(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    branch_id: Optional[int] = None
    package_type: Optional[str] = None
    sessions: Optional[float] = None  # Учитывается только для ролей с правом SET_INITIAL_SESSIONS
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None
    total_training_fee: float = 0
    downpayment: float = 0

    @validator('name')
    def name_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()

    @validator('email')
    def validate_email(cls, v):
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()

    @validator('sessions')
    def sessions_must_be_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Sessions must be a positive number")
        return v

    @validator('total_training_fee', 'downpayment')
    def money_not_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("Amount must not be negative")
        return v


# Схема для обновления игрока
class PlayerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    branch_id: Optional[int] = None
    package_type: Optional[str] = None
    sessions: Optional[float] = None
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None
    total_training_fee: Optional[float] = None
    downpayment: Optional[float] = None

    @validator('sessions')
    def sessions_must_be_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Sessions must be a positive number")
        return v

    @validator('total_training_fee', 'downpayment')
    def money_not_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("Amount must not be negative")
        return v


# Схема ответа для одного игрока
class PlayerResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    branch_id: Optional[int] = None
    package_type: Optional[str] = None
    sessions: Optional[float] = None
    remaining_sessions: float
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None
    total_training_fee: Optional[float] = None
    downpayment: Optional[float] = None
    remaining_balance: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class QuotaSummaryResponse(BaseModel):
    player_id: int
    cycle_number: int
    cycle_start: Optional[datetime] = None
    cycle_end: Optional[datetime] = None
    sessions: float
    used_sessions: float
    remaining_sessions: float
    progress_percentage: float
    status: PackageStatus

    model_config = {"from_attributes": True}
