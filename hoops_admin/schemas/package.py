from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from hoops_admin.schemas.attendance import AttendanceResponse
from hoops_admin.models.package import PackageStatus


# --- Справочник типов пакетов ---

class PackageTypeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    is_active: bool = True

    @validator('name')
    def name_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Package name must not be empty")
        return v.strip()


class PackageTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class PackageTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# --- Жизненный цикл пакета игрока ---

class PackageData(BaseModel):
    """Новые значения пакета (продление и редактирование)"""
    package_type: Optional[str] = None
    sessions: float = Field(..., description="Квота сессий (часов) на цикл")
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None

    @validator('sessions')
    def sessions_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("Sessions must be a positive number")
        return v


class PackageRetrieveRequest(BaseModel):
    extend_days: int = Field(30, description="На сколько дней продлить от текущей даты окончания")
    sessions: Optional[float] = Field(None, description="Новая квота; если задана, использование сбрасывается")

    @validator('extend_days')
    def extend_days_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("extend_days must be a positive number")
        return v

    @validator('sessions')
    def sessions_must_be_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Sessions must be a positive number")
        return v


class PackageHistoryResponse(BaseModel):
    id: int
    player_id: int
    package_type: Optional[str] = None
    sessions: Optional[float] = None
    remaining_sessions: Optional[float] = None
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None
    captured_at: datetime
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class PackageCycleResponse(BaseModel):
    cycle_number: int
    label: str
    is_current: bool
    history_id: Optional[int] = None
    package_type: Optional[str] = None
    sessions: Optional[float] = None
    remaining_sessions: Optional[float] = None
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None
    captured_at: Optional[datetime] = None
    reason: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    attended_sessions: float
    status: PackageStatus
    attendance: List[AttendanceResponse] = []

    model_config = {"from_attributes": True}
