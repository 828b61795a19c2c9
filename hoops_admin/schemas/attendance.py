from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, validator

from hoops_admin.models.attendance import AttendanceStatus


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus
    session_duration: Optional[float] = None  # Учитывается только для персональных пакетов

    @validator('session_duration')
    def duration_must_be_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Session duration must be a positive number")
        return v


class AttendanceResponse(BaseModel):
    id: int
    session_id: int
    player_id: int
    status: AttendanceStatus
    session_duration: Optional[float] = None
    package_cycle: Optional[int] = None
    marked_at: Optional[datetime] = None
    session_date: Optional[date] = None

    model_config = {"from_attributes": True}


class AttendanceUpdateResponse(BaseModel):
    """Запись посещаемости и пересчитанная квота игрока"""
    record: AttendanceResponse
    remaining_sessions: float


class CoachAttendanceUpdate(BaseModel):
    status: AttendanceStatus


class CoachAttendanceResponse(BaseModel):
    id: int
    session_id: int
    coach_id: int
    coach_name: Optional[str] = None
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    marked_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GracePeriodResponse(BaseModel):
    marked_absent: int
    sessions_checked: int

    model_config = {"from_attributes": True}
