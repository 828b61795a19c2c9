from datetime import date as date_type, time, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, validator

from hoops_admin.models.training_session import SessionStatus
from hoops_admin.schemas.attendance import AttendanceResponse


class TrainingSessionCreate(BaseModel):
    date: date_type
    start_time: time
    end_time: time
    branch_id: int
    coach_id: int
    package_type: Optional[str] = None
    notes: Optional[str] = None
    player_ids: List[int] = Field(default_factory=list, description="Состав игроков")

    @validator('end_time')
    def end_after_start(cls, v, values):
        start = values.get('start_time')
        if start and v <= start:
            raise ValueError("End time must be after start time")
        return v


class TrainingSessionUpdate(BaseModel):
    date: Optional[date_type] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    coach_id: Optional[int] = None
    package_type: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[SessionStatus] = None


class RosterUpdate(BaseModel):
    player_ids: List[int]


class TrainingSessionResponse(BaseModel):
    id: int
    date: date_type
    start_time: time
    end_time: time
    branch_id: int
    coach_id: int
    package_type: Optional[str] = None
    notes: Optional[str] = None
    status: SessionStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TrainingSessionDetailResponse(TrainingSessionResponse):
    attendance_records: List[AttendanceResponse] = []
