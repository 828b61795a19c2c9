import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.crud import attendance as crud_attendance
from hoops_admin.dependencies import get_db
from hoops_admin.errors.attendance_errors import (
    AttendanceError,
    AttendanceRecordNotFound,
    CoachAttendanceNotAllowed,
    InvalidAttendanceUpdate,
)
from hoops_admin.errors.player_errors import PlayerNotFound
from hoops_admin.errors.session_errors import TrainingSessionNotFound
from hoops_admin.schemas.attendance import (
    AttendanceResponse,
    AttendanceUpdate,
    AttendanceUpdateResponse,
    CoachAttendanceResponse,
    CoachAttendanceUpdate,
    GracePeriodResponse,
)
from hoops_admin.services.coach_attendance import CoachAttendanceService
from hoops_admin.services.quota_ledger import QuotaLedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["Attendance"])


@router.patch("/{record_id}", response_model=AttendanceUpdateResponse)
def update_attendance(
    record_id: int,
    attendance_data: AttendanceUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MARK_ATTENDANCE)),
    db: Session = Depends(get_db),
):
    """
    Отметка посещаемости.
    Квота игрока пересчитывается в той же транзакции.
    """
    try:
        record = QuotaLedgerService(db).update_attendance(
            record_id, attendance_data.status, attendance_data.session_duration
        )
    except (AttendanceRecordNotFound, PlayerNotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidAttendanceUpdate as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AttendanceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    logger.debug(f"Attendance {record.id} marked {record.status.value} by user {current_user.user_id}")
    return {"record": record, "remaining_sessions": record.player.remaining_sessions}


@router.get("/{record_id}", response_model=AttendanceResponse)
def get_attendance_record(
    record_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    record = crud_attendance.get_attendance_record(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Attendance record not found")
    return record


@router.get("/session/{session_id}", response_model=List[AttendanceResponse])
def get_session_attendance(
    session_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    # Direct CRUD call as no business logic is involved
    return crud_attendance.get_session_attendance(db, session_id)


# =============================================================================
# ПОСЕЩАЕМОСТЬ ТРЕНЕРОВ
# =============================================================================

def _raise_coach_attendance_http_error(e: Exception):
    if isinstance(e, TrainingSessionNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, CoachAttendanceNotAllowed):
        raise HTTPException(status_code=403, detail=str(e))
    if isinstance(e, InvalidAttendanceUpdate):
        raise HTTPException(status_code=400, detail=str(e))
    logger.error(f"Coach attendance operation failed: {e}")
    raise HTTPException(status_code=500, detail=str(e))


@router.get("/coach/session/{session_id}", response_model=List[CoachAttendanceResponse])
def get_session_coach_attendance(
    session_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    try:
        return CoachAttendanceService(db).list_session_attendance(session_id)
    except TrainingSessionNotFound as e:
        _raise_coach_attendance_http_error(e)


@router.get("/coach/{coach_id}", response_model=List[CoachAttendanceResponse])
def get_coach_attendance(
    coach_id: int,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    return CoachAttendanceService(db).list_coach_attendance(coach_id, date_from, date_to)


@router.patch("/coach/session/{session_id}", response_model=CoachAttendanceResponse)
def mark_coach_attendance(
    session_id: int,
    attendance_data: CoachAttendanceUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MARK_ATTENDANCE)),
    db: Session = Depends(get_db),
):
    try:
        return CoachAttendanceService(db).mark_attendance(session_id, attendance_data.status, current_user)
    except (TrainingSessionNotFound, AttendanceError) as e:
        _raise_coach_attendance_http_error(e)


@router.post("/coach/session/{session_id}/time-in", response_model=CoachAttendanceResponse)
def coach_time_in(
    session_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MARK_ATTENDANCE)),
    db: Session = Depends(get_db),
):
    try:
        return CoachAttendanceService(db).time_in(session_id, current_user)
    except (TrainingSessionNotFound, AttendanceError) as e:
        _raise_coach_attendance_http_error(e)


@router.post("/coach/session/{session_id}/time-out", response_model=CoachAttendanceResponse)
def coach_time_out(
    session_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MARK_ATTENDANCE)),
    db: Session = Depends(get_db),
):
    try:
        return CoachAttendanceService(db).time_out(session_id, current_user)
    except (TrainingSessionNotFound, AttendanceError) as e:
        _raise_coach_attendance_http_error(e)


@router.post("/coach/grace-period", response_model=GracePeriodResponse)
def mark_absent_after_grace_period(
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_COACHES)),
    db: Session = Depends(get_db),
):
    """
    Проверка опозданий тренеров.
    Вызывается по расписанию (cron) или вручную администратором.
    """
    return CoachAttendanceService(db).mark_absent_after_grace_period()
