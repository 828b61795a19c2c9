import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.crud import training_session as crud_session
from hoops_admin.dependencies import get_db
from hoops_admin.errors.session_errors import (
    CoachScheduleConflict,
    InvalidTrainingSession,
    TrainingSessionError,
    TrainingSessionNotFound,
)
from hoops_admin.models import SessionStatus
from hoops_admin.schemas.attendance import AttendanceResponse
from hoops_admin.schemas.training_session import (
    RosterUpdate,
    TrainingSessionCreate,
    TrainingSessionDetailResponse,
    TrainingSessionResponse,
    TrainingSessionUpdate,
)
from hoops_admin.services.training_session import TrainingSessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Training Sessions"])


def _raise_session_http_error(e: TrainingSessionError):
    if isinstance(e, TrainingSessionNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidTrainingSession):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, CoachScheduleConflict):
        raise HTTPException(status_code=409, detail=str(e))
    raise HTTPException(status_code=500, detail=str(e))


@router.post("/", response_model=TrainingSessionDetailResponse, status_code=201)
def create_training_session(
    session_data: TrainingSessionCreate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_SESSIONS)),
    db: Session = Depends(get_db),
):
    """
    Создание тренировки с составом.
    Для каждого игрока создается запись посещаемости в статусе pending.
    """
    try:
        return TrainingSessionService(db).create_session(session_data)
    except TrainingSessionError as e:
        _raise_session_http_error(e)


@router.get("/", response_model=List[TrainingSessionResponse])
def get_training_sessions(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    branch_id: Optional[int] = Query(None),
    coach_id: Optional[int] = Query(None),
    status: Optional[SessionStatus] = Query(None),
    skip: int = 0,
    limit: int = 100,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    return crud_session.get_training_sessions(
        db,
        date_from=date_from,
        date_to=date_to,
        branch_id=branch_id,
        coach_id=coach_id,
        status=status,
        skip=skip,
        limit=limit,
    )


@router.get("/{session_id}", response_model=TrainingSessionDetailResponse)
def get_training_session(
    session_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    try:
        return TrainingSessionService(db).get_session(session_id)
    except TrainingSessionError as e:
        _raise_session_http_error(e)


@router.patch("/{session_id}", response_model=TrainingSessionResponse)
def update_training_session(
    session_id: int,
    session_data: TrainingSessionUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_SESSIONS)),
    db: Session = Depends(get_db),
):
    try:
        return TrainingSessionService(db).update_session(session_id, session_data)
    except TrainingSessionError as e:
        _raise_session_http_error(e)


@router.delete("/{session_id}", status_code=204)
def delete_training_session(
    session_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_SESSIONS)),
    db: Session = Depends(get_db),
):
    """Удаление тренировки; квота за отмеченные присутствия возвращается игрокам"""
    try:
        TrainingSessionService(db).delete_session(session_id)
    except TrainingSessionError as e:
        _raise_session_http_error(e)


@router.post("/{session_id}/players", response_model=List[AttendanceResponse])
def add_players(
    session_id: int,
    roster: RosterUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_SESSIONS)),
    db: Session = Depends(get_db),
):
    try:
        return TrainingSessionService(db).add_players(session_id, roster.player_ids)
    except TrainingSessionError as e:
        _raise_session_http_error(e)


@router.delete("/{session_id}/players/{player_id}", status_code=204)
def remove_player(
    session_id: int,
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_SESSIONS)),
    db: Session = Depends(get_db),
):
    try:
        TrainingSessionService(db).remove_player(session_id, player_id)
    except TrainingSessionError as e:
        _raise_session_http_error(e)
