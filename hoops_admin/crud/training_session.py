from datetime import date, time
from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.models import TrainingSession, SessionStatus


def get_training_session(db: Session, session_id: int) -> Optional[TrainingSession]:
    return db.query(TrainingSession).filter(TrainingSession.id == session_id).first()


def get_training_sessions(
    db: Session,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    branch_id: Optional[int] = None,
    coach_id: Optional[int] = None,
    status: Optional[SessionStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[TrainingSession]:
    query = db.query(TrainingSession)
    if date_from:
        query = query.filter(TrainingSession.date >= date_from)
    if date_to:
        query = query.filter(TrainingSession.date <= date_to)
    if branch_id:
        query = query.filter(TrainingSession.branch_id == branch_id)
    if coach_id:
        query = query.filter(TrainingSession.coach_id == coach_id)
    if status:
        query = query.filter(TrainingSession.status == status)
    return (
        query.order_by(TrainingSession.date.desc(), TrainingSession.start_time.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_overlapping_sessions(
    db: Session,
    coach_id: int,
    session_date: date,
    start_time: time,
    end_time: time,
    exclude_session_id: Optional[int] = None,
) -> List[TrainingSession]:
    """Сессии тренера в тот же день, пересекающиеся по времени (кроме отмененных)"""
    query = db.query(TrainingSession).filter(
        TrainingSession.coach_id == coach_id,
        TrainingSession.date == session_date,
        TrainingSession.start_time < end_time,
        TrainingSession.end_time > start_time,
        TrainingSession.status != SessionStatus.CANCELLED,
    )
    if exclude_session_id:
        query = query.filter(TrainingSession.id != exclude_session_id)
    return query.all()


def create_training_session(db: Session, **fields) -> TrainingSession:
    training_session = TrainingSession(**fields)
    db.add(training_session)
    db.flush()
    return training_session


def update_training_session(db: Session, training_session: TrainingSession, update_data: dict) -> TrainingSession:
    for key, value in update_data.items():
        setattr(training_session, key, value)
    db.flush()
    return training_session


def delete_training_session(db: Session, training_session: TrainingSession) -> None:
    db.delete(training_session)
    db.flush()
