from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from hoops_admin.models import CoachAttendance, SessionStatus, TrainingSession


def get_coach_attendance(db: Session, session_id: int, coach_id: int) -> Optional[CoachAttendance]:
    return (
        db.query(CoachAttendance)
        .filter(CoachAttendance.session_id == session_id, CoachAttendance.coach_id == coach_id)
        .first()
    )


def get_session_coach_attendance(db: Session, session_id: int) -> List[CoachAttendance]:
    return (
        db.query(CoachAttendance)
        .options(joinedload(CoachAttendance.coach))
        .filter(CoachAttendance.session_id == session_id)
        .order_by(CoachAttendance.id)
        .all()
    )


def get_coach_attendance_history(
    db: Session,
    coach_id: int,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[CoachAttendance]:
    """Отметки тренера по его сессиям, от новых к старым"""
    query = (
        db.query(CoachAttendance)
        .join(TrainingSession, CoachAttendance.session_id == TrainingSession.id)
        .filter(CoachAttendance.coach_id == coach_id)
    )
    if date_from:
        query = query.filter(TrainingSession.date >= date_from)
    if date_to:
        query = query.filter(TrainingSession.date <= date_to)
    return query.order_by(TrainingSession.date.desc(), TrainingSession.start_time.desc()).all()


def get_started_sessions(db: Session, until: date) -> List[TrainingSession]:
    """Неотмененные сессии с датой не позже until (кандидаты на проверку опозданий)"""
    return (
        db.query(TrainingSession)
        .filter(
            TrainingSession.date <= until,
            TrainingSession.status.in_([SessionStatus.SCHEDULED, SessionStatus.COMPLETED]),
        )
        .all()
    )


def create_coach_attendance(db: Session, session_id: int, coach_id: int) -> CoachAttendance:
    """
    Новая отметка тренера в статусе pending.
    НЕ делаем commit здесь - это делает сервис
    """
    record = CoachAttendance(session_id=session_id, coach_id=coach_id)
    db.add(record)
    db.flush()
    return record


def delete_coach_attendance(db: Session, record: CoachAttendance) -> None:
    db.delete(record)
    db.flush()
