from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from hoops_admin.models import AttendanceRecord, AttendanceStatus, TrainingSession


def get_attendance_record(db: Session, record_id: int) -> Optional[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .options(joinedload(AttendanceRecord.session))
        .filter(AttendanceRecord.id == record_id)
        .first()
    )


def get_attendance_record_for(db: Session, session_id: int, player_id: int) -> Optional[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.session_id == session_id, AttendanceRecord.player_id == player_id)
        .first()
    )


def get_player_attendance(db: Session, player_id: int) -> List[AttendanceRecord]:
    """Все записи посещаемости игрока, от новых сессий к старым"""
    return (
        db.query(AttendanceRecord)
        .join(TrainingSession, AttendanceRecord.session_id == TrainingSession.id)
        .options(joinedload(AttendanceRecord.session))
        .filter(AttendanceRecord.player_id == player_id)
        .order_by(TrainingSession.date.desc(), TrainingSession.start_time.desc())
        .all()
    )


def get_present_attendance(db: Session, player_id: int) -> List[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .options(joinedload(AttendanceRecord.session))
        .filter(
            AttendanceRecord.player_id == player_id,
            AttendanceRecord.status == AttendanceStatus.PRESENT,
        )
        .all()
    )


def get_session_attendance(db: Session, session_id: int) -> List[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.session_id == session_id)
        .order_by(AttendanceRecord.id)
        .all()
    )


def create_attendance_record(db: Session, session_id: int, player_id: int) -> AttendanceRecord:
    """Новая запись всегда в статусе pending, цикл назначается при отметке"""
    record = AttendanceRecord(
        session_id=session_id,
        player_id=player_id,
        status=AttendanceStatus.PENDING,
        package_cycle=None,
    )
    db.add(record)
    db.flush()
    return record


def delete_attendance_record(db: Session, record: AttendanceRecord) -> None:
    db.delete(record)
    db.flush()
