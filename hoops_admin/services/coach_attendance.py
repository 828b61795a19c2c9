"""
Посещаемость тренеров.

У тренера сессии одна отметка: статус (pending/present/absent) и время
прихода/ухода. Отметка прихода означает присутствие. Если через
COACH_ATTENDANCE_GRACE_MINUTES после начала сессии отметки все еще нет,
проверка опозданий ставит тренеру absent.

Время сессий хранится по локальным часам, поэтому и отметки берутся
по локальным часам (datetime.now()).
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.auth.policy import ActingContext
from hoops_admin.config import config
from hoops_admin.crud import coach_attendance as crud
from hoops_admin.crud import training_session as session_crud
from hoops_admin.database import transactional
from hoops_admin.errors.attendance_errors import CoachAttendanceNotAllowed, InvalidAttendanceUpdate
from hoops_admin.errors.session_errors import TrainingSessionNotFound
from hoops_admin.models import AttendanceStatus, CoachAttendance, TrainingSession, UserRole

logger = logging.getLogger(__name__)


def session_start(training_session: TrainingSession) -> datetime:
    return datetime.combine(training_session.date, training_session.start_time)


def grace_period_end(training_session: TrainingSession, grace_minutes: int) -> datetime:
    return session_start(training_session) + timedelta(minutes=grace_minutes)


def is_past_grace_period(training_session: TrainingSession, now: datetime, grace_minutes: int) -> bool:
    return now > grace_period_end(training_session, grace_minutes)


@dataclass
class GracePeriodResult:
    marked_absent: int
    sessions_checked: int


class CoachAttendanceService:
    def __init__(self, db: Session):
        self.db = db

    # --- Public Methods (Transactional) ---

    def list_session_attendance(self, session_id: int) -> List[CoachAttendance]:
        self._get_session(self.db, session_id)
        return crud.get_session_coach_attendance(self.db, session_id)

    def list_coach_attendance(
        self, coach_id: int, date_from: Optional[date] = None, date_to: Optional[date] = None
    ) -> List[CoachAttendance]:
        return crud.get_coach_attendance_history(self.db, coach_id, date_from, date_to)

    def mark_attendance(
        self,
        session_id: int,
        status: AttendanceStatus,
        context: ActingContext,
        now: Optional[datetime] = None,
    ) -> CoachAttendance:
        """Ручная отметка тренера сессии; разрешена и после окончания льготного периода."""
        now = now or datetime.now()
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            self._check_access(training_session, context)
            record = self.ensure_record_logic(session, training_session)
            record.status = status
            record.marked_at = now if status != AttendanceStatus.PENDING else None
            session.flush()
            logger.info(f"Coach {record.coach_id} marked {status.value} for session {session_id}")
            return record

    def time_in(self, session_id: int, context: ActingContext, now: Optional[datetime] = None) -> CoachAttendance:
        now = now or datetime.now()
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            self._check_access(training_session, context)
            record = self.ensure_record_logic(session, training_session)
            if record.time_in is not None:
                raise InvalidAttendanceUpdate(f"Coach already timed in for session {session_id}")
            record.time_in = now
            record.status = AttendanceStatus.PRESENT
            record.marked_at = now
            session.flush()
            logger.info(f"Coach {record.coach_id} timed in for session {session_id} at {now}")
            return record

    def time_out(self, session_id: int, context: ActingContext, now: Optional[datetime] = None) -> CoachAttendance:
        now = now or datetime.now()
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            self._check_access(training_session, context)
            record = crud.get_coach_attendance(session, session_id, training_session.coach_id)
            if not record or record.time_in is None:
                raise InvalidAttendanceUpdate(f"Coach has not timed in for session {session_id}")
            if record.time_out is not None:
                raise InvalidAttendanceUpdate(f"Coach already timed out for session {session_id}")
            if now < record.time_in:
                raise InvalidAttendanceUpdate("Time out cannot be before time in")
            record.time_out = now
            session.flush()
            logger.info(f"Coach {record.coach_id} timed out for session {session_id} at {now}")
            return record

    def mark_absent_after_grace_period(self, now: Optional[datetime] = None) -> GracePeriodResult:
        """
        Ставит absent тренерам начавшихся сессий, которые так и не отметились
        за льготный период. Уже отмеченные (present/absent) не трогаются.
        """
        now = now or datetime.now()
        grace_minutes = config.COACH_ATTENDANCE_GRACE_MINUTES
        marked = checked = 0
        with transactional(self.db) as session:
            for training_session in crud.get_started_sessions(session, now.date()):
                if session_start(training_session) > now:
                    continue
                record = crud.get_coach_attendance(session, training_session.id, training_session.coach_id)
                if record and record.status != AttendanceStatus.PENDING:
                    continue
                checked += 1
                if not is_past_grace_period(training_session, now, grace_minutes):
                    continue
                record = record or crud.create_coach_attendance(session, training_session.id, training_session.coach_id)
                record.status = AttendanceStatus.ABSENT
                record.marked_at = now
                marked += 1
            session.flush()

        logger.info(f"Grace period check: {marked} coach(es) marked absent, {checked} session(s) checked")
        return GracePeriodResult(marked_absent=marked, sessions_checked=checked)

    # --- Logic Methods (Non-Transactional) ---

    def reassign_coach_logic(self, session: Session, training_session: TrainingSession, old_coach_id: int) -> None:
        """Смена тренера: неотмеченная запись прежнего тренера удаляется, новому создается pending."""
        old_record = crud.get_coach_attendance(session, training_session.id, old_coach_id)
        if old_record and old_record.status == AttendanceStatus.PENDING and old_record.time_in is None:
            crud.delete_coach_attendance(session, old_record)
        self.ensure_record_logic(session, training_session)

    def ensure_record_logic(self, session: Session, training_session: TrainingSession) -> CoachAttendance:
        """Отметка тренера сессии; создается в статусе pending, если ее еще нет"""
        record = crud.get_coach_attendance(session, training_session.id, training_session.coach_id)
        if record is None:
            record = crud.create_coach_attendance(session, training_session.id, training_session.coach_id)
        return record

    def _get_session(self, session: Session, session_id: int) -> TrainingSession:
        training_session = session_crud.get_training_session(session, session_id)
        if not training_session:
            raise TrainingSessionNotFound(f"Training session {session_id} not found")
        return training_session

    def _check_access(self, training_session: TrainingSession, context: ActingContext) -> None:
        # Тренер отмечает только себя
        if context.role == UserRole.COACH and training_session.coach_id != context.user_id:
            raise CoachAttendanceNotAllowed(
                f"Coach {context.user_id} cannot log attendance for session {training_session.id}"
            )
