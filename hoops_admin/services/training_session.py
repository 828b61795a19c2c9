import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.crud import attendance as attendance_crud
from hoops_admin.crud import branch as branch_crud
from hoops_admin.crud import player as player_crud
from hoops_admin.crud import training_session as crud
from hoops_admin.crud import user as user_crud
from hoops_admin.database import transactional
from hoops_admin.errors.session_errors import (
    CoachScheduleConflict,
    InvalidTrainingSession,
    TrainingSessionNotFound,
)
from hoops_admin.models import AttendanceRecord, Player, TrainingSession, UserRole
from hoops_admin.schemas.training_session import TrainingSessionCreate, TrainingSessionUpdate
from hoops_admin.services.coach_attendance import CoachAttendanceService
from hoops_admin.services.notification import NotificationService, build_session_notification
from hoops_admin.services.quota_ledger import QuotaLedgerService

logger = logging.getLogger(__name__)


class TrainingSessionService:
    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        self.db = db
        self.quota_ledger = QuotaLedgerService(db)
        self.coach_attendance = CoachAttendanceService(db)
        self.notification_service = notification_service or NotificationService()

    # --- Public Methods (Transactional) ---

    def get_session(self, session_id: int) -> TrainingSession:
        training_session = crud.get_training_session(self.db, session_id)
        if not training_session:
            raise TrainingSessionNotFound(f"Training session {session_id} not found")
        return training_session

    def create_session(self, session_data: TrainingSessionCreate) -> TrainingSession:
        """Создает сессию и pending-записи посещаемости для всего состава."""
        with transactional(self.db) as session:
            training_session, players = self._create_session_logic(session, session_data)

        # Уведомление после записи: его ошибка не откатывает сессию
        self.notification_service.send_session_notification(
            build_session_notification(training_session, [training_session.coach], players)
        )
        return training_session

    def update_session(self, session_id: int, session_data: TrainingSessionUpdate) -> TrainingSession:
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            update_data = session_data.model_dump(exclude_unset=True)

            start_time = update_data.get("start_time", training_session.start_time)
            end_time = update_data.get("end_time", training_session.end_time)
            if end_time <= start_time:
                raise InvalidTrainingSession("End time must be after start time")
            if "coach_id" in update_data:
                self._validate_coach(session, update_data["coach_id"])

            self._check_conflicts(
                session,
                update_data.get("coach_id", training_session.coach_id),
                update_data.get("date", training_session.date),
                start_time,
                end_time,
                exclude_session_id=training_session.id,
            )
            old_coach_id = training_session.coach_id
            training_session = crud.update_training_session(session, training_session, update_data)
            if training_session.coach_id != old_coach_id:
                self.coach_attendance.reassign_coach_logic(session, training_session, old_coach_id)
            return training_session

    def delete_session(self, session_id: int) -> None:
        """Удаление сессии возвращает квоту за отмеченные присутствия текущего цикла."""
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            for record in attendance_crud.get_session_attendance(session, training_session.id):
                self.quota_ledger.release_record_logic(session, record)
            crud.delete_training_session(session, training_session)
            logger.info(f"Training session {session_id} deleted")

    def add_players(self, session_id: int, player_ids: List[int]) -> List[AttendanceRecord]:
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            players = self._load_players(session, player_ids)
            created = []
            for player in players:
                if attendance_crud.get_attendance_record_for(session, training_session.id, player.id):
                    continue
                created.append(attendance_crud.create_attendance_record(session, training_session.id, player.id))
            logger.info(f"Added {len(created)} player(s) to session {session_id}")
            return created

    def remove_player(self, session_id: int, player_id: int) -> None:
        with transactional(self.db) as session:
            training_session = self._get_session(session, session_id)
            record = attendance_crud.get_attendance_record_for(session, training_session.id, player_id)
            if not record:
                raise InvalidTrainingSession(f"Player {player_id} is not in session {session_id}")
            self.quota_ledger.release_record_logic(session, record)
            attendance_crud.delete_attendance_record(session, record)
            logger.info(f"Removed player {player_id} from session {session_id}")

    # --- Private Logic Methods (Non-Transactional) ---

    def _get_session(self, session: Session, session_id: int) -> TrainingSession:
        training_session = crud.get_training_session(session, session_id)
        if not training_session:
            raise TrainingSessionNotFound(f"Training session {session_id} not found")
        return training_session

    def _create_session_logic(self, session: Session, session_data: TrainingSessionCreate):
        if session_data.end_time <= session_data.start_time:
            raise InvalidTrainingSession("End time must be after start time")
        if not branch_crud.get_branch(session, session_data.branch_id):
            raise InvalidTrainingSession(f"Branch {session_data.branch_id} not found")
        self._validate_coach(session, session_data.coach_id)
        self._check_conflicts(
            session, session_data.coach_id, session_data.date, session_data.start_time, session_data.end_time
        )
        players = self._load_players(session, session_data.player_ids)

        training_session = crud.create_training_session(
            session,
            date=session_data.date,
            start_time=session_data.start_time,
            end_time=session_data.end_time,
            branch_id=session_data.branch_id,
            coach_id=session_data.coach_id,
            package_type=session_data.package_type,
            notes=session_data.notes,
        )
        for player in players:
            attendance_crud.create_attendance_record(session, training_session.id, player.id)
        self.coach_attendance.ensure_record_logic(session, training_session)

        logger.info(
            f"Training session {training_session.id} created on {training_session.date} "
            f"with {len(players)} player(s)"
        )
        return training_session, players

    def _validate_coach(self, session: Session, coach_id: int) -> None:
        coach = user_crud.get_user(session, coach_id)
        if not coach or coach.role != UserRole.COACH or not coach.is_active:
            raise InvalidTrainingSession(f"Coach {coach_id} not found or inactive")

    def _check_conflicts(self, session: Session, coach_id, session_date, start_time, end_time, exclude_session_id=None):
        conflicts = crud.get_overlapping_sessions(
            session, coach_id, session_date, start_time, end_time, exclude_session_id=exclude_session_id
        )
        if conflicts:
            raise CoachScheduleConflict(
                f"Coach {coach_id} is already scheduled for a session on {session_date} at this time"
            )

    def _load_players(self, session: Session, player_ids: List[int]) -> List[Player]:
        players = []
        for player_id in dict.fromkeys(player_ids):
            player = player_crud.get_player(session, player_id)
            if not player:
                raise InvalidTrainingSession(f"Player {player_id} not found")
            players.append(player)
        return players
