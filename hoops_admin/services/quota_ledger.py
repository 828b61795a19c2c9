"""
Учет квоты сессий игрока.

Квота текущего цикла пакета выводится из посещаемости:

    used      = сумма session_duration по записям со статусом present в текущем цикле
    remaining = max(0, sessions - used)

Модуль состоит из двух частей: чистые функции (без БД и без чтения часов,
дата передается явно) и QuotaLedgerService, который загружает строки,
применяет правила и записывает производные поля в одной транзакции.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional

from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from hoops_admin.crud import attendance as attendance_crud
from hoops_admin.crud import package_history as history_crud
from hoops_admin.crud import player as player_crud
from hoops_admin.database import transactional
from hoops_admin.errors.attendance_errors import AttendanceRecordNotFound, InvalidAttendanceUpdate
from hoops_admin.errors.package_errors import InvalidPackageData, PackageHistoryUnavailable
from hoops_admin.errors.player_errors import PlayerNotFound
from hoops_admin.models import (
    AttendanceRecord,
    AttendanceStatus,
    PackageHistory,
    PackageStatus,
    Player,
    RenewalReason,
)
from hoops_admin.models.attendance import DEFAULT_SESSION_DURATION
from hoops_admin.models.package import is_personal_package
from hoops_admin.schemas.package import PackageData

logger = logging.getLogger(__name__)


# =============================================================================
# ЧИСТЫЕ ПРАВИЛА
# =============================================================================

def _round(value: float) -> float:
    return round(float(value), 2)


def effective_duration(duration: Optional[float]) -> float:
    """NULL и 0 считаются за одну стандартную сессию"""
    if not duration:
        return DEFAULT_SESSION_DURATION
    return float(duration)


def resolve_session_duration(package_type: Optional[str], requested: Optional[float]) -> float:
    """Произвольная длительность допускается только для персональных пакетов."""
    if is_personal_package(package_type) and requested is not None and requested > 0:
        return _round(requested)
    if requested is not None and requested != DEFAULT_SESSION_DURATION:
        logger.debug(f"Duration {requested} ignored for package type {package_type!r}")
    return DEFAULT_SESSION_DURATION


def current_cycle_number(history_count: int) -> int:
    return history_count + 1


def as_datetime(value) -> Optional[datetime]:
    """Приводит date/datetime к наивному datetime в UTC для сравнения окон"""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


@dataclass(frozen=True)
class CycleWindow:
    """Полуоткрытое окно [start, end); None означает отсутствие границы"""
    start: Optional[datetime]
    end: Optional[datetime]

    def contains(self, moment) -> bool:
        moment = as_datetime(moment)
        if moment is None:
            return False
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment >= self.end:
            return False
        return True


def current_cycle_window(
    enrollment_date: Optional[date],
    expiration_date: Optional[date],
    latest_capture: Optional[datetime],
) -> CycleWindow:
    # Начало текущего цикла - момент последней архивации, иначе дата зачисления.
    # День окончания пакета входит в живой цикл.
    start = as_datetime(latest_capture) if latest_capture is not None else as_datetime(enrollment_date)
    end = as_datetime(expiration_date + timedelta(days=1)) if expiration_date is not None else None
    return CycleWindow(start=start, end=end)


def record_in_cycle(record: AttendanceRecord, cycle_number: int, window: CycleWindow) -> bool:
    """Точное совпадение по package_cycle; для старых записей без тега - по дате сессии."""
    if record.package_cycle is not None:
        return record.package_cycle == cycle_number
    return window.contains(record.session_date)


def used_sessions(records: Iterable[AttendanceRecord]) -> float:
    return _round(sum(
        effective_duration(record.session_duration)
        for record in records
        if record.status == AttendanceStatus.PRESENT
    ))


def remaining_sessions(total: Optional[float], used: float) -> float:
    return max(0.0, _round((total or 0) - used))


def derive_package_status(
    sessions: Optional[float],
    remaining: Optional[float],
    expiration_date: Optional[date],
    today: date,
    used: Optional[float] = None,
) -> PackageStatus:
    """
    Истекший пакет проверяется раньше завершенного во всех представлениях:
    просроченный и неиспользованный пакет - expired, а не completed.
    """
    total = float(sessions or 0)
    remaining = float(remaining or 0)
    if used is None:
        used = total - remaining

    # В день окончания пакет уже истек
    if expiration_date is not None and expiration_date <= today:
        return PackageStatus.EXPIRED
    if remaining <= 0 or used >= total:
        return PackageStatus.COMPLETED
    return PackageStatus.ONGOING


def renewal_reason(
    sessions: Optional[float],
    remaining: Optional[float],
    expiration_date: Optional[date],
    today: date,
) -> RenewalReason:
    status = derive_package_status(sessions, remaining, expiration_date, today)
    if status == PackageStatus.EXPIRED:
        return RenewalReason.EXPIRED
    if status == PackageStatus.COMPLETED:
        return RenewalReason.COMPLETED
    return RenewalReason.EARLY


def _deduct(remaining: float, duration: float) -> float:
    return max(0.0, _round(remaining - duration))


def _restore(remaining: float, duration: float, total: Optional[float]) -> float:
    restored = _round(remaining + duration)
    if total is not None:
        restored = min(float(total), restored)
    return restored


def apply_attendance_transition(
    remaining: float,
    total: Optional[float],
    old_status: Optional[AttendanceStatus],
    old_duration: Optional[float],
    new_status: AttendanceStatus,
    new_duration: Optional[float],
) -> float:
    """
    Изменение remaining_sessions при смене статуса/длительности записи.

    Смена длительности у present-записи выполняется в два шага (вернуть старую,
    списать новую), чтобы ограничение снизу нулем работало так же, как при
    раздельных операциях.
    """
    remaining = float(remaining or 0)
    was_present = old_status == AttendanceStatus.PRESENT
    is_present = new_status == AttendanceStatus.PRESENT

    if is_present and not was_present:
        return _deduct(remaining, effective_duration(new_duration))
    if was_present and not is_present:
        return _restore(remaining, effective_duration(old_duration), total)
    if was_present and is_present and effective_duration(old_duration) != effective_duration(new_duration):
        remaining = _restore(remaining, effective_duration(old_duration), total)
        return _deduct(remaining, effective_duration(new_duration))
    return remaining


@dataclass
class QuotaSummary:
    player_id: int
    cycle_number: int
    cycle_start: Optional[datetime]
    cycle_end: Optional[datetime]
    sessions: float
    used_sessions: float
    remaining_sessions: float
    progress_percentage: float
    status: PackageStatus


def _is_missing_history_table(error: Exception) -> bool:
    message = str(getattr(error, "orig", error)).lower()
    return PackageHistory.__tablename__ in message and (
        "no such table" in message or "does not exist" in message or "undefined" in message
    )


# =============================================================================
# СЕРВИС
# =============================================================================

class QuotaLedgerService:
    def __init__(self, db: Session):
        self.db = db

    # --- Public Methods (Transactional) ---

    def get_quota_summary(self, player_id: int, today: Optional[date] = None) -> QuotaSummary:
        """Read path: квота текущего цикла, выведенная из посещаемости."""
        player = player_crud.get_player(self.db, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found")
        return self._summary(player, today or date.today())

    def update_attendance(
        self,
        record_id: int,
        status: AttendanceStatus,
        session_duration: Optional[float] = None,
    ) -> AttendanceRecord:
        """Отметка посещаемости с пересчетом квоты игрока в той же транзакции."""
        with transactional(self.db) as session:
            return self._update_attendance_logic(session, record_id, status, session_duration)

    def edit_package(self, player_id: int, package_data: PackageData) -> Player:
        """Редактирование текущего пакета без создания нового цикла."""
        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            self._validate_package(package_data.sessions, package_data.enrollment_date, package_data.expiration_date)
            player.package_type = package_data.package_type
            player.enrollment_date = package_data.enrollment_date
            player.expiration_date = package_data.expiration_date
            self.set_sessions_total_logic(session, player, package_data.sessions)
            return player

    def renew_package(self, player_id: int, package_data: PackageData, today: Optional[date] = None) -> Player:
        """Новый цикл пакета: архивируем текущий пакет и выдаем свежую квоту."""
        with transactional(self.db) as session:
            return self._renew_package_logic(session, player_id, package_data, today or date.today())

    def expire_package(self, player_id: int, today: Optional[date] = None) -> Player:
        """Досрочно завершает текущий пакет. Запись в историю не создается."""
        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            player.expiration_date = today or date.today()
            player.remaining_sessions = 0
            session.flush()
            logger.info(f"Package expired for player {player.id} on {player.expiration_date}")
            return player

    def retrieve_package(self, player_id: int, extend_days: int, sessions: Optional[float] = None) -> Player:
        """
        Восстановление истекшего пакета: продление от текущей даты окончания.
        Если передана новая квота, она выдается целиком (как новый пакет).
        """
        if extend_days is None or extend_days <= 0:
            raise InvalidPackageData("extend_days must be a positive number")
        if sessions is not None and sessions <= 0:
            raise InvalidPackageData("Sessions must be a positive number")

        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            base_date = player.expiration_date or date.today()
            player.expiration_date = base_date + timedelta(days=extend_days)
            if sessions is not None:
                player.sessions = _round(sessions)
                player.remaining_sessions = _round(sessions)
            session.flush()
            logger.info(
                f"Package retrieved for player {player.id}: expiration {base_date} -> {player.expiration_date}, "
                f"sessions reset: {sessions is not None}"
            )
            return player

    def recalculate_remaining_sessions(self, player_id: int) -> Player:
        """Сверка: перезаписывает remaining_sessions значением из посещаемости."""
        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            self.set_sessions_total_logic(session, player, player.sessions)
            return player

    # --- Private Logic Methods (Non-Transactional) ---

    def _lock_player(self, session: Session, player_id: int) -> Player:
        player = player_crud.get_player_for_update(session, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found")
        return player

    @staticmethod
    def _validate_package(sessions, enrollment_date, expiration_date) -> None:
        if sessions is None or sessions <= 0:
            raise InvalidPackageData("Sessions must be a positive number")
        if enrollment_date and expiration_date and expiration_date < enrollment_date:
            raise InvalidPackageData("Expiration date cannot be before enrollment date")

    def _current_cycle(self, player: Player, history: List[PackageHistory]):
        latest_capture = history[-1].captured_at if history else None
        window = current_cycle_window(player.enrollment_date, player.expiration_date, latest_capture)
        return current_cycle_number(len(history)), window

    def _cycle_records(self, session: Session, player: Player) -> tuple[int, CycleWindow, List[AttendanceRecord]]:
        history = history_crud.get_player_history(session, player.id)
        cycle_number, window = self._current_cycle(player, history)
        records = [
            record
            for record in attendance_crud.get_present_attendance(session, player.id)
            if record_in_cycle(record, cycle_number, window)
        ]
        return cycle_number, window, records

    def _summary(self, player: Player, today: date) -> QuotaSummary:
        cycle_number, window, records = self._cycle_records(self.db, player)
        total = float(player.sessions or 0)
        used = used_sessions(records)
        remaining = remaining_sessions(total, used)
        return QuotaSummary(
            player_id=player.id,
            cycle_number=cycle_number,
            cycle_start=window.start,
            cycle_end=window.end,
            sessions=total,
            used_sessions=used,
            remaining_sessions=remaining,
            progress_percentage=_round(used / total * 100) if total > 0 else 0.0,
            status=derive_package_status(total, remaining, player.expiration_date, today, used=used),
        )

    def set_sessions_total_logic(self, session: Session, player: Player, sessions: Optional[float]) -> None:
        # Пересчет только из посещаемости, без арифметики от старого remaining
        _, _, records = self._cycle_records(session, player)
        used = used_sessions(records)
        before = player.remaining_sessions
        player.sessions = _round(sessions) if sessions is not None else sessions
        player.remaining_sessions = remaining_sessions(player.sessions, used)
        session.flush()
        logger.info(
            f"Player {player.id} sessions set to {player.sessions}: used {used}, "
            f"remaining {before} -> {player.remaining_sessions}"
        )

    def _renew_package_logic(self, session: Session, player_id: int, package_data: PackageData, today: date) -> Player:
        player = self._lock_player(session, player_id)
        self._validate_package(package_data.sessions, package_data.enrollment_date, package_data.expiration_date)

        if player.has_package_data():
            reason = renewal_reason(player.sessions, player.remaining_sessions, player.expiration_date, today)
            try:
                history_crud.create_history_entry(session, player, reason.value)
            except (ProgrammingError, OperationalError) as e:
                logger.error(f"Failed to archive package of player {player.id}: {e}")
                if _is_missing_history_table(e):
                    raise PackageHistoryUnavailable() from e
                raise
            logger.info(f"Archived package of player {player.id} with reason '{reason.value}'")

        player.package_type = package_data.package_type
        player.sessions = _round(package_data.sessions)
        player.remaining_sessions = _round(package_data.sessions)
        player.enrollment_date = package_data.enrollment_date
        player.expiration_date = package_data.expiration_date
        session.flush()
        logger.info(
            f"Player {player.id} renewed to cycle {current_cycle_number(history_crud.count_player_history(session, player.id))} "
            f"with {player.sessions} sessions"
        )
        return player

    def _update_attendance_logic(
        self,
        session: Session,
        record_id: int,
        status: AttendanceStatus,
        session_duration: Optional[float],
    ) -> AttendanceRecord:
        if session_duration is not None and session_duration <= 0:
            raise InvalidAttendanceUpdate("Session duration must be a positive number")

        record = attendance_crud.get_attendance_record(session, record_id)
        if not record:
            raise AttendanceRecordNotFound(f"Attendance record {record_id} not found")

        player = self._lock_player(session, record.player_id)
        old_status = record.status
        old_duration = record.session_duration

        history = history_crud.get_player_history(session, player.id)
        cycle_number, window = self._current_cycle(player, history)

        if status == AttendanceStatus.PRESENT:
            record.session_duration = resolve_session_duration(player.package_type, session_duration)
            if record.package_cycle is None:
                record.package_cycle = cycle_number
        record.status = status
        record.marked_at = datetime.utcnow() if status != AttendanceStatus.PENDING else None

        # Записи архивного цикла не трогают квоту текущего
        if record_in_cycle(record, cycle_number, window):
            before = player.remaining_sessions
            player.remaining_sessions = apply_attendance_transition(
                player.remaining_sessions,
                player.sessions,
                old_status,
                old_duration,
                record.status,
                record.session_duration,
            )
            if before != player.remaining_sessions:
                logger.info(
                    f"Attendance {record.id} {old_status} -> {status}: player {player.id} "
                    f"remaining {before} -> {player.remaining_sessions}"
                )
        else:
            logger.debug(f"Attendance {record.id} belongs to cycle {record.package_cycle}, live quota unchanged")

        session.flush()
        return record

    def release_record_logic(self, session: Session, record: AttendanceRecord) -> None:
        """
        Возвращает квоту за present-запись, которая сейчас будет удалена
        (удаление сессии или игрока из состава). Вызывается внутри транзакции.
        """
        if record.status != AttendanceStatus.PRESENT:
            return
        player = self._lock_player(session, record.player_id)
        history = history_crud.get_player_history(session, player.id)
        cycle_number, window = self._current_cycle(player, history)
        if not record_in_cycle(record, cycle_number, window):
            return
        player.remaining_sessions = apply_attendance_transition(
            player.remaining_sessions,
            player.sessions,
            AttendanceStatus.PRESENT,
            record.session_duration,
            AttendanceStatus.ABSENT,
            None,
        )
        session.flush()
        logger.info(f"Released {effective_duration(record.session_duration)} session(s) for player {player.id}")
