import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from hoops_admin.crud import attendance as attendance_crud
from hoops_admin.crud import package_history as history_crud
from hoops_admin.crud import player as player_crud
from hoops_admin.database import transactional
from hoops_admin.errors.package_errors import InvalidPackageData, PackageHistoryNotFound
from hoops_admin.errors.player_errors import PlayerNotFound
from hoops_admin.models import (
    AttendanceRecord,
    AttendanceStatus,
    PackageHistory,
    PackageStatus,
    Player,
    RenewalReason,
)
from hoops_admin.services.quota_ledger import (
    CycleWindow,
    as_datetime,
    current_cycle_window,
    derive_package_status,
    record_in_cycle,
    remaining_sessions,
    used_sessions,
)

logger = logging.getLogger(__name__)

INITIAL_PACKAGE_LABEL = "initial package"
RENEWAL_LABEL = "renewal"


@dataclass
class PackageCycle:
    cycle_number: int
    label: str
    is_current: bool
    start: Optional[datetime]
    end: Optional[datetime]
    attended_sessions: float
    status: PackageStatus
    history_id: Optional[int] = None
    package_type: Optional[str] = None
    sessions: Optional[float] = None
    remaining_sessions: Optional[float] = None
    enrollment_date: Optional[date] = None
    expiration_date: Optional[date] = None
    captured_at: Optional[datetime] = None
    reason: Optional[str] = None
    attendance: List[AttendanceRecord] = field(default_factory=list)


def history_window(history: Sequence[PackageHistory], index: int) -> CycleWindow:
    """
    Окно архивного цикла: от даты зачисления (или момента архивации) до
    архивации следующего снимка, а для последнего снимка - до его даты окончания.
    """
    entry = history[index]
    start = as_datetime(entry.enrollment_date) if entry.enrollment_date else as_datetime(entry.captured_at)
    if index + 1 < len(history):
        end = as_datetime(history[index + 1].captured_at)
    else:
        end = as_datetime(entry.expiration_date) if entry.expiration_date else as_datetime(entry.captured_at)
    return CycleWindow(start=start, end=end)


def archived_status(entry: PackageHistory, attended: float, today: date) -> PackageStatus:
    if entry.reason == RenewalReason.EXPIRED.value:
        return PackageStatus.EXPIRED
    status = derive_package_status(entry.sessions, entry.remaining_sessions, entry.expiration_date, today, used=attended)
    # Досрочно закрытый цикл больше не "идет"
    return PackageStatus.ENDED if status == PackageStatus.ONGOING else status


def build_package_cycles(
    player: Player,
    history: Sequence[PackageHistory],
    records: Sequence[AttendanceRecord],
    today: date,
) -> List[PackageCycle]:
    """
    Полная последовательность циклов игрока, от старых к новым: архивные
    снимки (цикл i+1 для снимка i) и текущий живой цикл последним.
    """
    history = sorted(history, key=lambda entry: (entry.captured_at, entry.id or 0))
    cycles: List[PackageCycle] = []

    for index, entry in enumerate(history):
        cycle_number = index + 1
        window = history_window(history, index)
        attributed = [record for record in records if record_in_cycle(record, cycle_number, window)]
        attended = used_sessions(attributed)
        cycles.append(PackageCycle(
            cycle_number=cycle_number,
            label=INITIAL_PACKAGE_LABEL if cycle_number == 1 else RENEWAL_LABEL,
            is_current=False,
            start=window.start,
            end=window.end,
            attended_sessions=attended,
            status=archived_status(entry, attended, today),
            history_id=entry.id,
            package_type=entry.package_type,
            sessions=entry.sessions,
            remaining_sessions=entry.remaining_sessions,
            enrollment_date=entry.enrollment_date,
            expiration_date=entry.expiration_date,
            captured_at=entry.captured_at,
            reason=entry.reason,
            attendance=attributed,
        ))
        logger.debug(f"Cycle {cycle_number} of player {player.id}: {len(attributed)} records, {attended} attended")

    current_number = len(history) + 1
    latest_capture = history[-1].captured_at if history else None
    window = current_cycle_window(player.enrollment_date, player.expiration_date, latest_capture)
    attributed = [record for record in records if record_in_cycle(record, current_number, window)]
    attended = used_sessions(attributed)
    remaining = remaining_sessions(player.sessions, attended)
    cycles.append(PackageCycle(
        cycle_number=current_number,
        label=INITIAL_PACKAGE_LABEL if current_number == 1 else RENEWAL_LABEL,
        is_current=True,
        start=window.start,
        end=window.end,
        attended_sessions=attended,
        status=derive_package_status(player.sessions, remaining, player.expiration_date, today, used=attended),
        package_type=player.package_type,
        sessions=player.sessions,
        remaining_sessions=remaining,
        enrollment_date=player.enrollment_date,
        expiration_date=player.expiration_date,
        attendance=attributed,
    ))
    return cycles


class PackageHistoryService:
    def __init__(self, db: Session):
        self.db = db

    def get_history(self, player_id: int) -> List[PackageHistory]:
        if not player_crud.get_player(self.db, player_id):
            raise PlayerNotFound(f"Player {player_id} not found")
        return history_crud.get_player_history(self.db, player_id)

    def get_cycles(self, player_id: int, today: Optional[date] = None) -> List[PackageCycle]:
        player = player_crud.get_player(self.db, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found")
        history = history_crud.get_player_history(self.db, player_id)
        records = attendance_crud.get_player_attendance(self.db, player_id)
        return build_package_cycles(player, history, records, today or date.today())

    def delete_history_entry(self, player_id: int, entry_id: int, today: Optional[date] = None) -> None:
        """
        Удаляет архивный снимок; живые поля игрока не меняются.

        Циклы после удаленного получают номер на единицу меньше, теги package_cycle
        сдвигаются вместе с ними. Посещаемость удаленного цикла переходит в
        предыдущий архивный цикл (для первого снимка - в следующий), поэтому
        текущий цикл не получает и не теряет записей.
        """
        with transactional(self.db) as session:
            player = player_crud.get_player_for_update(session, player_id)
            if not player:
                raise PlayerNotFound(f"Player {player_id} not found")

            history = history_crud.get_player_history(session, player_id)
            index = next((i for i, entry in enumerate(history) if entry.id == entry_id), None)
            if index is None:
                raise PackageHistoryNotFound(f"Package history entry {entry_id} not found")

            records = attendance_crud.get_player_attendance(session, player_id)
            cycles = build_package_cycles(player, history, records, today or date.today())
            deleted_cycle = index + 1
            if len(history) == 1 and cycles[index].attended_sessions:
                # Некуда перенести посещения, кроме текущего цикла
                raise InvalidPackageData(
                    f"Package history entry {entry_id} is the only archived cycle and has attended sessions"
                )

            # Принадлежность фиксируется тегом до удаления, включая старые записи без тега.
            # Неотмеченные записи без тега получат цикл при отметке.
            target_cycle = deleted_cycle - 1 if deleted_cycle > 1 else 1
            retagged = set()
            for cycle in cycles:
                if cycle.cycle_number < deleted_cycle:
                    new_number = cycle.cycle_number
                elif cycle.cycle_number == deleted_cycle:
                    new_number = target_cycle
                else:
                    new_number = cycle.cycle_number - 1
                for record in cycle.attendance:
                    if record.id in retagged:
                        continue
                    if record.package_cycle is None and record.status == AttendanceStatus.PENDING:
                        continue
                    record.package_cycle = new_number
                    retagged.add(record.id)

            history_crud.delete_history_entry(session, history[index])
            logger.info(
                f"Package history entry {entry_id} (cycle {deleted_cycle}) of player {player_id} deleted, "
                f"{len(retagged)} attendance record(s) retagged"
            )

    def list_player_attendance(self, player_id: int, cycle: Optional[int] = None) -> List[AttendanceRecord]:
        """Посещаемость игрока целиком или только записи одного цикла."""
        if cycle is None:
            if not player_crud.get_player(self.db, player_id):
                raise PlayerNotFound(f"Player {player_id} not found")
            return attendance_crud.get_player_attendance(self.db, player_id)

        for package_cycle in self.get_cycles(player_id):
            if package_cycle.cycle_number == cycle:
                return package_cycle.attendance
        raise PackageHistoryNotFound(f"Package cycle {cycle} not found for player {player_id}")
