from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.models import PackageHistory, Player


def get_history_entry(db: Session, entry_id: int) -> Optional[PackageHistory]:
    return db.query(PackageHistory).filter(PackageHistory.id == entry_id).first()


def get_player_history(db: Session, player_id: int) -> List[PackageHistory]:
    """История пакетов игрока в порядке архивации (старые первыми)"""
    return (
        db.query(PackageHistory)
        .filter(PackageHistory.player_id == player_id)
        .order_by(PackageHistory.captured_at.asc(), PackageHistory.id.asc())
        .all()
    )


def count_player_history(db: Session, player_id: int) -> int:
    return db.query(PackageHistory).filter(PackageHistory.player_id == player_id).count()


def create_history_entry(db: Session, player: Player, reason: str) -> PackageHistory:
    """
    Снимок текущих полей пакета игрока.
    НЕ делаем commit здесь - это делает сервис
    """
    entry = PackageHistory(
        player_id=player.id,
        package_type=player.package_type,
        sessions=player.sessions,
        remaining_sessions=player.remaining_sessions,
        enrollment_date=player.enrollment_date,
        expiration_date=player.expiration_date,
        reason=reason,
    )
    db.add(entry)
    db.flush()
    return entry


def delete_history_entry(db: Session, entry: PackageHistory) -> None:
    db.delete(entry)
    db.flush()
