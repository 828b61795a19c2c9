import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from hoops_admin.models import Player

logger = logging.getLogger(__name__)


def get_player(db: Session, player_id: int) -> Optional[Player]:
    """Retrieves a player by ID."""
    return db.query(Player).filter(Player.id == player_id).first()


def get_player_for_update(db: Session, player_id: int) -> Optional[Player]:
    """
    Retrieves a player row locked for the rest of the transaction.

    Every ledger write path reads the player through here, so concurrent
    read-recompute-write sequences on the same player are serialized by the
    database (no-op on SQLite).
    """
    return db.query(Player).filter(Player.id == player_id).with_for_update().first()


def get_player_by_email(db: Session, email: str) -> Optional[Player]:
    return db.query(Player).filter(Player.email == email.strip().lower()).first()


def _filtered_query(
    db: Session,
    *,
    search: Optional[str] = None,
    branch_id: Optional[int] = None,
    package_type: Optional[str] = None,
):
    query = db.query(Player)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Player.name.ilike(pattern), Player.email.ilike(pattern)))
    if branch_id:
        query = query.filter(Player.branch_id == branch_id)
    if package_type:
        query = query.filter(Player.package_type == package_type)
    return query


def get_players(
    db: Session,
    *,
    search: Optional[str] = None,
    branch_id: Optional[int] = None,
    package_type: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Player]:
    """Retrieves players with optional filters, ordered by name."""
    query = _filtered_query(db, search=search, branch_id=branch_id, package_type=package_type)
    return query.order_by(Player.name).offset(skip).limit(limit).all()


def count_players(
    db: Session,
    *,
    search: Optional[str] = None,
    branch_id: Optional[int] = None,
    package_type: Optional[str] = None,
) -> int:
    return _filtered_query(db, search=search, branch_id=branch_id, package_type=package_type).count()


def create_player(db: Session, **fields) -> Player:
    """Creates a player without committing."""
    player = Player(**fields)
    db.add(player)
    db.flush()
    logger.info(f"new player: {player.name} <{player.email}>, sessions: {player.sessions}")
    return player


def delete_player(db: Session, player: Player) -> None:
    db.delete(player)
    db.flush()
