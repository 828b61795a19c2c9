import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.config import config
from hoops_admin.crud import branch as branch_crud
from hoops_admin.crud import player as player_crud
from hoops_admin.database import transactional
from hoops_admin.errors.player_errors import InvalidPlayerData, PlayerNotFound
from hoops_admin.models import Player
from hoops_admin.schemas.player import PlayerCreate, PlayerUpdate
from hoops_admin.services.balance_ledger import BalanceLedgerService, compute_remaining_balance
from hoops_admin.services.quota_ledger import QuotaLedgerService

logger = logging.getLogger(__name__)


class PlayerService:
    def __init__(self, db: Session):
        self.db = db
        self.quota_ledger = QuotaLedgerService(db)
        self.balance_ledger = BalanceLedgerService(db)

    def get_player(self, player_id: int) -> Player:
        player = player_crud.get_player(self.db, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found")
        return player

    def list_players(
        self,
        *,
        search: Optional[str] = None,
        branch_id: Optional[int] = None,
        package_type: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> dict:
        """Страница игроков в формате PaginatedResponse"""
        page = max(page, 1)
        total_count = player_crud.count_players(
            self.db, search=search, branch_id=branch_id, package_type=package_type
        )
        players = player_crud.get_players(
            self.db,
            search=search,
            branch_id=branch_id,
            package_type=package_type,
            skip=(page - 1) * page_size,
            limit=page_size,
        )
        return {
            "total_pages": math.ceil(total_count / page_size) if page_size else 0,
            "total_count": total_count,
            "page": page,
            "page_size": page_size,
            "data": players,
        }

    def create_player(self, player_data: PlayerCreate, context: ActingContext) -> Player:
        """
        Новый игрок. Произвольную начальную квоту может задать только роль
        с правом SET_INITIAL_SESSIONS, остальные получают квоту по умолчанию.
        """
        with transactional(self.db) as session:
            self._validate_unique_email(session, player_data.email)
            self._validate_branch(session, player_data.branch_id)
            if player_data.expiration_date and player_data.enrollment_date and \
                    player_data.expiration_date < player_data.enrollment_date:
                raise InvalidPlayerData("Expiration date cannot be before enrollment date")

            if context.can(Permission.SET_INITIAL_SESSIONS) and player_data.sessions is not None:
                sessions = round(player_data.sessions, 2)
            else:
                sessions = float(config.DEFAULT_PLAYER_SESSIONS)

            player = player_crud.create_player(
                session,
                name=player_data.name,
                email=player_data.email,
                phone=player_data.phone or None,
                branch_id=player_data.branch_id,
                package_type=player_data.package_type,
                sessions=sessions,
                remaining_sessions=sessions,
                enrollment_date=player_data.enrollment_date,
                expiration_date=player_data.expiration_date,
                total_training_fee=round(player_data.total_training_fee or 0, 2),
                downpayment=round(player_data.downpayment or 0, 2),
                remaining_balance=compute_remaining_balance(
                    player_data.total_training_fee, player_data.downpayment, []
                ),
            )
            logger.info(f"Player {player.id} created by {context.role.value} with {sessions} sessions")
            return player

    def update_player(self, player_id: int, player_data: PlayerUpdate) -> Player:
        update_data = player_data.model_dump(exclude_unset=True)
        sessions = update_data.pop("sessions", None)
        total_training_fee = update_data.pop("total_training_fee", None)
        downpayment = update_data.pop("downpayment", None)

        with transactional(self.db) as session:
            player = player_crud.get_player_for_update(session, player_id)
            if not player:
                raise PlayerNotFound(f"Player {player_id} not found")

            if "email" in update_data and update_data["email"] != player.email:
                self._validate_unique_email(session, update_data["email"])
            if "branch_id" in update_data:
                self._validate_branch(session, update_data["branch_id"])

            for key, value in update_data.items():
                setattr(player, key, value)

            if player.expiration_date and player.enrollment_date and player.expiration_date < player.enrollment_date:
                raise InvalidPlayerData("Expiration date cannot be before enrollment date")

            if sessions is not None and sessions != player.sessions:
                self.quota_ledger.set_sessions_total_logic(session, player, sessions)
            self.balance_ledger.apply_payment_info_logic(session, player, total_training_fee, downpayment)
            session.flush()
            return player

    def delete_player(self, player_id: int) -> None:
        with transactional(self.db) as session:
            player = player_crud.get_player(session, player_id)
            if not player:
                raise PlayerNotFound(f"Player {player_id} not found")
            player_crud.delete_player(session, player)
            logger.info(f"Player {player_id} deleted with attendance, package history and payments")

    def _validate_unique_email(self, session: Session, email: str) -> None:
        if player_crud.get_player_by_email(session, email):
            raise InvalidPlayerData(f"Player with email {email} already exists")

    def _validate_branch(self, session: Session, branch_id: Optional[int]) -> None:
        if branch_id is not None and not branch_crud.get_branch(session, branch_id):
            raise InvalidPlayerData(f"Branch {branch_id} not found")
