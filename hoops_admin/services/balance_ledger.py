import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from hoops_admin.crud import payment as payment_crud
from hoops_admin.crud import player as player_crud
from hoops_admin.database import transactional
from hoops_admin.errors.payment_errors import InvalidPaymentData, PaymentNotFound
from hoops_admin.errors.player_errors import PlayerNotFound
from hoops_admin.models import Player, PlayerPayment

logger = logging.getLogger(__name__)


def compute_remaining_balance(
    total_training_fee: Optional[float],
    downpayment: Optional[float],
    payments: Iterable[Optional[float]],
) -> float:
    """remaining_balance = max(0, fee - downpayment - sum(payments)); пустые значения = 0"""
    paid = sum(amount or 0 for amount in payments)
    return max(0.0, round((total_training_fee or 0) - (downpayment or 0) - paid, 2))


@dataclass
class BalanceSummary:
    player_id: int
    total_training_fee: float
    downpayment: float
    total_paid: float
    remaining_balance: float


class BalanceLedgerService:
    """
    Остаток к оплате игрока.

    Пересчитывается в той же транзакции, что и изменение любого из входов:
    добавление/удаление платежа, изменение стоимости или первого взноса.
    Платежи на месте не редактируются.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_balance(self, player_id: int) -> BalanceSummary:
        player = player_crud.get_player(self.db, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found")
        return self._summary(self.db, player)

    def get_payments(self, player_id: int, skip: int = 0, limit: int = 100) -> List[PlayerPayment]:
        if not player_crud.get_player(self.db, player_id):
            raise PlayerNotFound(f"Player {player_id} not found")
        return payment_crud.get_player_payments(self.db, player_id, skip=skip, limit=limit)

    def record_payment(
        self,
        player_id: int,
        payment_amount: float,
        payment_date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> PlayerPayment:
        if payment_amount is None or payment_amount <= 0:
            raise InvalidPaymentData("Amount must be positive")

        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            payment = payment_crud.create_payment(
                session,
                player_id=player.id,
                payment_amount=round(payment_amount, 2),
                payment_date=payment_date,
                notes=notes,
            )
            self._recalculate_logic(session, player)
            logger.info(f"Payment registered: {payment.id}, player {player.id}, amount {payment.payment_amount}")
            return payment

    def delete_payment(self, payment_id: int) -> Player:
        with transactional(self.db) as session:
            payment = payment_crud.get_payment(session, payment_id)
            if not payment:
                raise PaymentNotFound(f"Payment {payment_id} not found")
            player = self._lock_player(session, payment.player_id)
            payment_crud.delete_payment(session, payment)
            self._recalculate_logic(session, player)
            logger.info(f"Payment deleted: {payment_id}, player {player.id}")
            return player

    def update_payment_info(
        self,
        player_id: int,
        total_training_fee: Optional[float] = None,
        downpayment: Optional[float] = None,
    ) -> Player:
        """Изменение стоимости обучения и/или первого взноса."""
        for value in (total_training_fee, downpayment):
            if value is not None and value < 0:
                raise InvalidPaymentData("Amount must not be negative")

        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            self.apply_payment_info_logic(session, player, total_training_fee, downpayment)
            return player

    def recalculate_balance(self, player_id: int) -> Player:
        with transactional(self.db) as session:
            player = self._lock_player(session, player_id)
            self._recalculate_logic(session, player)
            return player

    # --- Non-transactional helpers (вызываются внутри чужой транзакции) ---

    def apply_payment_info_logic(
        self,
        session: Session,
        player: Player,
        total_training_fee: Optional[float],
        downpayment: Optional[float],
    ) -> None:
        changed = False
        if total_training_fee is not None and total_training_fee != player.total_training_fee:
            player.total_training_fee = round(total_training_fee, 2)
            changed = True
        if downpayment is not None and downpayment != player.downpayment:
            player.downpayment = round(downpayment, 2)
            changed = True
        if changed:
            self._recalculate_logic(session, player)

    def _lock_player(self, session: Session, player_id: int) -> Player:
        player = player_crud.get_player_for_update(session, player_id)
        if not player:
            raise PlayerNotFound(f"Player {player_id} not found")
        return player

    def _recalculate_logic(self, session: Session, player: Player) -> None:
        before = player.remaining_balance
        total_paid = payment_crud.get_total_paid(session, player.id)
        player.remaining_balance = compute_remaining_balance(
            player.total_training_fee, player.downpayment, [total_paid]
        )
        session.flush()
        logger.debug(f"Player {player.id} remaining balance {before} -> {player.remaining_balance}")

    def _summary(self, session: Session, player: Player) -> BalanceSummary:
        total_paid = payment_crud.get_total_paid(session, player.id)
        return BalanceSummary(
            player_id=player.id,
            total_training_fee=float(player.total_training_fee or 0),
            downpayment=float(player.downpayment or 0),
            total_paid=round(total_paid, 2),
            remaining_balance=compute_remaining_balance(player.total_training_fee, player.downpayment, [total_paid]),
        )
