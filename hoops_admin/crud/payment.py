from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from hoops_admin.models import PlayerPayment


# =============================================================================
# ПРОСТЫЕ CRUD ОПЕРАЦИИ С ПЛАТЕЖАМИ
# =============================================================================

def get_payment(db: Session, payment_id: int) -> Optional[PlayerPayment]:
    """
    Получение платежа по ID
    """
    return db.query(PlayerPayment).filter(PlayerPayment.id == payment_id).first()


def get_player_payments(
    db: Session,
    player_id: int,
    *,
    skip: int = 0,
    limit: int = 100,
) -> List[PlayerPayment]:
    """
    Получение платежей игрока, новые первыми
    """
    return (
        db.query(PlayerPayment)
        .filter(PlayerPayment.player_id == player_id)
        .order_by(desc(PlayerPayment.payment_date), desc(PlayerPayment.id))
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_total_paid(db: Session, player_id: int) -> float:
    """
    Сумма всех платежей игрока
    """
    total = (
        db.query(func.coalesce(func.sum(PlayerPayment.payment_amount), 0.0))
        .filter(PlayerPayment.player_id == player_id)
        .scalar()
    )
    return float(total or 0.0)


def create_payment(
    db: Session,
    player_id: int,
    payment_amount: float,
    payment_date: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> PlayerPayment:
    """
    Создание нового платежа
    """
    db_payment = PlayerPayment(
        player_id=player_id,
        payment_amount=payment_amount,
        payment_date=payment_date or datetime.utcnow(),
        notes=notes,
    )
    db.add(db_payment)
    # НЕ делаем commit здесь - это делает сервис
    db.flush()
    return db_payment


def delete_payment(db: Session, payment: PlayerPayment) -> None:
    """
    Удаление платежа
    """
    db.delete(payment)
    # НЕ делаем commit здесь - это делает сервис
    db.flush()
