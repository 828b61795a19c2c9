import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.crud import payment as crud_payment
from hoops_admin.dependencies import get_db
from hoops_admin.errors.payment_errors import PaymentError, PaymentNotFound
from hoops_admin.errors.player_errors import PlayerNotFound
from hoops_admin.schemas.payment import BalanceResponse, PaymentResponse
from hoops_admin.services.balance_ledger import BalanceLedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    payment = crud_payment.get_payment(db, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.delete("/{payment_id}", response_model=BalanceResponse)
def delete_payment(
    payment_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    """
    Удаление платежа.
    Возвращает пересчитанный остаток к оплате игрока.
    """
    service = BalanceLedgerService(db)
    try:
        player = service.delete_payment(payment_id)
        return service.get_balance(player.id)
    except (PaymentNotFound, PlayerNotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=str(e))
