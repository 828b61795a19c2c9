import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.dependencies import get_db
from hoops_admin.errors.package_errors import (
    InvalidPackageData,
    PackageError,
    PackageHistoryNotFound,
    PackageHistoryUnavailable,
)
from hoops_admin.errors.payment_errors import InvalidPaymentData, PaymentError
from hoops_admin.errors.player_errors import InvalidPlayerData, PlayerError, PlayerNotFound
from hoops_admin.schemas.attendance import AttendanceResponse
from hoops_admin.schemas.package import (
    PackageCycleResponse,
    PackageData,
    PackageHistoryResponse,
    PackageRetrieveRequest,
)
from hoops_admin.schemas.pagination import PaginatedResponse
from hoops_admin.schemas.payment import BalanceResponse, PaymentCreate, PaymentInfoUpdate, PaymentResponse
from hoops_admin.schemas.player import PlayerCreate, PlayerResponse, PlayerUpdate, QuotaSummaryResponse
from hoops_admin.services.balance_ledger import BalanceLedgerService
from hoops_admin.services.package_history import PackageHistoryService
from hoops_admin.services.player_service import PlayerService
from hoops_admin.services.quota_ledger import QuotaLedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["Players"])


def _raise_package_http_error(e: Exception):
    if isinstance(e, PlayerNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PackageHistoryNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (InvalidPackageData, InvalidPlayerData)):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, PackageHistoryUnavailable):
        raise HTTPException(status_code=503, detail=str(e))
    logger.error(f"Package operation failed: {e}")
    raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# ИГРОКИ
# =============================================================================

@router.get("/", response_model=PaginatedResponse[PlayerResponse])
def get_players(
    search: Optional[str] = Query(None, description="Поиск по имени или email"),
    branch_id: Optional[int] = Query(None),
    package_type: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    return PlayerService(db).list_players(
        search=search, branch_id=branch_id, package_type=package_type, page=page, page_size=page_size
    )


@router.post("/", response_model=PlayerResponse, status_code=201)
def create_player(
    player_data: PlayerCreate,
    current_user: ActingContext = Depends(require_permission(Permission.CREATE_PLAYERS)),
    db: Session = Depends(get_db),
):
    """
    Создание игрока.
    Тренер может создать игрока, но квота сессий будет значением по умолчанию.
    """
    try:
        return PlayerService(db).create_player(player_data, current_user)
    except InvalidPlayerData as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PlayerError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{player_id}", response_model=PlayerResponse)
def get_player(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    try:
        return PlayerService(db).get_player(player_id)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{player_id}", response_model=PlayerResponse)
def update_player(
    player_id: int,
    player_data: PlayerUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    try:
        return PlayerService(db).update_player(player_id, player_data)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidPlayerData, InvalidPackageData, InvalidPaymentData) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (PlayerError, PackageError, PaymentError) as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{player_id}", status_code=204)
def delete_player(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.DELETE_PLAYERS)),
    db: Session = Depends(get_db),
):
    try:
        PlayerService(db).delete_player(player_id)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{player_id}/quota", response_model=QuotaSummaryResponse)
def get_quota_summary(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    """Квота текущего цикла, посчитанная по посещаемости"""
    try:
        return QuotaLedgerService(db).get_quota_summary(player_id)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{player_id}/attendance", response_model=List[AttendanceResponse])
def get_player_attendance(
    player_id: int,
    cycle: Optional[int] = Query(None, ge=1, description="Номер цикла пакета"),
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    try:
        return PackageHistoryService(db).list_player_attendance(player_id, cycle)
    except (PlayerNotFound, PackageHistoryNotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))


# =============================================================================
# ПАКЕТ
# =============================================================================

@router.post("/{player_id}/package/renew", response_model=PlayerResponse)
def renew_package(
    player_id: int,
    package_data: PackageData,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    """
    Продление пакета: текущий пакет уходит в историю с причиной
    (expired / completed / early), квота выдается заново.
    """
    try:
        return QuotaLedgerService(db).renew_package(player_id, package_data)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.patch("/{player_id}/package", response_model=PlayerResponse)
def edit_package(
    player_id: int,
    package_data: PackageData,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    try:
        return QuotaLedgerService(db).edit_package(player_id, package_data)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.post("/{player_id}/package/expire", response_model=PlayerResponse)
def expire_package(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    try:
        return QuotaLedgerService(db).expire_package(player_id)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.post("/{player_id}/package/retrieve", response_model=PlayerResponse)
def retrieve_package(
    player_id: int,
    retrieve_data: PackageRetrieveRequest,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    try:
        return QuotaLedgerService(db).retrieve_package(
            player_id, retrieve_data.extend_days, retrieve_data.sessions
        )
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.post("/{player_id}/package/recalculate", response_model=PlayerResponse)
def recalculate_remaining_sessions(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    """Сверка remaining_sessions с посещаемостью текущего цикла"""
    try:
        return QuotaLedgerService(db).recalculate_remaining_sessions(player_id)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.get("/{player_id}/package/history", response_model=List[PackageCycleResponse])
def get_package_cycles(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    try:
        return PackageHistoryService(db).get_cycles(player_id)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.get("/{player_id}/package/snapshots", response_model=List[PackageHistoryResponse])
def get_package_snapshots(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    """Архивные снимки пакета без сопоставления посещаемости"""
    try:
        return PackageHistoryService(db).get_history(player_id)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


@router.delete("/{player_id}/package/history/{entry_id}", status_code=204)
def delete_package_history_entry(
    player_id: int,
    entry_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PACKAGES)),
    db: Session = Depends(get_db),
):
    try:
        PackageHistoryService(db).delete_history_entry(player_id, entry_id)
    except (PlayerError, PackageError) as e:
        _raise_package_http_error(e)


# =============================================================================
# ОПЛАТА
# =============================================================================

@router.get("/{player_id}/payments", response_model=List[PaymentResponse])
def get_player_payments(
    player_id: int,
    skip: int = 0,
    limit: int = 100,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    try:
        return BalanceLedgerService(db).get_payments(player_id, skip=skip, limit=limit)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{player_id}/payments", response_model=PaymentResponse, status_code=201)
def record_payment(
    player_id: int,
    payment: PaymentCreate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    """Регистрация платежа и пересчет остатка к оплате"""
    try:
        return BalanceLedgerService(db).record_payment(
            player_id,
            payment_amount=payment.payment_amount,
            payment_date=payment.payment_date,
            notes=payment.notes,
        )
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPaymentData as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{player_id}/balance", response_model=BalanceResponse)
def get_balance(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    try:
        return BalanceLedgerService(db).get_balance(player_id)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{player_id}/payment-info", response_model=BalanceResponse)
def update_payment_info(
    player_id: int,
    payment_info: PaymentInfoUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    service = BalanceLedgerService(db)
    try:
        service.update_payment_info(
            player_id,
            total_training_fee=payment_info.total_training_fee,
            downpayment=payment_info.downpayment,
        )
        return service.get_balance(player_id)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPaymentData as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{player_id}/balance/recalculate", response_model=BalanceResponse)
def recalculate_balance(
    player_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_PAYMENTS)),
    db: Session = Depends(get_db),
):
    service = BalanceLedgerService(db)
    try:
        service.recalculate_balance(player_id)
        return service.get_balance(player_id)
    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
