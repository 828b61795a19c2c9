import pytest
from sqlalchemy.orm import Session

from hoops_admin.errors.payment_errors import PaymentNotFound
from hoops_admin.errors.player_errors import PlayerNotFound
from hoops_admin.models import PlayerPayment
from hoops_admin.services.balance_ledger import BalanceLedgerService


class TestBalanceLedgerService:

    def test_record_payment_recomputes_balance(self, db_session: Session, test_player):
        service = BalanceLedgerService(db_session)

        payment = service.record_payment(test_player.id, payment_amount=500, notes="cash")

        db_session.refresh(test_player)
        assert payment.id is not None
        assert payment.payment_date is not None
        assert test_player.remaining_balance == 3500

    def test_scenario_b_delete_payment(self, db_session: Session, test_player, test_payments):
        service = BalanceLedgerService(db_session)

        player = service.delete_payment(test_payments[0].id)

        assert player.remaining_balance == 3500
        assert db_session.query(PlayerPayment).count() == 1

    def test_balance_summary(self, db_session: Session, test_player, test_payments):
        summary = BalanceLedgerService(db_session).get_balance(test_player.id)

        assert summary.total_training_fee == 5000
        assert summary.downpayment == 1000
        assert summary.total_paid == 1000
        assert summary.remaining_balance == 3000

    def test_fee_change_recomputes_balance(self, db_session: Session, test_player, test_payments):
        player = BalanceLedgerService(db_session).update_payment_info(test_player.id, total_training_fee=6000)

        assert player.remaining_balance == 4000

    def test_overpayment_clamps_to_zero(self, db_session: Session, test_player, test_payments):
        player = BalanceLedgerService(db_session).update_payment_info(test_player.id, downpayment=4500)

        assert player.remaining_balance == 0

    def test_recalculate_fixes_stale_balance(self, db_session: Session, test_player, test_payments):
        test_player.remaining_balance = 1
        db_session.commit()

        player = BalanceLedgerService(db_session).recalculate_balance(test_player.id)

        assert player.remaining_balance == 3000

    def test_delete_unknown_payment(self, db_session: Session):
        with pytest.raises(PaymentNotFound):
            BalanceLedgerService(db_session).delete_payment(9999)

    def test_payment_for_unknown_player(self, db_session: Session):
        with pytest.raises(PlayerNotFound):
            BalanceLedgerService(db_session).record_payment(9999, payment_amount=100)
