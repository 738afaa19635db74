"""
Tests for BalanceLedger.
"""

from decimal import Decimal

import pytest

from warehouseman.exceptions import StockError
from warehouseman.models import Balance, Movement
from warehouseman.services.ledger import Adjustment, BalanceLedger, net_adjustments


pytestmark = pytest.mark.django_db


@pytest.fixture
def ledger():
    return BalanceLedger()


class TestNetAdjustments:
    """Tests for net_adjustments()."""

    def test_sums_per_key(self):
        net = net_adjustments([
            Adjustment(1, 1, Decimal('5')),
            Adjustment(2, 1, Decimal('3')),
            Adjustment(1, 1, Decimal('-2')),
        ])

        assert net == [Adjustment(1, 1, Decimal('3')), Adjustment(2, 1, Decimal('3'))]

    def test_drops_zero_net(self):
        net = net_adjustments([Adjustment(1, 1, Decimal('5')), Adjustment(1, 1, Decimal('-5'))])

        assert net == []

    def test_order_independent_totals(self):
        items = [Adjustment(1, 1, Decimal('5')), Adjustment(1, 1, Decimal('-7')), Adjustment(1, 2, 1)]

        forward = {adj.key: adj.delta for adj in net_adjustments(items)}
        backward = {adj.key: adj.delta for adj in net_adjustments(reversed(items))}

        assert forward == backward == {(1, 1): Decimal('-2'), (1, 2): Decimal('1')}


class TestAdjustBatch:
    """Tests for ledger.adjust_batch()."""

    def test_creates_balance_on_positive_delta(self, ledger, flour, kg):
        """Missing key + positive delta creates the row."""
        touched = ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('10'))], reason='test.in')

        assert len(touched) == 1
        assert touched[0].quantity == Decimal('10')
        assert ledger.get_balance(flour.pk, kg.pk) == Decimal('10')

    def test_missing_balance_on_negative_delta(self, ledger, flour, kg):
        with pytest.raises(StockError) as exc:
            ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('-1'))], reason='test.out')

        assert exc.value.code == 'BALANCE_NOT_FOUND'
        assert not Balance.objects.exists()

    def test_insufficient_stock(self, ledger, flour, kg):
        ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('5'))], reason='test.in')

        with pytest.raises(StockError) as exc:
            ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('-8'))], reason='test.out')

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.available == Decimal('5')
        assert exc.value.required == Decimal('8')
        assert ledger.get_balance(flour.pk, kg.pk) == Decimal('5')

    def test_can_drain_to_zero(self, ledger, flour, kg):
        ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('5'))], reason='test.in')
        ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('-5'))], reason='test.out')

        assert ledger.get_balance(flour.pk, kg.pk) == Decimal('0')

    def test_same_key_is_netted(self, ledger, flour, kg):
        """+10 and -4 on one key = a single +6 movement."""
        ledger.adjust_batch([
            Adjustment(flour.pk, kg.pk, Decimal('10')),
            Adjustment(flour.pk, kg.pk, Decimal('-4')),
        ], reason='test.mixed')

        assert ledger.get_balance(flour.pk, kg.pk) == Decimal('6')
        assert Movement.objects.count() == 1
        assert Movement.objects.get().delta == Decimal('6')

    def test_netted_negative_on_missing_key_fails(self, ledger, flour, kg):
        """Netting happens before the missing-row check."""
        with pytest.raises(StockError) as exc:
            ledger.adjust_batch([
                Adjustment(flour.pk, kg.pk, Decimal('3')),
                Adjustment(flour.pk, kg.pk, Decimal('-4')),
            ], reason='test.mixed')

        assert exc.value.code == 'BALANCE_NOT_FOUND'

    def test_zero_net_is_noop(self, ledger, flour, kg):
        touched = ledger.adjust_batch([
            Adjustment(flour.pk, kg.pk, Decimal('3')),
            Adjustment(flour.pk, kg.pk, Decimal('-3')),
        ], reason='test.noop')

        assert touched == []
        assert not Movement.objects.exists()

    def test_failed_batch_leaves_nothing(self, ledger, flour, sugar, kg):
        """A failing key rolls back the keys applied before it."""
        ledger.adjust_batch([Adjustment(sugar.pk, kg.pk, Decimal('1'))], reason='test.in')

        with pytest.raises(StockError):
            ledger.adjust_batch([
                Adjustment(flour.pk, kg.pk, Decimal('10')),
                Adjustment(sugar.pk, kg.pk, Decimal('-2')),
            ], reason='test.mixed')

        assert ledger.get_balance(flour.pk, kg.pk) is None
        assert ledger.get_balance(sugar.pk, kg.pk) == Decimal('1')

    def test_movement_records_reason_and_reference(self, ledger, stocked, flour, kg):
        movement = Movement.objects.get(balance__resource=flour, balance__unit=kg)

        assert movement.reason == 'supply.created'
        assert movement.reference == stocked
        assert movement.metadata == {'number': 'IN-1'}

    def test_rejects_delta_finer_than_column(self, ledger, flour, kg):
        with pytest.raises(StockError) as exc:
            ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('1.0004'))], reason='test.in')

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not Balance.objects.exists()
        assert not Movement.objects.exists()

    def test_without_row_locks(self, flour, kg):
        ledger = BalanceLedger(lock_rows=False)
        ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('2'))], reason='test.in')

        assert ledger.get_balance(flour.pk, kg.pk) == Decimal('2')

    def test_lock_rows_follows_setting(self, settings):
        settings.WAREHOUSEMAN = {'LOCK_BALANCES': False}

        assert BalanceLedger().lock_rows is False
        assert BalanceLedger(lock_rows=True).lock_rows is True


class TestValidateBatch:
    """Tests for ledger.validate_batch()."""

    def test_positive_deltas_always_pass(self, ledger, flour, kg):
        ledger.validate_batch([Adjustment(flour.pk, kg.pk, Decimal('1000'))])

    def test_checks_against_persisted_balance(self, ledger, flour, kg):
        ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('5'))], reason='test.in')

        ledger.validate_batch([Adjustment(flour.pk, kg.pk, Decimal('-5'))])
        with pytest.raises(StockError) as exc:
            ledger.validate_batch([Adjustment(flour.pk, kg.pk, Decimal('-6'))])

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.data['resource_id'] == flour.pk

    def test_each_adjustment_checked_alone(self, ledger, flour, kg):
        """Two -3 against 5 both pass: each sees the pre-batch value."""
        ledger.adjust_batch([Adjustment(flour.pk, kg.pk, Decimal('5'))], reason='test.in')

        ledger.validate_batch([
            Adjustment(flour.pk, kg.pk, Decimal('-3')),
            Adjustment(flour.pk, kg.pk, Decimal('-3')),
        ])

    def test_missing_key_counts_as_zero(self, ledger, flour, kg):
        with pytest.raises(StockError) as exc:
            ledger.validate_batch([Adjustment(flour.pk, kg.pk, Decimal('-1'))])

        assert exc.value.available == Decimal('0')


class TestBalanceQueries:
    """Tests for balance reads."""

    def test_get_balance_none_when_missing(self, ledger, flour, kg):
        assert ledger.get_balance(flour.pk, kg.pk) is None

    def test_list_balances_filters(self, wh, stocked, flour, sugar, kg):
        assert len(wh.get_balances()) == 2
        assert [b.resource for b in wh.get_balances([sugar.pk])] == [sugar]
        assert len(wh.get_balances([flour.pk], [kg.pk])) == 1

    def test_recalculate_fixes_drift(self, stocked, flour, kg):
        balance = Balance.objects.get(resource=flour, unit=kg)
        Balance.objects.filter(pk=balance.pk).update(quantity=Decimal('7'))
        balance.refresh_from_db()

        assert balance.recalculate() == Decimal('100')
        balance.refresh_from_db()
        assert balance.quantity == Decimal('100')


class TestMovementImmutability:
    """Movements are append-only."""

    def test_cannot_update(self, stocked):
        movement = Movement.objects.first()
        movement.reason = 'tampered'

        with pytest.raises(ValueError):
            movement.save()

    def test_cannot_delete(self, stocked):
        with pytest.raises(ValueError):
            Movement.objects.first().delete()
