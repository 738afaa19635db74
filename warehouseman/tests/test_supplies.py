"""
Tests for supply operations.
"""

from decimal import Decimal

import pytest

from warehouseman.exceptions import DocumentError, StockError
from warehouseman.models import Movement, SupplyDocument
from warehouseman.services.documents import DocumentFilter
from warehouseman.services.reconciler import ItemLine
from warehouseman.tests.helpers import balance_of, lines_of


pytestmark = pytest.mark.django_db


class TestCreateSupply:
    """Tests for warehouse.create_supply()."""

    def test_receives_stock(self, wh, stocked, flour, sugar, kg):
        assert stocked.number == 'IN-1'
        assert stocked.items.count() == 2
        assert balance_of(wh, flour, kg) == Decimal('100')
        assert balance_of(wh, sugar, kg) == Decimal('50')

    def test_second_supply_adds_up(self, wh, stocked, flour, kg, today):
        wh.create_supply('IN-2', today, [ItemLine(flour.pk, kg.pk, Decimal('2.5'))])

        assert balance_of(wh, flour, kg) == Decimal('102.5')

    def test_repeated_key_lines_net_into_one_movement(self, wh, flour, kg, today):
        supply = wh.create_supply('IN-2', today, [
            ItemLine(flour.pk, kg.pk, Decimal('1')),
            ItemLine(flour.pk, kg.pk, Decimal('2')),
        ])

        assert supply.items.count() == 2
        assert Movement.objects.get().delta == Decimal('3')

    def test_empty_supply_allowed_by_default(self, wh, today):
        supply = wh.create_supply('IN-0', today, [])

        assert supply.items.count() == 0
        assert not Movement.objects.exists()

    def test_empty_supply_rejected_when_configured(self, wh, today, settings):
        settings.WAREHOUSEMAN = {'ALLOW_EMPTY_SUPPLY': False}

        with pytest.raises(DocumentError) as exc:
            wh.create_supply('IN-0', today, [])

        assert exc.value.code == 'EMPTY_DOCUMENT'

    def test_duplicate_number(self, wh, stocked, flour, kg, today):
        with pytest.raises(DocumentError) as exc:
            wh.create_supply('IN-1', today, [ItemLine(flour.pk, kg.pk, Decimal('1'))])

        assert exc.value.code == 'DUPLICATE_NUMBER'
        assert exc.value.data == {'number': 'IN-1'}
        assert balance_of(wh, flour, kg) == Decimal('100')

    def test_number_free_again_after_delete(self, wh, stocked, today):
        wh.delete_supply(stocked.pk)

        assert wh.create_supply('IN-1', today, []).number == 'IN-1'

    def test_archived_resource(self, wh, flour, kg, today):
        wh.resources.archive(flour.pk)

        with pytest.raises(DocumentError) as exc:
            wh.create_supply('IN-2', today, [ItemLine(flour.pk, kg.pk, Decimal('1'))])

        assert exc.value.code == 'ARCHIVED_ENTITY_USED'
        assert not SupplyDocument.objects.filter(number='IN-2').exists()

    def test_archived_unit(self, wh, flour, kg, today):
        wh.units.archive(kg.pk)

        with pytest.raises(DocumentError) as exc:
            wh.create_supply('IN-2', today, [ItemLine(flour.pk, kg.pk, Decimal('1'))])

        assert exc.value.code == 'ARCHIVED_ENTITY_USED'
        assert exc.value.data == {'unit_ids': [kg.pk]}

    def test_sub_milli_quantity_rejected(self, wh, flour, kg, today):
        """Lines, movements and balance would disagree after rounding."""
        with pytest.raises(StockError) as exc:
            wh.create_supply('IN-2', today, [ItemLine(flour.pk, kg.pk, Decimal('1.0004'))])

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not SupplyDocument.objects.filter(number='IN-2').exists()
        assert wh.ledger.get_balance(flour.pk, kg.pk) is None

    def test_balance_matches_lines_and_movements(self, wh, flour, kg, today):
        wh.create_supply('IN-2', today, [ItemLine(flour.pk, kg.pk, Decimal('1.001'))])
        wh.create_supply('IN-3', today, [ItemLine(flour.pk, kg.pk, Decimal('0.001'))])

        movements = sum(m.delta for m in Movement.objects.all())
        assert balance_of(wh, flour, kg) == movements == Decimal('1.002')

    def test_unknown_resource(self, wh, kg, today):
        with pytest.raises(DocumentError) as exc:
            wh.create_supply('IN-2', today, [ItemLine(999, kg.pk, Decimal('1'))])

        assert exc.value.code == 'NOT_FOUND'


class TestUpdateSupply:
    """Tests for warehouse.update_supply()."""

    def test_quantity_change(self, wh, stocked, flour, sugar, kg, today):
        flour_line, sugar_line = lines_of(stocked)

        supply = wh.update_supply(stocked.pk, 'IN-1', today, [
            ItemLine(flour.pk, kg.pk, Decimal('120'), id=flour_line.id),
            sugar_line,
        ])

        assert balance_of(wh, flour, kg) == Decimal('120')
        assert balance_of(wh, sugar, kg) == Decimal('50')
        assert [line.quantity for line in lines_of(supply)] == [Decimal('120'), Decimal('50')]

    def test_insert_and_remove(self, wh, stocked, flour, sugar, kg, bag, today):
        flour_line, _ = lines_of(stocked)

        supply = wh.update_supply(stocked.pk, 'IN-1', today, [
            flour_line,
            ItemLine(flour.pk, bag.pk, Decimal('4')),
        ])

        assert supply.items.count() == 2
        assert balance_of(wh, sugar, kg) == Decimal('0')
        assert balance_of(wh, flour, bag) == Decimal('4')

    def test_key_change(self, wh, stocked, flour, sugar, kg, today):
        flour_line, sugar_line = lines_of(stocked)

        wh.update_supply(stocked.pk, 'IN-1', today, [
            ItemLine(sugar.pk, kg.pk, Decimal('100'), id=flour_line.id),
            sugar_line,
        ])

        assert balance_of(wh, flour, kg) == Decimal('0')
        assert balance_of(wh, sugar, kg) == Decimal('150')

    def test_header_only(self, wh, stocked, yesterday):
        supply = wh.update_supply(stocked.pk, 'IN-1-FIXED', yesterday, lines_of(stocked))

        assert supply.number == 'IN-1-FIXED'
        assert supply.date == yesterday
        assert Movement.objects.count() == 2

    def test_items_omitted_keeps_lines(self, wh, stocked, flour, sugar, kg, yesterday):
        supply = wh.update_supply(stocked.pk, 'IN-1-FIXED', yesterday)

        assert supply.number == 'IN-1-FIXED'
        assert lines_of(supply) == lines_of(stocked)
        assert balance_of(wh, flour, kg) == Decimal('100')
        assert balance_of(wh, sugar, kg) == Decimal('50')

    def test_items_omitted_ignores_empty_supply_setting(self, wh, stocked, today, settings):
        settings.WAREHOUSEMAN = {'ALLOW_EMPTY_SUPPLY': False}

        assert wh.update_supply(stocked.pk, 'IN-1', today).items.count() == 2

    def test_cannot_remove_shipped_stock(self, wh, draft, stocked, flour, kg, today):
        wh.sign_shipment(draft.pk)
        flour_line, sugar_line = lines_of(stocked)

        with pytest.raises(StockError) as exc:
            wh.update_supply(stocked.pk, 'IN-1', today, [
                ItemLine(flour.pk, kg.pk, Decimal('20'), id=flour_line.id),
                sugar_line,
            ])

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.available == Decimal('70')
        assert exc.value.required == Decimal('80')
        assert lines_of(wh.get_supply(stocked.pk))[0].quantity == Decimal('100')

    def test_archived_resource_kept_on_untouched_line(self, wh, stocked, flour, today):
        """Archiving does not block edits of lines already using it."""
        wh.resources.archive(flour.pk)
        flour_line, sugar_line = lines_of(stocked)

        wh.update_supply(stocked.pk, 'IN-1', today, [
            ItemLine(flour_line.resource_id, flour_line.unit_id, Decimal('90'), id=flour_line.id),
            sugar_line,
        ])

    def test_foreign_item_id(self, wh, stocked, flour, kg, today):
        other = wh.create_supply('IN-2', today, [ItemLine(flour.pk, kg.pk, Decimal('1'))])
        foreign = lines_of(other)[0]

        with pytest.raises(DocumentError) as exc:
            wh.update_supply(stocked.pk, 'IN-1', today, [foreign])

        assert exc.value.code == 'ITEM_NOT_FOUND'

    def test_duplicate_number(self, wh, stocked, today):
        other = wh.create_supply('IN-2', today, [])

        with pytest.raises(DocumentError) as exc:
            wh.update_supply(other.pk, 'IN-1', today, [])

        assert exc.value.code == 'DUPLICATE_NUMBER'

    def test_unknown_supply(self, wh, today):
        with pytest.raises(DocumentError) as exc:
            wh.update_supply(424242, 'IN-X', today, [])

        assert exc.value.code == 'NOT_FOUND'
        assert exc.value.data == {'supply_id': 424242}


class TestDeleteSupply:
    """Tests for warehouse.delete_supply()."""

    def test_takes_stock_back(self, wh, stocked, flour, sugar, kg):
        wh.delete_supply(stocked.pk)

        assert balance_of(wh, flour, kg) == Decimal('0')
        assert balance_of(wh, sugar, kg) == Decimal('0')
        assert SupplyDocument.objects.deleted().filter(pk=stocked.pk).exists()

    def test_deleted_supply_not_found(self, wh, stocked):
        wh.delete_supply(stocked.pk)

        with pytest.raises(DocumentError) as exc:
            wh.get_supply(stocked.pk)
        assert exc.value.code == 'NOT_FOUND'

        with pytest.raises(DocumentError):
            wh.delete_supply(stocked.pk)

    def test_cannot_delete_shipped_stock(self, wh, draft, stocked, flour, kg):
        wh.sign_shipment(draft.pk)

        with pytest.raises(StockError) as exc:
            wh.delete_supply(stocked.pk)

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert wh.get_supply(stocked.pk).number == 'IN-1'
        assert balance_of(wh, flour, kg) == Decimal('70')


class TestListSupplies:
    """Tests for warehouse.list_supplies()."""

    @pytest.fixture
    def second(self, wh, stocked, flour, bag, yesterday):
        return wh.create_supply('IN-2', yesterday, [ItemLine(flour.pk, bag.pk, Decimal('1'))])

    def test_all_alive(self, wh, stocked, second):
        wh.delete_supply(second.pk)

        assert [s.number for s in wh.list_supplies()] == ['IN-1']

    def test_by_number(self, wh, stocked, second):
        found = wh.list_supplies(DocumentFilter(numbers=['IN-2']))

        assert [s.pk for s in found] == [second.pk]

    def test_by_period(self, wh, stocked, second, yesterday):
        found = wh.list_supplies(DocumentFilter(date_from=yesterday, date_to=yesterday))

        assert [s.pk for s in found] == [second.pk]

    def test_by_unit(self, wh, stocked, second, kg):
        found = wh.list_supplies(DocumentFilter(unit_ids=[kg.pk]))

        assert [s.pk for s in found] == [stocked.pk]

    def test_criteria_are_alternatives(self, wh, stocked, second, bag):
        """Any matching criterion is enough."""
        found = wh.list_supplies(DocumentFilter(numbers=['IN-1'], unit_ids=[bag.pk]))

        assert {s.pk for s in found} == {stocked.pk, second.pk}

    def test_no_duplicates_from_line_joins(self, wh, stocked, flour, sugar):
        found = wh.list_supplies(DocumentFilter(resource_ids=[flour.pk, sugar.pk]))

        assert len(found) == 2
