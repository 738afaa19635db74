"""
Pytest fixtures for Warehouseman tests.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from warehouseman.models import Client, Resource, UnitOfMeasure
from warehouseman.service import Warehouse
from warehouseman.services.reconciler import ItemLine


@pytest.fixture
def wh(db):
    """Fresh Warehouse facade (own coordinator, default logger)."""
    return Warehouse()


@pytest.fixture
def flour(db):
    return Resource.objects.create(name='Flour')


@pytest.fixture
def sugar(db):
    return Resource.objects.create(name='Sugar')


@pytest.fixture
def kg(db):
    return UnitOfMeasure.objects.create(name='kg')


@pytest.fixture
def bag(db):
    return UnitOfMeasure.objects.create(name='bag')


@pytest.fixture
def bakery(db):
    """Create a test client."""
    return Client.objects.create(name='Corner Bakery', address='1 Main St')


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()


@pytest.fixture
def yesterday():
    return date.today() - timedelta(days=1)


@pytest.fixture
def stocked(wh, flour, sugar, kg, today):
    """Supply IN-1: 100 kg flour, 50 kg sugar."""
    return wh.create_supply('IN-1', today, [
        ItemLine(flour.pk, kg.pk, Decimal('100')),
        ItemLine(sugar.pk, kg.pk, Decimal('50')),
    ])


@pytest.fixture
def draft(wh, stocked, bakery, flour, kg, today):
    """Draft shipment OUT-1: 30 kg flour."""
    return wh.create_shipment('OUT-1', bakery.pk, today, [
        ItemLine(flour.pk, kg.pk, Decimal('30')),
    ])

