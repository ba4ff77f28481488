"""
Tests for the billing session: selection resets, derived totals and bill snapshots.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from rentmate.session import BillingSession, ELECTRICITY_RATE
from rentmate.storage import MemoryStore, StorageBinder
from rentmate.tenants import TenantDirectory


@pytest.fixture
def directory():
    return TenantDirectory(StorageBinder(MemoryStore()))


@pytest.fixture
def session(directory):
    return BillingSession(directory)


@pytest.fixture
def ravi(directory):
    return directory.add(name='Ravi', mobile_number='9876543210', monthly_rent=5000,
                         water_bill=200, room_number='Room 101')


@pytest.fixture
def meera(directory):
    return directory.add(name='Meera', mobile_number='9123456780', monthly_rent=4000, water_bill=150)


class TestSelection:
    def test_starts_empty(self, session):
        assert session.selected_tenant is None
        assert session.electricity_units == 0
        assert session.extra_charges == 0

    def test_switching_tenant_resets_cycle(self, session, ravi, meera):
        session.select_tenant(ravi.id)
        session.set_electricity_units(42)
        session.set_extra_charges(300)
        session.set_billing_date(datetime(2026, 1, 1))

        session.select_tenant(meera.id)

        assert session.selected_tenant is meera
        assert session.electricity_units == 0
        assert session.extra_charges == 0
        assert session.billing_date > datetime(2026, 1, 1)

    def test_reselecting_same_tenant_also_resets(self, session, ravi):
        session.select_tenant(ravi.id)
        session.set_electricity_units(42)
        session.select_tenant(ravi.id)
        assert session.electricity_units == 0

    def test_reset_bill_keeps_selection(self, session, ravi):
        session.select_tenant(ravi.id)
        session.set_electricity_units(10)
        session.set_extra_charges(50)

        session.reset_bill()

        assert session.selected_tenant_id == ravi.id
        assert session.electricity_units == 0
        assert session.extra_charges == 0

    def test_selection_follows_directory_edits(self, session, directory, ravi):
        session.select_tenant(ravi.id)
        directory.update(ravi.id, monthly_rent=6000)
        assert session.total_amount == Decimal('6200')

    def test_deleted_tenant_reads_as_unselected(self, session, directory, ravi):
        session.select_tenant(ravi.id)
        directory.delete(ravi.id)
        assert session.selected_tenant is None
        assert session.total_amount == 0
        assert session.generate_bill_data() is None


class TestTotals:
    def test_rate_is_twelve(self):
        assert ELECTRICITY_RATE == Decimal('12')

    def test_total_is_zero_without_tenant(self, session):
        session.set_electricity_units(10)
        session.set_extra_charges(50)
        assert session.electricity_charges == Decimal('120')
        assert session.total_amount == 0

    def test_worked_example(self, session, ravi):
        session.select_tenant(ravi.id)
        session.set_electricity_units(10)
        session.set_extra_charges(50)

        assert session.electricity_charges == Decimal('120')
        assert session.total_amount == Decimal('5370')

    @pytest.mark.parametrize('units,extra,expected', [
        (0, 0, '5200'),
        (1, 0, '5212'),
        (125, 0, '6700'),
        (7, '99.50', '5383.50'),
        ('12.5', 10, '5360'),
    ])
    def test_total_formula(self, session, ravi, units, extra, expected):
        session.select_tenant(ravi.id)
        session.set_electricity_units(units)
        session.set_extra_charges(extra)
        assert session.total_amount == Decimal(expected)

    def test_negative_inputs_are_not_clamped(self, session, ravi):
        session.select_tenant(ravi.id)
        session.set_electricity_units(-5)
        session.set_extra_charges(-100)
        assert session.electricity_charges == Decimal('-60')
        assert session.total_amount == Decimal('5040')

    def test_custom_rate(self, directory, ravi):
        session = BillingSession(directory, electricity_rate='8.5')
        session.select_tenant(ravi.id)
        session.set_electricity_units(10)
        assert session.electricity_charges == Decimal('85')


class TestBillData:
    def test_none_without_tenant(self, session):
        assert session.generate_bill_data() is None

    def test_snapshot_matches_session(self, session, ravi):
        when = datetime(2026, 10, 5, 9, 0)
        session.select_tenant(ravi.id)
        session.set_electricity_units(10)
        session.set_extra_charges(50)
        session.set_billing_date(when)

        bill = session.generate_bill_data()

        assert bill.tenant_id == ravi.id
        assert bill.tenant_name == 'Ravi'
        assert bill.room_number == 'Room 101'
        assert bill.mobile_number == '9876543210'
        assert bill.monthly_rent == Decimal('5000')
        assert bill.electricity_units == Decimal('10')
        assert bill.electricity_rate == Decimal('12')
        assert bill.electricity_charges == Decimal('120')
        assert bill.water_bill == Decimal('200')
        assert bill.extra_charges == Decimal('50')
        assert bill.total_amount == Decimal('5370')
        assert bill.billing_date == when

    def test_snapshot_is_frozen_and_detached(self, session, ravi):
        session.select_tenant(ravi.id)
        session.set_electricity_units(10)
        bill = session.generate_bill_data()

        with pytest.raises(AttributeError):
            bill.total_amount = Decimal('0')

        session.set_electricity_units(20)
        assert bill.electricity_units == Decimal('10')

    def test_generating_has_no_side_effects(self, session, ravi):
        session.select_tenant(ravi.id)
        session.set_electricity_units(10)
        first = session.generate_bill_data()
        second = session.generate_bill_data()
        assert first == second
        assert session.electricity_units == Decimal('10')
