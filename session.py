"""
Billing session: the bill currently being prepared.

Nothing here is persisted. The session only remembers which tenant is
selected (by id) plus the numbers typed in for this cycle; rent and water
are read from the directory every time, so tenant edits show up at once.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .datatypes import BillData, Money, TenantRecord, to_money
from .tenants import TenantDirectory

logger = logging.getLogger(__name__)

ELECTRICITY_RATE = Decimal('12')   # rupees per unit


class BillingSession:
    def __init__(self, directory: TenantDirectory, electricity_rate=ELECTRICITY_RATE):
        self._directory = directory
        self.electricity_rate: Money = to_money(electricity_rate)
        self.selected_tenant_id: Optional[str] = None
        self.electricity_units: Money = Decimal('0')
        self.extra_charges: Money = Decimal('0')
        self.billing_date: datetime = datetime.now()

    @property
    def selected_tenant(self) -> Optional[TenantRecord]:
        if self.selected_tenant_id is None:
            return None
        return self._directory.get(self.selected_tenant_id)

    def select_tenant(self, tenant_id: Optional[str]) -> None:
        """Select a tenant (or None). Always starts a fresh cycle."""
        self.selected_tenant_id = tenant_id
        self.reset_bill()
        logger.debug(f"Selected tenant {tenant_id}")

    def reset_bill(self) -> None:
        self.electricity_units = Decimal('0')
        self.extra_charges = Decimal('0')
        self.billing_date = datetime.now()

    # Setters take whatever the caller hands over; negatives are not clamped.
    def set_electricity_units(self, units) -> None:
        self.electricity_units = to_money(units)

    def set_extra_charges(self, charges) -> None:
        self.extra_charges = to_money(charges)

    def set_billing_date(self, billing_date: datetime) -> None:
        self.billing_date = billing_date

    @property
    def electricity_charges(self) -> Money:
        return self.electricity_units * self.electricity_rate

    @property
    def total_amount(self) -> Money:
        tenant = self.selected_tenant
        if tenant is None:
            return Decimal('0')
        return tenant.monthly_rent + self.electricity_charges + tenant.water_bill + self.extra_charges

    def generate_bill_data(self) -> Optional[BillData]:
        tenant = self.selected_tenant
        if tenant is None:
            return None

        return BillData(
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            room_number=tenant.room_number,
            mobile_number=tenant.mobile_number,
            monthly_rent=tenant.monthly_rent,
            electricity_units=self.electricity_units,
            electricity_rate=self.electricity_rate,
            electricity_charges=self.electricity_charges,
            water_bill=tenant.water_bill,
            extra_charges=self.extra_charges,
            total_amount=self.total_amount,
            billing_date=self.billing_date,
        )
