"""
BillingService: the one object the presentation layer talks to.

Build it once at start-up (``BillingService.open()`` for the on-disk store)
and pass it around. There is nothing to close; every write has already hit
the store by the time a call returns.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

from .config import Settings, load_settings
from .datatypes import PaymentRecord, TenantRecord
from .history_csv import write_history
from .owner import OwnerProfileStore
from .session import BillingSession
from .storage import JsonFileStore, KeyValueStore, StorageBinder
from .tenants import TenantDirectory

logger = logging.getLogger(__name__)

BILLING_MONTH_FORMAT = '%B %Y'     # "October 2026"


class BillingService:
    def __init__(self, store: KeyValueStore, settings: Optional[Settings] = None):
        self.settings = settings or load_settings()
        self.binder = StorageBinder(store)
        self.directory = TenantDirectory(self.binder, self.settings.tenants_key)
        self.owner = OwnerProfileStore(self.binder, self.settings.owner_key)
        self.session = BillingSession(self.directory, self.settings.electricity_rate)

    @classmethod
    def open(cls, store_path: Optional[Path] = None, settings: Optional[Settings] = None) -> 'BillingService':
        settings = settings or load_settings()
        path = Path(store_path) if store_path is not None else settings.store_path
        logger.debug(f"Opening store at {path}")
        return cls(JsonFileStore(path), settings)

    def finalize_bill(self, billing_month: Optional[str] = None) -> Optional[PaymentRecord]:
        """
        Record the current bill in the selected tenant's history and start
        a fresh cycle for the same tenant.

        Returns the new PaymentRecord, or None when no tenant is selected.
        """
        bill = self.session.generate_bill_data()
        if bill is None:
            logger.debug("finalize_bill: no tenant selected")
            return None

        record = PaymentRecord(
            id=uuid.uuid4().hex,
            date=bill.billing_date,
            billing_month=billing_month or bill.billing_date.strftime(BILLING_MONTH_FORMAT),
            rent_amount=bill.monthly_rent,
            electricity_units=bill.electricity_units,
            electricity_amount=bill.electricity_charges,
            water_amount=bill.water_bill,
            extra_amount=bill.extra_charges,
            amount=bill.total_amount,
        )
        self.directory.add_payment_record(bill.tenant_id, record)
        self.session.reset_bill()
        return record

    def export_history(self, tenant_id: str, csv_path: Path) -> int:
        """Write the tenant's history (newest first) to CSV; returns the row count."""
        tenant = self.directory.get(tenant_id)
        if tenant is None:
            raise KeyError(tenant_id)
        records = self.directory.history(tenant_id)
        write_history(Path(csv_path), tenant.name, records)
        return len(records)

    def reminder_phone(self, tenant: TenantRecord) -> str:
        """Number the reminder is addressed to: country code + the tenant's digits."""
        digits = re.sub(r'\D', '', tenant.mobile_number)
        return f'{self.settings.country_code}{digits}'
