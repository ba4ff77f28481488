"""
Tenant directory: the persisted list of tenants and their payment history.

All tenants live under a single storage key as one JSON array. Every
mutating call saves the whole list before it returns.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from .datatypes import TenantRecord, PaymentRecord, to_money
from .storage import StorageBinder

logger = logging.getLogger(__name__)

DEFAULT_TENANTS_KEY = 'rentmate_tenants'

# Fields update() may change
UPDATABLE_FIELDS = ('name', 'room_number', 'mobile_number', 'monthly_rent', 'water_bill')
MONEY_FIELDS = ('monthly_rent', 'water_bill')


def _new_id() -> str:
    return uuid.uuid4().hex


def _timestamp_after(previous: datetime) -> datetime:
    """Current time, nudged forward so it is strictly later than `previous`."""
    now = datetime.now()
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def _decode_tenants(raw) -> List[TenantRecord]:
    if not isinstance(raw, list):
        raise TypeError(f"Tenant list is not a JSON array: {type(raw).__name__}")
    return [TenantRecord.from_dict(t) for t in raw]


def _encode_tenants(tenants: List[TenantRecord]) -> list:
    return [t.to_dict() for t in tenants]


class TenantDirectory:
    def __init__(self, binder: StorageBinder, key: str = DEFAULT_TENANTS_KEY):
        self._binder = binder
        self._key = key
        self._tenants: List[TenantRecord] = binder.load(key, [], _decode_tenants)
        logger.info(f"Loaded {len(self._tenants)} tenants")

    @property
    def tenants(self) -> List[TenantRecord]:
        return list(self._tenants)

    def __len__(self):
        return len(self._tenants)

    def _persist(self):
        self._binder.save(self._key, self._tenants, _encode_tenants)

    def get(self, tenant_id: str) -> Optional[TenantRecord]:
        for tenant in self._tenants:
            if tenant.id == tenant_id:
                return tenant
        return None

    def add(self, name: str, mobile_number: str, monthly_rent, water_bill,
            room_number: str = '') -> TenantRecord:
        """Create a tenant with a fresh id and empty history. No validation."""
        now = datetime.now()
        tenant = TenantRecord(
            id=_new_id(),
            name=name,
            room_number=room_number,
            mobile_number=mobile_number,
            monthly_rent=to_money(monthly_rent),
            water_bill=to_money(water_bill),
            created_at=now,
            updated_at=now,
        )
        self._tenants.append(tenant)
        self._persist()
        logger.info(f"Added tenant {tenant.name} ({tenant.id})")
        return tenant

    def update(self, tenant_id: str, **changes) -> None:
        tenant = self.get(tenant_id)
        if tenant is None:
            logger.debug(f"update: no tenant {tenant_id}")
            return

        for field_name, value in changes.items():
            if field_name not in UPDATABLE_FIELDS:
                logger.warning(f"update: ignoring field {field_name!r} on tenant {tenant_id}")
                continue
            if field_name in MONEY_FIELDS:
                value = to_money(value)
            setattr(tenant, field_name, value)

        tenant.updated_at = _timestamp_after(tenant.updated_at)
        self._persist()
        logger.info(f"Updated tenant {tenant.name} ({tenant.id})")

    def delete(self, tenant_id: str) -> None:
        remaining = [t for t in self._tenants if t.id != tenant_id]
        if len(remaining) == len(self._tenants):
            logger.debug(f"delete: no tenant {tenant_id}")
            return
        self._tenants = remaining
        self._persist()
        logger.info(f"Deleted tenant {tenant_id}")

    def add_payment_record(self, tenant_id: str, record: PaymentRecord) -> bool:
        tenant = self.get(tenant_id)
        if tenant is None:
            logger.debug(f"add_payment_record: no tenant {tenant_id}")
            return False
        tenant.payment_history.append(record)
        self._persist()
        logger.info(f"Recorded {record.billing_month} payment of {record.amount} for {tenant.name}")
        return True

    def delete_payment_record(self, tenant_id: str, record_id: str) -> None:
        tenant = self.get(tenant_id)
        if tenant is None:
            logger.debug(f"delete_payment_record: no tenant {tenant_id}")
            return

        history = [p for p in tenant.payment_history if p.id != record_id]
        if len(history) == len(tenant.payment_history):
            logger.debug(f"delete_payment_record: no record {record_id} for tenant {tenant_id}")
            return
        tenant.payment_history = history
        self._persist()
        logger.info(f"Deleted payment record {record_id} from {tenant.name}")

    def history(self, tenant_id: str) -> List[PaymentRecord]:
        """Payment history, newest first."""
        tenant = self.get(tenant_id)
        if tenant is None:
            return []
        return sorted(tenant.payment_history, key=lambda p: p.date, reverse=True)
