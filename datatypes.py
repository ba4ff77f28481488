from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Dict, Any
from datetime import datetime

from dateutil.parser import isoparse

Money = Decimal       # keep full-precision rupees and paise


def to_money(value) -> Money:
    """Coerce an int/float/str/Decimal amount into Money."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _money_to_json(amount: Money):
    if not amount.is_finite():
        raise ValueError(f"Cannot store non-finite amount {amount}")
    # integral amounts go out as ints so the stored JSON stays readable;
    # the rest as strings so no digits are lost to float
    if amount == amount.to_integral_value():
        return int(amount)
    return str(amount)


def _money_from_json(raw) -> Money:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str, Decimal)):
        raise TypeError(f"Not a money amount: {raw!r}")
    amount = Decimal(str(raw))
    if not amount.is_finite():
        raise ValueError(f"Not a finite amount: {raw!r}")
    return amount


def _datetime_from_json(raw) -> datetime:
    """Parse an ISO timestamp into a naive local datetime."""
    if not isinstance(raw, str):
        raise TypeError(f"Not a timestamp: {raw!r}")
    parsed = isoparse(raw)
    if parsed.tzinfo is not None:
        # "2026-01-01T00:00:00.000Z" and friends
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _str_from_json(raw, default: str = '') -> str:
    if raw is None:
        return default
    if not isinstance(raw, str):
        raise TypeError(f"Not a string: {raw!r}")
    return raw


@dataclass
class PaymentRecord:
    id: str
    date: datetime                 # when the cycle was billed
    billing_month: str             # "October 2026"
    rent_amount: Money
    electricity_units: Money
    electricity_amount: Money
    water_amount: Money
    extra_amount: Money
    amount: Money                  # rent + electricity + water + extra

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'billingMonth': self.billing_month,
            'rentAmount': _money_to_json(self.rent_amount),
            'electricityUnits': _money_to_json(self.electricity_units),
            'electricityAmount': _money_to_json(self.electricity_amount),
            'waterAmount': _money_to_json(self.water_amount),
            'extraAmount': _money_to_json(self.extra_amount),
            'amount': _money_to_json(self.amount),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'PaymentRecord':
        return cls(
            id=_str_from_json(raw['id']),
            date=_datetime_from_json(raw['date']),
            billing_month=_str_from_json(raw.get('billingMonth')),
            rent_amount=_money_from_json(raw.get('rentAmount', 0)),
            electricity_units=_money_from_json(raw.get('electricityUnits', 0)),
            electricity_amount=_money_from_json(raw.get('electricityAmount', 0)),
            water_amount=_money_from_json(raw.get('waterAmount', 0)),
            extra_amount=_money_from_json(raw.get('extraAmount', 0)),
            amount=_money_from_json(raw['amount']),
        )


@dataclass
class TenantRecord:
    id: str                        # uuid4 hex, never reused
    name: str
    mobile_number: str             # 10 digits, no country code
    monthly_rent: Money
    water_bill: Money
    created_at: datetime
    updated_at: datetime
    room_number: str = ''          # "Room 101" / "Flat 2B"
    payment_history: List[PaymentRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'roomNumber': self.room_number,
            'mobileNumber': self.mobile_number,
            'monthlyRent': _money_to_json(self.monthly_rent),
            'waterBill': _money_to_json(self.water_bill),
            'paymentHistory': [p.to_dict() for p in self.payment_history],
            'createdAt': self.created_at.isoformat(),
            'updatedAt': self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'TenantRecord':
        history = raw.get('paymentHistory') or []
        if not isinstance(history, list):
            raise TypeError(f"paymentHistory is not a list: {history!r}")
        return cls(
            id=_str_from_json(raw['id']),
            name=_str_from_json(raw['name']),
            room_number=_str_from_json(raw.get('roomNumber')),
            mobile_number=_str_from_json(raw.get('mobileNumber')),
            monthly_rent=_money_from_json(raw.get('monthlyRent', 0)),
            water_bill=_money_from_json(raw.get('waterBill', 0)),
            payment_history=[PaymentRecord.from_dict(p) for p in history],
            created_at=_datetime_from_json(raw['createdAt']),
            updated_at=_datetime_from_json(raw['updatedAt']),
        )


@dataclass
class OwnerInfo:
    name: str = ''
    mobile_number: str = ''
    upi_id: str = ''               # "owner@upi"

    def to_dict(self) -> Dict[str, str]:
        return {
            'name': self.name,
            'mobileNumber': self.mobile_number,
            'upiId': self.upi_id,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'OwnerInfo':
        if not isinstance(raw, dict):
            raise TypeError(f"Owner info is not an object: {raw!r}")
        return cls(
            name=_str_from_json(raw.get('name')),
            mobile_number=_str_from_json(raw.get('mobileNumber')),
            upi_id=_str_from_json(raw.get('upiId')),
        )


@dataclass(frozen=True)
class BillData:
    tenant_id: str
    tenant_name: str
    room_number: str
    mobile_number: str
    monthly_rent: Money
    electricity_units: Money
    electricity_rate: Money
    electricity_charges: Money    # units * rate
    water_bill: Money
    extra_charges: Money
    total_amount: Money           # rent + electricity + water + extra
    billing_date: datetime
