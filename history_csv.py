import pandas as pd
from pathlib import Path
from typing import List
from .datatypes import PaymentRecord
import logging

logger = logging.getLogger(__name__)

# Column order of the exported history sheet
COLUMNS = [
    'Date',
    'Billing Month',
    'Rent',
    'Electricity Units',
    'Electricity',
    'Water',
    'Extra',
    'Total',
    'Record ID',
]


def write_history(csv_path: Path, tenant_name: str, records: List[PaymentRecord]) -> None:
    """Write a tenant's payment history to CSV, replacing any existing file"""
    logger.info(f"Writing {len(records)} payment records for {tenant_name} to {csv_path}")

    rows_data = [_record_to_dict(r) for r in records]
    df = pd.DataFrame(rows_data, columns=COLUMNS)
    df.to_csv(csv_path, index=False)
    logger.debug(f"Successfully wrote history to {csv_path}")


def _record_to_dict(record: PaymentRecord) -> dict:
    return {
        'Date': _format_date(record.date),
        'Billing Month': record.billing_month,
        'Rent': _format_money(record.rent_amount),
        'Electricity Units': str(record.electricity_units),
        'Electricity': _format_money(record.electricity_amount),
        'Water': _format_money(record.water_amount),
        'Extra': _format_money(record.extra_amount),
        'Total': _format_money(record.amount),
        'Record ID': record.id,
    }


def _format_date(date_obj):
    return date_obj.strftime('%d %b %Y')  # "05 Oct 2026", as the history view shows it


def _format_money(amount):
    """Format money amount with ₹ prefix"""
    return f'₹{amount:.2f}'
