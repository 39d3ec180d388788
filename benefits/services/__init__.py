from __future__ import annotations

from .dates import MilestoneDates, derive_dates, parse_calendar_date
from .invoices import invoice_download_url, invoice_on_file, submit_invoice, validate_upload
from .payments import (
    approve_invoice,
    confirm_client_payment,
    get_benefit,
    mark_paid,
    reject_invoice,
    schedule_payment,
)

__all__ = [
    # datas-marco
    "MilestoneDates", "derive_dates", "parse_calendar_date",
    # admin
    "get_benefit", "confirm_client_payment", "approve_invoice", "reject_invoice",
    "schedule_payment", "mark_paid",
    # expert / NF
    "submit_invoice", "validate_upload", "invoice_on_file", "invoice_download_url",
]
