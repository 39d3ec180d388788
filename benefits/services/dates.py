# benefits/services/dates.py
"""
Datas-marco do benefício, derivadas da data de assinatura do contrato.

Tudo é feito em ``datetime.date`` (ano/mês/dia, sem hora nem fuso) : a data
recebida como texto é fatiada em componentes e remontada, nunca passa por um
construtor sensível a fuso horário.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.utils.dates import parse_calendar_date

FIRST_CLIENT_PAYMENT_DAY = 5
INVOICE_ELIGIBLE_DAY = 6
EXPERT_PAYMENT_DAY = 15


@dataclass(frozen=True)
class MilestoneDates:
    first_client_payment: date
    invoice_eligible_from: date
    expected_payment: date

    def as_dict(self) -> dict:
        return {
            "first_client_payment_date": self.first_client_payment.isoformat(),
            "invoice_eligible_from": self.invoice_eligible_from.isoformat(),
            "expected_payment_date": self.expected_payment.isoformat(),
        }


def next_month(d: date) -> tuple[int, int]:
    if d.month == 12:
        return d.year + 1, 1
    return d.year, d.month + 1


def derive_dates(contract_date) -> MilestoneDates:
    year, month = next_month(parse_calendar_date(contract_date))
    return MilestoneDates(
        first_client_payment=date(year, month, FIRST_CLIENT_PAYMENT_DAY),
        invoice_eligible_from=date(year, month, INVOICE_ELIGIBLE_DAY),
        expected_payment=date(year, month, EXPERT_PAYMENT_DAY),
    )
