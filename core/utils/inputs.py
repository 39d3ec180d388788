# core/utils/inputs.py
from decimal import Decimal, InvalidOperation

from core.exceptions import ValidationFailed
from core.utils.dates import parse_calendar_date

# max_digits=12, decimal_places=2 nos campos de valor
MAX_AMOUNT = Decimal("9999999999.99")


def clean_amount(value) -> Decimal:
    """Valor monetário > 0, arredondado em centavos (aceita vírgula decimal)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationFailed("Informe o valor do benefício.")
    try:
        amount = Decimal(str(value).strip().replace(",", "."))
        if not amount.is_finite() or amount <= 0:
            raise ValidationFailed("O valor do benefício deve ser maior que zero.")
        amount = amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationFailed("Valor do benefício inválido.")
    if amount == 0:
        raise ValidationFailed("O valor do benefício deve ser maior que zero.")
    if amount > MAX_AMOUNT:
        raise ValidationFailed("O valor do benefício excede o limite permitido.")
    return amount


def clean_date(value, label="data do contrato"):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationFailed(f"Informe a {label}.")
    try:
        return parse_calendar_date(value)
    except ValueError:
        raise ValidationFailed(f"A {label} é inválida.")


def clean_reason(value, message="Informe o motivo da recusa.") -> str:
    reason = (value or "").strip()
    if not reason:
        raise ValidationFailed(message)
    return reason
