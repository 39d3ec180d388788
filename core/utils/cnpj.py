# core/utils/cnpj.py
import re

_ONLY_DIGITS_RE = re.compile(r"\D+")

_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def only_digits(value: str) -> str:
    return _ONLY_DIGITS_RE.sub("", value or "")


def _check_digit(digits: str, weights) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    rest = total % 11
    return 0 if rest < 2 else 11 - rest


def is_valid_cnpj(value: str) -> bool:
    """
    Valida um CNPJ (14 dígitos, os 2 últimos verificadores módulo 11).
    Aceita a entrada com máscara (11.222.333/0001-81).
    """
    digits = only_digits(value)
    if len(digits) != 14:
        return False
    # 00000000000000, 11111111111111... passam no cálculo mas são inválidos
    if digits == digits[0] * 14:
        return False
    if _check_digit(digits[:12], _WEIGHTS_1) != int(digits[12]):
        return False
    return _check_digit(digits[:13], _WEIGHTS_2) == int(digits[13])


def normalize_cnpj(value: str) -> str:
    """Devolve os 14 dígitos ou lança ValueError."""
    if not is_valid_cnpj(value):
        raise ValueError("CNPJ inválido.")
    return only_digits(value)


def format_cnpj(value: str) -> str:
    d = only_digits(value)
    if len(d) != 14:
        return value or ""
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"
