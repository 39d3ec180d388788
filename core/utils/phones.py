# core/utils/phones.py
import re
import phonenumbers
from django.conf import settings
from phonenumbers import PhoneNumberFormat, NumberParseException

# Brasil por padrão ; sobrescrito por settings.PHONE_DEFAULT_REGIONS
ALLOWED_REGIONS_DEFAULT = ("BR",)

_CLEAN_RE = re.compile(r"[^\d\+]")
_ONLY_DIGITS_RE = re.compile(r"\D+")

# DDI digitado sem "+"
BARE_COUNTRY_CODES = ("55",)


def default_regions():
    return tuple(getattr(settings, "PHONE_DEFAULT_REGIONS", None) or ALLOWED_REGIONS_DEFAULT)


def _fallback_br_to_e164(digits: str) -> str | None:
    """
    Tolerância BR quando a libphonenumber recusa mas o formato local é plausível :
    DDD (2 dígitos, sem 0) + 8 ou 9 dígitos, opcionalmente precedido de 0.
    """
    if digits.startswith("0"):
        digits = digits[1:]
    if len(digits) in (10, 11) and digits[0] != "0" and digits[1] != "0":
        return "+55" + digits
    return None


def to_e164(phone_raw: str, regions=None) -> str:
    """
    Normaliza um número em E.164. Aceita 00 como prefixo internacional, DDI
    sem "+" e os formatos locais BR com ou sem máscara.
    """
    if not phone_raw:
        raise ValueError("Número obrigatório.")

    regions = tuple(regions or default_regions())
    raw = phone_raw.strip()
    cleaned = _CLEAN_RE.sub("", raw)

    # 00 -> +
    if cleaned.startswith("00"):
        cleaned = "+" + cleaned[2:]

    # 1) Internacional
    if cleaned.startswith("+"):
        try:
            num = phonenumbers.parse(cleaned, None)
            if phonenumbers.is_valid_number(num):
                return phonenumbers.format_number(num, PhoneNumberFormat.E164)
        except NumberParseException:
            pass

    # 2) DDI sem "+" (ex.: 5511912345678)
    digits_only = _ONLY_DIGITS_RE.sub("", raw)
    for cc in BARE_COUNTRY_CODES:
        if digits_only.startswith(cc) and len(digits_only) >= 12 and not raw.startswith(("+", "00")):
            try:
                num = phonenumbers.parse("+" + digits_only, None)
                if phonenumbers.is_valid_number(num):
                    return phonenumbers.format_number(num, PhoneNumberFormat.E164)
            except NumberParseException:
                pass

    # 3) Formatos locais, região por região
    for region in regions:
        try:
            num = phonenumbers.parse(raw, region)
            if phonenumbers.is_valid_number(num):
                return phonenumbers.format_number(num, PhoneNumberFormat.E164)
        except NumberParseException:
            continue

    # 4) Fallback BR
    if "BR" in regions:
        fb = _fallback_br_to_e164(digits_only)
        if fb:
            return fb

    raise ValueError("Número inválido. Informe DDD + número (ex.: (11) 91234-5678).")
