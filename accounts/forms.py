# accounts/forms.py
import uuid

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from core.forms.fields import CNPJFormField, InternationalPhoneFormField
from core.forms.mixins import ErrorSummaryMixin
from core.utils.cnpj import normalize_cnpj, only_digits
from core.utils.phones import to_e164
from .models import Expert

PROFILE_FIELDS = ("name", "whatsapp", "company_name", "company_cnpj", "pix_key", "pix_key_type")


def normalize_pix_key(key_type: str, key: str) -> str:
    """Chave PIX no formato canônico do tipo ; ValidationError se não confere."""
    key = (key or "").strip()
    T = Expert.PixKeyType
    if key_type == T.CPF:
        digits = only_digits(key)
        if len(digits) != 11:
            raise ValidationError("CPF da chave PIX deve ter 11 dígitos.")
        return digits
    if key_type == T.CNPJ:
        try:
            return normalize_cnpj(key)
        except ValueError as e:
            raise ValidationError(str(e))
    if key_type == T.EMAIL:
        validate_email(key)
        return key.lower()
    if key_type == T.PHONE:
        try:
            return to_e164(key)
        except ValueError as e:
            raise ValidationError(str(e))
    try:
        return str(uuid.UUID(key))
    except ValueError:
        raise ValidationError("Chave aleatória inválida.")


class ExpertProfileForm(ErrorSummaryMixin, forms.ModelForm):
    """
    Dados que o próprio expert mantém (tela "Meus dados").
    Status, curso e e-mail ficam fora : mudam por fluxos próprios.
    """
    whatsapp = InternationalPhoneFormField(label="WhatsApp", required=False)
    company_cnpj = CNPJFormField(label="CNPJ da empresa", required=False)

    class Meta:
        model = Expert
        fields = PROFILE_FIELDS
        labels = {
            "name": "Nome",
            "company_name": "Empresa",
            "pix_key": "Chave PIX",
            "pix_key_type": "Tipo da chave PIX",
        }

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise ValidationError("Nome é obrigatório.")
        return name

    def clean(self):
        cleaned = super().clean()
        key = (cleaned.get("pix_key") or "").strip()
        key_type = cleaned.get("pix_key_type") or ""
        if key and not key_type:
            self.add_error("pix_key_type", "Informe o tipo da chave PIX.")
        elif key:
            try:
                cleaned["pix_key"] = normalize_pix_key(key_type, key)
            except ValidationError as e:
                self.add_error("pix_key", e)
        else:
            cleaned["pix_key"] = ""
        return cleaned
