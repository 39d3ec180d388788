# core/forms/fields.py
from django import forms
from django.core.exceptions import ValidationError
from core.utils.cnpj import normalize_cnpj
from core.utils.phones import to_e164


class InternationalPhoneFormField(forms.CharField):
    def __init__(self, *args, regions=None, **kwargs):
        attrs = kwargs.pop("widget_attrs", {})
        attrs.setdefault("placeholder", "(11) 91234-5678")
        kwargs.setdefault("widget", forms.TextInput(attrs=attrs))
        super().__init__(*args, **kwargs)
        self.regions = tuple(regions) if regions else None

    def clean(self, value):
        value = super().clean(value)
        if not value:
            return value
        try:
            return to_e164(value, regions=self.regions)
        except ValueError as e:
            raise ValidationError(str(e))


class CNPJFormField(forms.CharField):
    """Aceita o CNPJ com ou sem máscara ; devolve os 14 dígitos."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("max_length", 18)
        super().__init__(*args, **kwargs)

    def clean(self, value):
        value = super().clean(value)
        if not value:
            return value
        try:
            return normalize_cnpj(value)
        except ValueError as e:
            raise ValidationError(str(e))
