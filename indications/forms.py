# indications/forms.py
from django import forms

from core.forms.fields import CNPJFormField, InternationalPhoneFormField
from core.forms.mixins import ErrorSummaryMixin
from .models import Indication


class IndicationForm(ErrorSummaryMixin, forms.ModelForm):
    """
    Formulário de indicação enviado pelo expert.
    - CNPJ validado (dígitos verificadores) e guardado só com os 14 dígitos
    - Telefone do contato normalizado em E.164
    - Quantidade de funcionários obrigatória e >= 1
    """
    company_cnpj = CNPJFormField(label="CNPJ")
    contact_phone = InternationalPhoneFormField(label="WhatsApp do contato", required=False)
    employee_count = forms.IntegerField(label="Quantidade de funcionários", min_value=1)

    class Meta:
        model = Indication
        fields = (
            "company_name", "company_cnpj",
            "contact_name", "contact_email", "contact_phone",
            "employee_count", "channel", "notes",
        )

    def clean(self):
        cleaned = super().clean()
        for name in ("company_name", "contact_name", "notes"):
            if isinstance(cleaned.get(name), str):
                cleaned[name] = cleaned[name].strip()
        if not cleaned.get("company_name") and "company_name" not in self.errors:
            self.add_error("company_name", "Nome da empresa é obrigatório.")
        if not cleaned.get("contact_name") and "contact_name" not in self.errors:
            self.add_error("contact_name", "Nome do contato é obrigatório.")
        email = (cleaned.get("contact_email") or "").strip().lower()
        cleaned["contact_email"] = email
        return cleaned
