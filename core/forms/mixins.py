# core/forms/mixins.py


class ErrorSummaryMixin:
    """Resumo legível dos erros do formulário para a resposta JSON."""

    def error_message(self) -> str:
        parts = []
        for field, errors in self.errors.items():
            label = self.fields[field].label if field in self.fields else ""
            parts.append(f"{label}: {' '.join(errors)}" if label else " ".join(errors))
        return " | ".join(parts)
