# core/exceptions.py
"""
Erros de negócio do ciclo de vida (indicações e benefícios).

Todos carregam uma mensagem pronta para o usuário ; as views JSON
convertem em código HTTP via ``http_status``.
"""


class LifecycleError(Exception):
    http_status = 400
    code = "error"

    def __init__(self, message: str = "", **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def as_dict(self) -> dict:
        return {"success": False, "error": self.code, "message": self.message}


class ValidationFailed(LifecycleError):
    """Entrada obrigatória ausente ou inválida (motivo, valor, arquivo...)."""
    http_status = 400
    code = "validation"


class ConflictError(LifecycleError):
    """Já existe um benefício para esta indicação."""
    http_status = 409
    code = "conflict"


class InvalidTransition(LifecycleError):
    http_status = 409
    code = "invalid_transition"


class NotFound(LifecycleError):
    http_status = 404
    code = "not_found"


class DependencyFailure(LifecycleError):
    """Falha de escrita no banco ou no storage."""
    http_status = 502
    code = "dependency_failure"
