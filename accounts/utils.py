# accounts/utils.py
import json

from django.http import JsonResponse

from core.exceptions import ValidationFailed


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR") or None


def bearer_token(request) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def json_body(request) -> dict:
    """Corpo JSON ou, na falta dele, os campos POST clássicos."""
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            raise ValidationFailed("JSON inválido.")
        if not isinstance(data, dict):
            raise ValidationFailed("JSON inválido.")
        return data
    return request.POST.dict()


def error_response(exc) -> JsonResponse:
    return JsonResponse(exc.as_dict(), status=exc.http_status)
