# benefits/services/storage.py
"""
Armazenamento dos arquivos de NF (API de storage do Django).

Os documentos contêm dados comerciais : nunca há URL pública permanente, só
links assinados de curta duração servidos por ``benefits.views.invoice_download``.
"""
from __future__ import annotations

from django.conf import settings
from django.core import signing
from django.core.files.base import ContentFile, File
from django.core.files.storage import storages
from django.urls import reverse

SIGNING_SALT = "benefits.invoice-download"


def get_storage():
    return storages[getattr(settings, "INVOICE_STORAGE_ALIAS", "default")]


def store_file(path: str, content) -> str:
    """Grava ``content`` (bytes ou File) em ``path`` ; devolve o nome efetivo."""
    if not isinstance(content, File):
        content = ContentFile(content)
    if hasattr(content, "seek"):
        content.seek(0)
    return get_storage().save(path, content)


def delete_file(path: str) -> None:
    if path:
        get_storage().delete(path)


def file_exists(path: str) -> bool:
    return bool(path) and get_storage().exists(path)


def open_file(path: str):
    return get_storage().open(path, "rb")


def sign_path(path: str) -> str:
    return signing.dumps(path, salt=SIGNING_SALT, compress=False)


def unsign_token(token: str, max_age=None) -> str:
    """Lança ``signing.SignatureExpired`` / ``signing.BadSignature``."""
    if max_age is None:
        max_age = settings.INVOICE_URL_MAX_AGE
    return signing.loads(token, salt=SIGNING_SALT, max_age=max_age)


def resolve_download_url(path: str) -> str:
    return reverse("benefits:invoice_download", kwargs={"token": sign_path(path)})
