"""
Django settings for config project (CorpVox Experts).

– Carrega .env.local (prioritário) e depois .env
– DEV/PROD alternados por DEBUG
– Parâmetros do ciclo de vida (expiração, NF, sessões) via ambiente
"""

from pathlib import Path
import os

import dj_database_url
from dotenv import load_dotenv

# ======================================================================
# BASE & ENV
# ======================================================================
BASE_DIR = Path(__file__).resolve().parent.parent

def _load_env():
    """Carrega .env.local com prioridade, senão .env (se existirem)."""
    for name in (".env.local", ".env"):
        p = BASE_DIR / name
        if p.exists():
            load_dotenv(p, override=True)
            break

_load_env()

def env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}

def env_list(name: str, default: str = "") -> list[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]

def env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return int(v)

# ======================================================================
# CORE FLAGS
# ======================================================================
DEBUG = env_bool("DEBUG", True)

SECRET_KEY = (os.getenv("SECRET_KEY") or ("dev-secret" if DEBUG else ""))
if not DEBUG and not SECRET_KEY:
    raise RuntimeError("SECRET_KEY ausente em produção.")

# Hosts & CSRF
if DEBUG:
    ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", "localhost,127.0.0.1,0.0.0.0,testserver")
    CSRF_TRUSTED_ORIGINS = env_list("CSRF_TRUSTED_ORIGINS", "http://localhost,http://127.0.0.1")
else:
    ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", "experts.corpvox.com.br")
    CSRF_TRUSTED_ORIGINS = env_list("CSRF_TRUSTED_ORIGINS", "https://experts.corpvox.com.br")

# ======================================================================
# APPS
# ======================================================================
INSTALLED_APPS = [
    # Apps projeto
    "core",
    "accounts.apps.AccountsConfig",
    "indications.apps.IndicationsConfig",
    "benefits.apps.BenefitsConfig",

    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
]

# ======================================================================
# MIDDLEWARE & TEMPLATES
# ======================================================================
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

# apenas para o Django admin
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

# ======================================================================
# DATABASE
# ======================================================================
DATABASES = {
    "default": dj_database_url.parse(
        os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'dev.sqlite3'}"),
        conn_max_age=600,
        ssl_require=env_bool("DB_SSL_REQUIRE", False),
    )
}

# ======================================================================
# AUTH / PASSWORDS
# ======================================================================
AUTH_USER_MODEL = "accounts.User"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

AUTHENTICATION_BACKENDS = [
    "accounts.backends.CaseInsensitiveModelBackend",  # herda de ModelBackend
]

# sessões Bearer (tabela AccessSession)
ADMIN_SESSION_HOURS = env_int("ADMIN_SESSION_HOURS", 8)
EXPERT_SESSION_HOURS = env_int("EXPERT_SESSION_HOURS", 24)

# ======================================================================
# I18N / TZ
# ======================================================================
LANGUAGE_CODE = "pt-br"
TIME_ZONE = os.getenv("TIME_ZONE", "America/Sao_Paulo")
USE_I18N = True
USE_TZ = True

PHONE_DEFAULT_REGIONS = tuple(env_list("PHONE_DEFAULT_REGIONS", "BR"))

# ======================================================================
# STATIC / STORAGE
# ======================================================================
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

MEDIA_ROOT = BASE_DIR / "media"
INVOICE_ROOT = Path(os.getenv("INVOICE_ROOT", str(BASE_DIR / "private" / "invoices")))

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    # NFs : diretório privado, nunca servido diretamente (links assinados)
    "invoices": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
        "OPTIONS": {"location": INVOICE_ROOT, "base_url": None},
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage" if DEBUG
        else "django.contrib.staticfiles.storage.ManifestStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ======================================================================
# CICLO DE VIDA : indicações & benefícios
# ======================================================================
INDICATION_EXPIRY_DAYS = env_int("INDICATION_EXPIRY_DAYS", 90)

INVOICE_STORAGE_ALIAS = "invoices"
INVOICE_MAX_BYTES = env_int("INVOICE_MAX_BYTES", 10 * 1024 * 1024)  # 10 MB
INVOICE_ALLOWED_CONTENT_TYPES = ("application/pdf", "text/xml", "application/xml")
INVOICE_URL_MAX_AGE = env_int("INVOICE_URL_MAX_AGE", 300)  # segundos

# uploads acima disso vão para arquivo temporário
FILE_UPLOAD_MAX_MEMORY_SIZE = 2_621_440
DATA_UPLOAD_MAX_MEMORY_SIZE = INVOICE_MAX_BYTES + 1024 * 1024

# ======================================================================
# SEGURANÇA / PROXY
# ======================================================================
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

if DEBUG:
    SECURE_SSL_REDIRECT = False
    SESSION_COOKIE_SECURE = False
    CSRF_COOKIE_SECURE = False
else:
    SECURE_SSL_REDIRECT = env_bool("SECURE_SSL_REDIRECT", True)
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True

# ======================================================================
# LOGGING
# ======================================================================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "INFO" if not DEBUG else "DEBUG"},
    "loggers": {
        "accounts": {"level": "INFO"},
        "indications": {"level": "INFO"},
        "benefits": {"level": "INFO"},
        "django.db.backends": {"level": "WARNING"},
    },
}
