import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name, default):
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-ota-proxy-key")
DEBUG = _env_bool("DEBUG", False)
ALLOWED_HOSTS = _env_list("ALLOWED_HOSTS", ["*"])

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "gateway",
]

MIDDLEWARE = [
    "gateway.middleware.RequestLoggingMiddleware",
]

ROOT_URLCONF = "otaproxy.urls"
WSGI_APPLICATION = "otaproxy.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

USE_TZ = True
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# --- Upstream targets ---
PHPTRAVELS_TARGET = os.getenv("PHPTRAVELS_TARGET", "https://api.phptravels.com")
IATA_LOCAL_SEARCH_URL = os.getenv("IATA_LOCAL_SEARCH_URL", "https://ota-proxy-dev.onrender.com/api/v1/search")
DUFFEL_SEARCH_URL = os.getenv("DUFFEL_SEARCH_URL", "https://api.duffel.com/air/offer_requests?return_offers=true")
DUFFEL_VERSION = os.getenv("DUFFEL_VERSION", "v2")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

# Supplier modules adapted by the gateway, matched as /flights/<module> in the path.
GATEWAY_MODULES = _env_list("GATEWAY_MODULES", ["duffel", "iatalocal"])
PASSTHROUGH_PREFIX = "/api"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "gateway": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

# Pass-through bodies are relayed whole; form/JSON size limits belong to the legacy backend.
DATA_UPLOAD_MAX_MEMORY_SIZE = None
