import os
from pathlib import Path

from django.core.exceptions import ImproperlyConfigured

from payup.config import (
    build_wallet_dsns,
    env_bool,
    env_float,
    env_int,
    env_list,
    load_environment,
)

BASE_DIR = Path(__file__).resolve().parent.parent
load_environment(BASE_DIR)

DEBUG = env_bool("DEBUG", default=True)

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "")
if not SECRET_KEY:
    if DEBUG:
        SECRET_KEY = "dev-only-secret-key"
    else:
        raise ImproperlyConfigured("DJANGO_SECRET_KEY must be set when DEBUG=False")

ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", ["127.0.0.1", "localhost", "testserver"])
if not DEBUG and not ALLOWED_HOSTS:
    raise ImproperlyConfigured("ALLOWED_HOSTS must be set when DEBUG=False")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "mobile_wallets",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "payup.urls"

WSGI_APPLICATION = "payup.wsgi.application"

# Verification is stateless apart from the in-memory token cache.
DATABASES = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "mobile_wallets.api.exceptions.custom_exception_handler",
}

MOBILE_WALLET_PROVIDERS = env_list("MOBILE_WALLET_PROVIDERS", [])
MOBILE_WALLET_DSNS = build_wallet_dsns(MOBILE_WALLET_PROVIDERS)

MOBILE_WALLET_CONNECT_TIMEOUT = env_float("MOBILE_WALLET_CONNECT_TIMEOUT", default=3.0)
MOBILE_WALLET_HTTP_MAX_CONNECTIONS = env_int(
    "MOBILE_WALLET_HTTP_MAX_CONNECTIONS", default=10
)
MOBILE_WALLET_HTTP_MAX_KEEPALIVE = env_int("MOBILE_WALLET_HTTP_MAX_KEEPALIVE", default=10)
MOBILE_WALLET_CANCEL_POLL_INTERVAL = env_float(
    "MOBILE_WALLET_CANCEL_POLL_INTERVAL", default=0.05
)

if MOBILE_WALLET_CONNECT_TIMEOUT <= 0:
    raise ImproperlyConfigured("MOBILE_WALLET_CONNECT_TIMEOUT must be greater than zero")
if MOBILE_WALLET_HTTP_MAX_CONNECTIONS < 1:
    raise ImproperlyConfigured("MOBILE_WALLET_HTTP_MAX_CONNECTIONS must be >= 1")
if MOBILE_WALLET_HTTP_MAX_KEEPALIVE < 1:
    raise ImproperlyConfigured("MOBILE_WALLET_HTTP_MAX_KEEPALIVE must be >= 1")
if MOBILE_WALLET_CANCEL_POLL_INTERVAL <= 0:
    raise ImproperlyConfigured(
        "MOBILE_WALLET_CANCEL_POLL_INTERVAL must be greater than zero"
    )

LOG_LEVEL = os.getenv("PAYUP_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "structured": {
            "format": (
                '{"ts":"%(asctime)s","level":"%(levelname)s",'
                '"logger":"%(name)s","message":"%(message)s"}'
            ),
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "structured",
        },
    },
    "loggers": {
        "mobile_wallets": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
