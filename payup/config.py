import os

from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv


def load_environment(base_dir):
    load_dotenv(base_dir / ".env")


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name, default):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ImproperlyConfigured(f"{name} must be an integer") from exc


def env_float(name, default):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ImproperlyConfigured(f"{name} must be a number") from exc


def env_list(name, default=None):
    value = os.getenv(name)
    if value is None:
        return default or []
    return [item.strip() for item in value.split(",") if item.strip()]


def build_wallet_dsns(providers):
    """Map each enabled provider name to the DSN in ``<NAME>_DSN``.

    Provider names are camelCase registry keys (``airtelMoney``); the
    environment variable is the snake-cased upper form (``AIRTEL_MONEY_DSN``).
    """
    dsns = {}
    for provider in providers:
        env_name = _env_name_for_provider(provider)
        dsn = os.getenv(env_name, "").strip()
        if not dsn:
            raise ImproperlyConfigured(
                f"{env_name} must be set when {provider} is enabled"
            )
        dsns[provider] = dsn
    return dsns


def _env_name_for_provider(provider):
    chars = []
    for char in provider:
        if char.isupper() and chars:
            chars.append("_")
        chars.append(char.upper())
    return "".join(chars) + "_DSN"
