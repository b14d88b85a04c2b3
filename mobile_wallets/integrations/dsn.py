from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlsplit, urlunsplit

from mobile_wallets.domain.constants import DEFAULT_TIMEOUT_MS
from mobile_wallets.domain.exceptions import ConfigError

REQUIRED_PARAMETERS = ("client_id", "secret_key", "country", "currency")


def parse_dsn(dsn):
    """Split a wallet DSN into its base endpoint and its query parameters.

    ``https://openapi.airtel.africa?client_id=a&secret_key=b`` yields
    ``("https://openapi.airtel.africa", {"client_id": "a", "secret_key": "b"})``.
    Repeated keys keep their first value.
    """
    try:
        parts = urlsplit(dsn.strip())
    except (AttributeError, ValueError) as exc:
        raise ConfigError(str(exc), operation="parsing dsn") from exc

    # Bare keys (`&debug`) and empty fields (trailing `&`) are tolerated.
    parsed = parse_qs(parts.query, keep_blank_values=True)
    values = {key: items[0] for key, items in parsed.items()}

    endpoint = urlunsplit((parts.scheme, parts.netloc, parts.path, "", "")).rstrip("/")
    return endpoint, values


def _is_absolute(endpoint):
    parts = urlsplit(endpoint)
    return bool(parts.scheme and parts.netloc)


@dataclass(frozen=True)
class WalletConfig:
    client_id: str
    client_secret: str = field(repr=False)
    country: str
    currency: str
    endpoint: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_dsn(cls, dsn, *, default_timeout_ms=DEFAULT_TIMEOUT_MS):
        endpoint, values = parse_dsn(dsn)

        for name in REQUIRED_PARAMETERS:
            if not values.get(name, "").strip():
                raise ConfigError(
                    f"missing parameter `{name}`",
                    parameter=name,
                    operation="reading client parameters",
                )

        timeout_ms = default_timeout_ms
        raw_timeout = values.get("timeout")
        if raw_timeout is not None:
            try:
                timeout_ms = int(raw_timeout)
            except ValueError as exc:
                raise ConfigError(
                    f"invalid timeout value {raw_timeout}",
                    parameter="timeout",
                    operation="reading client parameters",
                ) from exc
            if timeout_ms <= 0:
                raise ConfigError(
                    f"timeout must be greater than zero, got {raw_timeout}",
                    parameter="timeout",
                    operation="reading client parameters",
                )

        if not _is_absolute(endpoint):
            raise ConfigError("dsn must be an absolute url", operation="parsing dsn")

        return cls(
            client_id=values["client_id"],
            client_secret=values["secret_key"],
            country=values["country"],
            currency=values["currency"],
            endpoint=endpoint,
            timeout_ms=timeout_ms,
        )

    @property
    def timeout_seconds(self):
        return self.timeout_ms / 1000

    def url(self, *segments):
        return "/".join([self.endpoint, *segments])
