import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from django.conf import settings

from mobile_wallets.domain.exceptions import AuthError, NetworkRequestFailed
from mobile_wallets.integrations.context import RequestContext

logger = logging.getLogger(__name__)

TOKEN_PATH = ("auth", "oauth2", "token")

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def utc_now():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthToken:
    access_token: str = field(default="", repr=False)
    token_type: str = ""
    expires_in: int | None = None
    expires_at: datetime | None = None

    @classmethod
    def empty(cls):
        return cls()

    @property
    def authenticated(self):
        return self.expires_at is not None

    def is_valid(self, now=None):
        if self.expires_at is None:
            return False
        return (now or utc_now()) < self.expires_at

    @property
    def authorization_header(self):
        return f"Bearer {self.access_token}"


def _parse_expires_in(value):
    if isinstance(value, bool):
        raise ValueError(f"invalid expires_in value {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip())


class CredentialManager:
    """Caches the provider bearer token and refreshes it when it expires.

    Refresh is serialized by a lock, so callers sharing one wallet adapter
    trigger at most one token exchange per expiry.
    """

    def __init__(self, config, http_client, *, now=utc_now, poll_interval=None):
        self.config = config
        self.http_client = http_client
        self._now = now
        self.poll_interval = (
            settings.MOBILE_WALLET_CANCEL_POLL_INTERVAL
            if poll_interval is None
            else poll_interval
        )
        self._token = AuthToken.empty()
        self._lock = threading.Lock()

    @property
    def token(self):
        return self._token

    def is_authenticated(self):
        return self._token.is_valid(self._now())

    def invalidate(self):
        with self._lock:
            self._token = AuthToken.empty()

    def ensure_authenticated(self, context=None):
        token = self._token
        if token.is_valid(self._now()):
            return token

        context = context or RequestContext.background()
        context.raise_if_done("sending authentication request")
        # Waiters re-check their own context between lock attempts.
        while not self._lock.acquire(timeout=self.poll_interval):
            context.raise_if_done("sending authentication request")
        try:
            token = self._token
            if token.is_valid(self._now()):
                return token
            self._token = self._fetch_token(context)
            return self._token
        finally:
            self._lock.release()

    def _fetch_token(self, context):
        url = self.config.url(*TOKEN_PATH)
        payload = {
            "client_id": self.config.client_id,
            "secret_key": self.config.client_secret,
            "grant_type": "",
        }
        timed_context = context.with_timeout(self.config.timeout_seconds)

        logger.info(
            "event=mobile_wallet_auth_request provider=airtel_money url=%s client_id=%s",
            url,
            self.config.client_id,
        )
        try:
            response = self.http_client.post_json(
                url,
                json=payload,
                headers=dict(JSON_HEADERS),
                context=timed_context,
                operation="sending authentication request",
            )
        except NetworkRequestFailed as exc:
            logger.warning(
                "event=mobile_wallet_auth_failed provider=airtel_money reason=network_error"
            )
            raise AuthError(
                "network request failed",
                operation="sending authentication request",
            ) from exc
        if response.status_code != 200:
            logger.warning(
                "event=mobile_wallet_auth_failed provider=airtel_money http_status=%s",
                response.status_code,
            )
            raise AuthError(
                f"authentication response code {response.status_code}",
                status_code=response.status_code,
                operation="sending authentication request",
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise AuthError(
                "invalid json body",
                status_code=response.status_code,
                operation="parsing authentication response",
            ) from exc
        if not isinstance(body, dict) or not body.get("access_token"):
            raise AuthError(
                "access_token missing",
                status_code=response.status_code,
                operation="parsing authentication response",
            )

        raw_expires_in = body.get("expires_in")
        try:
            expires_in = _parse_expires_in(raw_expires_in)
        except (TypeError, ValueError) as exc:
            raise AuthError(
                f"invalid expires_in value {raw_expires_in!r}",
                status_code=response.status_code,
                operation="parsing authentication response (expires_in)",
            ) from exc

        token = AuthToken(
            access_token=str(body["access_token"]),
            token_type=str(body.get("token_type") or ""),
            expires_in=expires_in,
            expires_at=self._now() + timedelta(seconds=expires_in),
        )
        logger.info(
            "event=mobile_wallet_auth_success provider=airtel_money token_type=%s expires_at=%s",
            token.token_type,
            token.expires_at.isoformat(),
        )
        return token
