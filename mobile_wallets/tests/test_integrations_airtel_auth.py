import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from django.test import SimpleTestCase

from mobile_wallets.domain.exceptions import (
    AuthError,
    NetworkRequestFailed,
    RequestCancelled,
)
from mobile_wallets.integrations.airtel_auth import AuthToken, CredentialManager
from mobile_wallets.integrations.context import RequestContext
from mobile_wallets.integrations.dsn import WalletConfig

DSN = "http://airtel.local?client_id=a&secret_key=b&country=KE&currency=KES&timeout=5000"
T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class MutableClock:
    def __init__(self, value):
        self.value = value

    def __call__(self):
        return self.value


def auth_response(status_code=200, body=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = (
        body
        if body is not None
        else {"access_token": "tok1", "expires_in": "3600", "token_type": "bearer"}
    )
    return response


class AuthTokenTests(SimpleTestCase):
    def test_empty_token_is_never_valid(self):
        token = AuthToken.empty()

        self.assertFalse(token.authenticated)
        self.assertFalse(token.is_valid(T0))

    def test_validity_boundary_is_exact(self):
        token = AuthToken(access_token="tok1", expires_in=60, expires_at=T0 + timedelta(seconds=60))

        self.assertTrue(token.is_valid(T0))
        self.assertTrue(token.is_valid(T0 + timedelta(seconds=60) - timedelta(microseconds=1)))
        self.assertFalse(token.is_valid(T0 + timedelta(seconds=60)))
        self.assertFalse(token.is_valid(T0 + timedelta(seconds=61)))

    def test_access_token_is_hidden_from_repr(self):
        self.assertNotIn("secret-token", repr(AuthToken(access_token="secret-token")))


class CredentialManagerTests(SimpleTestCase):
    def setUp(self):
        self.config = WalletConfig.from_dsn(DSN)
        self.http_client = Mock()
        self.clock = MutableClock(T0)
        self.manager = CredentialManager(self.config, self.http_client, now=self.clock)

    def test_exchanges_client_credentials(self):
        self.http_client.post_json.return_value = auth_response()

        token = self.manager.ensure_authenticated()

        self.assertEqual(token.access_token, "tok1")
        self.assertEqual(token.token_type, "bearer")
        self.assertEqual(token.expires_in, 3600)
        self.assertEqual(token.expires_at, T0 + timedelta(seconds=3600))
        args, kwargs = self.http_client.post_json.call_args
        self.assertEqual(args[0], "http://airtel.local/auth/oauth2/token")
        self.assertEqual(
            kwargs["json"],
            {"client_id": "a", "secret_key": "b", "grant_type": ""},
        )
        self.assertEqual(kwargs["headers"]["Accept"], "application/json")
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")
        self.assertLessEqual(kwargs["context"].remaining(), 5.0)

    def test_valid_token_is_reused(self):
        self.http_client.post_json.return_value = auth_response()

        self.manager.ensure_authenticated()
        self.clock.value = T0 + timedelta(seconds=3599)
        self.manager.ensure_authenticated()

        self.assertEqual(self.http_client.post_json.call_count, 1)

    def test_token_is_refreshed_at_expiry(self):
        self.http_client.post_json.side_effect = [
            auth_response(),
            auth_response(body={"access_token": "tok2", "expires_in": 60, "token_type": "bearer"}),
        ]

        self.manager.ensure_authenticated()
        self.clock.value = T0 + timedelta(seconds=3600)
        token = self.manager.ensure_authenticated()

        self.assertEqual(self.http_client.post_json.call_count, 2)
        self.assertEqual(token.access_token, "tok2")
        self.assertEqual(token.expires_at, T0 + timedelta(seconds=3660))

    def test_non_200_status_raises_auth_error(self):
        self.http_client.post_json.return_value = auth_response(status_code=401, body={})

        with self.assertRaises(AuthError) as ctx:
            self.manager.ensure_authenticated()

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertFalse(self.manager.token.authenticated)

    def test_invalid_json_raises_auth_error(self):
        response = auth_response()
        response.json.side_effect = ValueError("invalid json")
        self.http_client.post_json.return_value = response

        with self.assertRaises(AuthError) as ctx:
            self.manager.ensure_authenticated()

        self.assertEqual(ctx.exception.operation, "parsing authentication response")

    def test_unparsable_expires_in_raises_auth_error(self):
        self.http_client.post_json.return_value = auth_response(
            body={"access_token": "tok1", "expires_in": "soon", "token_type": "bearer"}
        )

        with self.assertRaises(AuthError) as ctx:
            self.manager.ensure_authenticated()

        self.assertEqual(
            ctx.exception.operation, "parsing authentication response (expires_in)"
        )
        self.assertFalse(self.manager.token.authenticated)

    def test_network_failure_raises_auth_error(self):
        self.http_client.post_json.side_effect = NetworkRequestFailed("down")

        with self.assertRaises(AuthError) as ctx:
            self.manager.ensure_authenticated()

        self.assertEqual(ctx.exception.operation, "sending authentication request")
        self.assertIsInstance(ctx.exception.__cause__, NetworkRequestFailed)

    def test_invalidate_forces_new_exchange(self):
        self.http_client.post_json.return_value = auth_response()

        self.manager.ensure_authenticated()
        self.manager.invalidate()
        self.manager.ensure_authenticated()

        self.assertEqual(self.http_client.post_json.call_count, 2)

    def test_concurrent_callers_share_one_exchange(self):
        def slow_post_json(*args, **kwargs):
            time.sleep(0.05)
            return auth_response()

        self.http_client.post_json.side_effect = slow_post_json
        threads = [
            threading.Thread(target=self.manager.ensure_authenticated) for _ in range(5)
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        self.assertEqual(self.http_client.post_json.call_count, 1)
        self.assertTrue(self.manager.is_authenticated())

    def test_cancelled_waiter_stops_queueing_for_refresh(self):
        manager = CredentialManager(
            self.config, self.http_client, now=self.clock, poll_interval=0.01
        )
        release = threading.Event()
        exchange_started = threading.Event()

        def blocked_post_json(*args, **kwargs):
            exchange_started.set()
            release.wait(5)
            return auth_response()

        self.http_client.post_json.side_effect = blocked_post_json
        holder = threading.Thread(target=manager.ensure_authenticated)
        holder.start()
        self.assertTrue(exchange_started.wait(5))

        context = RequestContext.with_cancel()
        timer = threading.Timer(0.05, context.cancel)
        timer.start()
        started = time.monotonic()
        try:
            with self.assertRaises(RequestCancelled) as ctx:
                manager.ensure_authenticated(context)
            elapsed = time.monotonic() - started
        finally:
            timer.cancel()
            release.set()
            holder.join(timeout=5)

        self.assertLess(elapsed, 1.0)
        self.assertEqual(ctx.exception.operation, "sending authentication request")
        self.assertEqual(self.http_client.post_json.call_count, 1)
        self.assertTrue(manager.is_authenticated())

    def test_already_cancelled_context_skips_exchange(self):
        context = RequestContext.with_cancel()
        context.cancel()

        with self.assertRaises(RequestCancelled):
            self.manager.ensure_authenticated(context)

        self.http_client.post_json.assert_not_called()
