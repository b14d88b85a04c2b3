import concurrent.futures
import logging
import threading

import requests
from django.conf import settings

from mobile_wallets.domain.exceptions import DeadlineExceeded, NetworkRequestFailed
from mobile_wallets.integrations.context import RequestContext

logger = logging.getLogger(__name__)

# urllib3 rejects zero timeouts.
_MIN_TIMEOUT = 0.001


def build_session():
    session = requests.Session()
    adapter = requests.adapters.HTTPAdapter(
        pool_connections=settings.MOBILE_WALLET_HTTP_MAX_CONNECTIONS,
        pool_maxsize=settings.MOBILE_WALLET_HTTP_MAX_KEEPALIVE,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _close_abandoned_response(future):
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()


class HttpClient:
    """Single-attempt JSON HTTP client bounded by a ``RequestContext``.

    Cancellable contexts run the request on a worker thread so that the
    caller can return as soon as the context is cancelled; the abandoned
    response is closed once it arrives.
    """

    def __init__(
        self,
        *,
        session=None,
        connect_timeout=None,
        read_timeout=30.0,
        poll_interval=None,
        executor=None,
    ):
        self.session = session or build_session()
        self.connect_timeout = (
            settings.MOBILE_WALLET_CONNECT_TIMEOUT
            if connect_timeout is None
            else connect_timeout
        )
        self.read_timeout = read_timeout
        self.poll_interval = (
            settings.MOBILE_WALLET_CANCEL_POLL_INTERVAL
            if poll_interval is None
            else poll_interval
        )
        self._executor = executor
        self._executor_lock = threading.Lock()

    def _get_executor(self):
        with self._executor_lock:
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=settings.MOBILE_WALLET_HTTP_MAX_CONNECTIONS,
                    thread_name_prefix="mobile-wallet-http",
                )
            return self._executor

    def _timeout(self, context):
        remaining = context.remaining()
        if remaining is None:
            return (self.connect_timeout, self.read_timeout)
        remaining = max(_MIN_TIMEOUT, remaining)
        return (min(self.connect_timeout, remaining), min(self.read_timeout, remaining))

    def post_json(self, url, *, json=None, headers=None, context=None, operation=None):
        context = context or RequestContext.background()
        context.raise_if_done(operation)
        timeout = self._timeout(context)

        def send_once():
            return self.session.post(
                url,
                json=json,
                headers=headers,
                timeout=timeout,
            )

        return self._send(send_once, context=context, operation=operation)

    def get_json(self, url, *, headers=None, context=None, operation=None):
        context = context or RequestContext.background()
        context.raise_if_done(operation)
        timeout = self._timeout(context)

        def send_once():
            return self.session.get(
                url,
                headers=headers,
                timeout=timeout,
            )

        return self._send(send_once, context=context, operation=operation)

    def _send(self, send_once, *, context, operation):
        try:
            if context.cancellable:
                return self._send_cancellable(
                    send_once, context=context, operation=operation
                )
            return send_once()
        except (requests.Timeout, requests.ConnectionError) as exc:
            if context.expired:
                raise DeadlineExceeded(
                    "context deadline exceeded", operation=operation
                ) from exc
            raise NetworkRequestFailed(
                "network request failed", operation=operation
            ) from exc
        except requests.RequestException as exc:
            raise NetworkRequestFailed(
                f"request could not be sent: {exc}", operation=operation
            ) from exc

    def _send_cancellable(self, send_once, *, context, operation):
        future = self._get_executor().submit(send_once)
        while True:
            try:
                return future.result(timeout=self.poll_interval)
            except concurrent.futures.TimeoutError:
                if not (context.cancelled or context.expired):
                    continue
                # A request still queued behind a busy pool is never sent.
                future.cancel()
                future.add_done_callback(_close_abandoned_response)
                logger.info(
                    "event=mobile_wallet_http_abandoned operation=%s cancelled=%s",
                    operation,
                    context.cancelled,
                )
                context.raise_if_done(operation)

    def close(self):
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
        self.session.close()
