import functools
import logging
import threading

from django.conf import settings

from mobile_wallets.domain.exceptions import UnknownProvider, WalletError
from mobile_wallets.domain.policies import validate_reference_id, validate_timeout_seconds
from mobile_wallets.integrations.context import RequestContext
from mobile_wallets.registry import get_default_registry

logger = logging.getLogger(__name__)


class WalletDirectory:
    """Builds each configured wallet adapter once and hands out the same instance.

    Reusing the adapter keeps its bearer token cached across verifications.
    """

    def __init__(self, *, registry, dsns):
        self.registry = registry
        self.dsns = dict(dsns)
        self._wallets = {}
        self._lock = threading.Lock()

    def providers(self):
        return sorted(self.dsns)

    def get(self, provider):
        wallet = self._wallets.get(provider)
        if wallet is not None:
            return wallet

        with self._lock:
            wallet = self._wallets.get(provider)
            if wallet is not None:
                return wallet
            try:
                dsn = self.dsns[provider]
            except KeyError:
                raise UnknownProvider(f"provider {provider!r} is not configured") from None
            wallet = self.registry.create(provider, dsn)
            self._wallets[provider] = wallet
            logger.info("event=mobile_wallet_adapter_created provider=%s", provider)
            return wallet


@functools.lru_cache(maxsize=1)
def get_wallet_directory():
    return WalletDirectory(
        registry=get_default_registry(),
        dsns=settings.MOBILE_WALLET_DSNS,
    )


class VerificationService:
    @staticmethod
    def verify(provider, reference_id, *, timeout=None, context=None, directory=None):
        reference_id = validate_reference_id(reference_id)
        if timeout is not None:
            timeout = validate_timeout_seconds(timeout)

        wallet = (directory or get_wallet_directory()).get(provider)
        context = context or RequestContext.background()
        if timeout is not None:
            context = context.with_timeout(timeout)

        try:
            result = wallet.verify_transaction(reference_id, context=context)
        except WalletError as exc:
            logger.warning(
                "event=mobile_wallet_verification_failed provider=%s reference_id=%s error=%s operation=%s",
                provider,
                reference_id,
                type(exc).__name__,
                exc.operation,
            )
            raise

        logger.info(
            "event=mobile_wallet_verification_completed provider=%s reference_id=%s status=%s",
            provider,
            reference_id,
            result.status.value,
        )
        return result
