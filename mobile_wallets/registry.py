import functools
import logging
import threading

from mobile_wallets.domain.exceptions import DuplicateProvider, UnknownProvider
from mobile_wallets.integrations.airtel_money import PROVIDER_NAME as AIRTEL_MONEY
from mobile_wallets.integrations.airtel_money import AirtelMoneyWallet

logger = logging.getLogger(__name__)


class WalletRegistry:
    """Maps provider names to wallet constructors taking a DSN string."""

    def __init__(self):
        self._constructors = {}
        self._lock = threading.Lock()

    def register(self, name, constructor):
        if not name:
            raise ValueError("provider name must not be empty")
        if not callable(constructor):
            raise TypeError("wallet constructor must be callable")
        with self._lock:
            if name in self._constructors:
                raise DuplicateProvider(f"provider {name!r} is already registered")
            self._constructors[name] = constructor
        logger.debug("event=mobile_wallet_provider_registered provider=%s", name)

    def is_registered(self, name):
        return name in self._constructors

    def names(self):
        return sorted(self._constructors)

    def create(self, name, dsn):
        try:
            constructor = self._constructors[name]
        except KeyError:
            raise UnknownProvider(f"no wallet registered under {name!r}") from None
        return constructor(dsn)


def register_default_providers(registry):
    registry.register(AIRTEL_MONEY, AirtelMoneyWallet.from_dsn)
    return registry


@functools.lru_cache(maxsize=1)
def get_default_registry():
    return register_default_providers(WalletRegistry())
