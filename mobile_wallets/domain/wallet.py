class MobileWallet:
    """Capability every mobile money provider adapter implements."""

    provider_name = None

    def verify_transaction(self, reference_id, context=None):
        """Return a ``TransactionResult`` for ``reference_id``.

        Raises ``TransactionNotFound``, ``ProviderError``, ``TransportError``,
        ``AuthError`` or ``RequestCancelled``; never returns a partial result.
        """
        raise NotImplementedError
