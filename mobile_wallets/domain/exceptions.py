class WalletError(Exception):
    """Base class for mobile wallet errors.

    ``operation`` names the step that failed (``"parsing dsn"``,
    ``"sending authentication request"`` ...) so callers can tell causes
    apart without inspecting the chained exception.
    """

    def __init__(self, message, *, operation=None):
        self.operation = operation
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)


class ConfigError(WalletError):
    """Raised when the wallet DSN is malformed or misses a parameter."""

    def __init__(self, message, *, parameter=None, operation=None):
        self.parameter = parameter
        super().__init__(message, operation=operation)


class AuthError(WalletError):
    """Raised when the client-credentials exchange fails."""

    def __init__(self, message, *, status_code=None, operation=None):
        self.status_code = status_code
        super().__init__(message, operation=operation)


class TransportError(WalletError):
    """Raised on an unexpected HTTP status or an unreadable response."""

    def __init__(self, message, *, status_code=None, operation=None):
        self.status_code = status_code
        super().__init__(message, operation=operation)


class NetworkRequestFailed(TransportError):
    """Raised when the provider could not be reached."""


class TransactionNotFound(WalletError):
    """Raised when the provider does not know the reference id."""

    def __init__(self, reference_id, *, operation=None):
        self.reference_id = reference_id
        super().__init__(f"transaction {reference_id!r} not found", operation=operation)


class ProviderError(WalletError):
    """Raised when the provider answered with a non-success request code."""

    def __init__(
        self,
        code,
        *,
        response_code=None,
        reason=None,
        description=None,
        provider_message=None,
        operation=None,
    ):
        self.code = code
        self.response_code = response_code
        self.reason = reason
        self.description = description
        self.provider_message = provider_message
        super().__init__(f"transaction response code {code}", operation=operation)


class RequestCancelled(WalletError):
    """Raised when the caller cancelled the request context."""


class DeadlineExceeded(RequestCancelled):
    """Raised when the request context deadline passed."""


class UnknownProvider(WalletError):
    """Raised when no wallet constructor is registered under a name."""


class DuplicateProvider(WalletError):
    """Raised when a provider name is registered twice."""


class InvalidRequest(WalletError):
    """Raised when a verification request carries invalid arguments."""
