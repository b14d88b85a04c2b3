import math

from mobile_wallets.domain.exceptions import InvalidRequest


def validate_reference_id(reference_id):
    # Format is the provider's concern; only emptiness is rejected here.
    if not isinstance(reference_id, str) or not reference_id.strip():
        raise InvalidRequest("reference_id must be a non-empty string")
    return reference_id


def validate_timeout_seconds(timeout):
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise InvalidRequest("timeout must be a number of seconds")

    if not math.isfinite(timeout) or timeout <= 0:
        raise InvalidRequest("timeout must be greater than zero")

    return float(timeout)
