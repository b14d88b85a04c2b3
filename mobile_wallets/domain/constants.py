from enum import Enum


class TransactionStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"
    EXPIRED = "EXPIRED"
    # Provider reported a status code with no canonical counterpart.
    UNKNOWN = "UNKNOWN"


FINAL_STATUSES = frozenset(
    {
        TransactionStatus.SUCCESS,
        TransactionStatus.FAILED,
        TransactionStatus.EXPIRED,
    }
)

DEFAULT_TIMEOUT_MS = 30 * 1000
