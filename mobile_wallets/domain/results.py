from dataclasses import dataclass
from datetime import datetime

from mobile_wallets.domain.constants import FINAL_STATUSES, TransactionStatus


@dataclass(frozen=True)
class TransactionResult:
    id: str
    reference_id: str
    message: str
    status: TransactionStatus
    provider_status: str | None = None
    # Not every provider reports these; None means "not available", never zero.
    amount: float | None = None
    created_at: datetime | None = None

    def __post_init__(self):
        if not isinstance(self.status, TransactionStatus):
            object.__setattr__(self, "status", TransactionStatus(self.status))

    @property
    def success(self):
        return self.status == TransactionStatus.SUCCESS

    @property
    def is_final(self):
        return self.status in FINAL_STATUSES

    @property
    def is_recognized(self):
        return self.status != TransactionStatus.UNKNOWN
