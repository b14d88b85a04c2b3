from mobile_wallets.domain.constants import TransactionStatus

# Request-level codes carried in the ``status.code`` field of every response.
REQUEST_SUCCESS_CODE = "200"
REQUEST_NOT_FOUND_CODE = "400"

# Diagnostic text for ``status.response_code``; never used for control flow.
RESPONSE_CODES = {
    "DP00800001000": (
        "Ambiguous",
        "The transaction is still processing and is in ambiguous state. "
        "Please do the transaction enquiry to fetch the transaction status.",
    ),
    "DP00800001001": ("Success", "Transaction is successful."),
    "DP00800001002": ("Incorrect Pin", "Incorrect pin has been entered."),
    "DP00800001003": (
        "Exceeds withdrawal amount limit(s) / Withdrawal amount limit exceeded",
        "The User has exceeded their wallet allowed transaction limit.",
    ),
    "DP00800001004": (
        "Invalid Amount",
        "The amount User is trying to transfer is less than the minimum amount allowed.",
    ),
    "DP00800001005": ("Transaction ID is invalid", "User didn't enter the pin."),
    "DP00800001006": (
        "In process",
        "Transaction in pending state. Please check after sometime.",
    ),
    "DP00800001007": (
        "Not enough balance",
        "User wallet does not have enough money to cover the payable amount.",
    ),
    "DP00800001008": ("Refused", "The transaction was refused."),
    "DP00800001010": (
        "Transaction not permitted to Payee",
        "Payee is already initiated for churn or barred or not registered "
        "on Airtel Money platform.",
    ),
    "DP00800001024": ("Transaction Timed Out", "The transaction was timed out."),
    "DP00800001025": ("Transaction Not Found", "The transaction was not found."),
    "DP00800001026": ("Forbidden", "X-signature and payload did not match."),
    "DP00800001029": ("Transaction Expired", "Transaction has been expired."),
}

# TA (ambiguous) and TIP (in progress) both collapse to PENDING; the raw code
# stays on TransactionResult.provider_status.
TRANSACTION_STATUS_MAP = {
    "TS": TransactionStatus.SUCCESS,
    "TF": TransactionStatus.FAILED,
    "TA": TransactionStatus.PENDING,
    "TIP": TransactionStatus.PENDING,
    "TE": TransactionStatus.EXPIRED,
}


def canonical_status(provider_status):
    return TRANSACTION_STATUS_MAP.get(provider_status, TransactionStatus.UNKNOWN)


def describe_response_code(response_code):
    """Return ``(reason, description)`` or ``(None, None)`` for unlisted codes."""
    return RESPONSE_CODES.get(response_code, (None, None))
