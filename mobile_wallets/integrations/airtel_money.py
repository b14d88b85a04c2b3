import logging
from dataclasses import dataclass
from urllib.parse import quote

from mobile_wallets.domain.exceptions import (
    ProviderError,
    TransactionNotFound,
    TransportError,
)
from mobile_wallets.domain.results import TransactionResult
from mobile_wallets.domain.wallet import MobileWallet
from mobile_wallets.integrations.airtel_auth import JSON_HEADERS, CredentialManager
from mobile_wallets.integrations.airtel_codes import (
    REQUEST_NOT_FOUND_CODE,
    REQUEST_SUCCESS_CODE,
    canonical_status,
    describe_response_code,
)
from mobile_wallets.integrations.context import RequestContext
from mobile_wallets.integrations.dsn import WalletConfig
from mobile_wallets.integrations.http import HttpClient

logger = logging.getLogger(__name__)

PROVIDER_NAME = "airtelMoney"
PAYMENTS_PATH = ("standard", "v1", "payments")


def _text(value):
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class StatusEnvelope:
    code: str = ""
    message: str = ""
    result_code: str = ""
    response_code: str = ""
    success: bool = False

    @classmethod
    def from_payload(cls, payload):
        payload = payload if isinstance(payload, dict) else {}
        return cls(
            code=_text(payload.get("code")),
            message=_text(payload.get("message")),
            result_code=_text(payload.get("result_code")),
            response_code=_text(payload.get("response_code")),
            success=bool(payload.get("success", False)),
        )

    @property
    def response_code_reason(self):
        return describe_response_code(self.response_code)[0]

    @property
    def response_code_description(self):
        return describe_response_code(self.response_code)[1]


@dataclass(frozen=True)
class ProviderTransaction:
    airtel_money_id: str = ""
    # Id assigned by the merchant, i.e. the caller's reference id.
    id: str = ""
    message: str = ""
    status: str = ""

    @classmethod
    def from_payload(cls, payload):
        payload = payload if isinstance(payload, dict) else {}
        return cls(
            airtel_money_id=_text(payload.get("airtel_money_id")),
            id=_text(payload.get("id")),
            message=_text(payload.get("message")),
            status=_text(payload.get("status")),
        )


@dataclass(frozen=True)
class TransactionDetails:
    transaction: ProviderTransaction
    request_status: StatusEnvelope

    @classmethod
    def from_payload(cls, body):
        data = body.get("data")
        transaction = data.get("transaction") if isinstance(data, dict) else None
        return cls(
            transaction=ProviderTransaction.from_payload(transaction),
            request_status=StatusEnvelope.from_payload(body.get("status")),
        )

    def to_result(self):
        return TransactionResult(
            id=self.transaction.airtel_money_id,
            reference_id=self.transaction.id,
            message=self.transaction.message,
            status=canonical_status(self.transaction.status),
            provider_status=self.transaction.status or None,
        )


class AirtelMoneyWallet(MobileWallet):
    provider_name = PROVIDER_NAME

    def __init__(self, config, *, http_client=None, credentials=None):
        self.config = config
        self.http_client = http_client or HttpClient(read_timeout=config.timeout_seconds)
        self.credentials = credentials or CredentialManager(config, self.http_client)

    @classmethod
    def from_dsn(cls, dsn):
        return cls(WalletConfig.from_dsn(dsn))

    def _headers(self, token):
        headers = dict(JSON_HEADERS)
        headers["X-Country"] = self.config.country
        headers["X-Currency"] = self.config.currency
        headers["Authorization"] = token.authorization_header
        return headers

    def verify_transaction(self, reference_id, context=None):
        context = context or RequestContext.background()
        token = self.credentials.ensure_authenticated(context)

        timed_context = context.with_timeout(self.config.timeout_seconds)
        url = self.config.url(*PAYMENTS_PATH, quote(reference_id, safe=""))
        logger.info(
            "event=mobile_wallet_verify_request provider=airtel_money reference_id=%s",
            reference_id,
        )
        response = self.http_client.get_json(
            url,
            headers=self._headers(token),
            context=timed_context,
            operation="sending transaction verification request",
        )
        logger.info(
            "event=mobile_wallet_verify_http_response provider=airtel_money reference_id=%s http_status=%s",
            reference_id,
            response.status_code,
        )

        if response.status_code == 404:
            logger.info(
                "event=mobile_wallet_verify_not_found provider=airtel_money reference_id=%s source=http",
                reference_id,
            )
            raise TransactionNotFound(
                reference_id, operation="sending transaction verification request"
            )
        if response.status_code != 200:
            raise TransportError(
                f"transaction response code {response.status_code}",
                status_code=response.status_code,
                operation="sending transaction verification request",
            )

        details = self._decode(response)
        request_status = details.request_status

        if request_status.code == REQUEST_NOT_FOUND_CODE:
            logger.info(
                "event=mobile_wallet_verify_not_found provider=airtel_money reference_id=%s source=request_status response_code=%s",
                reference_id,
                request_status.response_code,
            )
            raise TransactionNotFound(
                reference_id, operation="reading transaction verification response"
            )
        if request_status.code != REQUEST_SUCCESS_CODE:
            logger.warning(
                "event=mobile_wallet_verify_provider_error provider=airtel_money reference_id=%s code=%s response_code=%s reason=%s",
                reference_id,
                request_status.code,
                request_status.response_code,
                request_status.response_code_reason,
            )
            raise ProviderError(
                request_status.code,
                response_code=request_status.response_code or None,
                reason=request_status.response_code_reason,
                description=request_status.response_code_description,
                provider_message=request_status.message or None,
                operation="reading transaction verification response",
            )

        result = details.to_result()
        logger.info(
            "event=mobile_wallet_verify_result provider=airtel_money reference_id=%s transaction_id=%s status=%s provider_status=%s response_code=%s",
            reference_id,
            result.id,
            result.status.value,
            result.provider_status,
            request_status.response_code,
        )
        return result

    @staticmethod
    def _decode(response):
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                "invalid json body",
                status_code=response.status_code,
                operation="parsing transaction verification response",
            ) from exc
        if not isinstance(body, dict):
            raise TransportError(
                "response body is not a json object",
                status_code=response.status_code,
                operation="parsing transaction verification response",
            )
        return TransactionDetails.from_payload(body)
