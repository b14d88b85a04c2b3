from rest_framework import status as http_status
from rest_framework.views import APIView

from mobile_wallets.api.responses import api_response
from mobile_wallets.api.serializers import (
    TransactionResultSerializer,
    VerificationQuerySerializer,
)
from mobile_wallets.domain.exceptions import (
    AuthError,
    ConfigError,
    DeadlineExceeded,
    InvalidRequest,
    ProviderError,
    RequestCancelled,
    TransactionNotFound,
    TransportError,
    UnknownProvider,
)
from mobile_wallets.domain.services import VerificationService, get_wallet_directory


class TransactionVerificationAPIView(APIView):
    def get(self, request, provider, reference_id):
        query_serializer = VerificationQuerySerializer(data=request.query_params)
        if not query_serializer.is_valid():
            return api_response(
                detail=query_serializer.errors,
                message="Invalid query parameters.",
                status_code=http_status.HTTP_400_BAD_REQUEST,
                data=None,
            )

        try:
            result = VerificationService.verify(
                provider,
                reference_id,
                timeout=query_serializer.validated_data.get("timeout"),
                directory=get_wallet_directory(),
            )
        except UnknownProvider as exc:
            return api_response(
                detail=str(exc),
                message="Wallet provider was not found.",
                status_code=http_status.HTTP_404_NOT_FOUND,
                data=None,
            )
        except InvalidRequest as exc:
            return api_response(
                detail=str(exc),
                message="Invalid verification request.",
                status_code=http_status.HTTP_400_BAD_REQUEST,
                data=None,
            )
        except ConfigError as exc:
            return api_response(
                detail=str(exc),
                message="Wallet provider is misconfigured.",
                status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE,
                data=None,
            )
        except TransactionNotFound as exc:
            return api_response(
                detail=str(exc),
                message="Transaction was not found.",
                status_code=http_status.HTTP_404_NOT_FOUND,
                data={"reference_id": exc.reference_id},
            )
        except ProviderError as exc:
            return api_response(
                detail=str(exc),
                message="Wallet provider rejected the verification request.",
                status_code=http_status.HTTP_502_BAD_GATEWAY,
                data={
                    "code": exc.code,
                    "response_code": exc.response_code,
                    "reason": exc.reason,
                    "description": exc.description,
                },
            )
        except AuthError as exc:
            return api_response(
                detail=str(exc),
                message="Wallet provider authentication failed.",
                status_code=http_status.HTTP_502_BAD_GATEWAY,
                data=None,
            )
        except TransportError as exc:
            return api_response(
                detail=str(exc),
                message="Wallet provider request failed.",
                status_code=http_status.HTTP_502_BAD_GATEWAY,
                data={"http_status": exc.status_code},
            )
        except DeadlineExceeded as exc:
            return api_response(
                detail=str(exc),
                message="Wallet provider did not answer in time.",
                status_code=http_status.HTTP_504_GATEWAY_TIMEOUT,
                data=None,
            )
        except RequestCancelled as exc:
            return api_response(
                detail=str(exc),
                message="Verification was cancelled.",
                status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE,
                data=None,
            )

        return api_response(
            detail="Transaction verified.",
            message="Transaction status retrieved successfully.",
            status_code=http_status.HTTP_200_OK,
            data={
                "provider": provider,
                "transaction": TransactionResultSerializer(result).data,
            },
        )
