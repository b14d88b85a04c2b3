from django.urls import path

from mobile_wallets.api.views import TransactionVerificationAPIView

urlpatterns = [
    path(
        "<str:provider>/transactions/<str:reference_id>/",
        TransactionVerificationAPIView.as_view(),
        name="mobile-wallet-transaction-verify",
    ),
]
