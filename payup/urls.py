from django.urls import include, path

urlpatterns = [
    path("api/mobile-wallets/", include("mobile_wallets.api.urls")),
]
