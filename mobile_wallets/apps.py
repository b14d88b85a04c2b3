from django.apps import AppConfig


class MobileWalletsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mobile_wallets"

    def ready(self):
        from mobile_wallets.registry import get_default_registry

        get_default_registry()
