from django.core.management.base import BaseCommand, CommandError

from mobile_wallets.domain.exceptions import WalletError
from mobile_wallets.domain.services import (
    VerificationService,
    WalletDirectory,
    get_wallet_directory,
)
from mobile_wallets.registry import get_default_registry


class Command(BaseCommand):
    help = "Verify the status of one mobile money transaction."

    def add_arguments(self, parser):
        parser.add_argument("provider", help="Registered wallet provider, e.g. airtelMoney")
        parser.add_argument("reference_id", help="Merchant reference id of the transaction")
        parser.add_argument(
            "--dsn",
            default=None,
            help="Provider DSN (defaults to the configured <PROVIDER>_DSN)",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Overall deadline in seconds for authentication plus verification",
        )

    def handle(self, *args, **options):
        provider = options["provider"]
        reference_id = options["reference_id"]
        timeout = options["timeout"]

        if timeout is not None and timeout <= 0:
            raise CommandError("--timeout must be greater than zero")

        if options["dsn"]:
            directory = WalletDirectory(
                registry=get_default_registry(),
                dsns={provider: options["dsn"]},
            )
        else:
            directory = get_wallet_directory()

        try:
            result = VerificationService.verify(
                provider,
                reference_id,
                timeout=timeout,
                directory=directory,
            )
        except WalletError as exc:
            raise CommandError(f"verification failed: {exc}") from exc

        self.stdout.write(
            self.style.SUCCESS(
                (
                    "transaction verified: "
                    f"provider={provider} reference_id={result.reference_id} "
                    f"transaction_id={result.id} status={result.status.value} "
                    f"provider_status={result.provider_status} "
                    f"message={result.message!r}"
                )
            )
        )
