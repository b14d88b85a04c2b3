import os
from unittest.mock import patch

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

from payup.config import build_wallet_dsns, env_float, env_int, env_list


class EnvironmentHelpersTests(SimpleTestCase):
    def test_env_int_rejects_non_integer(self):
        with patch.dict(os.environ, {"PAYUP_TEST_INT": "abc"}):
            with self.assertRaises(ImproperlyConfigured):
                env_int("PAYUP_TEST_INT", 1)

    def test_env_float_defaults_when_blank(self):
        with patch.dict(os.environ, {"PAYUP_TEST_FLOAT": ""}):
            self.assertEqual(env_float("PAYUP_TEST_FLOAT", 2.5), 2.5)

    def test_env_list_splits_and_strips(self):
        with patch.dict(os.environ, {"PAYUP_TEST_LIST": "airtelMoney, mPesa ,"}):
            self.assertEqual(env_list("PAYUP_TEST_LIST"), ["airtelMoney", "mPesa"])


class BuildWalletDsnsTests(SimpleTestCase):
    def test_reads_dsn_per_enabled_provider(self):
        dsn = "https://openapi.airtel.africa?client_id=a&secret_key=b&country=KE&currency=KES"
        with patch.dict(os.environ, {"AIRTEL_MONEY_DSN": dsn}):
            self.assertEqual(build_wallet_dsns(["airtelMoney"]), {"airtelMoney": dsn})

    def test_enabled_provider_without_dsn_is_rejected(self):
        with patch.dict(os.environ, {"AIRTEL_MONEY_DSN": ""}):
            with self.assertRaises(ImproperlyConfigured) as ctx:
                build_wallet_dsns(["airtelMoney"])
        self.assertIn("AIRTEL_MONEY_DSN", str(ctx.exception))
