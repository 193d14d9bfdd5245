from __future__ import annotations

from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings

from catalog.models import Product
from providers.models import SyncLog


class SyncCommandTests(TestCase):
    @override_settings(BIGBUY_API_KEY="")
    def test_stock_command_fails_loudly_without_key(self):
        with self.assertRaises(CommandError):
            call_command("sync_bigbuy_stock")
        self.assertFalse(SyncLog.objects.exists())

    @override_settings(BIGBUY_API_KEY="k", BIGBUY_SYNC_CHUNK_DELAY_S=0)
    @mock.patch("providers.adapters.bigbuy.requests.get")
    def test_stock_command_for_selected_products(self, get):
        get.return_value = mock.Mock(status_code=200, json=mock.Mock(return_value={"quantity": 11}))
        Product.objects.create(id="bigbuy-1", external_id="1", origin="BigBuy", stock=0)
        Product.objects.create(id="bigbuy-2", external_id="2", origin="BigBuy", stock=0)

        out = StringIO()
        call_command("sync_bigbuy_stock", "--product-id", "1", stdout=out)

        self.assertIn("Stock sync complete", out.getvalue())
        self.assertEqual(Product.objects.get(pk="bigbuy-1").stock, 11)
        self.assertEqual(Product.objects.get(pk="bigbuy-2").stock, 0)
        self.assertEqual(get.call_count, 1)

    @override_settings(BIGBUY_API_KEY="k")
    @mock.patch("providers.adapters.bigbuy.requests.get")
    def test_products_command(self, get):
        get.return_value = mock.Mock(
            status_code=200,
            json=mock.Mock(return_value={"data": [{"id": 3, "name": "Mat"}], "total": 1}),
        )
        out = StringIO()
        call_command("sync_bigbuy_products", "--category", "12", "--limit", "5", stdout=out)

        self.assertTrue(Product.objects.filter(pk="bigbuy-3").exists())
        self.assertEqual(get.call_args.kwargs["params"]["category"], "12")
        self.assertEqual(get.call_args.kwargs["params"]["limit"], 5)
        self.assertEqual(SyncLog.objects.get().category, "12")
