from __future__ import annotations

from unittest import mock

import requests
from django.test import TestCase, override_settings
from django.urls import reverse


def _ok(body):
    return mock.Mock(status_code=200, json=mock.Mock(return_value=body))


@override_settings(BIGBUY_API_KEY="k", BIGBUY_PUBLIC_STOCK_TIMEOUT_S=5)
@mock.patch("providers.adapters.bigbuy.requests.get")
class PublicStockEndpointTests(TestCase):
    def setUp(self) -> None:
        self.url = reverse("storefront:stock_check")

    def test_in_stock(self, get):
        get.return_value = _ok({"quantity": 7, "status": "active"})
        r = self.client.get(self.url, {"productId": "bigbuy-42"})

        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertTrue(data["inStock"])
        self.assertEqual(data["availableQuantity"], 7)
        self.assertEqual(data["productId"], "bigbuy-42")
        self.assertIn("timestamp", data)
        self.assertEqual(r["Cache-Control"], "public, max-age=300, s-maxage=300")
        self.assertEqual(r["X-Content-Type-Options"], "nosniff")
        # prefix is stripped before calling upstream, short timeout applied
        self.assertTrue(get.call_args.args[0].endswith("/catalog/products/42/stock"))
        self.assertEqual(get.call_args.kwargs["timeout"], 5)

    def test_zero_or_inactive_is_out_of_stock(self, get):
        get.return_value = _ok({"quantity": 0})
        self.assertFalse(self.client.get(self.url, {"productId": "42"}).json()["inStock"])

        get.return_value = _ok({"quantity": 3, "status": "discontinued"})
        data = self.client.get(self.url, {"productId": "42"}).json()
        self.assertFalse(data["inStock"])
        self.assertEqual(data["availableQuantity"], 3)

    def test_missing_and_malformed_ids(self, get):
        r = self.client.get(self.url)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Product ID is required")

        for bad in ("abc$", "../etc", "x" * 65, "42\n", "a;b", "a b", " 42"):
            r = self.client.get(self.url, {"productId": bad})
            self.assertEqual(r.status_code, 400)
            self.assertEqual(r.json()["error"], "Invalid product ID format")
            self.assertFalse(r.json()["inStock"])
        get.assert_not_called()

    def test_post_not_allowed(self, get):
        r = self.client.post(self.url, {"productId": "42"})
        self.assertEqual(r.status_code, 405)
        get.assert_not_called()

    def test_upstream_failure_degrades_to_out_of_stock(self, get):
        get.side_effect = requests.Timeout("slow")
        with self.assertLogs("storefront.views_stock", level="ERROR") as logs:
            r = self.client.get(self.url, {"productId": "42"})

        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertFalse(data["inStock"])
        self.assertEqual(data["availableQuantity"], 0)
        self.assertIn(data["errorRef"], data["error"])
        self.assertIn(data["errorRef"], logs.output[0])
        self.assertEqual(r["Cache-Control"], "no-store")

    @override_settings(BIGBUY_API_KEY="")
    def test_missing_key_still_answers_200(self, get):
        with self.assertLogs("storefront.views_stock", level="ERROR"):
            r = self.client.get(self.url, {"productId": "42"})
        self.assertEqual(r.status_code, 200)
        self.assertFalse(r.json()["inStock"])
        get.assert_not_called()
