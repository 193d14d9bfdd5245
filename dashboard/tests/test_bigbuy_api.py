from __future__ import annotations

import json
from unittest import mock

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.test import TestCase, override_settings
from django.urls import reverse

from catalog.models import AdminProduct, Product
from providers.models import SyncLog


def _ok(body):
    return mock.Mock(status_code=200, json=mock.Mock(return_value=body))


@override_settings(BIGBUY_API_KEY="k", BIGBUY_SYNC_CHUNK_DELAY_S=0)
@mock.patch("providers.adapters.bigbuy.requests.get")
class BigBuyAdminApiTests(TestCase):
    def setUp(self) -> None:
        for name in ["admin", "editor"]:
            Group.objects.get_or_create(name=name)

    # ------------ helpers ------------
    def login_user_with_roles(self, username: str, roles: list[str], *, superuser=False):
        U = get_user_model()
        u = U.objects.create_user(username, f"{username}@x.com", "x")
        u.is_superuser = superuser
        u.save()
        for r in roles:
            u.groups.add(Group.objects.get(name=r))
        self.client.login(username=username, password="x")
        return u

    def post_json(self, name, payload=None, **kwargs):
        return self.client.post(
            reverse(f"dashboard:{name}", kwargs=kwargs or None),
            data=json.dumps(payload or {}),
            content_type="application/json",
        )

    # ------------ access ------------
    def test_anonymous_gets_401_and_no_upstream_call(self, get):
        r = self.post_json("bigbuy_search", {"query": "lamp"})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["code"], "unauthenticated")

        r = self.client.get(reverse("dashboard:bigbuy_product_stock", args=["bigbuy-1"]))
        self.assertEqual(r.status_code, 401)
        get.assert_not_called()

    def test_non_admin_gets_403_and_no_upstream_call(self, get):
        self.login_user_with_roles("ed", ["editor"])
        for name in ("bigbuy_search", "bigbuy_sync_stock", "bigbuy_sync_products"):
            r = self.post_json(name, {})
            self.assertEqual(r.status_code, 403)
            self.assertEqual(r.json()["code"], "permission-denied")
        r = self.post_json("bigbuy_import", {"productId": "5"})
        self.assertEqual(r.status_code, 403)
        get.assert_not_called()
        self.assertFalse(Product.objects.exists())

    def test_wrong_method_rejected(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        r = self.client.get(reverse("dashboard:bigbuy_search"))
        self.assertEqual(r.status_code, 405)

    # ------------ catalog ------------
    def test_admin_group_can_search(self, get):
        self.login_user_with_roles("adm", ["admin"])
        get.return_value = _ok({"data": [{"id": 1, "name": "Lamp", "retailPrice": "9.90"}], "total": 1})

        r = self.post_json("bigbuy_search", {"query": "lamp", "limit": 10})

        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["products"][0]["id"], "bigbuy-1")
        self.assertEqual(data["products"][0]["price"], "9.90")
        self.assertFalse(data["has_more"])

    def test_import_then_list_imported(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        get.return_value = _ok({"id": 77, "name": "Garden Hose", "stock": 3})

        r = self.post_json("bigbuy_import", {"productId": "77"})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["product"]["id"], "bigbuy-77")
        self.assertTrue(AdminProduct.objects.filter(pk="bigbuy-77").exists())

        r = self.client.get(reverse("dashboard:bigbuy_imported"))
        self.assertEqual(r.json()["imported"], ["77"])

    def test_import_without_id_is_invalid_argument(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        r = self.post_json("bigbuy_import", {})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["code"], "invalid-argument")
        get.assert_not_called()

    def test_bad_json_body(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        r = self.client.post(
            reverse("dashboard:bigbuy_search"), data="{nope", content_type="application/json"
        )
        self.assertEqual(r.status_code, 400)

    def test_upstream_error_maps_to_502(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        get.return_value = mock.Mock(status_code=500)
        r = self.client.get(reverse("dashboard:bigbuy_categories"))
        self.assertEqual(r.status_code, 502)
        self.assertEqual(r.json()["code"], "upstream-error")

    @override_settings(BIGBUY_API_KEY="")
    def test_missing_key_maps_to_503(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        r = self.post_json("bigbuy_sync_stock", {})
        self.assertEqual(r.status_code, 503)
        self.assertEqual(r.json()["code"], "failed-precondition")
        self.assertFalse(SyncLog.objects.exists())

    def test_pricing_and_remove(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        Product.objects.create(id="bigbuy-5", external_id="5", origin="BigBuy")

        r = self.post_json("bigbuy_update_pricing", {"price": "20", "markup": 10}, product_id="bigbuy-5")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["product"]["price"], "22.00")

        r = self.post_json("bigbuy_update_pricing", {}, product_id="bigbuy-5")
        self.assertEqual(r.status_code, 400)

        r = self.post_json("bigbuy_update_pricing", {"price": "1"}, product_id="bigbuy-404")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["code"], "not-found")

        r = self.post_json("bigbuy_remove_product", product_id="bigbuy-5")
        self.assertEqual(r.json(), {"success": True, "deleted": True})
        get.assert_not_called()

    # ------------ stock ------------
    def test_batch_stock_update_records_caller(self, get):
        user = self.login_user_with_roles("boss", [], superuser=True)
        Product.objects.create(id="bigbuy-1", external_id="1", origin="BigBuy", stock=1)
        get.return_value = _ok({"quantity": 6})

        r = self.post_json("bigbuy_batch_stock", {"productIds": ["bigbuy-1"]})

        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["successful_updates"], 1)
        self.assertEqual(Product.objects.get().stock, 6)
        self.assertEqual(SyncLog.objects.get().performed_by, str(user.pk))

        r = self.post_json("bigbuy_batch_stock", {"productIds": []})
        self.assertEqual(r.status_code, 400)

    def test_product_stock_open_to_any_signed_in_user(self, get):
        self.login_user_with_roles("shopper", [])
        Product.objects.create(id="bigbuy-1", external_id="1", origin="BigBuy", stock=9)
        get.return_value = _ok({"quantity": 2})

        r = self.client.get(reverse("dashboard:bigbuy_product_stock", args=["bigbuy-1"]))

        self.assertEqual(r.status_code, 200)
        self.assertEqual(
            r.json(), {"success": True, "product_id": "bigbuy-1", "stock": 2, "available": True}
        )
        self.assertEqual(Product.objects.get().stock, 2)

    def test_ping(self, get):
        self.login_user_with_roles("boss", [], superuser=True)
        get.return_value = _ok({"data": [{"id": 1}, {"id": 2}]})
        r = self.client.get(reverse("dashboard:bigbuy_ping"))
        self.assertEqual(r.json(), {"ok": True, "categories_found": 2})
