import unittest
import uuid

import httpx

from cart_core import (
    CapacityError,
    CartError,
    NotFoundError,
    PersistenceError,
    StaleCartError,
    ValidationError,
)
from storefront.main import app
from storefront.security.auth import issue_token
from storefront.services.cart_client import CartClient

BASE_URL = "http://storefront.test"


def transport():
    return httpx.ASGITransport(app=app)


class GuestCartClientTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.client = CartClient(BASE_URL, transport=transport())

    async def asyncTearDown(self):
        await self.client.close()

    async def test_tracks_issued_session(self):
        self.assertIsNone(self.client.guest_session)
        cart = await self.client.get_cart()
        self.assertTrue(self.client.guest_session.startswith("guest_"))
        self.assertEqual(cart["sessionId"], self.client.guest_session)

    async def test_cache_replaced_by_server_cart(self):
        await self.client.add_item("perf-001", "50ml", quantity=1)
        await self.client.add_item("perf-001", "50ml", quantity=2)

        item = self.client.find_item("perf-001", "50ml")
        self.assertEqual(item["quantity"], 3)
        self.assertEqual(self.client.total_items, 3)
        self.assertEqual(self.client.cart["totalPrice"], 240.0)
        self.assertEqual(self.client.cart["totalDiscount"], 60.0)
        self.assertIsNone(self.client.find_item("perf-001", "100ml"))

    async def test_quantity_round_trip(self):
        await self.client.add_item("smpl-002", "2ml")
        item_id = self.client.find_item("smpl-002", "2ml")["id"]

        await self.client.increment(item_id)
        self.assertEqual(self.client.total_items, 2)
        await self.client.set_quantity(item_id, 5)
        self.assertEqual(self.client.cart["totalPrice"], 40.0)
        await self.client.decrement(item_id)
        self.assertEqual(self.client.total_items, 4)
        await self.client.remove_item(item_id)
        self.assertEqual(self.client.cart["items"], [])

    async def test_bundles(self):
        await self.client.add_bundle("coll-002", quantity=2)
        bundle = self.client.find_bundle("coll-002")
        self.assertEqual(bundle["quantity"], 2)
        self.assertEqual(self.client.cart["totalPrice"], 100.0)
        self.assertEqual(self.client.cart["totalDiscount"], 0.0)
        await self.client.clear()
        self.assertIsNone(self.client.find_bundle("coll-002"))

    async def test_errors_map_to_cart_errors(self):
        await self.client.add_item("perf-001", "50ml", quantity=7)
        with self.assertRaises(CapacityError):
            await self.client.add_item("perf-001", "50ml", quantity=5)
        # failed call leaves the last good cart cached
        self.assertEqual(self.client.total_items, 7)

        with self.assertRaises(NotFoundError):
            await self.client.set_quantity("missing", 2)
        with self.assertRaises(ValidationError):
            await self.client.add_item("perf-001", "50ml", quantity=0)
        with self.assertRaises(CartError):
            await self.client.add_item("nope", "50ml")

    async def test_checkout_returns_order(self):
        await self.client.add_item("perf-001", "50ml", quantity=2)
        order = await self.client.checkout()
        self.assertTrue(order["orderId"].startswith("ORD-"))
        self.assertEqual(order["totalPrice"], 160.0)
        self.assertEqual(self.client.cart["items"], [])


class UserCartClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_merge_after_login(self):
        async with CartClient(BASE_URL, transport=transport()) as guest:
            await guest.add_item("perf-001", "50ml", quantity=2)
            session_id = guest.guest_session

        token = issue_token(f"user-{uuid.uuid4().hex[:8]}")
        async with CartClient(BASE_URL, access_token=token, transport=transport()) as user:
            await user.add_item("perf-001", "50ml", quantity=3)
            cart = await user.merge_guest_cart(session_id)

            self.assertEqual(cart["items"][0]["quantity"], 5)
            self.assertEqual(user.total_items, 5)
            self.assertIsNone(user.guest_session)

    async def test_merge_without_guest_session_just_fetches(self):
        token = issue_token(f"user-{uuid.uuid4().hex[:8]}")
        async with CartClient(BASE_URL, access_token=token, transport=transport()) as user:
            cart = await user.merge_guest_cart()
            self.assertEqual(cart["items"], [])

    async def test_merge_needs_token(self):
        async with CartClient(BASE_URL, transport=transport()) as guest:
            with self.assertRaises(CartError):
                await guest.merge_guest_cart("guest_abc")

    async def test_bad_token_is_cart_error(self):
        async with CartClient(BASE_URL, access_token="garbage", transport=transport()) as user:
            with self.assertRaises(CartError) as ctx:
                await user.get_cart()
            self.assertNotIsInstance(ctx.exception, PersistenceError)


class FailingStorefrontTests(unittest.IsolatedAsyncioTestCase):
    async def test_transport_failure_is_persistence_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with CartClient(BASE_URL, transport=httpx.MockTransport(refuse)) as client:
            with self.assertRaises(PersistenceError):
                await client.get_cart()

    async def test_failed_merge_keeps_guest_session(self):
        def stale(request):
            return httpx.Response(503, json={"detail": "Cart changed concurrently", "error": "stale_cart"})

        token = issue_token("user-stale")
        async with CartClient(BASE_URL, access_token=token, transport=httpx.MockTransport(stale)) as client:
            with self.assertRaises(StaleCartError):
                await client.merge_guest_cart("guest_abc")
            self.assertEqual(client.guest_session, "guest_abc")

    async def test_unreadable_success_body_is_persistence_error(self):
        def html(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        async with CartClient(BASE_URL, transport=httpx.MockTransport(html)) as client:
            with self.assertRaises(PersistenceError):
                await client.get_cart()
            self.assertIsNone(client.cart)

    async def test_configured_session_header(self):
        seen = []

        def echo(request):
            seen.append(request.headers.get("X-Cart-Session"))
            return httpx.Response(200, headers={"X-Cart-Session": "guest_custom"}, json={"cart": {"items": []}})

        async with CartClient(
            BASE_URL, guest_session_header="X-Cart-Session", transport=httpx.MockTransport(echo)
        ) as client:
            await client.get_cart()
            self.assertEqual(client.guest_session, "guest_custom")
            await client.get_cart()
        self.assertEqual(seen, [None, "guest_custom"])


if __name__ == "__main__":
    unittest.main()
