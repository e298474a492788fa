import unittest
from decimal import Decimal

from apps.carts.coordinator import CartSession, ProductRef
from apps.carts.store import SessionCartStore


class FakeSession(dict):
    modified = False


class SessionCartStoreTests(unittest.TestCase):
    def setUp(self):
        self.session = FakeSession()
        self.store = SessionCartStore(self.session, key="cart")

    def test_load_without_saved_cart_is_empty(self):
        self.assertTrue(self.store.load().is_empty)

    def test_save_then_load(self):
        cart = CartSession()
        item = cart.add_item(
            ProductRef(id=3, event_id=1, type="vendor_spot", name="Booth", price=Decimal("50"))
        )
        self.store.save(cart)

        self.assertTrue(self.session.modified)
        self.assertIn("cart", self.session)
        loaded = self.store.load()
        self.assertEqual(loaded.get_next_registration_path(), f"/vendor-registration/{item.id}")

    def test_clear_removes_key(self):
        self.store.save(CartSession())
        self.session.modified = False
        self.store.clear()
        self.assertNotIn("cart", self.session)
        self.assertTrue(self.session.modified)

    def test_clear_without_cart_is_noop(self):
        self.store.clear()
        self.assertFalse(self.session.modified)


if __name__ == "__main__":
    unittest.main()
