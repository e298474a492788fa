import unittest
from decimal import Decimal

from apps.carts.coordinator import (
    CHECKOUT_PATH,
    CartSession,
    InvalidQuantityError,
    ProductRef,
    RegistrationStatus,
)


def product(product_id, type="ticket", price="10.00"):
    return ProductRef(
        id=product_id, event_id=1, type=type, name=f"{type} {product_id}", price=Decimal(price)
    )


TICKET = product(1, "ticket", "25.00")
VENDOR_B = product(2, "vendor_spot", "80.00")
VENDOR_C = product(3, "vendor_spot", "120.00")
SHIFT = product(4, "volunteer_shift", "0.00")
SHIRT = product(5, "merchandise", "15.00")


class CartSequencingTests(unittest.TestCase):
    def setUp(self):
        self.cart = CartSession()
        self.ticket = self.cart.add_item(TICKET)
        self.booth_b = self.cart.add_item(VENDOR_B)
        self.booth_c = self.cart.add_item(VENDOR_C)

    def test_initial_statuses_follow_product_type(self):
        self.assertEqual(self.ticket.registration_status, RegistrationStatus.NOT_REQUIRED)
        self.assertEqual(self.booth_b.registration_status, RegistrationStatus.PENDING)
        self.assertEqual(self.booth_c.registration_status, RegistrationStatus.PENDING)

    def test_walks_pending_items_in_insertion_order(self):
        self.assertTrue(self.cart.needs_registration())
        self.assertEqual(
            self.cart.get_next_registration_path(), f"/vendor-registration/{self.booth_b.id}"
        )

        next_path = self.cart.complete_registration(self.booth_b.id, {"businessName": "Bakes"})
        self.assertEqual(next_path, f"/vendor-registration/{self.booth_c.id}")

        next_path = self.cart.complete_registration(self.booth_c.id, {"businessName": "Bakes"})
        self.assertEqual(next_path, CHECKOUT_PATH)
        self.assertFalse(self.cart.needs_registration())

    def test_excluding_variants_skip_the_item_being_submitted(self):
        self.assertTrue(self.cart.needs_registration_excluding(self.booth_b.id))
        self.assertEqual(
            self.cart.get_next_registration_path_excluding(self.booth_b.id),
            f"/vendor-registration/{self.booth_c.id}",
        )
        self.cart.complete_registration(self.booth_b.id, {})
        self.assertFalse(self.cart.needs_registration_excluding(self.booth_c.id))
        self.assertEqual(
            self.cart.get_next_registration_path_excluding(self.booth_c.id), CHECKOUT_PATH
        )

    def test_completing_later_item_first_still_returns_earlier_form(self):
        next_path = self.cart.complete_registration(self.booth_c.id, {"businessName": "Kiln"})
        self.assertEqual(next_path, f"/vendor-registration/{self.booth_b.id}")
        self.assertEqual(
            self.cart.get_next_registration_path(), f"/vendor-registration/{self.booth_b.id}"
        )
        self.assertEqual(
            self.cart.get_next_registration_path_excluding(self.booth_b.id), CHECKOUT_PATH
        )
        self.assertFalse(self.cart.needs_registration_excluding(self.booth_b.id))

    def test_completing_twice_keeps_latest_data(self):
        self.cart.complete_registration(self.booth_b.id, {"businessName": "First"})
        self.assertEqual(
            self.cart.complete_registration(self.booth_b.id, {"businessName": "Second"}),
            f"/vendor-registration/{self.booth_c.id}",
        )
        item = self.cart.get_cart_item(self.booth_b.id)
        self.assertEqual(item.registration_data, {"businessName": "Second"})

    def test_unknown_item_and_not_required_item_are_ignored(self):
        self.assertFalse(
            self.cart.set_registration_status("missing", RegistrationStatus.COMPLETE, {})
        )
        self.assertIsNone(self.cart.complete_registration(self.ticket.id, {}))
        self.assertEqual(
            self.cart.get_registration_status(self.ticket.id), RegistrationStatus.NOT_REQUIRED
        )

    def test_cannot_move_back_to_pending(self):
        self.cart.complete_registration(self.booth_b.id, {})
        self.assertFalse(
            self.cart.set_registration_status(self.booth_b.id, RegistrationStatus.PENDING)
        )
        self.assertEqual(
            self.cart.get_registration_status(self.booth_b.id), RegistrationStatus.COMPLETE
        )

    def test_removing_pending_item_advances_next_path(self):
        self.assertTrue(self.cart.remove_item(self.booth_b.id))
        self.assertEqual(
            self.cart.get_next_registration_path(), f"/vendor-registration/{self.booth_c.id}"
        )
        self.assertFalse(self.cart.remove_item(self.booth_b.id))

    def test_reusable_data_comes_from_latest_completed_item_of_kind(self):
        self.assertIsNone(self.cart.reusable_registration_data("vendor"))
        self.cart.complete_registration(self.booth_b.id, {"businessName": "Bakes"})
        self.assertEqual(
            self.cart.reusable_registration_data("vendor", exclude_item_id=self.booth_c.id),
            {"businessName": "Bakes"},
        )
        self.assertIsNone(
            self.cart.reusable_registration_data("vendor", exclude_item_id=self.booth_b.id)
        )
        self.assertIsNone(self.cart.reusable_registration_data("volunteer"))


class CartContentsTests(unittest.TestCase):
    def test_merchandise_only_goes_straight_to_checkout(self):
        cart = CartSession()
        cart.add_item(SHIRT, 2)
        cart.add_item(TICKET)
        self.assertFalse(cart.needs_registration())
        self.assertEqual(cart.get_next_registration_path(), CHECKOUT_PATH)
        self.assertEqual(cart.item_count, 3)
        self.assertEqual(cart.total, Decimal("55.00"))

    def test_empty_cart(self):
        cart = CartSession()
        self.assertTrue(cart.is_empty)
        self.assertFalse(cart.needs_registration())
        self.assertEqual(cart.get_next_registration_path(), CHECKOUT_PATH)
        self.assertEqual(cart.total, Decimal("0"))

    def test_same_product_twice_creates_two_entries(self):
        cart = CartSession()
        first = cart.add_item(VENDOR_B)
        second = cart.add_item(VENDOR_B)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(cart), 2)
        self.assertEqual(len(cart.pending_items()), 2)

    def test_volunteer_shift_routes_to_volunteer_form(self):
        cart = CartSession()
        shift = cart.add_item(SHIFT)
        self.assertEqual(cart.get_next_registration_path(), f"/volunteer-registration/{shift.id}")
        self.assertTrue(cart.has_registration_type("volunteer"))
        self.assertFalse(cart.has_registration_type("vendor"))
        self.assertTrue(cart.has_item_of_type("volunteer_shift"))

    def test_invalid_quantities_rejected(self):
        cart = CartSession()
        for quantity in (0, -1, "2", 1.5, True):
            with self.assertRaises(InvalidQuantityError):
                cart.add_item(TICKET, quantity)
        item = cart.add_item(TICKET)
        with self.assertRaises(InvalidQuantityError):
            cart.update_item(item.id, 0)
        self.assertEqual(cart.get_cart_item(item.id).quantity, 1)

    def test_update_quantity_keeps_registration_status(self):
        cart = CartSession()
        booth = cart.add_item(VENDOR_B)
        cart.complete_registration(booth.id, {"businessName": "Bakes"})
        cart.update_item(booth.id, 3)
        self.assertEqual(cart.get_registration_status(booth.id), RegistrationStatus.COMPLETE)
        self.assertEqual(cart.get_cart_item(booth.id).subtotal, Decimal("240.00"))

    def test_clear(self):
        cart = CartSession()
        cart.add_item(VENDOR_B)
        cart.clear()
        self.assertTrue(cart.is_empty)
        self.assertFalse(cart.needs_registration())


class CartStorageTests(unittest.TestCase):
    def test_restores_items_and_statuses(self):
        cart = CartSession()
        ticket = cart.add_item(TICKET, 2)
        booth = cart.add_item(VENDOR_B)
        cart.add_item(SHIFT)
        cart.complete_registration(booth.id, {"businessName": "Bakes", "registrationId": 7})

        restored = CartSession.from_dict(cart.to_dict())

        self.assertEqual([item.id for item in restored], [item.id for item in cart])
        self.assertEqual(restored.get_cart_item(ticket.id).quantity, 2)
        self.assertEqual(restored.get_cart_item(booth.id).product.price, Decimal("80.00"))
        self.assertEqual(
            restored.get_cart_item(booth.id).registration_data["registrationId"], 7
        )
        self.assertEqual(restored.get_next_registration_path(), cart.get_next_registration_path())

    def test_malformed_entries_are_dropped(self):
        raw = CartSession()
        raw.add_item(TICKET)
        data = raw.to_dict()
        data["items"].append({"id": "broken"})
        data["items"].append({"id": "bad-qty", "product": TICKET.to_dict(), "quantity": 0})
        restored = CartSession.from_dict(data)
        self.assertEqual(len(restored), 1)

    def test_missing_data_gives_empty_cart(self):
        self.assertTrue(CartSession.from_dict(None).is_empty)
        self.assertTrue(CartSession.from_dict({}).is_empty)


if __name__ == "__main__":
    unittest.main()
