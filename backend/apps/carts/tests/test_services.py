import types
import unittest
from unittest.mock import Mock

from apps.api.exceptions import DomainValidationError, NotFoundError
from apps.carts.coordinator import CartSession, RegistrationStatus
from apps.carts.services import (
    CartService,
    ItemNotFound,
    RegistrationNotApplicable,
    RegistrationRequired,
    RegistrationSaveFailed,
)
from apps.events.services import SlotUnavailableError


class MemoryStore:
    def __init__(self):
        self.data = None
        self.saves = 0

    def load(self):
        return CartSession.from_dict(self.data)

    def save(self, cart):
        self.data = cart.to_dict()
        self.saves += 1

    def clear(self):
        self.data = None


def product_dto(product_id, type="ticket", price="10.00", quantity=None, available=True):
    return types.SimpleNamespace(
        id=product_id,
        event_id=1,
        type=type,
        name=f"{type} {product_id}",
        price=price,
        quantity=quantity,
        available_for_sale=available,
    )


class FakeCatalog:
    def __init__(self, *products):
        self.products = {p.id: p for p in products}

    def get_product(self, product_id):
        return self.products.get(product_id)

    def ensure_slots(self, product_id, requested):
        product = self.products[product_id]
        if product.quantity is not None and requested > product.quantity:
            raise SlotUnavailableError(details={"productId": product_id})


class CartServiceTests(unittest.TestCase):
    def setUp(self):
        self.catalog = FakeCatalog(
            product_dto(1, "ticket", "25.00"),
            product_dto(2, "vendor_spot", "80.00", quantity=2),
            product_dto(3, "volunteer_shift", "0.00"),
            product_dto(4, "merchandise", available=False),
        )
        self.registrations = Mock()
        self.service = CartService(products=self.catalog, registrations=self.registrations)
        self.store = MemoryStore()

    def test_add_item_persists_and_returns_item(self):
        dto = self.service.add_item(self.store, 2)
        self.assertEqual(dto.registration_status, RegistrationStatus.PENDING)
        self.assertEqual(dto.registration_path, f"/vendor-registration/{dto.id}")
        self.assertEqual(dto.unit_price, "80.00")
        self.assertEqual(self.store.saves, 1)
        cart = self.service.get_cart(self.store)
        self.assertTrue(cart.needs_registration)
        self.assertEqual(cart.total, "80.00")

    def test_add_unknown_product(self):
        with self.assertRaises(NotFoundError):
            self.service.add_item(self.store, 99)

    def test_add_unavailable_product(self):
        with self.assertRaises(DomainValidationError):
            self.service.add_item(self.store, 4)
        self.assertIsNone(self.store.data)

    def test_add_counts_quantity_already_in_cart(self):
        self.service.add_item(self.store, 2)
        self.service.add_item(self.store, 2)
        with self.assertRaises(SlotUnavailableError):
            self.service.add_item(self.store, 2)
        self.assertEqual(len(self.store.load()), 2)

    def test_update_item_checks_slots_and_quantity(self):
        item = self.service.add_item(self.store, 2)
        with self.assertRaises(SlotUnavailableError):
            self.service.update_item(self.store, item.id, 3)
        cart = self.service.update_item(self.store, item.id, 2)
        self.assertEqual(cart.item_count, 2)
        with self.assertRaises(ItemNotFound):
            self.service.update_item(self.store, "missing", 1)

    def test_remove_and_clear(self):
        item = self.service.add_item(self.store, 1)
        with self.assertRaises(ItemNotFound) as ctx:
            self.service.remove_item(self.store, "missing")
        self.assertEqual(ctx.exception.extra, {"redirect": "/"})
        cart = self.service.remove_item(self.store, item.id)
        self.assertEqual(cart.items, [])
        self.service.add_item(self.store, 1)
        self.service.clear(self.store)
        self.assertTrue(self.store.load().is_empty)

    def test_next_step(self):
        self.service.add_item(self.store, 1)
        self.assertEqual(
            self.service.next_step(self.store),
            {"needs_registration": False, "next_path": "/checkout", "pending_item_ids": []},
        )
        shift = self.service.add_item(self.store, 3)
        step = self.service.next_step(self.store)
        self.assertTrue(step["needs_registration"])
        self.assertEqual(step["next_path"], f"/volunteer-registration/{shift.id}")
        self.assertEqual(step["pending_item_ids"], [shift.id])

    def test_checkout_guard(self):
        booth = self.service.add_item(self.store, 2)
        with self.assertRaises(RegistrationRequired) as ctx:
            self.service.ensure_ready_for_checkout(self.store.load())
        self.assertEqual(ctx.exception.extra["nextPath"], f"/vendor-registration/{booth.id}")
        self.assertEqual(ctx.exception.details["pendingItemIds"], [booth.id])

    def test_registration_form_passes_reusable_data(self):
        first = self.service.add_item(self.store, 2)
        second = self.service.add_item(self.store, 2)
        self.registrations.submit.return_value = (types.SimpleNamespace(id=11), None)
        self.service.submit_registration(
            self.store, first.id, 5, form={"business_name": "Bakes"}, payload={"businessName": "Bakes"}
        )
        self.registrations.prefill.return_value = {"businessName": "Bakes"}
        user = types.SimpleNamespace(id=5)

        form = self.service.registration_form(self.store, second.id, user)

        self.assertEqual(form["kind"], "vendor")
        self.assertEqual(form["prefill"], {"businessName": "Bakes"})
        self.registrations.prefill.assert_called_once_with(
            "vendor", user, reusable={"businessName": "Bakes", "registrationId": 11}
        )

    def test_registration_form_rejects_items_without_registration(self):
        ticket = self.service.add_item(self.store, 1)
        with self.assertRaises(RegistrationNotApplicable):
            self.service.registration_form(self.store, ticket.id, types.SimpleNamespace(id=5))
        with self.assertRaises(ItemNotFound):
            self.service.registration_kind(self.store, "missing")

    def test_submit_completes_item_after_save(self):
        first = self.service.add_item(self.store, 2)
        second = self.service.add_item(self.store, 3)
        self.registrations.submit.return_value = (types.SimpleNamespace(id=11), None)

        result = self.service.submit_registration(
            self.store, first.id, 5, form={"full_name": "Ana"}, payload={"fullName": "Ana"}
        )

        self.registrations.submit.assert_called_once_with(
            "vendor", 5, product_id=2, cart_item_id=first.id, data={"full_name": "Ana"}
        )
        self.assertEqual(result["next_path"], f"/volunteer-registration/{second.id}")
        self.assertTrue(result["needs_registration"])
        stored = self.store.load().get_cart_item(first.id)
        self.assertEqual(stored.registration_status, RegistrationStatus.COMPLETE)
        self.assertEqual(stored.registration_data, {"fullName": "Ana", "registrationId": 11})

    def test_failed_save_leaves_item_pending(self):
        booth = self.service.add_item(self.store, 2)
        saves = self.store.saves
        self.registrations.submit.return_value = (
            None,
            ("VALIDATION_ERROR", "This item does not take a vendor registration", None),
        )
        with self.assertRaises(RegistrationSaveFailed):
            self.service.submit_registration(self.store, booth.id, 5, form={}, payload={})
        self.assertEqual(self.store.saves, saves)
        self.assertEqual(
            self.store.load().get_registration_status(booth.id), RegistrationStatus.PENDING
        )


if __name__ == "__main__":
    unittest.main()
