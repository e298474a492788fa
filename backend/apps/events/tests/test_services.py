import types
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from apps.api.exceptions import ApplicationError
from apps.events.commands import EventListQuery
from apps.events.services import (
    EventService,
    ProductNotFoundError,
    ProductService,
    SlotUnavailableError,
)


class FakeCache:
    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def set(self, key, value, timeout=None):
        self.store[key] = value


class StubEvent:
    def __init__(self, event_id, owner_id, title="Street Fair", status="published", is_active=True):
        start = datetime(2030, 6, 1, 10, tzinfo=timezone.utc)
        self.id = event_id
        self.title = title
        self.description = "Food and music"
        self.location = "Main Street"
        self.start_date = start
        self.end_date = start + timedelta(hours=8)
        self.image_url = None
        self.event_type = "festival"
        self.owner_id = owner_id
        self.owner = types.SimpleNamespace(
            name=f"Owner {owner_id}", username=f"owner{owner_id}", email=f"owner{owner_id}@example.com"
        )
        self.is_active = is_active
        self.status = status
        self.price = Decimal("0.00")
        self.created_at = start

    @property
    def is_public(self):
        return self.is_active and self.status == "published"


class StubProduct:
    def __init__(self, product_id, event, type="ticket", price="10.00", quantity=None, is_active=True):
        self.id = product_id
        self.event = event
        self.event_id = event.id
        self.type = type
        self.name = f"{type} {product_id}"
        self.description = ""
        self.price = Decimal(price)
        self.quantity = quantity
        self.is_active = is_active

    @property
    def requires_registration(self):
        return self.type in ("vendor_spot", "volunteer_shift")


class FakeEventRepository:
    def __init__(self):
        self._events = {}
        self._pk = 1
        self.search_calls = 0

    def add(self, event):
        self._events[event.id] = event
        self._pk = max(self._pk, event.id + 1)
        return event

    def get(self, **filters):
        return self._events.get(filters.get("id"))

    def search(self, query, *, public_only=True):
        self.search_calls += 1
        events = [e for e in self._events.values() if e.is_public or not public_only]
        if query.search:
            events = [e for e in events if query.search.lower() in e.title.lower()]
        return events

    def for_owner(self, owner_id):
        return [e for e in self._events.values() if e.owner_id == owner_id]

    def create(self, **data):
        event = StubEvent(self._pk, data["owner_id"], title=data["title"])
        for key, value in data.items():
            setattr(event, key, value)
        return self.add(event)

    def update_scalar(self, event, **fields):
        for key, value in fields.items():
            if value is not None:
                setattr(event, key, value)
        return event

    def delete(self, event):
        self._events.pop(event.id, None)


class FakeProductRepository:
    def __init__(self):
        self._products = {}
        self._pk = 1

    def add(self, product):
        self._products[product.id] = product
        self._pk = max(self._pk, product.id + 1)
        return product

    def get(self, **filters):
        return self._products.get(filters.get("id"))

    def list_for_event(self, event_id, *, product_type=None, active_only=True):
        items = [p for p in self._products.values() if p.event_id == event_id]
        if product_type:
            items = [p for p in items if p.type == product_type]
        if active_only:
            items = [p for p in items if p.is_active]
        return items

    def create(self, **data):
        product = StubProduct(
            self._pk,
            data["event"],
            type=data["type"],
            price=str(data["price"]),
            quantity=data.get("quantity"),
        )
        product.name = data["name"]
        return self.add(product)

    def update(self, product, **data):
        for key, value in data.items():
            setattr(product, key, value)
        return product

    def update_scalar(self, product, **fields):
        for key, value in fields.items():
            if value is not None:
                setattr(product, key, value)
        return product

    def delete(self, product):
        self._products.pop(product.id, None)

    def decrement_quantity(self, product_id, amount):
        product = self._products.get(product_id)
        if product is None:
            return False
        if product.quantity is None:
            return True
        if product.quantity < amount:
            return False
        product.quantity -= amount
        return True


class EventServiceTests(unittest.TestCase):
    def setUp(self):
        self.repo = FakeEventRepository()
        self.cache = FakeCache()
        self.service = EventService(self.repo, self.cache)
        self.repo.add(StubEvent(1, owner_id=10, title="Street Fair"))
        self.repo.add(StubEvent(2, owner_id=10, title="Draft Gala", status="draft"))

    def test_list_events_is_cached_per_filter(self):
        first = self.service.list_events({})
        second = self.service.list_events({})
        self.assertEqual([e.id for e in first], [1])
        self.assertEqual(first, second)
        self.assertEqual(self.repo.search_calls, 1)

        self.service.list_events({"search": "fair"})
        self.assertEqual(self.repo.search_calls, 2)

    def test_writes_bump_cache_version(self):
        self.service.list_events(EventListQuery())
        self.service.create_event(
            {
                "title": "Night Market",
                "description": "Stalls",
                "location": "Harbour",
                "start_date": datetime(2030, 7, 1, tzinfo=timezone.utc),
                "end_date": datetime(2030, 7, 2, tzinfo=timezone.utc),
                "event_type": "market",
            },
            owner_id=10,
        )
        self.assertEqual(self.cache.get("events:list:version"), 2)
        refreshed = self.service.list_events(EventListQuery())
        self.assertEqual(self.repo.search_calls, 2)
        self.assertIn("Night Market", [e.title for e in refreshed])

    def test_cache_disabled_always_queries(self):
        service = EventService(self.repo, self.cache, disable_cache=True)
        service.list_events({})
        service.list_events({})
        self.assertEqual(self.repo.search_calls, 2)
        self.assertEqual(self.cache.store, {})

    def test_hidden_event_only_visible_to_owner_or_admin(self):
        self.assertIsNone(self.service.get_event(2))
        self.assertIsNone(self.service.get_event(2, actor_id=99))
        self.assertEqual(self.service.get_event(2, actor_id=10).id, 2)
        self.assertEqual(self.service.get_event(2, actor_id=99, is_privileged=True).id, 2)

    def test_calendar_export_follows_event_visibility(self):
        self.assertIsNone(self.service.export_calendar(2, actor_id=99))
        filename, body = self.service.export_calendar(2, [45], actor_id=10)
        self.assertEqual(filename, "draft-gala.ics")
        text = body.decode()
        self.assertIn("UID:event-2@", text)
        self.assertIn("DTSTART:20300601T100000Z", text)
        self.assertIn("DTEND:20300601T180000Z", text)
        self.assertEqual(text.count("BEGIN:VALARM"), 1)
        self.assertIn("TRIGGER:-PT45M", text)

    def test_create_rejects_end_before_start(self):
        dto, error = self.service.create_event(
            {
                "title": "Backwards",
                "description": "x",
                "location": "y",
                "start_date": datetime(2030, 7, 2, tzinfo=timezone.utc),
                "end_date": datetime(2030, 7, 1, tzinfo=timezone.utc),
                "event_type": "market",
            },
            owner_id=10,
        )
        self.assertIsNone(dto)
        self.assertEqual(error[0], "VALIDATION_ERROR")

    def test_update_requires_owner(self):
        dto, error = self.service.update_event(
            1, {"title": "Hijacked"}, partial=True, actor_id=99
        )
        self.assertIsNone(dto)
        self.assertEqual(error[0], "FORBIDDEN")

        dto, error = self.service.update_event(
            1, {"title": "Summer Fair"}, partial=True, actor_id=10
        )
        self.assertIsNone(error)
        self.assertEqual(dto.title, "Summer Fair")

    def test_delete_unknown_event(self):
        ok, error = self.service.delete_event(404, actor_id=10)
        self.assertFalse(ok)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_admin_can_delete_any_event(self):
        ok, error = self.service.delete_event(1, actor_id=1, is_privileged=True)
        self.assertTrue(ok)
        self.assertIsNone(error)
        self.assertIsNone(self.repo.get(id=1))


class ProductServiceTests(unittest.TestCase):
    def setUp(self):
        self.events = FakeEventRepository()
        self.products = FakeProductRepository()
        self.service = ProductService(self.products, self.events)
        self.public = self.events.add(StubEvent(1, owner_id=10))
        self.hidden = self.events.add(StubEvent(2, owner_id=10, status="draft"))
        self.products.add(StubProduct(1, self.public, type="ticket", quantity=5))
        self.products.add(StubProduct(2, self.public, type="vendor_spot", quantity=1))
        self.products.add(StubProduct(3, self.public, type="merchandise", is_active=False))

    def test_public_listing_hides_inactive_products(self):
        data, error = self.service.list_event_products(1)
        self.assertIsNone(error)
        self.assertEqual([p.id for p in data], [1, 2])

    def test_owner_listing_includes_inactive_products(self):
        data, _ = self.service.list_event_products(1, actor_id=10)
        self.assertEqual([p.id for p in data], [1, 2, 3])

    def test_listing_filters_by_type(self):
        data, _ = self.service.list_event_products(1, product_type="vendor_spot")
        self.assertEqual([p.id for p in data], [2])
        self.assertTrue(data[0].requires_registration)

    def test_listing_hidden_event_is_not_found_for_public(self):
        data, error = self.service.list_event_products(2)
        self.assertIsNone(data)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_create_product_requires_event_owner(self):
        payload = {"type": "ticket", "name": "VIP", "price": "50.00", "quantity": 10}
        dto, error = self.service.create_product(1, payload, actor_id=99)
        self.assertIsNone(dto)
        self.assertEqual(error[0], "FORBIDDEN")

        dto, error = self.service.create_product(1, payload, actor_id=10)
        self.assertIsNone(error)
        self.assertEqual(dto.name, "VIP")
        self.assertEqual(dto.quantity, 10)
        self.assertEqual(dto.price, "50.00")

    def test_update_with_null_quantity_makes_stock_unlimited(self):
        dto, error = self.service.update_product(
            1, {"quantity": None}, partial=True, actor_id=10
        )
        self.assertIsNone(error)
        self.assertIsNone(dto.quantity)

    def test_slot_availability(self):
        self.assertEqual(self.service.check_slot_availability(1, 5), (True, 5))
        self.assertEqual(self.service.check_slot_availability(1, 6), (False, 5))
        self.products.get(id=1).quantity = None
        self.assertEqual(self.service.check_slot_availability(1, 1000), (True, None))

    def test_ensure_slots_raises_conflict(self):
        with self.assertRaises(SlotUnavailableError) as ctx:
            self.service.ensure_slots(2, 2)
        self.assertIsInstance(ctx.exception, ApplicationError)
        self.assertEqual(ctx.exception.code, "SLOT_UNAVAILABLE")
        self.assertEqual(ctx.exception.details["remaining"], 1)

    def test_unknown_product_raises_not_found(self):
        with self.assertRaises(ProductNotFoundError):
            self.service.check_slot_availability(99, 1)

    def test_decrease_product_quantity(self):
        self.assertTrue(self.service.decrease_product_quantity(1, 2))
        self.assertEqual(self.products.get(id=1).quantity, 3)
        self.assertFalse(self.service.decrease_product_quantity(2, 3))
        self.assertEqual(self.products.get(id=2).quantity, 1)
