import types
import unittest
from datetime import datetime, timezone

from apps.registrations.services import RegistrationService, UnknownRegistrationKindError

NOW = datetime(2030, 5, 1, 9, tzinfo=timezone.utc)


class FakeProfileRepository:
    def __init__(self):
        self.profiles = {}

    def for_user(self, user_id):
        return self.profiles.get(user_id)

    def save_for_user(self, user_id, fields):
        profile = self.profiles.get(user_id) or types.SimpleNamespace(
            id=len(self.profiles) + 1, user_id=user_id, updated_at=NOW
        )
        for key, value in fields.items():
            setattr(profile, key, value)
        self.profiles[user_id] = profile
        return profile


class FakeRegistrationRepository:
    def __init__(self, *registrations):
        self.rows = {r.id: r for r in registrations}

    def get(self, **filters):
        return self.rows.get(filters.get("id"))

    def for_event(self, event_id, *, status=None):
        return [
            r
            for r in self.rows.values()
            if r.event_id == event_id and (status is None or r.status == status)
        ]

    def update(self, obj, **data):
        for key, value in data.items():
            setattr(obj, key, value)
        return obj


class FakeLookup:
    def __init__(self, *rows):
        self.rows = {r.id: r for r in rows}

    def get(self, **filters):
        return self.rows.get(filters.get("id"))


def vendor_registration(reg_id, event, status="pending"):
    profile = types.SimpleNamespace(
        full_name="Vera Vendor", email="vera@example.com", business_name="Vera's Bakes"
    )
    return types.SimpleNamespace(
        id=reg_id,
        status=status,
        user_id=9,
        user=types.SimpleNamespace(name="Vera", username="vera", email="v@example.com"),
        vendor_profile=profile,
        event_id=event.id,
        event=event,
        product_id=3,
        product=types.SimpleNamespace(name="Booth"),
        cart_item_id="abc",
        notes="",
        preferred_location="Corner",
        reviewed_by_id=None,
        reviewed_at=None,
        created_at=NOW,
    )


class RegistrationServiceTests(unittest.TestCase):
    def setUp(self):
        self.event = types.SimpleNamespace(id=1, owner_id=5, title="Makers Fair")
        self.vendor_profiles = FakeProfileRepository()
        self.volunteer_profiles = FakeProfileRepository()
        self.vendor_registrations = FakeRegistrationRepository(
            vendor_registration(1, self.event),
            vendor_registration(2, self.event, status="approved"),
        )
        self.service = RegistrationService(
            vendor_profiles=self.vendor_profiles,
            volunteer_profiles=self.volunteer_profiles,
            vendor_registrations=self.vendor_registrations,
            volunteer_assignments=FakeRegistrationRepository(),
            products=FakeLookup(),
            events=FakeLookup(self.event),
        )
        self.user = types.SimpleNamespace(
            id=9, name="Bea Buyer", email="bea@example.com", phone="555-010-9999"
        )

    def test_unknown_kind(self):
        with self.assertRaises(UnknownRegistrationKindError):
            self.service.get_profile("sponsor", 9)

    def test_save_profile_ignores_non_profile_fields(self):
        dto = self.service.save_profile(
            "volunteer", 9, {"full_name": "Vic", "age": 30, "agree_to_terms": True}
        )
        self.assertEqual(dto.data["fullName"], "Vic")
        self.assertEqual(dto.data["age"], 30)
        self.assertFalse(hasattr(self.volunteer_profiles.for_user(9), "agree_to_terms"))

    def test_prefill_falls_back_to_account(self):
        values = self.service.prefill("vendor", self.user)
        self.assertEqual(values["fullName"], "Bea Buyer")
        self.assertEqual(values["email"], "bea@example.com")
        self.assertEqual(values["phoneNumber"], "555-010-9999")
        self.assertEqual(values["businessName"], "")

    def test_prefill_prefers_profile_then_cart_data(self):
        self.service.save_profile("vendor", 9, {"business_name": "Saved Bakes", "city": ""})
        values = self.service.prefill(
            "vendor",
            self.user,
            reusable={"businessName": "Cart Bakes", "city": "Springfield", "registrationId": 4},
        )
        self.assertEqual(values["businessName"], "Saved Bakes")
        self.assertEqual(values["city"], "Springfield")
        self.assertEqual(values["fullName"], "Bea Buyer")
        self.assertNotIn("registrationId", values)

    def test_prefill_for_anonymous_user_uses_cart_data(self):
        anonymous = types.SimpleNamespace(id=None)
        values = self.service.prefill("volunteer", anonymous, reusable={"tShirtSize": "S"})
        self.assertEqual(values["tShirtSize"], "S")
        self.assertEqual(values["fullName"], "")

    def test_list_for_event_owner_only(self):
        data, error = self.service.list_for_event(1, actor_id=6)
        self.assertIsNone(data)
        self.assertEqual(error[0], "FORBIDDEN")

        data, error = self.service.list_for_event(1, kind="vendor", status="approved", actor_id=5)
        self.assertIsNone(error)
        self.assertEqual([r.id for r in data], [2])
        self.assertEqual(data[0].details, {"preferredLocation": "Corner"})
        self.assertEqual(data[0].applicant_name, "Vera Vendor")

    def test_list_for_event_admin_and_missing_event(self):
        data, error = self.service.list_for_event(1, actor_id=99, is_privileged=True)
        self.assertEqual(len(data), 2)
        _, error = self.service.list_for_event(404, actor_id=5)
        self.assertEqual(error[0], "NOT_FOUND")
        _, error = self.service.list_for_event(1, status="lost", actor_id=5)
        self.assertEqual(error[0], "VALIDATION_ERROR")

    def test_review_records_decision(self):
        dto, error = self.service.review("vendor", 1, "approved", actor_id=5, notes="Welcome")
        self.assertIsNone(error)
        self.assertEqual(dto.status, "approved")
        self.assertEqual(dto.reviewed_by_id, 5)
        self.assertIsNotNone(dto.reviewed_at)
        self.assertEqual(dto.notes, "Welcome")

    def test_review_rejects_other_owners_and_bad_decisions(self):
        _, error = self.service.review("vendor", 1, "approved", actor_id=6)
        self.assertEqual(error[0], "FORBIDDEN")
        _, error = self.service.review("vendor", 1, "pending", actor_id=5)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        _, error = self.service.review("vendor", 77, "approved", actor_id=5)
        self.assertEqual(error[0], "NOT_FOUND")


if __name__ == "__main__":
    unittest.main()
