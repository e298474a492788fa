from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.events.models import Event, Product
from apps.registrations.models import VendorProfile, VendorRegistration
from apps.users.models import User


class RegistrationsApiTests(APITestCase):
    def setUp(self):
        self.owner = User.objects.create_user(
            username="organizer",
            password="OrganizerPass1!",
            email="organizer@example.com",
            role=User.Role.EVENT_OWNER,
        )
        self.other_owner = User.objects.create_user(
            username="rival",
            password="RivalPass1!",
            email="rival@example.com",
            role=User.Role.EVENT_OWNER,
        )
        self.vendor = User.objects.create_user(
            username="vendor", password="VendorPass1!", email="vendor@example.com"
        )
        start = timezone.now() + timedelta(days=7)
        self.event = Event.objects.create(
            title="Makers Fair",
            description="Crafts",
            location="Hall 2",
            start_date=start,
            end_date=start + timedelta(hours=8),
            event_type="market",
            owner=self.owner,
        )
        self.booth = Product.objects.create(
            event=self.event, type=Product.Type.VENDOR_SPOT, name="Booth", price=Decimal("50")
        )
        self.profile = VendorProfile.objects.create(
            user=self.vendor,
            full_name="Vera Vendor",
            business_name="Vera's Bakes",
            business_address="1 Oven Lane",
            city="Springfield",
            state="OR",
            zip_code="97477",
            phone_number="555-010-2030",
            email="vera@example.com",
            products_description="Bread",
        )
        self.registration = VendorRegistration.objects.create(
            user=self.vendor,
            event=self.event,
            product=self.booth,
            vendor_profile=self.profile,
            cart_item_id="item-1",
            preferred_location="Corner",
        )

    def _auth(self, user):
        token = RefreshToken.for_user(user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def test_profile_requires_login(self):
        response = self.client.get("/api/profiles/vendor/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_get_own_profile(self):
        self._auth(self.vendor)
        response = self.client.get("/api/profiles/vendor/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["businessName"], "Vera's Bakes")

    def test_missing_profile_and_unknown_kind(self):
        self._auth(self.vendor)
        missing = self.client.get("/api/profiles/volunteer/")
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn("hint", missing.data["error"])
        unknown = self.client.get("/api/profiles/sponsor/")
        self.assertEqual(unknown.status_code, status.HTTP_404_NOT_FOUND)

    def test_put_profile_creates_it(self):
        self._auth(self.owner)
        response = self.client.put(
            "/api/profiles/volunteer/",
            {
                "fullName": "Olga",
                "email": "olga@example.com",
                "phoneNumber": "555-010-1111",
                "age": 40,
                "availability": "all day",
                "emergencyContactName": "Oscar",
                "emergencyContactPhone": "555-010-2222",
                "tShirtSize": "S",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["tShirtSize"], "S")
        self.assertEqual(self.owner.volunteer_profile.age, 40)

    def test_owner_lists_event_registrations(self):
        self._auth(self.owner)
        response = self.client.get(f"/api/events/{self.event.id}/registrations/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["applicantName"], "Vera Vendor")
        self.assertEqual(response.data[0]["details"], {"preferredLocation": "Corner"})

        filtered = self.client.get(
            f"/api/events/{self.event.id}/registrations/", {"status": "approved"}
        )
        self.assertEqual(filtered.data, [])

    def test_other_owner_and_plain_user_cannot_list(self):
        self._auth(self.other_owner)
        response = self.client.get(f"/api/events/{self.event.id}/registrations/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self._auth(self.vendor)
        response = self.client.get(f"/api/events/{self.event.id}/registrations/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_reviews_registration(self):
        self._auth(self.owner)
        response = self.client.post(
            f"/api/registrations/vendor/{self.registration.id}/review/",
            {"status": "approved", "notes": "See you there"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "approved")
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.reviewed_by, self.owner)
        self.assertEqual(self.registration.notes, "See you there")

    def test_review_rejects_invalid_status(self):
        self._auth(self.owner)
        response = self.client.post(
            f"/api/registrations/vendor/{self.registration.id}/review/",
            {"status": "pending"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
