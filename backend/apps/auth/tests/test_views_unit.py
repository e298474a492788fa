import types
import unittest
from unittest.mock import Mock, patch

from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError

from apps.auth.serializers import RoleTokenObtainPairSerializer
from apps.auth.views import (
    LogoutAllView,
    LogoutView,
    MeView,
    RegisterView,
    UsernameAvailabilityView,
)


class DummyRequest:
    def __init__(self, data=None, query_params=None, user=None):
        self.data = data or {}
        self.query_params = (
            query_params if query_params is not None else dict(self.data)
        )
        self.user = user


class RoleTokenSerializerTests(unittest.TestCase):
    def test_login_payload_includes_role(self):
        serializer = RoleTokenObtainPairSerializer()

        def fake_validate(self, attrs):
            self.user = types.SimpleNamespace(role="event_owner")
            return {"access": "a", "refresh": "b"}

        with patch(
            "apps.auth.serializers.TokenObtainPairSerializer.validate", fake_validate
        ):
            data = serializer.validate({})
        self.assertEqual(data["role"], "event_owner")
        self.assertIn("access", data)


class AuthViewsUnitTests(unittest.TestCase):
    def test_register_success(self):
        service = Mock()
        service.register.return_value = {
            "id": 1,
            "username": "newuser",
            "email": "new@example.com",
            "name": "New User",
            "role": "user",
        }
        request = DummyRequest(
            {
                "username": "newuser",
                "email": "new@example.com",
                "password": "Secret123!",
                "confirmPassword": "Secret123!",
                "name": "New User",
                "phone": "555-123-4567",
            }
        )
        view = RegisterView()
        view.service = service
        response = view.post(request)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["username"], "newuser")
        self.assertEqual(response.data["role"], "user")
        payload = service.register.call_args.args[0]
        self.assertNotIn("confirmPassword", payload)

    def test_register_reports_service_conflict(self):
        service = Mock()
        service.register.return_value = (
            "VALIDATION_ERROR",
            "Username already exists",
            {"username": "taken"},
        )
        view = RegisterView()
        view.service = service
        response = view.post(
            DummyRequest(
                {
                    "username": "taken",
                    "email": "other@example.com",
                    "password": "Secret123!",
                }
            )
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")

    def test_register_rejects_mismatched_confirmation(self):
        service = Mock()
        view = RegisterView()
        view.service = service
        with self.assertRaises(DRFValidationError):
            view.post(
                DummyRequest(
                    {
                        "username": "goodname",
                        "email": "test@example.com",
                        "password": "Secret123!",
                        "confirmPassword": "Secret124!",
                    }
                )
            )
        service.register.assert_not_called()

    def test_register_rejects_weak_password_and_short_phone(self):
        service = Mock()
        view = RegisterView()
        view.service = service
        with self.assertRaises(DRFValidationError):
            view.post(
                DummyRequest(
                    {"username": "goodname", "email": "a@example.com", "password": "short"}
                )
            )
        with self.assertRaises(DRFValidationError):
            view.post(
                DummyRequest(
                    {
                        "username": "goodname",
                        "email": "a@example.com",
                        "password": "Secret123!",
                        "phone": "12345",
                    }
                )
            )
        service.register.assert_not_called()

    def test_me_view_returns_profile(self):
        user = types.SimpleNamespace(
            id=1,
            username="me",
            email="me@example.com",
            name="Me User",
            phone=None,
            role="admin",
            stripe_account_id="acct_123",
            last_login=None,
            date_joined=None,
        )
        response = MeView().get(DummyRequest(user=user))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["username"], "me")
        self.assertEqual(response.data["role"], "admin")
        self.assertTrue(response.data["stripeConnected"])

    def test_username_availability_view_reports_status(self):
        service = Mock()
        service.is_username_available.return_value = False
        view = UsernameAvailabilityView()
        view.service = service
        response = view.get(DummyRequest(query_params={"username": "taken"}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["available"])
        service.is_username_available.assert_called_once_with("taken")

    def test_logout_view_success_and_failure(self):
        request = DummyRequest({"refresh": "abc"}, user=types.SimpleNamespace(id=5))
        view = LogoutView()
        view.service = Mock()
        view.service.logout.return_value = None
        self.assertEqual(view.post(request).status_code, status.HTTP_200_OK)
        view.service.logout.assert_called_once_with("abc", 5)

        view.service.logout.return_value = ("VALIDATION_ERROR", "Invalid token", None)
        response = view.post(request)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_all_delegates_to_service(self):
        view = LogoutAllView()
        view.service = Mock()
        view.service.logout_all.return_value = {
            "detail": "Logged out from all devices",
            "tokens_invalidated": 2,
        }
        actor = types.SimpleNamespace(id=10)
        response = view.post(DummyRequest(user=actor))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["tokens_invalidated"], 2)
        view.service.logout_all.assert_called_once_with(actor)
