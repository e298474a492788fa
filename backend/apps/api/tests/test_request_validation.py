import types
from unittest.mock import patch

from rest_framework.test import APIRequestFactory

from apps.api.middleware import RequestValidationMiddleware
from apps.api.validation import _extract_request_data, validate_request_context
from apps.auth.views import RegisterView
from apps.carts.views import CartItemRegistrationView, CartView
from apps.events.views import EventDetailView, EventListView
from apps.registrations.views import ProfileView
from apps.reports.views import AdminStatsView, TicketStatusView
from apps.users.views import UserListView, UserRoleView


factory = APIRequestFactory()


def _user(user_id, role="user", **flags):
    return types.SimpleNamespace(
        id=user_id,
        is_authenticated=True,
        role=role,
        is_staff=flags.get("is_staff", False),
        is_superuser=flags.get("is_superuser", False),
    )


def test_cart_is_open_to_anonymous_sessions():
    request = factory.get("/api/cart/")
    response = validate_request_context(request, CartView, {})
    assert response is None
    assert request.validated_user_id is None
    assert request.is_privileged_user is False


def test_cart_records_logged_in_user():
    request = factory.get("/api/cart/")
    request.user = _user(42)
    response = validate_request_context(request, CartView, {})
    assert response is None
    assert request.validated_user_id == 42


def test_cart_registration_requires_login():
    request = factory.get("/api/cart/items/abc/registration/")
    response = validate_request_context(request, CartItemRegistrationView, {"item_id": "abc"})
    assert response.status_code == 401
    assert response.data["error"]["code"] == "UNAUTHORIZED"


def test_middleware_no_view_class_returns_none():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/health/live")
    response = middleware.process_view(request, lambda req: req, [], {})
    assert response is None


def test_middleware_renders_blocked_response():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/api/admin/stats/")
    response = middleware.process_view(request, AdminStatsView.as_view(), [], {})
    assert response.status_code == 401
    response.render()
    assert b"UNAUTHORIZED" in response.content


def test_event_listing_is_public_but_creation_needs_organizer():
    request = factory.get("/api/events/")
    assert validate_request_context(request, EventListView, {}) is None

    request = factory.post("/api/events/", {"title": "X"}, format="json")
    assert validate_request_context(request, EventListView, {}).status_code == 401

    request = factory.post("/api/events/", {"title": "X"}, format="json")
    request.user = _user(3)
    response = validate_request_context(request, EventListView, {})
    assert response.status_code == 403
    assert response.data["error"]["message"] == "Only event organizers can create events"

    request = factory.post("/api/events/", {"title": "X"}, format="json")
    request.user = _user(4, role="event_owner")
    assert validate_request_context(request, EventListView, {}) is None
    assert request.is_organizer is True
    assert request.is_privileged_user is False


def test_admin_counts_as_organizer():
    request = factory.post("/api/events/", {"title": "X"}, format="json")
    request.user = _user(5, role="admin")
    assert validate_request_context(request, EventListView, {}) is None
    assert request.is_organizer is True
    assert request.is_privileged_user is True


def test_invalid_path_identifier():
    request = factory.get("/api/events/abc/")
    response = validate_request_context(request, EventDetailView, {"event_id": "abc"})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"event_id": "abc"}


def test_path_identifier_is_parsed_onto_request():
    request = factory.patch("/api/admin/tickets/7/status/", {"status": "active"}, format="json")
    request.user = _user(1, role="admin")
    response = validate_request_context(request, TicketStatusView, {"ticket_id": "7"})
    assert response is None
    assert request.ticket_id == 7


def test_unknown_registration_kind():
    request = factory.get("/api/profiles/sponsor/")
    request.user = _user(2)
    response = validate_request_context(request, ProfileView, {"kind": "sponsor"})
    assert response.status_code == 404
    assert response.data["error"]["details"]["allowed"] == ["vendor", "volunteer"]


def test_registration_kind_is_recorded():
    request = factory.get("/api/profiles/vendor/")
    request.user = _user(2)
    assert validate_request_context(request, ProfileView, {"kind": "vendor"}) is None
    assert request.registration_kind == "vendor"


def test_user_admin_views_require_admin():
    request = factory.get("/api/users/")
    assert validate_request_context(request, UserListView, {}).status_code == 401

    request = factory.get("/api/users/")
    request.user = _user(12, role="event_owner")
    assert validate_request_context(request, UserListView, {}).status_code == 403

    request = factory.put("/api/users/3/role/", {"role": "admin"}, format="json")
    request.user = _user(13, is_superuser=True)
    assert validate_request_context(request, UserRoleView, {"user_id": "3"}) is None
    assert request.is_privileged_user is True
    assert request.user_id == 3


@patch("apps.api.validation.User.objects")
def test_register_rejects_duplicate_username(mock_user_manager):
    mock_user_manager.filter.return_value.exists.return_value = True
    request = factory.post("/api/auth/register/", {"username": "dup"}, format="json")
    request.data = {"username": "dup"}
    response = validate_request_context(request, RegisterView, {})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"field": "username", "value": "dup"}


@patch("apps.api.validation.User.objects")
def test_register_accepts_unique_user(mock_user_manager):
    mock_user_manager.filter.return_value.exists.return_value = False
    request = factory.post(
        "/api/auth/register/", {"username": "new", "email": "new@example.com"}, format="json"
    )
    request.data = {"username": "new", "email": "new@example.com"}
    assert validate_request_context(request, RegisterView, {}) is None
    assert mock_user_manager.filter.call_count == 2


def test_extract_request_data_handles_invalid_json():
    request = types.SimpleNamespace(
        content_type="application/json", body=b"\xff", data=None, POST={}
    )
    assert _extract_request_data(request) == {}


def test_extract_request_data_form_payload():
    request = factory.post("/api/auth/register/", {"username": "form-user"})
    assert _extract_request_data(request).get("username") == "form-user"


def test_extract_request_data_without_post_attribute():
    request = types.SimpleNamespace(content_type="", data=None)
    assert _extract_request_data(request) == {}
