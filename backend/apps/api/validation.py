import json
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.utils import error_response, parse_int
from apps.common import get_logger
from apps.users.models import User

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()

ALL_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
REGISTRATION_KINDS = frozenset({"vendor", "volunteer"})


@dataclass(frozen=True)
class AccessRule:
    """Per-view request requirements checked before the view runs.

    ``auth`` lists the methods that need a bearer token; ``role`` (``organizer``
    or ``admin``) applies to the same methods. ``ids`` names integer path kwargs
    that are parsed onto the request as attributes of the same name.
    """

    auth: FrozenSet[str] = frozenset()
    role: Optional[str] = None
    ids: Tuple[str, ...] = ()
    kind: bool = False
    forbidden_message: str = "You do not have permission to perform this action"


VIEW_RULES: Dict[str, AccessRule] = {
    # auth
    "RegisterView": AccessRule(),
    # users
    "UserListView": AccessRule(
        auth=ALL_METHODS,
        role="admin",
        forbidden_message="You do not have permission to list users",
    ),
    "UserRoleView": AccessRule(
        auth=ALL_METHODS,
        role="admin",
        ids=("user_id",),
        forbidden_message="You do not have permission to change user roles",
    ),
    # events
    "EventListView": AccessRule(
        auth=frozenset({"POST"}),
        role="organizer",
        forbidden_message="Only event organizers can create events",
    ),
    "EventDetailView": AccessRule(auth=WRITE_METHODS, ids=("event_id",)),
    "EventCalendarView": AccessRule(ids=("event_id",)),
    "MyEventsView": AccessRule(
        auth=ALL_METHODS,
        role="organizer",
        forbidden_message="Only event organizers have events",
    ),
    "EventProductListView": AccessRule(auth=WRITE_METHODS, ids=("event_id",)),
    "ProductDetailView": AccessRule(auth=WRITE_METHODS, ids=("product_id",)),
    # registrations
    "ProfileView": AccessRule(auth=ALL_METHODS, kind=True),
    "EventRegistrationListView": AccessRule(
        auth=ALL_METHODS,
        role="organizer",
        ids=("event_id",),
        forbidden_message="You do not have permission to review registrations",
    ),
    "RegistrationReviewView": AccessRule(
        auth=ALL_METHODS,
        role="organizer",
        ids=("registration_id",),
        kind=True,
        forbidden_message="You do not have permission to review registrations",
    ),
    # cart (session scoped; a bearer token is optional except for registrations)
    "CartView": AccessRule(),
    "CartItemListView": AccessRule(),
    "CartItemDetailView": AccessRule(),
    "CartNextStepView": AccessRule(),
    "CartItemRegistrationView": AccessRule(auth=ALL_METHODS),
    # orders
    "CheckoutView": AccessRule(auth=ALL_METHODS),
    "OrderListView": AccessRule(auth=ALL_METHODS),
    "OrderDetailView": AccessRule(auth=ALL_METHODS),
    "MyTicketsView": AccessRule(auth=ALL_METHODS),
    # reports
    "AdminStatsView": AccessRule(auth=ALL_METHODS, role="admin"),
    "TransactionSearchView": AccessRule(auth=ALL_METHODS, role="admin"),
    "TransactionExportView": AccessRule(auth=ALL_METHODS, role="admin"),
    "TicketStatusView": AccessRule(auth=ALL_METHODS, role="admin", ids=("ticket_id",)),
    "OrderPaymentStatusView": AccessRule(auth=ALL_METHODS, role="admin"),
    "AdminNoteListView": AccessRule(auth=ALL_METHODS, role="admin"),
}


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF authenticates lazily inside the view; bearer tokens have to be
    # resolved here for the checks below.
    meta = getattr(request, "META", {}) or {}
    auth_header = meta.get("HTTP_AUTHORIZATION") if hasattr(meta, "get") else None
    if not auth_header:
        return False

    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False

    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False

    request.user = user
    request.auth = token
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _set_validated_user(request: HttpRequest, user_id: Optional[int]) -> None:
    request.validated_user_id = user_id
    user = getattr(request, "user", None)
    request.is_privileged_user = _is_privileged_user(user)
    request.is_organizer = _is_organizer(user)


def _is_privileged_user(user: Any) -> bool:
    return bool(
        getattr(user, "role", None) == User.Role.ADMIN
        or getattr(user, "is_superuser", False)
        or getattr(user, "is_staff", False)
    )


def _is_organizer(user: Any) -> bool:
    return getattr(user, "role", None) == User.Role.EVENT_OWNER or _is_privileged_user(
        user
    )


def _has_role(user: Any, role: Optional[str]) -> bool:
    if role is None:
        return True
    if role == "admin":
        return _is_privileged_user(user)
    if role == "organizer":
        return _is_organizer(user)
    return False


def _extract_request_data(request: HttpRequest) -> Dict[str, Any]:
    data = getattr(request, "data", None)
    if data not in (None, {}):
        return data
    if request.content_type == "application/json":
        try:
            body = request.body.decode("utf-8") if hasattr(request, "body") else None
            return json.loads(body) if body else {}
        except (ValueError, AttributeError, UnicodeDecodeError):
            return {}
    if hasattr(request, "POST"):
        post = request.POST
        if hasattr(post, "dict"):
            return post.dict()
        return dict(post)
    return {}


def _validate_user_uniqueness(request: HttpRequest) -> Any:
    data = _extract_request_data(request) or {}
    for field_name in ("username", "email"):
        value = data.get(field_name)
        if value and User.objects.filter(**{field_name: value}).exists():
            logger.info("Uniqueness validation failed", field=field_name, value=value)
            return error_response(
                "VALIDATION_ERROR",
                f"{field_name.capitalize()} already exists",
                {"field": field_name, "value": value},
            )
    return None


def _parse_path_ids(request: HttpRequest, view_name: str, rule: AccessRule, view_kwargs) -> Any:
    for name in rule.ids:
        raw = view_kwargs.get(name)
        parsed = parse_int(raw)
        if parsed is None:
            logger.warning("Invalid path identifier", view=view_name, param=name, value=raw)
            return error_response(
                "VALIDATION_ERROR",
                "Invalid identifier",
                {name: str(raw)},
            )
        setattr(request, name, parsed)
    if rule.kind:
        kind = view_kwargs.get("kind")
        if kind not in REGISTRATION_KINDS:
            logger.warning("Unknown registration kind", view=view_name, kind=kind)
            return error_response(
                "NOT_FOUND",
                "Unknown registration kind",
                {"kind": kind, "allowed": sorted(REGISTRATION_KINDS)},
            )
        request.registration_kind = kind
    return None


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Run the access checks registered for ``view_class``.

    Returns an error Response when the request must not reach the view;
    otherwise None, with the resolved user and parsed identifiers attached to
    the request (``validated_user_id``, ``is_privileged_user``, ``is_organizer``).
    """
    view_name = getattr(view_class, "__name__", "")
    method = getattr(request, "method", "") or ""
    rule = VIEW_RULES.get(view_name)

    logger.debug("Running request context validation", view=view_name, method=method)

    if rule is None:
        return None

    resp = _parse_path_ids(request, view_name, rule, view_kwargs or {})
    if resp is not None:
        return resp

    if method in rule.auth:
        if not _is_authenticated_user(request):
            logger.warning("Authentication required", view=view_name, method=method)
            return error_response("UNAUTHORIZED", "Authentication required")
        _set_validated_user(request, int(request.user.id))
        if not _has_role(request.user, rule.role):
            logger.warning(
                "Role check failed",
                view=view_name,
                method=method,
                user_id=request.user.id,
                required_role=rule.role,
            )
            return error_response("FORBIDDEN", rule.forbidden_message)
    elif _is_authenticated_user(request):
        _set_validated_user(request, int(request.user.id))
    else:
        _set_validated_user(request, None)

    if view_name == "RegisterView" and method == "POST":
        result = _validate_user_uniqueness(request)
        if result:
            return result

    logger.debug(
        "Validated request context",
        view=view_name,
        method=method,
        user_id=getattr(request, "validated_user_id", None),
    )
    return None
