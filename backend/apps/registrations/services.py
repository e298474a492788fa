from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from apps.api.exceptions import DomainValidationError
from apps.common import get_logger
from .dtos import ProfileDTO, RegistrationDTO
from .mappers import (
    KINDS,
    PROFILE_FIELDS,
    REGISTRATION_DETAIL_FIELDS,
    VENDOR,
    VOLUNTEER,
    ProfileMapper,
    RegistrationMapper,
)
from .models import ReviewStatus
from .protocols import (
    EventLookupProtocol,
    ProductLookupProtocol,
    ProfileRepositoryProtocol,
    RegistrationRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="registrations", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]

PRODUCT_TYPE_FOR_KIND = {VENDOR: "vendor_spot", VOLUNTEER: "volunteer_shift"}
REVIEW_DECISIONS = (ReviewStatus.APPROVED, ReviewStatus.REJECTED)


class UnknownRegistrationKindError(DomainValidationError):
    default_message = "Unknown registration kind"


def _require_kind(kind: str) -> str:
    if kind not in KINDS:
        raise UnknownRegistrationKindError(details={"kind": kind, "allowed": list(KINDS)})
    return kind


class RegistrationService:
    def __init__(
        self,
        vendor_profiles: ProfileRepositoryProtocol,
        volunteer_profiles: ProfileRepositoryProtocol,
        vendor_registrations: RegistrationRepositoryProtocol,
        volunteer_assignments: RegistrationRepositoryProtocol,
        products: ProductLookupProtocol,
        events: EventLookupProtocol,
    ):
        self._profiles = {VENDOR: vendor_profiles, VOLUNTEER: volunteer_profiles}
        self._registrations = {VENDOR: vendor_registrations, VOLUNTEER: volunteer_assignments}
        self.products = products
        self.events = events
        self.logger = logger.bind(service="RegistrationService")

    # profiles

    def get_profile(self, kind: str, user_id: int) -> Optional[ProfileDTO]:
        profile = self._profiles[_require_kind(kind)].for_user(user_id)
        if not profile:
            self.logger.debug("No profile on file", kind=kind, user_id=user_id)
            return None
        return ProfileMapper.to_dto(kind, profile)

    def save_profile(self, kind: str, user_id: int, data: Dict[str, Any]) -> ProfileDTO:
        """Create or update the user's profile from the snake_case profile fields in ``data``."""
        fields = {
            name: value for name, value in data.items() if name in PROFILE_FIELDS[_require_kind(kind)]
        }
        profile = self._profiles[kind].save_for_user(user_id, fields)
        self.logger.info("Profile saved", kind=kind, user_id=user_id, profile_id=profile.id)
        return ProfileMapper.to_dto(kind, profile)

    def prefill(
        self, kind: str, user, *, reusable: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Initial form values, field by field: the saved profile first, then a
        registration of the same kind already completed in this cart, then the
        account itself.
        """
        _require_kind(kind)
        profile = self.get_profile(kind, user.id) if getattr(user, "id", None) else None
        saved = profile.data if profile else {}
        reusable = reusable or {}
        account = {
            "fullName": getattr(user, "name", "") or "",
            "email": getattr(user, "email", "") or "",
            "phoneNumber": getattr(user, "phone", "") or "",
        }
        values: Dict[str, Any] = {}
        for api_name in PROFILE_FIELDS[kind].values():
            value = saved.get(api_name)
            if value in (None, ""):
                value = reusable.get(api_name)
            if value in (None, ""):
                value = account.get(api_name)
            values[api_name] = "" if value is None else value
        self.logger.debug(
            "Built registration prefill",
            kind=kind,
            user_id=getattr(user, "id", None),
            has_profile=bool(profile),
            has_reusable=bool(reusable),
        )
        return values

    # registrations

    def submit(
        self,
        kind: str,
        user_id: int,
        *,
        product_id: int,
        cart_item_id: str,
        data: Dict[str, Any],
    ) -> Tuple[Optional[RegistrationDTO], Optional[ErrorTuple]]:
        """Save the profile and the registration for one cart entry in a single transaction."""
        _require_kind(kind)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Registration for unknown product", kind=kind, product_id=product_id)
            return None, ("NOT_FOUND", "Product not found", {"productId": product_id})
        if product.type != PRODUCT_TYPE_FOR_KIND[kind]:
            self.logger.warning(
                "Registration kind does not match product",
                kind=kind,
                product_id=product_id,
                product_type=product.type,
            )
            return None, (
                "VALIDATION_ERROR",
                f"This item does not take a {kind} registration",
                {"productId": product_id, "type": product.type},
            )
        profile_fields = {k: v for k, v in data.items() if k in PROFILE_FIELDS[kind]}
        registration_fields: Dict[str, Any] = {
            k: v for k, v in data.items() if k in REGISTRATION_DETAIL_FIELDS[kind]
        }
        registration_fields.update(
            event_id=product.event_id,
            product_id=product.id,
            status=ReviewStatus.PENDING,
            notes=data.get("special_accommodations") or data.get("notes") or "",
            reviewed_by=None,
            reviewed_at=None,
        )
        with transaction.atomic():
            profile = self._profiles[kind].save_for_user(user_id, profile_fields)
            registration_fields[f"{kind}_profile"] = profile
            registration = self._registrations[kind].upsert_for_cart_item(
                user_id, cart_item_id, registration_fields
            )
        self.logger.info(
            "Registration submitted",
            kind=kind,
            user_id=user_id,
            registration_id=registration.id,
            event_id=product.event_id,
            cart_item_id=cart_item_id,
        )
        return RegistrationMapper.to_dto(kind, registration), None

    def list_for_event(
        self,
        event_id: int,
        *,
        kind: Optional[str] = None,
        status: Optional[str] = None,
        actor_id: Optional[int],
        is_privileged: bool = False,
    ) -> Tuple[Optional[List[RegistrationDTO]], Optional[ErrorTuple]]:
        event = self.events.get(id=event_id)
        if not event:
            return None, ("NOT_FOUND", "Event not found", {"id": str(event_id)})
        if not (is_privileged or event.owner_id == actor_id):
            self.logger.warning(
                "Registration listing forbidden", event_id=event_id, actor_id=actor_id
            )
            return None, ("FORBIDDEN", "You can only view registrations for your own events", None)
        if status and status not in ReviewStatus.values:
            return None, (
                "VALIDATION_ERROR",
                "Invalid status",
                {"status": status, "allowed": list(ReviewStatus.values)},
            )
        kinds = [_require_kind(kind)] if kind else list(KINDS)
        result: List[RegistrationDTO] = []
        for k in kinds:
            result.extend(
                RegistrationMapper.many_to_dto(
                    k, self._registrations[k].for_event(event_id, status=status)
                )
            )
        self.logger.debug(
            "Listed event registrations", event_id=event_id, kinds=kinds, count=len(result)
        )
        return result, None

    def review(
        self,
        kind: str,
        registration_id: int,
        decision: str,
        *,
        actor_id: Optional[int],
        is_privileged: bool = False,
        notes: Optional[str] = None,
    ) -> Tuple[Optional[RegistrationDTO], Optional[ErrorTuple]]:
        """Approve or reject a registration, recording who decided and when."""
        _require_kind(kind)
        if decision not in REVIEW_DECISIONS:
            return None, (
                "VALIDATION_ERROR",
                "Invalid review decision",
                {"status": decision, "allowed": list(REVIEW_DECISIONS)},
            )
        registration = self._registrations[kind].get(id=registration_id)
        if not registration:
            return None, ("NOT_FOUND", "Registration not found", {"id": str(registration_id)})
        if not (is_privileged or registration.event.owner_id == actor_id):
            self.logger.warning(
                "Registration review forbidden",
                kind=kind,
                registration_id=registration_id,
                actor_id=actor_id,
            )
            return None, ("FORBIDDEN", "You can only review registrations for your own events", None)
        changes: Dict[str, Any] = {
            "status": decision,
            "reviewed_by_id": actor_id,
            "reviewed_at": timezone.now(),
        }
        if notes is not None:
            changes["notes"] = notes
        registration = self._registrations[kind].update(registration, **changes)
        self.logger.info(
            "Registration reviewed",
            kind=kind,
            registration_id=registration_id,
            status=decision,
            actor_id=actor_id,
        )
        return RegistrationMapper.to_dto(kind, registration), None
