from typing import Any, Dict, Optional

from apps.common.repository import GenericRepository
from .models import VendorProfile, VendorRegistration, VolunteerAssignment, VolunteerProfile


class ProfileRepository(GenericRepository):
    def for_user(self, user_id: int):
        return self.model.objects.filter(user_id=user_id).first()

    def save_for_user(self, user_id: int, fields: Dict[str, Any]):
        profile, _ = self.model.objects.update_or_create(user_id=user_id, defaults=fields)
        return profile


class VendorProfileRepository(ProfileRepository):
    def __init__(self):
        super().__init__(VendorProfile)


class VolunteerProfileRepository(ProfileRepository):
    def __init__(self):
        super().__init__(VolunteerProfile)


class RegistrationRepository(GenericRepository):
    profile_field = ""

    def _base_queryset(self):
        return self.model.objects.select_related(
            "user", "event", "product", self.profile_field
        )

    def get(self, **filters):
        return self._base_queryset().filter(**filters).first()

    def upsert_for_cart_item(self, user_id: int, cart_item_id: str, fields: Dict[str, Any]):
        # Resubmitting the form for the same cart entry replaces the earlier submission.
        registration, _ = self.model.objects.update_or_create(
            user_id=user_id,
            cart_item_id=cart_item_id,
            defaults=fields,
        )
        return self.get(id=registration.id)

    def for_event(self, event_id: int, *, status: Optional[str] = None):
        qs = self._base_queryset().filter(event_id=event_id)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("created_at", "id")


class VendorRegistrationRepository(RegistrationRepository):
    profile_field = "vendor_profile"

    def __init__(self):
        super().__init__(VendorRegistration)


class VolunteerAssignmentRepository(RegistrationRepository):
    profile_field = "volunteer_profile"

    def __init__(self):
        super().__init__(VolunteerAssignment)
