from __future__ import annotations

from apps.events.repositories import EventRepository, ProductRepository
from .repositories import (
    VendorProfileRepository,
    VendorRegistrationRepository,
    VolunteerAssignmentRepository,
    VolunteerProfileRepository,
)
from .services import RegistrationService


def build_registration_service() -> RegistrationService:
    return RegistrationService(
        vendor_profiles=VendorProfileRepository(),
        volunteer_profiles=VolunteerProfileRepository(),
        vendor_registrations=VendorRegistrationRepository(),
        volunteer_assignments=VolunteerAssignmentRepository(),
        products=ProductRepository(),
        events=EventRepository(),
    )
