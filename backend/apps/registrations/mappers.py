from typing import Any, Dict, Iterable, List, Mapping, Optional

from .dtos import ProfileDTO, RegistrationDTO

VENDOR = "vendor"
VOLUNTEER = "volunteer"
KINDS = (VENDOR, VOLUNTEER)

# model attribute -> API field
PROFILE_FIELDS: Dict[str, Dict[str, str]] = {
    VENDOR: {
        "full_name": "fullName",
        "business_name": "businessName",
        "business_address": "businessAddress",
        "business_address_line2": "businessAddressLine2",
        "city": "city",
        "state": "state",
        "zip_code": "zipCode",
        "phone_number": "phoneNumber",
        "email": "email",
        "website_url": "websiteUrl",
        "facebook_url": "facebookUrl",
        "instagram_url": "instagramUrl",
        "tiktok_url": "tiktokUrl",
        "other_promo_url": "otherPromoUrl",
        "products_description": "productsDescription",
    },
    VOLUNTEER: {
        "full_name": "fullName",
        "email": "email",
        "phone_number": "phoneNumber",
        "age": "age",
        "experience": "experience",
        "interests": "interests",
        "availability": "availability",
        "emergency_contact_name": "emergencyContactName",
        "emergency_contact_phone": "emergencyContactPhone",
        "tshirt_size": "tShirtSize",
        "special_accommodations": "specialAccommodations",
    },
}

REGISTRATION_DETAIL_FIELDS: Dict[str, Dict[str, str]] = {
    VENDOR: {"preferred_location": "preferredLocation"},
    VOLUNTEER: {"availability": "availability"},
}


def _iso(value):
    return value.isoformat() if value is not None else None


def to_api_fields(kind: str, source: Any, mapping: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read the attributes (or keys) named in ``mapping`` and rename them for the API."""
    mapping = mapping if mapping is not None else PROFILE_FIELDS[kind]
    out: Dict[str, Any] = {}
    for attr, api_name in mapping.items():
        if isinstance(source, Mapping):
            out[api_name] = source.get(attr)
        else:
            out[api_name] = getattr(source, attr, None)
    return out


class ProfileMapper:
    @staticmethod
    def to_dto(kind: str, profile) -> ProfileDTO:
        return ProfileDTO(
            id=profile.id,
            kind=kind,
            user_id=profile.user_id,
            data=to_api_fields(kind, profile),
            updated_at=_iso(getattr(profile, "updated_at", None)),
        )


class RegistrationMapper:
    @staticmethod
    def to_dto(kind: str, registration) -> RegistrationDTO:
        profile = (
            registration.vendor_profile if kind == VENDOR else registration.volunteer_profile
        )
        user = registration.user
        return RegistrationDTO(
            id=registration.id,
            kind=kind,
            status=registration.status,
            user_id=registration.user_id,
            applicant_name=profile.full_name or getattr(user, "name", "") or user.username,
            applicant_email=profile.email or user.email,
            event_id=registration.event_id,
            event_title=registration.event.title,
            product_id=registration.product_id,
            product_name=registration.product.name,
            cart_item_id=registration.cart_item_id,
            notes=registration.notes,
            details=to_api_fields(kind, registration, REGISTRATION_DETAIL_FIELDS[kind]),
            profile=to_api_fields(kind, profile),
            reviewed_by_id=registration.reviewed_by_id,
            reviewed_at=_iso(registration.reviewed_at),
            created_at=_iso(registration.created_at),
        )

    @staticmethod
    def many_to_dto(kind: str, registrations: Iterable) -> List[RegistrationDTO]:
        return [RegistrationMapper.to_dto(kind, r) for r in registrations]
