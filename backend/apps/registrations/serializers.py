from rest_framework import serializers

from apps.users.validators import validate_phone
from .models import ReviewStatus

MIN_VOLUNTEER_AGE = 16
TSHIRT_SIZES = ("XS", "S", "M", "L", "XL", "XXL")
PROMO_FIELDS = ("website_url", "facebook_url", "instagram_url", "tiktok_url", "other_promo_url")


def _validate_terms(value: bool) -> bool:
    if value is not True:
        raise serializers.ValidationError("You must agree to the terms and conditions.")
    return value


class VendorProfileSerializer(serializers.Serializer):
    fullName = serializers.CharField(source="full_name", max_length=200)
    businessName = serializers.CharField(source="business_name", max_length=200)
    businessAddress = serializers.CharField(source="business_address", max_length=255)
    businessAddressLine2 = serializers.CharField(
        source="business_address_line2", max_length=255, required=False, allow_blank=True
    )
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zipCode = serializers.CharField(source="zip_code", min_length=5, max_length=20)
    phoneNumber = serializers.CharField(source="phone_number", max_length=50)
    email = serializers.EmailField()
    websiteUrl = serializers.URLField(source="website_url", required=False, allow_blank=True)
    facebookUrl = serializers.URLField(source="facebook_url", required=False, allow_blank=True)
    instagramUrl = serializers.URLField(source="instagram_url", required=False, allow_blank=True)
    tiktokUrl = serializers.URLField(source="tiktok_url", required=False, allow_blank=True)
    otherPromoUrl = serializers.URLField(
        source="other_promo_url", required=False, allow_blank=True
    )
    productsDescription = serializers.CharField(source="products_description")

    def validate_phoneNumber(self, value: str) -> str:
        return validate_phone(value)


class VendorRegistrationSerializer(VendorProfileSerializer):
    hasProvidedPromoInfo = serializers.BooleanField(
        source="has_provided_promo_info", required=False, default=False
    )
    preferredLocation = serializers.CharField(
        source="preferred_location", max_length=255, required=False, allow_blank=True
    )
    agreeToTerms = serializers.BooleanField(source="agree_to_terms")

    def validate_agreeToTerms(self, value: bool) -> bool:
        return _validate_terms(value)

    def validate(self, attrs):
        if attrs.get("has_provided_promo_info") and not any(
            attrs.get(name) for name in PROMO_FIELDS
        ):
            raise serializers.ValidationError(
                {"websiteUrl": "Provide at least one website or social media link."}
            )
        return attrs


class VolunteerProfileSerializer(serializers.Serializer):
    fullName = serializers.CharField(source="full_name", max_length=200)
    email = serializers.EmailField()
    phoneNumber = serializers.CharField(source="phone_number", max_length=50)
    age = serializers.IntegerField(
        min_value=MIN_VOLUNTEER_AGE,
        max_value=120,
        error_messages={"min_value": f"Volunteers must be at least {MIN_VOLUNTEER_AGE} years old."},
    )
    experience = serializers.CharField(required=False, allow_blank=True)
    interests = serializers.CharField(required=False, allow_blank=True)
    availability = serializers.CharField(max_length=100)
    emergencyContactName = serializers.CharField(source="emergency_contact_name", max_length=200)
    emergencyContactPhone = serializers.CharField(
        source="emergency_contact_phone", max_length=50
    )
    tShirtSize = serializers.ChoiceField(source="tshirt_size", choices=TSHIRT_SIZES)
    specialAccommodations = serializers.CharField(
        source="special_accommodations", required=False, allow_blank=True
    )

    def validate_phoneNumber(self, value: str) -> str:
        return validate_phone(value)

    def validate_emergencyContactPhone(self, value: str) -> str:
        return validate_phone(value)


class VolunteerRegistrationSerializer(VolunteerProfileSerializer):
    agreeToTerms = serializers.BooleanField(source="agree_to_terms")

    def validate_agreeToTerms(self, value: bool) -> bool:
        return _validate_terms(value)


PROFILE_SERIALIZERS = {
    "vendor": VendorProfileSerializer,
    "volunteer": VolunteerProfileSerializer,
}

REGISTRATION_SERIALIZERS = {
    "vendor": VendorRegistrationSerializer,
    "volunteer": VolunteerRegistrationSerializer,
}


class ProfileReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    kind = serializers.CharField()
    userId = serializers.IntegerField(source="user_id")
    data = serializers.DictField()
    updatedAt = serializers.CharField(source="updated_at", allow_null=True)


class RegistrationReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    kind = serializers.CharField()
    status = serializers.CharField()
    userId = serializers.IntegerField(source="user_id")
    applicantName = serializers.CharField(source="applicant_name")
    applicantEmail = serializers.CharField(source="applicant_email")
    eventId = serializers.IntegerField(source="event_id")
    eventTitle = serializers.CharField(source="event_title")
    productId = serializers.IntegerField(source="product_id")
    productName = serializers.CharField(source="product_name")
    cartItemId = serializers.CharField(source="cart_item_id")
    notes = serializers.CharField(allow_blank=True)
    details = serializers.DictField()
    profile = serializers.DictField()
    reviewedById = serializers.IntegerField(source="reviewed_by_id", allow_null=True)
    reviewedAt = serializers.CharField(source="reviewed_at", allow_null=True)
    createdAt = serializers.CharField(source="created_at", allow_null=True)


class RegistrationListQuerySerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=("vendor", "volunteer"), required=False)
    status = serializers.ChoiceField(choices=ReviewStatus.choices, required=False)


class RegistrationReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[(ReviewStatus.APPROVED, "Approved"), (ReviewStatus.REJECTED, "Rejected")]
    )
    notes = serializers.CharField(required=False, allow_blank=True)
