from django.db import models
from django.utils import timezone

from apps.events.models import Event, Product
from apps.users.models import User


class VendorProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="vendor_profile")
    full_name = models.CharField(max_length=200)
    business_name = models.CharField(max_length=200)
    business_address = models.CharField(max_length=255)
    business_address_line2 = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    phone_number = models.CharField(max_length=50)
    email = models.EmailField()
    website_url = models.URLField(blank=True, default="")
    facebook_url = models.URLField(blank=True, default="")
    instagram_url = models.URLField(blank=True, default="")
    tiktok_url = models.URLField(blank=True, default="")
    other_promo_url = models.URLField(blank=True, default="")
    products_description = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.business_name} ({self.user_id})"


class VolunteerProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="volunteer_profile")
    full_name = models.CharField(max_length=200)
    email = models.EmailField()
    phone_number = models.CharField(max_length=50)
    age = models.PositiveSmallIntegerField()
    experience = models.TextField(blank=True, default="")
    interests = models.TextField(blank=True, default="")
    availability = models.CharField(max_length=100)
    emergency_contact_name = models.CharField(max_length=200)
    emergency_contact_phone = models.CharField(max_length=50)
    tshirt_size = models.CharField(max_length=10)
    special_accommodations = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.full_name} ({self.user_id})"


class ReviewStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class RegistrationBase(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="+")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="+")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="+")
    # Cart entry the registration was submitted for.
    cart_item_id = models.CharField(max_length=64)
    status = models.CharField(
        max_length=20, choices=ReviewStatus.choices, default=ReviewStatus.PENDING
    )
    notes = models.TextField(blank=True, default="")
    reviewed_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]


class VendorRegistration(RegistrationBase):
    vendor_profile = models.ForeignKey(
        VendorProfile, on_delete=models.CASCADE, related_name="registrations"
    )
    preferred_location = models.CharField(max_length=255, blank=True, default="")

    class Meta(RegistrationBase.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=["user", "cart_item_id"], name="vendor_registration_cart_item_unique"
            )
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="vendor_reg_event_status_idx"),
        ]


class VolunteerAssignment(RegistrationBase):
    volunteer_profile = models.ForeignKey(
        VolunteerProfile, on_delete=models.CASCADE, related_name="assignments"
    )
    availability = models.CharField(max_length=100, blank=True, default="")

    class Meta(RegistrationBase.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=["user", "cart_item_id"], name="volunteer_assignment_cart_item_unique"
            )
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="volunteer_asg_event_status_idx"),
        ]
