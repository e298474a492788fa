from django.db import models
from django.utils import timezone

from apps.users.models import User


class Event(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        CANCELLED = "cancelled", "Cancelled"

    title = models.CharField(max_length=255)
    description = models.TextField()
    location = models.CharField(max_length=255)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    image_url = models.TextField(blank=True, null=True)
    event_type = models.CharField(max_length=100)
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="events")
    is_active = models.BooleanField(default=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PUBLISHED
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["start_date", "id"]
        indexes = [
            models.Index(fields=["start_date"], name="event_start_idx"),
            models.Index(fields=["event_type"], name="event_type_idx"),
            models.Index(fields=["is_active", "status"], name="event_visibility_idx"),
        ]

    @property
    def is_public(self) -> bool:
        return self.is_active and self.status == self.Status.PUBLISHED

    def __str__(self):
        return self.title


class Product(models.Model):
    class Type(models.TextChoices):
        TICKET = "ticket", "Ticket"
        MERCHANDISE = "merchandise", "Merchandise"
        ADDON = "addon", "Add-on"
        VENDOR_SPOT = "vendor_spot", "Vendor spot"
        VOLUNTEER_SHIFT = "volunteer_shift", "Volunteer shift"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="products")
    type = models.CharField(max_length=20, choices=Type.choices)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    # None means unlimited
    quantity = models.PositiveIntegerField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["event", "type"], name="product_event_type_idx"),
        ]

    @property
    def requires_registration(self) -> bool:
        return self.type in (self.Type.VENDOR_SPOT, self.Type.VOLUNTEER_SHIFT)

    def __str__(self):
        return f"{self.name} ({self.type})"
