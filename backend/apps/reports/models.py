from django.db import models
from django.utils import timezone

from apps.users.models import User


class AdminNote(models.Model):
    class TargetType(models.TextChoices):
        USER = "user", "User"
        EVENT = "event", "Event"
        ORDER = "order", "Order"
        TICKET = "ticket", "Ticket"

    # Null for notes written by the system itself.
    author = models.ForeignKey(
        User, on_delete=models.PROTECT, related_name="admin_notes", null=True, blank=True
    )
    target_type = models.CharField(max_length=20, choices=TargetType.choices)
    target_id = models.PositiveIntegerField()
    content = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["target_type", "target_id"], name="admin_note_target_idx"),
        ]

    def __str__(self):
        return f"{self.target_type}:{self.target_id}"
