from rest_framework import serializers

from .commands import EVENT_SORT_OPTIONS
from .ical import DEFAULT_REMINDER_MINUTES, MAX_REMINDER_MINUTES, MAX_REMINDERS
from .models import Event, Product


class EventReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    startDate = serializers.CharField(source="start_date")
    endDate = serializers.CharField(source="end_date")
    imageUrl = serializers.CharField(source="image_url", allow_null=True)
    eventType = serializers.CharField(source="event_type")
    ownerId = serializers.IntegerField(source="owner_id")
    ownerName = serializers.CharField(source="owner_name")
    isActive = serializers.BooleanField(source="is_active")
    status = serializers.CharField()
    price = serializers.CharField()
    createdAt = serializers.CharField(source="created_at", allow_null=True)


class EventWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    location = serializers.CharField(max_length=255)
    startDate = serializers.DateTimeField(source="start_date")
    endDate = serializers.DateTimeField(source="end_date")
    imageUrl = serializers.CharField(
        source="image_url", required=False, allow_blank=True, allow_null=True
    )
    eventType = serializers.CharField(source="event_type", max_length=100)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    isActive = serializers.BooleanField(source="is_active", required=False)
    status = serializers.ChoiceField(choices=Event.Status.choices, required=False)

    def validate(self, attrs):
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError({"endDate": "End date must not be before start date."})
        return attrs


class EventListQuerySerializer(serializers.Serializer):
    type = serializers.CharField(required=False)
    location = serializers.CharField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    sortBy = serializers.ChoiceField(choices=EVENT_SORT_OPTIONS, required=False)
    isUpcoming = serializers.BooleanField(required=False, allow_null=True, default=None)



class EventCalendarQuerySerializer(serializers.Serializer):
    reminders = serializers.CharField(required=False, allow_blank=True)

    def validate_reminders(self, value: str):
        """Comma-separated minutes before the start, e.g. ``15,60,1440``."""
        parts = [p.strip() for p in value.split(",") if p.strip()]
        if not parts:
            return list(DEFAULT_REMINDER_MINUTES)
        if len(parts) > MAX_REMINDERS:
            raise serializers.ValidationError(f"At most {MAX_REMINDERS} reminders are allowed.")
        minutes = set()
        for part in parts:
            if not part.isdigit() or not 0 < int(part) <= MAX_REMINDER_MINUTES:
                raise serializers.ValidationError(
                    f"Reminders must be whole minutes between 1 and {MAX_REMINDER_MINUTES}."
                )
            minutes.add(int(part))
        return sorted(minutes)


class ProductReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    eventId = serializers.IntegerField(source="event_id")
    eventTitle = serializers.CharField(source="event_title")
    type = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    price = serializers.CharField()
    quantity = serializers.IntegerField(allow_null=True)
    isActive = serializers.BooleanField(source="is_active")
    requiresRegistration = serializers.BooleanField(source="requires_registration")
    availableForSale = serializers.BooleanField(source="available_for_sale")


class ProductWriteSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Product.Type.choices)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    isActive = serializers.BooleanField(source="is_active", required=False)


class ProductUpdateSerializer(ProductWriteSerializer):
    # Product type is fixed once created.
    type = None
