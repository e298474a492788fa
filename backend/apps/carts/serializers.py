from rest_framework import serializers

from apps.registrations.serializers import RegistrationReadSerializer


class CartItemReadSerializer(serializers.Serializer):
    id = serializers.CharField()
    productId = serializers.IntegerField(source="product_id")
    eventId = serializers.IntegerField(source="event_id")
    type = serializers.CharField(source="product_type")
    name = serializers.CharField(source="product_name")
    price = serializers.CharField(source="unit_price")
    quantity = serializers.IntegerField()
    subtotal = serializers.CharField()
    registrationStatus = serializers.CharField(source="registration_status")
    registrationKind = serializers.CharField(source="registration_kind", allow_null=True)
    registrationPath = serializers.CharField(source="registration_path", allow_null=True)
    registrationData = serializers.DictField(source="registration_data", allow_null=True)


class CartReadSerializer(serializers.Serializer):
    items = CartItemReadSerializer(many=True)
    itemCount = serializers.IntegerField(source="item_count")
    total = serializers.CharField()
    needsRegistration = serializers.BooleanField(source="needs_registration")
    nextPath = serializers.CharField(source="next_path")


class CartItemAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class CartItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)


class CartItemAddedSerializer(serializers.Serializer):
    item = CartItemReadSerializer()
    cart = CartReadSerializer()


class CartNextStepSerializer(serializers.Serializer):
    needsRegistration = serializers.BooleanField(source="needs_registration")
    nextPath = serializers.CharField(source="next_path")
    pendingItemIds = serializers.ListField(child=serializers.CharField(), source="pending_item_ids")


class RegistrationFormSerializer(serializers.Serializer):
    item = CartItemReadSerializer()
    kind = serializers.CharField()
    prefill = serializers.DictField()


class RegistrationSubmittedSerializer(serializers.Serializer):
    registration = RegistrationReadSerializer()
    nextPath = serializers.CharField(source="next_path", allow_null=True)
    needsRegistration = serializers.BooleanField(source="needs_registration")
    cart = CartReadSerializer()
