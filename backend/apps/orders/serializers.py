from rest_framework import serializers


class CheckoutResponseSerializer(serializers.Serializer):
    orderNumber = serializers.CharField(source="order_number")
    checkoutUrl = serializers.CharField(source="checkout_url")
    totalAmount = serializers.CharField(source="total_amount")
    paymentStatus = serializers.CharField(source="payment_status")


class OrderItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    productId = serializers.IntegerField(source="product_id", allow_null=True)
    eventId = serializers.IntegerField(source="event_id", allow_null=True)
    type = serializers.CharField(source="product_type")
    name = serializers.CharField(source="product_name")
    price = serializers.CharField(source="unit_price")
    quantity = serializers.IntegerField()
    subtotal = serializers.CharField()
    registrationData = serializers.DictField(source="registration_data", allow_null=True)


class TicketReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    ticketNumber = serializers.CharField(source="ticket_number")
    orderNumber = serializers.CharField(source="order_number")
    eventId = serializers.IntegerField(source="event_id", allow_null=True)
    eventTitle = serializers.CharField(source="event_title", allow_null=True)
    eventStart = serializers.CharField(source="event_start", allow_null=True)
    productName = serializers.CharField(source="product_name")
    status = serializers.CharField()
    issuedAt = serializers.CharField(source="issued_at", allow_null=True)


class OrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField(source="order_number")
    userId = serializers.IntegerField(source="user_id")
    totalAmount = serializers.CharField(source="total_amount")
    currency = serializers.CharField()
    status = serializers.CharField()
    paymentStatus = serializers.CharField(source="payment_status")
    createdAt = serializers.CharField(source="created_at", allow_null=True)
    paidAt = serializers.CharField(source="paid_at", allow_null=True)
    oversold = serializers.BooleanField()
    items = OrderItemReadSerializer(many=True)
    tickets = TicketReadSerializer(many=True)
