from rest_framework import serializers

from apps.events.models import Product
from apps.orders.models import Order, Ticket
from .models import AdminNote


class StatsSerializer(serializers.Serializer):
    totalUsers = serializers.IntegerField(source="total_users")
    activeEvents = serializers.IntegerField(source="active_events")
    monthlyRevenue = serializers.CharField(source="monthly_revenue")
    ticketsSoldThisMonth = serializers.IntegerField(source="tickets_sold_this_month")
    recentEvents = serializers.ListField(child=serializers.DictField(), source="recent_events")
    recentOrders = serializers.ListField(child=serializers.DictField(), source="recent_orders")


class TransactionQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    userId = serializers.IntegerField(required=False, min_value=1)
    eventId = serializers.IntegerField(required=False, min_value=1)
    transactionType = serializers.ChoiceField(
        choices=Product.Type.choices, required=False
    )
    status = serializers.ChoiceField(choices=Order.PaymentStatus.choices, required=False)
    startDate = serializers.DateField(required=False)
    endDate = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("startDate"), attrs.get("endDate")
        if start and end and start > end:
            raise serializers.ValidationError({"endDate": "endDate must not be before startDate"})
        return attrs


class TransactionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField(source="order_number")
    createdAt = serializers.CharField(source="created_at", allow_null=True)
    userId = serializers.IntegerField(source="user_id")
    userName = serializers.CharField(source="user_name")
    userEmail = serializers.CharField(source="user_email")
    eventId = serializers.IntegerField(source="event_id", allow_null=True)
    eventTitle = serializers.CharField(source="event_title", allow_null=True)
    transactionType = serializers.CharField(source="transaction_type")
    productName = serializers.CharField(source="product_name")
    quantity = serializers.IntegerField()
    amount = serializers.CharField()
    paymentStatus = serializers.CharField(source="payment_status")


class TicketStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Ticket.Status.choices)


class PaymentStatusUpdateSerializer(serializers.Serializer):
    paymentStatus = serializers.ChoiceField(choices=Order.PaymentStatus.choices)


class AdminNoteQuerySerializer(serializers.Serializer):
    targetType = serializers.ChoiceField(choices=AdminNote.TargetType.choices)
    targetId = serializers.IntegerField(min_value=1)


class AdminNoteWriteSerializer(AdminNoteQuerySerializer):
    content = serializers.CharField(max_length=5000)


class AdminNoteSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    targetType = serializers.CharField(source="target_type")
    targetId = serializers.IntegerField(source="target_id")
    content = serializers.CharField()
    authorId = serializers.IntegerField(source="author_id", allow_null=True)
    authorName = serializers.CharField(source="author_name")
    createdAt = serializers.CharField(source="created_at", allow_null=True)
