from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

from django.db.models import Q, Sum

from apps.common.repository import GenericRepository
from apps.events.models import Event
from apps.orders.models import Order, OrderItem, Ticket
from apps.users.models import User
from .commands import TransactionQuery
from .models import AdminNote

UNSOLD_TICKET_STATUSES = (Ticket.Status.CANCELLED, Ticket.Status.REFUNDED)


class StatsRepository:
    def total_users(self) -> int:
        return User.objects.count()

    def active_events(self) -> int:
        return Event.objects.filter(is_active=True, status=Event.Status.PUBLISHED).count()

    def revenue_since(self, start: datetime) -> Decimal:
        total = Order.objects.filter(
            payment_status=Order.PaymentStatus.PAID, paid_at__gte=start
        ).aggregate(total=Sum("total_amount"))["total"]
        return total or Decimal("0")

    def tickets_issued_since(self, start: datetime) -> int:
        return (
            Ticket.objects.filter(issued_at__gte=start)
            .exclude(status__in=UNSOLD_TICKET_STATUSES)
            .count()
        )

    def recent_events(self, limit: int) -> List[Event]:
        return list(Event.objects.order_by("-created_at", "-id")[:limit])

    def recent_orders(self, limit: int) -> List[Order]:
        return list(Order.objects.select_related("user").order_by("-created_at", "-id")[:limit])


class TransactionRepository(GenericRepository[OrderItem]):
    def __init__(self):
        super().__init__(OrderItem)

    def search(self, query: TransactionQuery) -> Iterable[OrderItem]:
        qs = self.model.objects.select_related("order", "order__user", "event")
        if query.search:
            term = query.search
            qs = qs.filter(
                Q(order__order_number__icontains=term)
                | Q(order__user__name__icontains=term)
                | Q(order__user__username__icontains=term)
                | Q(order__user__email__icontains=term)
                | Q(event__title__icontains=term)
                | Q(product_name__icontains=term)
            )
        if query.user_id is not None:
            qs = qs.filter(order__user_id=query.user_id)
        if query.event_id is not None:
            qs = qs.filter(event_id=query.event_id)
        if query.transaction_type:
            qs = qs.filter(product_type=query.transaction_type)
        if query.status:
            qs = qs.filter(order__payment_status=query.status)
        if query.start_date:
            qs = qs.filter(order__created_at__date__gte=query.start_date)
        if query.end_date:
            qs = qs.filter(order__created_at__date__lte=query.end_date)
        return qs.order_by("-order__created_at", "-id")


class AdminNoteRepository(GenericRepository[AdminNote]):
    def __init__(self):
        super().__init__(AdminNote)

    def for_target(self, target_type: str, target_id: int) -> Iterable[AdminNote]:
        return self.model.objects.select_related("author").filter(
            target_type=target_type, target_id=target_id
        )

    def create(self, **data) -> AdminNote:
        note = super().create(**data)
        return self.model.objects.select_related("author").get(pk=note.pk)
