from typing import Any, Dict, Iterable, List, Optional

from apps.common.repository import GenericRepository
from .models import Order, OrderItem, Ticket


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def _base_queryset(self):
        return self.model.objects.select_related("user").prefetch_related(
            "items", "tickets__event", "tickets__order_item"
        )

    def get(self, **filters) -> Optional[Order]:
        return self._base_queryset().filter(**filters).first()

    def for_user(self, user_id: int) -> Iterable[Order]:
        return self._base_queryset().filter(user_id=user_id)

    def create_with_items(self, *, items: List[Dict[str, Any]], **fields) -> Order:
        order = self.model.objects.create(**fields)
        OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in items])
        return order

    def lock_by_session(self, session_id: str) -> Optional[Order]:
        """Row-locked lookup; callers must be inside a transaction."""
        return (
            self.model.objects.select_for_update()
            .filter(stripe_session_id=session_id)
            .first()
        )


class TicketRepository(GenericRepository[Ticket]):
    def __init__(self):
        super().__init__(Ticket)

    def _base_queryset(self):
        return self.model.objects.select_related("event", "order", "order_item")

    def get(self, **filters) -> Optional[Ticket]:
        return self._base_queryset().filter(**filters).first()

    def for_user(self, user_id: int) -> Iterable[Ticket]:
        return self._base_queryset().filter(user_id=user_id)

    def number_taken(self, ticket_number: str) -> bool:
        return self.model.objects.filter(ticket_number=ticket_number).exists()

    def set_status_for_order(self, order_id: int, *, from_status: str, to_status: str) -> int:
        return self.model.objects.filter(order_id=order_id, status=from_status).update(
            status=to_status
        )
