from typing import Optional

from django.db.models import F, Q
from django.utils import timezone

from apps.common.repository import GenericRepository
from .commands import EventListQuery
from .models import Event, Product

_EVENT_ORDERING = {
    "date": ("start_date", "id"),
    "date_desc": ("-start_date", "-id"),
    "price": ("price", "start_date"),
    "title": ("title", "id"),
}


class EventRepository(GenericRepository[Event]):
    def __init__(self):
        super().__init__(Event)

    def _base_queryset(self):
        return self.model.objects.select_related("owner")

    def get(self, **filters):
        return self._base_queryset().filter(**filters).first()

    def search(self, query: EventListQuery, *, public_only: bool = True):
        qs = self._base_queryset()
        if public_only:
            qs = qs.filter(is_active=True, status=Event.Status.PUBLISHED)
        if query.event_type:
            qs = qs.filter(event_type__iexact=query.event_type)
        if query.location:
            qs = qs.filter(location__icontains=query.location)
        if query.search:
            qs = qs.filter(
                Q(title__icontains=query.search)
                | Q(description__icontains=query.search)
                | Q(location__icontains=query.search)
            )
        if query.is_upcoming is True:
            qs = qs.filter(start_date__gte=timezone.now())
        elif query.is_upcoming is False:
            qs = qs.filter(start_date__lt=timezone.now())
        return qs.order_by(*_EVENT_ORDERING.get(query.sort_by, _EVENT_ORDERING["date"]))

    def for_owner(self, owner_id: int):
        return self._base_queryset().filter(owner_id=owner_id).order_by("-start_date")


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def _base_queryset(self):
        return self.model.objects.select_related("event")

    def get(self, **filters):
        return self._base_queryset().filter(**filters).first()

    def list(self, **filters):  # type: ignore[override]
        return self._base_queryset().filter(**filters)

    def list_for_event(
        self, event_id: int, *, product_type: Optional[str] = None, active_only: bool = True
    ):
        qs = self._base_queryset().filter(event_id=event_id)
        if product_type:
            qs = qs.filter(type=product_type)
        if active_only:
            qs = qs.filter(is_active=True)
        return qs.order_by("id")

    def decrement_quantity(self, product_id: int, amount: int) -> bool:
        """Atomically take ``amount`` units; unlimited products always succeed."""
        product = self.model.objects.filter(id=product_id).only("quantity").first()
        if product is None:
            return False
        if product.quantity is None:
            return True
        updated = self.model.objects.filter(
            id=product_id, quantity__gte=amount
        ).update(quantity=F("quantity") - amount)
        return bool(updated)
