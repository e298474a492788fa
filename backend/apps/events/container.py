from __future__ import annotations

from django.core.cache import cache

from .repositories import EventRepository, ProductRepository
from .services import EventService, ProductService


def build_event_service(*, disable_cache: bool = False) -> EventService:
    return EventService(
        events=EventRepository(),
        cache_backend=cache,
        disable_cache=disable_cache,
    )


def build_product_service() -> ProductService:
    return ProductService(products=ProductRepository(), events=EventRepository())
