from typing import Iterable, List

from .dtos import EventDTO, ProductDTO
from .models import Event, Product


def _iso(value):
    return value.isoformat() if value is not None else None


class EventMapper:
    @staticmethod
    def to_dto(event: Event) -> EventDTO:
        owner = getattr(event, "owner", None)
        owner_name = ""
        if owner is not None:
            owner_name = getattr(owner, "name", "") or getattr(owner, "username", "")
        return EventDTO(
            id=event.id,
            title=event.title,
            description=event.description,
            location=event.location,
            start_date=_iso(event.start_date),
            end_date=_iso(event.end_date),
            image_url=event.image_url,
            event_type=event.event_type,
            owner_id=event.owner_id,
            owner_name=owner_name,
            is_active=event.is_active,
            status=event.status,
            price=str(event.price),
            created_at=_iso(getattr(event, "created_at", None)),
        )

    @staticmethod
    def many_to_dto(events: Iterable[Event]) -> List[EventDTO]:
        return [EventMapper.to_dto(e) for e in events]


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        event = product.event
        return ProductDTO(
            id=product.id,
            event_id=product.event_id,
            event_title=event.title,
            owner_id=event.owner_id,
            type=product.type,
            name=product.name,
            description=product.description,
            price=str(product.price),
            quantity=product.quantity,
            is_active=product.is_active,
            requires_registration=product.requires_registration,
            available_for_sale=bool(product.is_active and event.is_public),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
