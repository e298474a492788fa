from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from apps.api.exceptions import ConflictError, NotFoundError
from apps.common import get_logger
from .commands import (
    EventCreateCommand,
    EventListQuery,
    EventUpdateCommand,
    ProductCreateCommand,
    ProductUpdateCommand,
)
from .dtos import EventDTO, ProductDTO
from .ical import DEFAULT_REMINDER_MINUTES, build_event_calendar, calendar_filename
from .mappers import EventMapper, ProductMapper
from .protocols import (
    CacheBackendProtocol,
    EventRepositoryProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="events", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class EventNotFoundError(NotFoundError):
    default_message = "Event not found"


class ProductNotFoundError(NotFoundError):
    default_message = "Product not found"


class SlotUnavailableError(ConflictError):
    default_code = "SLOT_UNAVAILABLE"
    default_message = "Not enough availability for this product"


def _can_manage(owner_id: int, actor_id: Optional[int], is_privileged: bool) -> bool:
    return is_privileged or (actor_id is not None and owner_id == actor_id)


class EventService:
    def __init__(
        self,
        events: EventRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
    ):
        self.events = events
        self.cache = cache_backend
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="EventService")
        self._cache_prefix = "events:list"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    def _get_cache_version(self) -> int:
        return self.cache.get(self._cache_version_key) or self._default_version

    def _bump_cache_version(self) -> None:
        version = self._get_cache_version() + 1
        # The version key itself never expires.
        self.cache.set(self._cache_version_key, version, timeout=None)
        self.logger.debug("Bumped event cache version", new_version=version)

    def _cache_key(self, query: EventListQuery) -> str:
        return f"{self._cache_prefix}:v{self._get_cache_version()}:{query.cache_token()}"

    def list_events(self, query: Union[EventListQuery, Dict[str, Any], None] = None) -> List[EventDTO]:
        """Public listing: active, published events matching the filters."""
        if not isinstance(query, EventListQuery):
            query = EventListQuery.from_raw(query or {})
        self.logger.debug(
            "Listing events",
            filters=query.cache_token(),
            cache_enabled=not self.disable_cache,
        )
        if self.disable_cache:
            return EventMapper.many_to_dto(self.events.search(query))
        key = self._cache_key(query)
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Event list cache hit", cache_key=key)
            return cached
        self.logger.debug("Event list cache miss", cache_key=key)
        data = EventMapper.many_to_dto(self.events.search(query))
        self.cache.set(key, data)
        return data

    def list_owner_events(self, owner_id: int) -> List[EventDTO]:
        self.logger.debug("Listing owner events", owner_id=owner_id)
        return EventMapper.many_to_dto(self.events.for_owner(owner_id))

    def get_event(
        self,
        event_id: int,
        *,
        actor_id: Optional[int] = None,
        is_privileged: bool = False,
    ) -> Optional[EventDTO]:
        event = self._visible_event(event_id, actor_id, is_privileged)
        return EventMapper.to_dto(event) if event else None

    def _visible_event(self, event_id: int, actor_id: Optional[int], is_privileged: bool):
        """Unpublished or inactive events are only visible to their owner and admins."""
        event = self.events.get(id=event_id)
        if not event:
            self.logger.info("Event not found", event_id=event_id)
            return None
        if not event.is_public and not _can_manage(event.owner_id, actor_id, is_privileged):
            self.logger.info("Hidden event requested", event_id=event_id, actor_id=actor_id)
            return None
        return event

    def export_calendar(
        self,
        event_id: int,
        reminders: Sequence[int] = DEFAULT_REMINDER_MINUTES,
        *,
        actor_id: Optional[int] = None,
        is_privileged: bool = False,
    ) -> Optional[Tuple[str, bytes]]:
        """Return ``(filename, ics bytes)`` for a visible event, else None."""
        event = self._visible_event(event_id, actor_id, is_privileged)
        if not event:
            return None
        self.logger.debug("Calendar export", event_id=event_id, reminders=list(reminders))
        return calendar_filename(event.title), build_event_calendar(event, reminders)

    def create_event(
        self, data: Union[Dict[str, Any], EventCreateCommand], *, owner_id: int
    ) -> Tuple[Optional[EventDTO], Optional[ErrorTuple]]:
        cmd = data if isinstance(data, EventCreateCommand) else EventCreateCommand.from_raw(data)
        if cmd.end_date and cmd.start_date and cmd.end_date < cmd.start_date:
            return None, (
                "VALIDATION_ERROR",
                "End date must not be before start date",
                {"end_date": str(cmd.end_date)},
            )
        self.logger.info("Creating event", title=cmd.title, owner_id=owner_id)
        event = self.events.create(
            title=cmd.title,
            description=cmd.description,
            location=cmd.location,
            start_date=cmd.start_date,
            end_date=cmd.end_date,
            event_type=cmd.event_type,
            image_url=cmd.image_url,
            price=cmd.price,
            is_active=cmd.is_active,
            status=cmd.status,
            owner_id=owner_id,
        )
        self._bump_cache_version()
        self.logger.info("Event created", event_id=event.id)
        return EventMapper.to_dto(event), None

    def update_event(
        self,
        event_id: int,
        data: Union[Dict[str, Any], EventUpdateCommand],
        *,
        partial: bool = False,
        actor_id: Optional[int],
        is_privileged: bool = False,
    ) -> Tuple[Optional[EventDTO], Optional[ErrorTuple]]:
        cmd = (
            data
            if isinstance(data, EventUpdateCommand)
            else EventUpdateCommand.from_raw(event_id, data, partial)
        )
        event = self.events.get(id=event_id)
        if not event:
            self.logger.warning("Event update failed: not found", event_id=event_id)
            return None, ("NOT_FOUND", "Event not found", {"id": str(event_id)})
        if not _can_manage(event.owner_id, actor_id, is_privileged):
            self.logger.warning(
                "Event update forbidden", event_id=event_id, actor_id=actor_id
            )
            return None, ("FORBIDDEN", "You can only modify your own events", None)
        start = cmd.start_date or event.start_date
        end = cmd.end_date or event.end_date
        if start and end and end < start:
            return None, (
                "VALIDATION_ERROR",
                "End date must not be before start date",
                {"end_date": str(end)},
            )
        self.events.update_scalar(event, **cmd.changes())
        self._bump_cache_version()
        self.logger.info("Event updated", event_id=event_id, partial=partial)
        return EventMapper.to_dto(event), None

    def delete_event(
        self, event_id: int, *, actor_id: Optional[int], is_privileged: bool = False
    ) -> Tuple[bool, Optional[ErrorTuple]]:
        event = self.events.get(id=event_id)
        if not event:
            self.logger.warning("Event deletion failed: not found", event_id=event_id)
            return False, ("NOT_FOUND", "Event not found", {"id": str(event_id)})
        if not _can_manage(event.owner_id, actor_id, is_privileged):
            self.logger.warning(
                "Event deletion forbidden", event_id=event_id, actor_id=actor_id
            )
            return False, ("FORBIDDEN", "You can only delete your own events", None)
        self.events.delete(event)
        self._bump_cache_version()
        self.logger.info("Event deleted", event_id=event_id, actor_id=actor_id)
        return True, None


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        events: EventRepositoryProtocol,
    ):
        self.products = products
        self.events = events
        self.logger = logger.bind(service="ProductService")

    def list_event_products(
        self,
        event_id: int,
        *,
        product_type: Optional[str] = None,
        actor_id: Optional[int] = None,
        is_privileged: bool = False,
    ) -> Tuple[Optional[List[ProductDTO]], Optional[ErrorTuple]]:
        event = self.events.get(id=event_id)
        manages = bool(event) and _can_manage(event.owner_id, actor_id, is_privileged)
        if not event or (not event.is_public and not manages):
            self.logger.info("Product listing for unknown event", event_id=event_id)
            return None, ("NOT_FOUND", "Event not found", {"id": str(event_id)})
        qs = self.products.list_for_event(
            event_id, product_type=product_type, active_only=not manages
        )
        return ProductMapper.many_to_dto(qs), None

    def get_product(self, product_id: int) -> Optional[ProductDTO]:
        product = self.products.get(id=product_id)
        if not product:
            self.logger.info("Product not found", product_id=product_id)
            return None
        return ProductMapper.to_dto(product)

    def require_product(self, product_id: int) -> ProductDTO:
        dto = self.get_product(product_id)
        if dto is None:
            raise ProductNotFoundError(details={"id": str(product_id)})
        return dto

    def create_product(
        self,
        event_id: int,
        data: Union[Dict[str, Any], ProductCreateCommand],
        *,
        actor_id: Optional[int],
        is_privileged: bool = False,
    ) -> Tuple[Optional[ProductDTO], Optional[ErrorTuple]]:
        cmd = (
            data
            if isinstance(data, ProductCreateCommand)
            else ProductCreateCommand.from_raw(event_id, data)
        )
        event = self.events.get(id=event_id)
        if not event:
            return None, ("NOT_FOUND", "Event not found", {"id": str(event_id)})
        if not _can_manage(event.owner_id, actor_id, is_privileged):
            self.logger.warning(
                "Product creation forbidden", event_id=event_id, actor_id=actor_id
            )
            return None, ("FORBIDDEN", "You can only add products to your own events", None)
        product = self.products.create(
            event=event,
            type=cmd.type,
            name=cmd.name,
            description=cmd.description,
            price=cmd.price,
            quantity=cmd.quantity,
            is_active=cmd.is_active,
        )
        self.logger.info(
            "Product created", product_id=product.id, event_id=event_id, type=cmd.type
        )
        return ProductMapper.to_dto(product), None

    def update_product(
        self,
        product_id: int,
        data: Union[Dict[str, Any], ProductUpdateCommand],
        *,
        partial: bool = False,
        actor_id: Optional[int],
        is_privileged: bool = False,
    ) -> Tuple[Optional[ProductDTO], Optional[ErrorTuple]]:
        cmd = (
            data
            if isinstance(data, ProductUpdateCommand)
            else ProductUpdateCommand.from_raw(product_id, data, partial)
        )
        product = self.products.get(id=product_id)
        if not product:
            return None, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        if not _can_manage(product.event.owner_id, actor_id, is_privileged):
            self.logger.warning(
                "Product update forbidden", product_id=product_id, actor_id=actor_id
            )
            return None, ("FORBIDDEN", "You can only modify products of your own events", None)
        changes = {
            key: value
            for key, value in (
                ("name", cmd.name),
                ("description", cmd.description),
                ("price", cmd.price),
                ("quantity", cmd.quantity),
                ("is_active", cmd.is_active),
            )
            if value is not None
        }
        if cmd.clear_quantity:
            changes["quantity"] = None
        if changes:
            self.products.update(product, **changes)
        self.logger.info("Product updated", product_id=product_id, partial=partial)
        return ProductMapper.to_dto(product), None

    def delete_product(
        self, product_id: int, *, actor_id: Optional[int], is_privileged: bool = False
    ) -> Tuple[bool, Optional[ErrorTuple]]:
        product = self.products.get(id=product_id)
        if not product:
            return False, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        if not _can_manage(product.event.owner_id, actor_id, is_privileged):
            return False, ("FORBIDDEN", "You can only delete products of your own events", None)
        self.products.delete(product)
        self.logger.info("Product deleted", product_id=product_id, actor_id=actor_id)
        return True, None

    def check_slot_availability(self, product_id: int, requested: int) -> Tuple[bool, Optional[int]]:
        """Return ``(available, remaining)``; ``remaining`` is None for unlimited stock."""
        product = self.products.get(id=product_id)
        if not product:
            raise ProductNotFoundError(details={"id": str(product_id)})
        if product.quantity is None:
            return True, None
        available = product.quantity >= requested
        if not available:
            self.logger.info(
                "Insufficient availability",
                product_id=product_id,
                requested=requested,
                remaining=product.quantity,
            )
        return available, product.quantity

    def ensure_slots(self, product_id: int, requested: int) -> None:
        available, remaining = self.check_slot_availability(product_id, requested)
        if not available:
            raise SlotUnavailableError(
                details={"productId": product_id, "requested": requested, "remaining": remaining}
            )

    def decrease_product_quantity(self, product_id: int, amount: int) -> bool:
        """Take stock after a successful payment; False when stock ran out meanwhile."""
        ok = self.products.decrement_quantity(product_id, amount)
        if ok:
            self.logger.info("Product stock decreased", product_id=product_id, amount=amount)
        else:
            self.logger.warning(
                "Product stock could not be decreased", product_id=product_id, amount=amount
            )
        return ok
