from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from .commands import EventListQuery
    from .models import Event, Product


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> Any: ...


class EventRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Event"]: ...

    def create(self, **data) -> "Event": ...

    def update_scalar(self, obj: "Event", **fields) -> "Event": ...

    def delete(self, obj: "Event") -> None: ...

    def search(self, query: "EventListQuery", *, public_only: bool = True) -> Iterable["Event"]: ...

    def for_owner(self, owner_id: int) -> Iterable["Event"]: ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]: ...

    def create(self, **data) -> "Product": ...

    def update(self, obj: "Product", **data) -> "Product": ...

    def update_scalar(self, obj: "Product", **fields) -> "Product": ...

    def delete(self, obj: "Product") -> None: ...

    def list_for_event(
        self, event_id: int, *, product_type: Optional[str] = None, active_only: bool = True
    ) -> Iterable["Product"]: ...

    def decrement_quantity(self, product_id: int, amount: int) -> bool: ...
