from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Protocol


class ProfileRepositoryProtocol(Protocol):
    def for_user(self, user_id: int) -> Optional[Any]: ...

    def save_for_user(self, user_id: int, fields: Dict[str, Any]) -> Any: ...


class RegistrationRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Any]: ...

    def upsert_for_cart_item(
        self, user_id: int, cart_item_id: str, fields: Dict[str, Any]
    ) -> Any: ...

    def for_event(self, event_id: int, *, status: Optional[str] = None) -> Iterable[Any]: ...

    def update(self, obj: Any, **data) -> Any: ...


class ProductLookupProtocol(Protocol):
    def get(self, **filters) -> Optional[Any]: ...


class EventLookupProtocol(Protocol):
    def get(self, **filters) -> Optional[Any]: ...
