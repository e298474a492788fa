from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.coordinator import CartSession
    from apps.events.dtos import ProductDTO
    from .models import Order, Ticket


class OrderRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Order"]: ...

    def for_user(self, user_id: int) -> Iterable["Order"]: ...

    def create_with_items(self, *, items: List[Dict[str, Any]], **fields) -> "Order": ...

    def lock_by_session(self, session_id: str) -> Optional["Order"]: ...

    def update(self, obj: "Order", **data) -> "Order": ...


class TicketRepositoryProtocol(Protocol):
    def create(self, **data) -> "Ticket": ...

    def for_user(self, user_id: int) -> Iterable["Ticket"]: ...

    def number_taken(self, ticket_number: str) -> bool: ...


class CheckoutCatalogProtocol(Protocol):
    def get_product(self, product_id: int) -> Optional["ProductDTO"]: ...

    def ensure_slots(self, product_id: int, requested: int) -> None: ...

    def decrease_product_quantity(self, product_id: int, amount: int) -> bool: ...


class CheckoutGuardProtocol(Protocol):
    def ensure_ready_for_checkout(self, cart: "CartSession") -> None: ...


class PaymentGatewayProtocol(Protocol):
    def create_checkout_session(
        self,
        *,
        order_number: str,
        line_items: Iterable[Dict[str, Any]],
        customer_email: Optional[str] = None,
        destination_account: Optional[str] = None,
    ) -> Any: ...

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Any: ...


class UserLookupProtocol(Protocol):
    def get(self, **filters) -> Any: ...


class OrderNotesProtocol(Protocol):
    def add_note(
        self, target_type: str, target_id: int, content: str, *, author_id: Optional[int]
    ) -> Any: ...
