from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.events.dtos import ProductDTO
    from apps.registrations.dtos import RegistrationDTO
    from .coordinator import CartSession


class CartStoreProtocol(Protocol):
    def load(self) -> "CartSession": ...

    def save(self, cart: "CartSession") -> None: ...

    def clear(self) -> None: ...


class ProductCatalogProtocol(Protocol):
    def get_product(self, product_id: int) -> Optional["ProductDTO"]: ...

    def ensure_slots(self, product_id: int, requested: int) -> None: ...


class RegistrationGatewayProtocol(Protocol):
    def prefill(
        self, kind: str, user: Any, *, reusable: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]: ...

    def submit(
        self,
        kind: str,
        user_id: int,
        *,
        product_id: int,
        cart_item_id: str,
        data: Dict[str, Any],
    ) -> Tuple[Optional["RegistrationDTO"], Optional[Tuple[str, str, Any]]]: ...
