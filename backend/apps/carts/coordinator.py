"""
Session cart and registration sequencing.

``CartSession`` owns the ordered items a visitor intends to buy and decides
which registration form, if any, has to be completed before checkout. It does
no I/O; ``apps.carts.store.SessionCartStore`` loads and saves it.

Vendor spots and volunteer shifts enter the cart ``pending`` and are resolved
one at a time in insertion order::

    cart = CartSession()
    cart.add_item(ticket)
    booth = cart.add_item(vendor_spot)
    cart.get_next_registration_path()      # "/vendor-registration/<booth.id>"
    cart.complete_registration(booth.id, form_data)   # "/checkout"
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Optional

from apps.common import get_logger

logger = get_logger(__name__).bind(component="carts", layer="coordinator")

CHECKOUT_PATH = "/checkout"


class ProductType:
    TICKET = "ticket"
    MERCHANDISE = "merchandise"
    ADDON = "addon"
    VENDOR_SPOT = "vendor_spot"
    VOLUNTEER_SHIFT = "volunteer_shift"

    ALL = (TICKET, MERCHANDISE, ADDON, VENDOR_SPOT, VOLUNTEER_SHIFT)


class RegistrationStatus:
    NOT_REQUIRED = "not_required"
    PENDING = "pending"
    COMPLETE = "complete"


# Product types that need a registration form, keyed to the form kind.
REGISTRATION_KINDS = {
    ProductType.VENDOR_SPOT: "vendor",
    ProductType.VOLUNTEER_SHIFT: "volunteer",
}

_REGISTRATION_ROUTES = {
    "vendor": "/vendor-registration/{item_id}",
    "volunteer": "/volunteer-registration/{item_id}",
}


class InvalidQuantityError(ValueError):
    """Raised for cart quantities that are not positive integers."""


def registration_kind(product_type: str) -> Optional[str]:
    return REGISTRATION_KINDS.get(product_type)


def registration_path(item: "CartItem") -> str:
    kind = registration_kind(item.product.type)
    if kind is None:
        return CHECKOUT_PATH
    return _REGISTRATION_ROUTES[kind].format(item_id=item.id)


def _validate_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(f"Quantity must be a positive integer, got {quantity!r}")
    return quantity


@dataclass(frozen=True)
class ProductRef:
    """Snapshot of the product taken when it was added to the cart."""

    id: int
    event_id: int
    type: str
    name: str
    price: Decimal
    quantity: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "type": self.type,
            "name": self.name,
            "price": str(self.price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ProductRef":
        return cls(
            id=int(raw["id"]),
            event_id=int(raw["event_id"]),
            type=str(raw["type"]),
            name=str(raw.get("name", "")),
            price=Decimal(str(raw["price"])),
            quantity=raw.get("quantity"),
        )


@dataclass
class CartItem:
    id: str
    product: ProductRef
    quantity: int = 1
    registration_status: str = RegistrationStatus.NOT_REQUIRED
    registration_data: Optional[Dict[str, Any]] = None

    @property
    def registration_kind(self) -> Optional[str]:
        return registration_kind(self.product.type)

    @property
    def is_pending(self) -> bool:
        return self.registration_status == RegistrationStatus.PENDING

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "registration_status": self.registration_status,
            "registration_data": self.registration_data,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CartItem":
        return cls(
            id=str(raw["id"]),
            product=ProductRef.from_dict(raw["product"]),
            quantity=_validate_quantity(raw.get("quantity", 1)),
            registration_status=raw.get(
                "registration_status", RegistrationStatus.NOT_REQUIRED
            ),
            registration_data=raw.get("registration_data"),
        )


@dataclass
class CartSession:
    _items: List[CartItem] = field(default_factory=list)

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0"))

    # mutations

    def add_item(self, product: ProductRef, quantity: int = 1) -> CartItem:
        """Append a new entry; adding the same product again creates another entry."""
        quantity = _validate_quantity(quantity)
        status = (
            RegistrationStatus.PENDING
            if product.type in REGISTRATION_KINDS
            else RegistrationStatus.NOT_REQUIRED
        )
        item = CartItem(
            id=uuid.uuid4().hex,
            product=product,
            quantity=quantity,
            registration_status=status,
        )
        self._items.append(item)
        logger.debug(
            "Cart item added",
            item_id=item.id,
            product_id=product.id,
            product_type=product.type,
            status=status,
        )
        return item

    def update_item(self, item_id: str, quantity: int) -> Optional[CartItem]:
        quantity = _validate_quantity(quantity)
        item = self.get_cart_item(item_id)
        if item is None:
            logger.warning("Quantity update for unknown cart item", item_id=item_id)
            return None
        item.quantity = quantity
        return item

    def remove_item(self, item_id: str) -> bool:
        item = self.get_cart_item(item_id)
        if item is None:
            logger.warning("Removal of unknown cart item ignored", item_id=item_id)
            return False
        self._items.remove(item)
        return True

    def clear(self) -> None:
        self._items.clear()

    def set_registration_status(
        self, item_id: str, status: str, data: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Move an item from ``pending`` to ``complete`` and attach ``data``.

        Only call this once the registration has been saved. Completing an
        already complete item replaces its data. Unknown ids and any other
        transition leave the cart untouched and return False.
        """
        item = self.get_cart_item(item_id)
        if item is None:
            logger.warning("Registration status for unknown cart item ignored", item_id=item_id)
            return False
        if status != RegistrationStatus.COMPLETE or item.registration_status not in (
            RegistrationStatus.PENDING,
            RegistrationStatus.COMPLETE,
        ):
            logger.warning(
                "Illegal registration transition ignored",
                item_id=item_id,
                current=item.registration_status,
                requested=status,
            )
            return False
        item.registration_status = RegistrationStatus.COMPLETE
        item.registration_data = dict(data) if data is not None else None
        logger.debug("Cart item registration completed", item_id=item_id)
        return True

    def complete_registration(
        self, item_id: str, data: Optional[Dict[str, Any]] = None
    ) -> Optional[str]:
        """Mark ``item_id`` complete and return where to go next, or None if nothing changed."""
        if not self.set_registration_status(item_id, RegistrationStatus.COMPLETE, data):
            return None
        return self.get_next_registration_path()

    # queries

    def get_cart_item(self, item_id: str) -> Optional[CartItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def get_registration_status(self, item_id: str) -> Optional[str]:
        item = self.get_cart_item(item_id)
        return item.registration_status if item else None

    def pending_items(self, exclude_item_id: Optional[str] = None) -> List[CartItem]:
        return [
            item for item in self._items if item.is_pending and item.id != exclude_item_id
        ]

    def needs_registration(self) -> bool:
        return bool(self.pending_items())

    def needs_registration_excluding(self, item_id: str) -> bool:
        return bool(self.pending_items(exclude_item_id=item_id))

    def get_next_registration_path(self) -> str:
        pending = self.pending_items()
        return registration_path(pending[0]) if pending else CHECKOUT_PATH

    def get_next_registration_path_excluding(self, item_id: str) -> str:
        pending = self.pending_items(exclude_item_id=item_id)
        return registration_path(pending[0]) if pending else CHECKOUT_PATH

    def has_item_of_type(self, product_type: str) -> bool:
        return any(item.product.type == product_type for item in self._items)

    def has_registration_type(self, kind: str) -> bool:
        return any(item.registration_kind == kind for item in self._items)

    def reusable_registration_data(
        self, kind: str, exclude_item_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Latest completed registration payload of ``kind``, used to pre-fill the next form."""
        for item in reversed(self._items):
            if (
                item.id != exclude_item_id
                and item.registration_kind == kind
                and item.registration_status == RegistrationStatus.COMPLETE
                and item.registration_data
            ):
                return dict(item.registration_data)
        return None

    # storage

    def to_dict(self) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self._items]}

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "CartSession":
        items: List[CartItem] = []
        for entry in (raw or {}).get("items", []):
            try:
                items.append(CartItem.from_dict(entry))
            except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
                logger.warning("Dropping malformed cart entry", error=str(exc))
        return cls(items)
