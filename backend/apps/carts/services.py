from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from apps.api.exceptions import ApplicationError, DomainValidationError, NotFoundError
from apps.common import get_logger
from .coordinator import CHECKOUT_PATH, CartSession, InvalidQuantityError, ProductRef
from .dtos import CartDTO, CartItemDTO
from .mappers import CartMapper
from .protocols import (
    CartStoreProtocol,
    ProductCatalogProtocol,
    RegistrationGatewayProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")


class ItemNotFound(NotFoundError):
    default_message = "Cart item not found"

    def __init__(self, item_id: str):
        super().__init__(
            details={"itemId": item_id},
            hint="The item is no longer in your cart.",
            extra={"redirect": "/"},
        )


class RegistrationSaveFailed(DomainValidationError):
    default_message = "Registration could not be saved"


class RegistrationRequired(ApplicationError):
    default_code = "REGISTRATION_REQUIRED"
    default_message = "Complete the pending registrations before checkout"

    def __init__(self, next_path: str, pending_item_ids=None):
        super().__init__(
            details={"pendingItemIds": list(pending_item_ids or [])},
            hint="Fill in the registration form for each vendor spot or volunteer shift.",
            extra={"nextPath": next_path},
        )


class RegistrationNotApplicable(DomainValidationError):
    default_message = "This item does not require registration"


class CartService:
    def __init__(
        self,
        products: ProductCatalogProtocol,
        registrations: RegistrationGatewayProtocol,
    ):
        self.products = products
        self.registrations = registrations
        self.logger = logger.bind(service="CartService")

    def _reserved(self, cart: CartSession, product_id: int, exclude_item_id: Optional[str] = None) -> int:
        return sum(
            item.quantity
            for item in cart
            if item.product.id == product_id and item.id != exclude_item_id
        )

    def _require_item(self, cart: CartSession, item_id: str):
        item = cart.get_cart_item(item_id)
        if item is None:
            self.logger.info("Cart item missing", item_id=item_id)
            raise ItemNotFound(item_id)
        return item

    def get_cart(self, store: CartStoreProtocol) -> CartDTO:
        return CartMapper.to_dto(store.load())

    def add_item(self, store: CartStoreProtocol, product_id: int, quantity: int = 1) -> CartItemDTO:
        product = self.products.get_product(product_id)
        if product is None:
            raise NotFoundError("NOT_FOUND", "Product not found", details={"productId": product_id})
        if not product.available_for_sale:
            self.logger.info("Rejected unavailable product", product_id=product_id)
            raise DomainValidationError(
                message="This product is not available for purchase",
                details={"productId": product_id},
            )
        cart = store.load()
        self.products.ensure_slots(product_id, self._reserved(cart, product_id) + quantity)
        ref = ProductRef(
            id=product.id,
            event_id=product.event_id,
            type=product.type,
            name=product.name,
            price=Decimal(product.price),
            quantity=product.quantity,
        )
        try:
            item = cart.add_item(ref, quantity)
        except InvalidQuantityError as exc:
            raise DomainValidationError(message=str(exc), details={"quantity": quantity}) from exc
        store.save(cart)
        self.logger.info(
            "Product added to cart",
            product_id=product_id,
            item_id=item.id,
            quantity=quantity,
            registration_status=item.registration_status,
        )
        return CartMapper.item_to_dto(item)

    def update_item(self, store: CartStoreProtocol, item_id: str, quantity: int) -> CartDTO:
        cart = store.load()
        item = self._require_item(cart, item_id)
        self.products.ensure_slots(
            item.product.id, self._reserved(cart, item.product.id, exclude_item_id=item_id) + quantity
        )
        try:
            cart.update_item(item_id, quantity)
        except InvalidQuantityError as exc:
            raise DomainValidationError(message=str(exc), details={"quantity": quantity}) from exc
        store.save(cart)
        self.logger.info("Cart item quantity changed", item_id=item_id, quantity=quantity)
        return CartMapper.to_dto(cart)

    def remove_item(self, store: CartStoreProtocol, item_id: str) -> CartDTO:
        cart = store.load()
        if not cart.remove_item(item_id):
            raise ItemNotFound(item_id)
        store.save(cart)
        self.logger.info("Cart item removed", item_id=item_id)
        return CartMapper.to_dto(cart)

    def clear(self, store: CartStoreProtocol) -> None:
        store.clear()
        self.logger.info("Cart cleared")

    def next_step(self, store: CartStoreProtocol) -> Dict[str, Any]:
        cart = store.load()
        return {
            "needs_registration": cart.needs_registration(),
            "next_path": cart.get_next_registration_path(),
            "pending_item_ids": [item.id for item in cart.pending_items()],
        }

    def ensure_ready_for_checkout(self, cart: CartSession) -> None:
        """Raise ``RegistrationRequired`` while any item still waits for its form."""
        if cart.needs_registration():
            pending = [item.id for item in cart.pending_items()]
            self.logger.info("Checkout blocked by pending registrations", pending=pending)
            raise RegistrationRequired(cart.get_next_registration_path(), pending)

    def _registrable_item(self, cart: CartSession, item_id: str):
        item = self._require_item(cart, item_id)
        if item.registration_kind is None:
            raise RegistrationNotApplicable(
                details={"itemId": item_id, "type": item.product.type},
                extra={"redirect": CHECKOUT_PATH},
            )
        return item

    def registration_kind(self, store: CartStoreProtocol, item_id: str) -> str:
        return self._registrable_item(store.load(), item_id).registration_kind

    def registration_form(self, store: CartStoreProtocol, item_id: str, user) -> Dict[str, Any]:
        cart = store.load()
        item = self._registrable_item(cart, item_id)
        kind = item.registration_kind
        prefill = self.registrations.prefill(
            kind, user, reusable=cart.reusable_registration_data(kind, exclude_item_id=item_id)
        )
        return {"item": CartMapper.item_to_dto(item), "kind": kind, "prefill": prefill}

    def submit_registration(
        self,
        store: CartStoreProtocol,
        item_id: str,
        user_id: int,
        *,
        form: Dict[str, Any],
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Persist the registration for ``item_id`` and only then complete the
        cart item. ``form`` holds the validated model fields; ``payload`` is the
        API representation kept on the cart item for later pre-fill.
        """
        cart = store.load()
        item = self._registrable_item(cart, item_id)
        kind = item.registration_kind
        registration, error = self.registrations.submit(
            kind,
            user_id,
            product_id=item.product.id,
            cart_item_id=item.id,
            data=form,
        )
        if error:
            code, message, details = error
            self.logger.warning(
                "Registration save failed; item stays pending",
                item_id=item_id,
                code=code,
            )
            raise RegistrationSaveFailed(message=message, details=details)
        next_path = cart.complete_registration(
            item_id, dict(payload, registrationId=registration.id)
        )
        store.save(cart)
        self.logger.info(
            "Cart registration completed",
            item_id=item_id,
            kind=kind,
            registration_id=registration.id,
            next_path=next_path,
        )
        return {
            "registration": registration,
            "next_path": next_path,
            "needs_registration": cart.needs_registration(),
            "cart": CartMapper.to_dto(cart),
        }
