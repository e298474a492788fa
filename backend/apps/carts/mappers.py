from decimal import Decimal

from .coordinator import CartItem, CartSession, registration_path
from .dtos import CartDTO, CartItemDTO

_CENTS = Decimal("0.01")


def _money(value: Decimal) -> str:
    return str(value.quantize(_CENTS))


class CartMapper:
    @staticmethod
    def item_to_dto(item: CartItem) -> CartItemDTO:
        return CartItemDTO(
            id=item.id,
            product_id=item.product.id,
            event_id=item.product.event_id,
            product_type=item.product.type,
            product_name=item.product.name,
            unit_price=_money(item.product.price),
            quantity=item.quantity,
            subtotal=_money(item.subtotal),
            registration_status=item.registration_status,
            registration_kind=item.registration_kind,
            registration_path=registration_path(item) if item.registration_kind else None,
            registration_data=item.registration_data,
        )

    @staticmethod
    def to_dto(cart: CartSession) -> CartDTO:
        return CartDTO(
            items=[CartMapper.item_to_dto(item) for item in cart],
            item_count=cart.item_count,
            total=_money(cart.total),
            needs_registration=cart.needs_registration(),
            next_path=cart.get_next_registration_path(),
        )
