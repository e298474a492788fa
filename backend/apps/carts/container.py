from __future__ import annotations

from apps.events.container import build_product_service
from apps.registrations.container import build_registration_service
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        products=build_product_service(),
        registrations=build_registration_service(),
    )
