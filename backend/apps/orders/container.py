from __future__ import annotations

from apps.carts.container import build_cart_service
from apps.events.container import build_product_service
from apps.reports.container import build_report_service
from apps.users.repositories import UserRepository
from .payments import StripeCheckoutGateway
from .repositories import OrderRepository, TicketRepository
from .services import CheckoutService


def build_checkout_service() -> CheckoutService:
    return CheckoutService(
        carts=build_cart_service(),
        products=build_product_service(),
        orders=OrderRepository(),
        tickets=TicketRepository(),
        users=UserRepository(),
        gateway=StripeCheckoutGateway(),
        notes=build_report_service(),
    )
