from __future__ import annotations

import secrets
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.api.exceptions import ApplicationError, DomainValidationError
from apps.common import get_logger
from .dtos import CheckoutDTO, OrderDTO, TicketDTO
from .mappers import OrderMapper, TicketMapper
from .models import Order, Ticket
from .protocols import (
    CheckoutCatalogProtocol,
    CheckoutGuardProtocol,
    OrderNotesProtocol,
    OrderRepositoryProtocol,
    PaymentGatewayProtocol,
    TicketRepositoryProtocol,
    UserLookupProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]

TICKET_PRODUCT_TYPE = "ticket"


class CartEmptyError(ApplicationError):
    default_code = "CART_EMPTY"
    default_message = "Your cart is empty"

    def __init__(self):
        super().__init__(extra={"redirect": "/"})


class ProductUnavailableError(DomainValidationError):
    default_message = "A product in your cart is no longer available"


def _new_order_number() -> str:
    return f"ORD-{timezone.now():%Y%m%d}-{secrets.token_hex(4).upper()}"


def _new_ticket_number() -> str:
    return f"TKT-{secrets.token_hex(5).upper()}"


class CheckoutService:
    def __init__(
        self,
        carts: CheckoutGuardProtocol,
        products: CheckoutCatalogProtocol,
        orders: OrderRepositoryProtocol,
        tickets: TicketRepositoryProtocol,
        users: UserLookupProtocol,
        gateway: PaymentGatewayProtocol,
        notes: Optional[OrderNotesProtocol] = None,
    ):
        self.carts = carts
        self.products = products
        self.orders = orders
        self.tickets = tickets
        self.users = users
        self.gateway = gateway
        self.notes = notes
        self.logger = logger.bind(service="CheckoutService")

    # checkout

    def _priced_lines(self, cart) -> List[Dict[str, Any]]:
        lines = []
        for item in cart:
            product = self.products.get_product(item.product.id)
            if product is None or not product.available_for_sale:
                self.logger.info(
                    "Checkout blocked by unavailable product",
                    item_id=item.id,
                    product_id=item.product.id,
                )
                raise ProductUnavailableError(
                    details={"itemId": item.id, "productId": item.product.id}
                )
            lines.append({"item": item, "product": product})
        return lines

    def _destination_account(self, owner_ids) -> Optional[str]:
        # Transfers only work when the whole payment belongs to one connected owner.
        if len(owner_ids) != 1:
            self.logger.info("Mixed owners in order; payment stays on platform", owners=sorted(owner_ids))
            return None
        owner = self.users.get(id=next(iter(owner_ids)))
        return getattr(owner, "stripe_account_id", None) or None

    def checkout(self, store, user) -> CheckoutDTO:
        """
        Turn the session cart into a pending order and a Stripe Checkout
        Session. The cart is cleared only once the session exists.
        """
        cart = store.load()
        if cart.is_empty:
            raise CartEmptyError()
        self.carts.ensure_ready_for_checkout(cart)

        lines = self._priced_lines(cart)
        requested: Dict[int, int] = OrderedDict()
        for line in lines:
            pid = line["product"].id
            requested[pid] = requested.get(pid, 0) + line["item"].quantity
        for product_id, quantity in requested.items():
            self.products.ensure_slots(product_id, quantity)

        total = sum(
            (Decimal(line["product"].price) * line["item"].quantity for line in lines),
            Decimal("0"),
        )
        order = self.orders.create_with_items(
            order_number=_new_order_number(),
            user=user,
            total_amount=total,
            currency=settings.STRIPE_CURRENCY,
            items=[
                {
                    "product_id": line["product"].id,
                    "event_id": line["product"].event_id,
                    "product_type": line["product"].type,
                    "product_name": line["product"].name,
                    "unit_price": Decimal(line["product"].price),
                    "quantity": line["item"].quantity,
                    "cart_item_id": line["item"].id,
                    "registration_data": line["item"].registration_data,
                }
                for line in lines
            ],
        )
        self.logger.info(
            "Order created",
            order_number=order.order_number,
            user_id=getattr(user, "id", None),
            total=str(total),
            items=len(lines),
        )

        if total == 0:
            self._fulfill(order, payment_intent_id="")
            checkout_url = f"{settings.FRONTEND_BASE_URL}/order-success?order={order.order_number}"
        else:
            try:
                session = self.gateway.create_checkout_session(
                    order_number=order.order_number,
                    line_items=[
                        {
                            "name": line["product"].name,
                            "unit_price": Decimal(line["product"].price),
                            "quantity": line["item"].quantity,
                        }
                        for line in lines
                    ],
                    customer_email=getattr(user, "email", None),
                    destination_account=self._destination_account(
                        {line["product"].owner_id for line in lines}
                    ),
                )
            except ApplicationError:
                self.orders.update(
                    order,
                    status=Order.Status.CANCELLED,
                    payment_status=Order.PaymentStatus.CANCELLED,
                )
                raise
            self.orders.update(order, stripe_session_id=session.id)
            checkout_url = session.url

        store.clear()
        return CheckoutDTO(
            order_number=order.order_number,
            checkout_url=checkout_url,
            total_amount=str(total.quantize(Decimal("0.01"))),
            payment_status=order.payment_status,
        )

    # fulfilment

    def _issue_ticket(self, order, item) -> Ticket:
        number = _new_ticket_number()
        while self.tickets.number_taken(number):
            number = _new_ticket_number()
        return self.tickets.create(
            ticket_number=number,
            order=order,
            order_item=item,
            user_id=order.user_id,
            event_id=item.event_id,
        )

    def _fulfill(self, order, *, payment_intent_id: str) -> None:
        """
        The payment has already been captured, so a stock shortfall does not
        stop fulfilment. The order is flagged and a note is left for the
        organizer to settle it with the buyer.
        """
        issued = 0
        short = []
        for item in order.items.all():
            if item.product_id and not self.products.decrease_product_quantity(
                item.product_id, item.quantity
            ):
                short.append(item)
            if item.product_type == TICKET_PRODUCT_TYPE:
                for _ in range(item.quantity):
                    self._issue_ticket(order, item)
                    issued += 1
        self.orders.update(
            order,
            status=Order.Status.COMPLETED,
            payment_status=Order.PaymentStatus.PAID,
            stripe_payment_intent_id=payment_intent_id or "",
            paid_at=timezone.now(),
            oversold=bool(short),
        )
        self.logger.info(
            "Order fulfilled", order_number=order.order_number, tickets_issued=issued
        )
        if short:
            self._record_oversell(order, short)

    def _record_oversell(self, order, items) -> None:
        lines = ", ".join(f"{item.quantity} x {item.product_name}" for item in items)
        self.logger.warning(
            "Order oversold",
            order_number=order.order_number,
            product_ids=[item.product_id for item in items],
        )
        if self.notes is None:
            return
        self.notes.add_note(
            "order",
            order.id,
            f"Paid after stock ran out: {lines}. Refund or accommodate the buyer.",
            author_id=None,
        )

    def fulfill_session(self, session_id: str, payment_intent_id: Optional[str] = None) -> Optional[Order]:
        """Mark the order paid, issue tickets and take stock. Repeated calls are no-ops."""
        with transaction.atomic():
            order = self.orders.lock_by_session(session_id)
            if order is None:
                self.logger.warning("Paid session without order", session_id=session_id)
                return None
            if order.payment_status == Order.PaymentStatus.PAID:
                self.logger.info(
                    "Duplicate payment notification ignored", order_number=order.order_number
                )
                return order
            self._fulfill(order, payment_intent_id=payment_intent_id or "")
        return order

    def cancel_session(self, session_id: str) -> Optional[Order]:
        with transaction.atomic():
            order = self.orders.lock_by_session(session_id)
            if order is None or order.payment_status != Order.PaymentStatus.PENDING:
                return order
            self.orders.update(
                order,
                status=Order.Status.CANCELLED,
                payment_status=Order.PaymentStatus.CANCELLED,
            )
        self.logger.info("Order cancelled after session expiry", order_number=order.order_number)
        return order

    # queries

    def list_orders(self, user_id: int) -> List[OrderDTO]:
        return OrderMapper.many_to_dto(self.orders.for_user(user_id))

    def get_order(
        self, order_number: str, *, actor_id: Optional[int], is_privileged: bool = False
    ) -> Tuple[Optional[OrderDTO], Optional[ErrorTuple]]:
        order = self.orders.get(order_number=order_number)
        # Other users' orders are reported as missing.
        if not order or not (is_privileged or order.user_id == actor_id):
            return None, ("NOT_FOUND", "Order not found", {"orderNumber": order_number})
        return OrderMapper.to_dto(order, include_tickets=True), None

    def list_tickets(self, user_id: int) -> List[TicketDTO]:
        return TicketMapper.many_to_dto(self.tickets.for_user(user_id))
