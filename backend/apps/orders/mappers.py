from decimal import Decimal
from typing import Iterable, List

from .dtos import OrderDTO, OrderItemDTO, TicketDTO
from .models import Order, OrderItem, Ticket

_CENTS = Decimal("0.01")


def _money(value) -> str:
    return str(Decimal(value).quantize(_CENTS))


def _iso(value):
    return value.isoformat() if value is not None else None


class TicketMapper:
    @staticmethod
    def to_dto(ticket: Ticket) -> TicketDTO:
        event = ticket.event
        return TicketDTO(
            id=ticket.id,
            ticket_number=ticket.ticket_number,
            order_number=ticket.order.order_number,
            user_id=ticket.user_id,
            event_id=ticket.event_id,
            event_title=event.title if event else None,
            event_start=_iso(event.start_date) if event else None,
            product_name=ticket.order_item.product_name,
            status=ticket.status,
            issued_at=_iso(ticket.issued_at),
        )

    @staticmethod
    def many_to_dto(tickets: Iterable[Ticket]) -> List[TicketDTO]:
        return [TicketMapper.to_dto(t) for t in tickets]


class OrderMapper:
    @staticmethod
    def item_to_dto(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            event_id=item.event_id,
            product_type=item.product_type,
            product_name=item.product_name,
            unit_price=_money(item.unit_price),
            quantity=item.quantity,
            subtotal=_money(item.subtotal),
            registration_data=item.registration_data,
        )

    @staticmethod
    def to_dto(order: Order, *, include_tickets: bool = False) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            total_amount=_money(order.total_amount),
            currency=order.currency,
            status=order.status,
            payment_status=order.payment_status,
            created_at=_iso(order.created_at),
            paid_at=_iso(order.paid_at),
            oversold=order.oversold,
            items=[OrderMapper.item_to_dto(i) for i in order.items.all()],
            tickets=TicketMapper.many_to_dto(order.tickets.all()) if include_tickets else [],
        )

    @staticmethod
    def many_to_dto(orders: Iterable[Order]) -> List[OrderDTO]:
        return [OrderMapper.to_dto(o) for o in orders]
