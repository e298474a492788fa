from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from django.utils import timezone

from apps.common import get_logger
from apps.orders.dtos import OrderDTO, TicketDTO
from apps.orders.mappers import OrderMapper, TicketMapper
from apps.orders.models import Order, Ticket
from .commands import TransactionQuery, month_start
from .dtos import AdminNoteDTO, StatsDTO, TransactionDTO
from .mappers import AdminNoteMapper, SummaryMapper, TransactionMapper
from .models import AdminNote

logger = get_logger(__name__).bind(component="reports", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]

RECENT_LIMIT = 5

CSV_COLUMNS = (
    ("Order Number", "order_number"),
    ("Date", "created_at"),
    ("User ID", "user_id"),
    ("User Name", "user_name"),
    ("User Email", "user_email"),
    ("Event ID", "event_id"),
    ("Event", "event_title"),
    ("Type", "transaction_type"),
    ("Product", "product_name"),
    ("Quantity", "quantity"),
    ("Amount", "amount"),
    ("Payment Status", "payment_status"),
)

# Order payment status -> (order status, ticket status applied to active tickets)
PAYMENT_STATUS_EFFECTS = {
    Order.PaymentStatus.PENDING: (Order.Status.PENDING, None),
    Order.PaymentStatus.PAID: (Order.Status.COMPLETED, None),
    Order.PaymentStatus.REFUNDED: (Order.Status.CANCELLED, Ticket.Status.REFUNDED),
    Order.PaymentStatus.CANCELLED: (Order.Status.CANCELLED, Ticket.Status.CANCELLED),
}


class ReportService:
    def __init__(self, stats, transactions, orders, tickets, notes):
        self.stats = stats
        self.transactions = transactions
        self.orders = orders
        self.tickets = tickets
        self.notes = notes
        self.logger = logger.bind(service="ReportService")

    def dashboard_stats(self, now: Optional[datetime] = None) -> StatsDTO:
        start = month_start(now or timezone.now())
        revenue = self.stats.revenue_since(start)
        return StatsDTO(
            total_users=self.stats.total_users(),
            active_events=self.stats.active_events(),
            monthly_revenue=f"{revenue:.2f}",
            tickets_sold_this_month=self.stats.tickets_issued_since(start),
            recent_events=[SummaryMapper.event(e) for e in self.stats.recent_events(RECENT_LIMIT)],
            recent_orders=[SummaryMapper.order(o) for o in self.stats.recent_orders(RECENT_LIMIT)],
        )

    def search_transactions(
        self, query: Union[TransactionQuery, Dict[str, Any], None] = None
    ) -> List[TransactionDTO]:
        q = query if isinstance(query, TransactionQuery) else TransactionQuery.from_raw(query or {})
        rows = TransactionMapper.many_to_dto(self.transactions.search(q))
        self.logger.debug("Transaction search", search=q.search, results=len(rows))
        return rows

    def export_csv(self, query: Union[TransactionQuery, Dict[str, Any], None] = None) -> str:
        rows = self.search_transactions(query)
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow([header for header, _ in CSV_COLUMNS])
        for row in rows:
            writer.writerow(["" if getattr(row, attr) is None else getattr(row, attr) for _, attr in CSV_COLUMNS])
        self.logger.info("Transactions exported", rows=len(rows))
        return buffer.getvalue()

    def update_ticket_status(
        self, ticket_id: int, status: str, *, actor_id: Optional[int]
    ) -> Tuple[Optional[TicketDTO], Optional[ErrorTuple]]:
        if status not in Ticket.Status.values:
            return None, (
                "VALIDATION_ERROR",
                "Invalid ticket status",
                {"status": status, "allowed": list(Ticket.Status.values)},
            )
        ticket = self.tickets.get(id=ticket_id)
        if not ticket:
            return None, ("NOT_FOUND", "Ticket not found", {"id": str(ticket_id)})
        previous = ticket.status
        ticket = self.tickets.update(ticket, status=status)
        self.logger.info(
            "Ticket status changed",
            ticket_id=ticket_id,
            previous=previous,
            status=status,
            actor_id=actor_id,
        )
        return TicketMapper.to_dto(ticket), None

    def update_order_payment_status(
        self, order_number: str, payment_status: str, *, actor_id: Optional[int]
    ) -> Tuple[Optional[OrderDTO], Optional[ErrorTuple]]:
        """
        Set the payment status of an order by hand. Refunds and cancellations
        carry over to the order's active tickets.
        """
        if payment_status not in PAYMENT_STATUS_EFFECTS:
            return None, (
                "VALIDATION_ERROR",
                "Invalid payment status",
                {"paymentStatus": payment_status, "allowed": list(Order.PaymentStatus.values)},
            )
        order = self.orders.get(order_number=order_number)
        if not order:
            return None, ("NOT_FOUND", "Order not found", {"orderNumber": order_number})
        order_status, ticket_status = PAYMENT_STATUS_EFFECTS[payment_status]
        changes: Dict[str, Any] = {"payment_status": payment_status, "status": order_status}
        if payment_status == Order.PaymentStatus.PAID and order.paid_at is None:
            changes["paid_at"] = timezone.now()
        previous = order.payment_status
        self.orders.update(order, **changes)
        affected = 0
        if ticket_status:
            affected = self.tickets.set_status_for_order(
                order.id, from_status=Ticket.Status.ACTIVE, to_status=ticket_status
            )
        self.logger.info(
            "Order payment status changed",
            order_number=order_number,
            previous=previous,
            payment_status=payment_status,
            tickets_updated=affected,
            actor_id=actor_id,
        )
        return OrderMapper.to_dto(self.orders.get(order_number=order_number), include_tickets=True), None

    def add_note(
        self, target_type: str, target_id: int, content: str, *, author_id: Optional[int]
    ) -> Tuple[Optional[AdminNoteDTO], Optional[ErrorTuple]]:
        if target_type not in AdminNote.TargetType.values:
            return None, (
                "VALIDATION_ERROR",
                "Invalid note target",
                {"targetType": target_type, "allowed": list(AdminNote.TargetType.values)},
            )
        content = (content or "").strip()
        if not content:
            return None, ("VALIDATION_ERROR", "Note content is required", {"content": "blank"})
        note = self.notes.create(
            target_type=target_type, target_id=target_id, content=content, author_id=author_id
        )
        self.logger.info(
            "Admin note added", target_type=target_type, target_id=target_id, author_id=author_id
        )
        return AdminNoteMapper.to_dto(note), None

    def list_notes(self, target_type: str, target_id: int) -> List[AdminNoteDTO]:
        return AdminNoteMapper.many_to_dto(self.notes.for_target(target_type, target_id))
