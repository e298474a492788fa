from __future__ import annotations

from apps.orders.repositories import OrderRepository, TicketRepository
from .repositories import AdminNoteRepository, StatsRepository, TransactionRepository
from .services import ReportService


def build_report_service() -> ReportService:
    return ReportService(
        stats=StatsRepository(),
        transactions=TransactionRepository(),
        orders=OrderRepository(),
        tickets=TicketRepository(),
        notes=AdminNoteRepository(),
    )
