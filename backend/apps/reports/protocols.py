from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.events.models import Event
    from apps.orders.models import Order, OrderItem, Ticket
    from .commands import TransactionQuery
    from .models import AdminNote


class StatsRepositoryProtocol(Protocol):
    def total_users(self) -> int: ...

    def active_events(self) -> int: ...

    def revenue_since(self, start: datetime) -> Decimal: ...

    def tickets_issued_since(self, start: datetime) -> int: ...

    def recent_events(self, limit: int) -> List["Event"]: ...

    def recent_orders(self, limit: int) -> List["Order"]: ...


class TransactionRepositoryProtocol(Protocol):
    def search(self, query: "TransactionQuery") -> Iterable["OrderItem"]: ...


class AdminNoteRepositoryProtocol(Protocol):
    def for_target(self, target_type: str, target_id: int) -> Iterable["AdminNote"]: ...

    def create(self, **data) -> "AdminNote": ...


class TicketStatusRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Ticket"]: ...

    def update(self, obj: "Ticket", **data) -> "Ticket": ...

    def set_status_for_order(self, order_id: int, *, from_status: str, to_status: str) -> int: ...
