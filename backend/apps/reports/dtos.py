from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class TransactionDTO:
    id: int
    order_number: str
    created_at: Optional[str]
    user_id: int
    user_name: str
    user_email: str
    event_id: Optional[int]
    event_title: Optional[str]
    transaction_type: str
    product_name: str
    quantity: int
    amount: str
    payment_status: str


@dataclass
class StatsDTO:
    total_users: int
    active_events: int
    monthly_revenue: str
    tickets_sold_this_month: int
    recent_events: List[Dict[str, Any]] = field(default_factory=list)
    recent_orders: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class AdminNoteDTO:
    id: int
    target_type: str
    target_id: int
    content: str
    author_id: Optional[int]
    author_name: str
    created_at: Optional[str]
