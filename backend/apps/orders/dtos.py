from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class OrderItemDTO:
    id: int
    product_id: Optional[int]
    event_id: Optional[int]
    product_type: str
    product_name: str
    unit_price: str
    quantity: int
    subtotal: str
    registration_data: Optional[Dict[str, Any]]


@dataclass
class TicketDTO:
    id: int
    ticket_number: str
    order_number: str
    user_id: int
    event_id: Optional[int]
    event_title: Optional[str]
    event_start: Optional[str]
    product_name: str
    status: str
    issued_at: Optional[str]


@dataclass
class OrderDTO:
    id: int
    order_number: str
    user_id: int
    total_amount: str
    currency: str
    status: str
    payment_status: str
    created_at: Optional[str]
    paid_at: Optional[str]
    oversold: bool = False
    items: List[OrderItemDTO] = field(default_factory=list)
    tickets: List[TicketDTO] = field(default_factory=list)


@dataclass
class CheckoutDTO:
    order_number: str
    checkout_url: str
    total_amount: str
    payment_status: str
