from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CartItemDTO:
    id: str
    product_id: int
    event_id: int
    product_type: str
    product_name: str
    unit_price: str
    quantity: int
    subtotal: str
    registration_status: str
    registration_kind: Optional[str]
    registration_path: Optional[str]
    registration_data: Optional[Dict[str, Any]]


@dataclass
class CartDTO:
    items: List[CartItemDTO] = field(default_factory=list)
    item_count: int = 0
    total: str = "0.00"
    needs_registration: bool = False
    next_path: str = "/checkout"
