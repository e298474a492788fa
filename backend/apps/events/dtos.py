from dataclasses import dataclass
from typing import Optional


@dataclass
class EventDTO:
    id: int
    title: str
    description: str
    location: str
    start_date: str
    end_date: str
    image_url: Optional[str]
    event_type: str
    owner_id: int
    owner_name: str
    is_active: bool
    status: str
    price: str
    created_at: Optional[str]


@dataclass
class ProductDTO:
    id: int
    event_id: int
    event_title: str
    owner_id: int
    type: str
    name: str
    description: str
    price: str
    quantity: Optional[int]
    is_active: bool
    requires_registration: bool
    available_for_sale: bool
