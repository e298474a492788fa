from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ProfileDTO:
    id: int
    kind: str
    user_id: int
    data: Dict[str, Any] = field(default_factory=dict)
    updated_at: Optional[str] = None


@dataclass
class RegistrationDTO:
    id: int
    kind: str
    status: str
    user_id: int
    applicant_name: str
    applicant_email: str
    event_id: int
    event_title: str
    product_id: int
    product_name: str
    cart_item_id: str
    notes: str
    details: Dict[str, Any]
    profile: Dict[str, Any]
    reviewed_by_id: Optional[int]
    reviewed_at: Optional[str]
    created_at: Optional[str]
