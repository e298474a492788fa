from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from apps.api.utils import parse_bool, parse_int

EVENT_SORT_OPTIONS = ("date", "date_desc", "price", "title")


def _decimal_or_none(raw: Any) -> Optional[Decimal]:
    if raw is None or raw == "":
        return None
    try:
        return Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None


@dataclass
class EventListQuery:
    event_type: Optional[str] = None
    location: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "date"
    is_upcoming: Optional[bool] = None

    @staticmethod
    def from_raw(params: Dict[str, Any]) -> "EventListQuery":
        data = params or {}

        def _clean(key):
            value = data.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        sort_by = _clean("sortBy") or "date"
        if sort_by not in EVENT_SORT_OPTIONS:
            sort_by = "date"
        return EventListQuery(
            event_type=_clean("type"),
            location=_clean("location"),
            search=_clean("search"),
            sort_by=sort_by,
            is_upcoming=parse_bool(data.get("isUpcoming")),
        )

    def cache_token(self) -> str:
        return ":".join(
            str(part or "-").lower()
            for part in (
                self.event_type,
                self.location,
                self.search,
                self.sort_by,
                self.is_upcoming,
            )
        )


@dataclass
class EventCreateCommand:
    title: str
    description: str
    location: str
    start_date: Any
    end_date: Any
    event_type: str
    image_url: Optional[str] = None
    price: Decimal = Decimal("0")
    is_active: bool = True
    status: str = "published"

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "EventCreateCommand":
        data = dict(payload or {})
        data.pop("id", None)
        return EventCreateCommand(
            title=str(data.get("title", "")).strip(),
            description=str(data.get("description", "")).strip(),
            location=str(data.get("location", "")).strip(),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            event_type=str(data.get("event_type", "")).strip(),
            image_url=data.get("image_url") or None,
            price=_decimal_or_none(data.get("price")) or Decimal("0"),
            is_active=data.get("is_active", True),
            status=data.get("status") or "published",
        )


@dataclass
class EventUpdateCommand:
    event_id: int
    partial: bool
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Any = None
    end_date: Any = None
    event_type: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[Decimal] = None
    is_active: Optional[bool] = None
    status: Optional[str] = None

    @staticmethod
    def from_raw(event_id: int, payload: Dict[str, Any], partial: bool) -> "EventUpdateCommand":
        data = dict(payload or {})
        data.pop("id", None)
        return EventUpdateCommand(
            event_id=event_id,
            partial=partial,
            title=data.get("title"),
            description=data.get("description"),
            location=data.get("location"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            event_type=data.get("event_type"),
            image_url=data.get("image_url"),
            price=_decimal_or_none(data.get("price")),
            is_active=data.get("is_active"),
            status=data.get("status"),
        )

    def changes(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "event_type": self.event_type,
            "image_url": self.image_url,
            "price": self.price,
            "is_active": self.is_active,
            "status": self.status,
        }


@dataclass
class ProductCreateCommand:
    event_id: int
    type: str
    name: str
    price: Decimal
    description: str = ""
    quantity: Optional[int] = None
    is_active: bool = True

    @staticmethod
    def from_raw(event_id: int, payload: Dict[str, Any]) -> "ProductCreateCommand":
        data = dict(payload or {})
        data.pop("id", None)
        return ProductCreateCommand(
            event_id=event_id,
            type=str(data.get("type", "")).strip(),
            name=str(data.get("name", "")).strip(),
            price=_decimal_or_none(data.get("price")) or Decimal("0"),
            description=str(data.get("description") or "").strip(),
            quantity=parse_int(data.get("quantity")),
            is_active=data.get("is_active", True),
        )


@dataclass
class ProductUpdateCommand:
    product_id: int
    partial: bool
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: Optional[int] = None
    clear_quantity: bool = False
    is_active: Optional[bool] = None

    @staticmethod
    def from_raw(product_id: int, payload: Dict[str, Any], partial: bool) -> "ProductUpdateCommand":
        data = dict(payload or {})
        data.pop("id", None)
        # An explicit null quantity switches the product to unlimited stock.
        clear_quantity = "quantity" in data and data.get("quantity") is None
        return ProductUpdateCommand(
            product_id=product_id,
            partial=partial,
            name=data.get("name"),
            description=data.get("description"),
            price=_decimal_or_none(data.get("price")),
            quantity=parse_int(data.get("quantity")),
            clear_quantity=clear_quantity,
            is_active=data.get("is_active"),
        )
