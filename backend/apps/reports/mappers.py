from decimal import Decimal
from typing import Any, Dict, Iterable, List

from .dtos import AdminNoteDTO, TransactionDTO

_CENTS = Decimal("0.01")

SYSTEM_AUTHOR = "system"


def _money(value) -> str:
    return str(Decimal(value or 0).quantize(_CENTS))


def _iso(value):
    return value.isoformat() if value is not None else None


def _display_name(user) -> str:
    return getattr(user, "name", "") or user.username


class TransactionMapper:
    @staticmethod
    def to_dto(item) -> TransactionDTO:
        order = item.order
        return TransactionDTO(
            id=item.id,
            order_number=order.order_number,
            created_at=_iso(order.created_at),
            user_id=order.user_id,
            user_name=_display_name(order.user),
            user_email=order.user.email,
            event_id=item.event_id,
            event_title=item.event.title if item.event else None,
            transaction_type=item.product_type,
            product_name=item.product_name,
            quantity=item.quantity,
            amount=_money(item.unit_price * item.quantity),
            payment_status=order.payment_status,
        )

    @staticmethod
    def many_to_dto(items: Iterable) -> List[TransactionDTO]:
        return [TransactionMapper.to_dto(i) for i in items]


class SummaryMapper:
    @staticmethod
    def event(event) -> Dict[str, Any]:
        return {
            "id": event.id,
            "title": event.title,
            "startDate": _iso(event.start_date),
            "status": event.status,
            "ownerId": event.owner_id,
        }

    @staticmethod
    def order(order) -> Dict[str, Any]:
        return {
            "orderNumber": order.order_number,
            "userId": order.user_id,
            "userName": _display_name(order.user),
            "totalAmount": _money(order.total_amount),
            "paymentStatus": order.payment_status,
            "oversold": order.oversold,
            "createdAt": _iso(order.created_at),
        }


class AdminNoteMapper:
    @staticmethod
    def to_dto(note) -> AdminNoteDTO:
        return AdminNoteDTO(
            id=note.id,
            target_type=note.target_type,
            target_id=note.target_id,
            content=note.content,
            author_id=note.author_id,
            author_name=_display_name(note.author) if note.author_id else SYSTEM_AUTHOR,
            created_at=_iso(note.created_at),
        )

    @staticmethod
    def many_to_dto(notes: Iterable) -> List[AdminNoteDTO]:
        return [AdminNoteMapper.to_dto(n) for n in notes]
