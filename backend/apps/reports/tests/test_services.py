import csv
import io
import types
import unittest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

from apps.reports.commands import TransactionQuery, month_start
from apps.reports.services import ReportService


def order_item(**overrides):
    user = types.SimpleNamespace(name="Dana Buyer", username="dana", email="dana@example.com")
    order = types.SimpleNamespace(
        order_number="ORD-1",
        created_at=datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc),
        user_id=3,
        user=user,
        payment_status="paid",
        total_amount=Decimal("25"),
        oversold=False,
    )
    data = dict(
        id=1,
        order=order,
        event_id=9,
        event=types.SimpleNamespace(title="Harbor Fest"),
        product_type="ticket",
        product_name="Early bird",
        unit_price=Decimal("12.50"),
        quantity=2,
    )
    data.update(overrides)
    return types.SimpleNamespace(**data)


class ReportServiceTests(unittest.TestCase):
    def setUp(self):
        self.stats = Mock()
        self.transactions = Mock()
        self.orders = Mock()
        self.tickets = Mock()
        self.notes = Mock()
        self.service = ReportService(
            stats=self.stats,
            transactions=self.transactions,
            orders=self.orders,
            tickets=self.tickets,
            notes=self.notes,
        )

    def test_month_start(self):
        now = datetime(2026, 5, 17, 15, 42, 9, tzinfo=timezone.utc)
        self.assertEqual(month_start(now), datetime(2026, 5, 1, tzinfo=timezone.utc))

    def test_dashboard_stats(self):
        now = datetime(2026, 5, 17, 15, 42, tzinfo=timezone.utc)
        self.stats.total_users.return_value = 12
        self.stats.active_events.return_value = 3
        self.stats.revenue_since.return_value = Decimal("150.5")
        self.stats.tickets_issued_since.return_value = 7
        self.stats.recent_events.return_value = [
            types.SimpleNamespace(id=1, title="Harbor Fest", start_date=None, status="published", owner_id=2)
        ]
        self.stats.recent_orders.return_value = [order_item().order]

        dto = self.service.dashboard_stats(now=now)

        self.stats.revenue_since.assert_called_once_with(datetime(2026, 5, 1, tzinfo=timezone.utc))
        self.assertEqual(dto.total_users, 12)
        self.assertEqual(dto.monthly_revenue, "150.50")
        self.assertEqual(dto.tickets_sold_this_month, 7)
        self.assertEqual(dto.recent_events[0]["title"], "Harbor Fest")
        self.assertEqual(dto.recent_orders[0]["userName"], "Dana Buyer")
        self.assertEqual(dto.recent_orders[0]["totalAmount"], "25.00")

    def test_search_accepts_raw_params(self):
        self.transactions.search.return_value = [order_item()]
        rows = self.service.search_transactions({"q": " harbor ", "eventId": "9", "startDate": "2026-03-01"})
        query = self.transactions.search.call_args.args[0]
        self.assertEqual(query.search, "harbor")
        self.assertEqual(query.event_id, 9)
        self.assertEqual(str(query.start_date), "2026-03-01")
        self.assertEqual(rows[0].amount, "25.00")
        self.assertEqual(rows[0].event_title, "Harbor Fest")

    def test_malformed_filters_are_ignored(self):
        query = TransactionQuery.from_raw({"userId": "abc", "endDate": "not-a-date", "search": "  "})
        self.assertIsNone(query.user_id)
        self.assertIsNone(query.end_date)
        self.assertIsNone(query.search)

    def test_export_csv(self):
        self.transactions.search.return_value = [
            order_item(),
            order_item(id=2, event=None, event_id=None, product_type="merchandise", quantity=1),
        ]
        rows = list(csv.reader(io.StringIO(self.service.export_csv(TransactionQuery()))))
        self.assertEqual(rows[0][0], "Order Number")
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[1][6], "Harbor Fest")
        self.assertEqual(rows[2][6], "")
        self.assertEqual(rows[2][10], "12.50")

    def test_ticket_status_rejects_unknown_status(self):
        dto, error = self.service.update_ticket_status(1, "lost", actor_id=1)
        self.assertIsNone(dto)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.tickets.get.assert_not_called()

    def test_ticket_status_not_found(self):
        self.tickets.get.return_value = None
        _, error = self.service.update_ticket_status(5, "checked_in", actor_id=1)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_payment_status_validation(self):
        _, error = self.service.update_order_payment_status("ORD-1", "settled", actor_id=1)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.orders.get.return_value = None
        _, error = self.service.update_order_payment_status("ORD-404", "paid", actor_id=1)
        self.assertEqual(error[0], "NOT_FOUND")
        self.tickets.set_status_for_order.assert_not_called()

    def test_add_note_requires_content_and_target(self):
        _, error = self.service.add_note("venue", 1, "hi", author_id=1)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        _, error = self.service.add_note("order", 1, "   ", author_id=1)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.notes.create.assert_not_called()


if __name__ == "__main__":
    unittest.main()
