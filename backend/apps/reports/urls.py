from django.urls import path

from .views import (
    AdminNoteListView,
    AdminStatsView,
    OrderPaymentStatusView,
    TicketStatusView,
    TransactionExportView,
    TransactionSearchView,
)

urlpatterns = [
    path("stats/", AdminStatsView.as_view(), name="api-admin-stats"),
    path("transactions/", TransactionSearchView.as_view(), name="api-admin-transactions"),
    path(
        "transactions/export/",
        TransactionExportView.as_view(),
        name="api-admin-transactions-export",
    ),
    path(
        "tickets/<int:ticket_id>/status/",
        TicketStatusView.as_view(),
        name="api-admin-ticket-status",
    ),
    path(
        "orders/<str:order_number>/payment-status/",
        OrderPaymentStatusView.as_view(),
        name="api-admin-order-payment-status",
    ),
    path("notes/", AdminNoteListView.as_view(), name="api-admin-notes"),
]
