from django.urls import path

from .views import CheckoutView, MyTicketsView, OrderDetailView, OrderListView

urlpatterns = [
    path("checkout/", CheckoutView.as_view(), name="api-checkout"),
    path("orders/", OrderListView.as_view(), name="api-orders-list"),
    path("orders/<str:order_number>/", OrderDetailView.as_view(), name="api-orders-detail"),
    path("my-tickets/", MyTicketsView.as_view(), name="api-my-tickets"),
]
