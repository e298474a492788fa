from django.urls import path

from .views import (
    EventCalendarView,
    EventDetailView,
    EventListView,
    EventProductListView,
    MyEventsView,
    ProductDetailView,
)

urlpatterns = [
    path("events/", EventListView.as_view(), name="api-events-list"),
    path("events/<int:event_id>/", EventDetailView.as_view(), name="api-events-detail"),
    path(
        "events/<int:event_id>/calendar/",
        EventCalendarView.as_view(),
        name="api-events-calendar",
    ),
    path(
        "events/<int:event_id>/products/",
        EventProductListView.as_view(),
        name="api-events-products",
    ),
    path("my-events/", MyEventsView.as_view(), name="api-my-events"),
    path("products/<int:product_id>/", ProductDetailView.as_view(), name="api-products-detail"),
]
