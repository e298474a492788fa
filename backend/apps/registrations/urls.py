from django.urls import path

from .views import EventRegistrationListView, ProfileView, RegistrationReviewView

urlpatterns = [
    path("profiles/<str:kind>/", ProfileView.as_view(), name="api-profiles-detail"),
    path(
        "events/<int:event_id>/registrations/",
        EventRegistrationListView.as_view(),
        name="api-events-registrations",
    ),
    path(
        "registrations/<str:kind>/<int:registration_id>/review/",
        RegistrationReviewView.as_view(),
        name="api-registrations-review",
    ),
]
