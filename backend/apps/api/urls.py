from django.urls import include, path

urlpatterns = [
    path("auth/", include("apps.auth.urls")),
    path("users/", include("apps.users.urls")),
    path("", include("apps.events.urls")),
    path("", include("apps.registrations.urls")),
    path("", include("apps.carts.urls")),
    path("", include("apps.orders.urls")),
    path("admin/", include("apps.reports.urls")),
]
