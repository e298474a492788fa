from django.urls import path

from .views import UserListView, UserRoleView

urlpatterns = [
    path("", UserListView.as_view(), name="api-users-list"),
    path("<int:user_id>/role/", UserRoleView.as_view(), name="api-users-role"),
]
