from django.urls import path

from .views import (
    CartItemDetailView,
    CartItemListView,
    CartItemRegistrationView,
    CartNextStepView,
    CartView,
)

urlpatterns = [
    path("cart/", CartView.as_view(), name="api-cart"),
    path("cart/items/", CartItemListView.as_view(), name="api-cart-items"),
    path("cart/next-step/", CartNextStepView.as_view(), name="api-cart-next-step"),
    path("cart/items/<str:item_id>/", CartItemDetailView.as_view(), name="api-cart-item-detail"),
    path(
        "cart/items/<str:item_id>/registration/",
        CartItemRegistrationView.as_view(),
        name="api-cart-item-registration",
    ),
]
