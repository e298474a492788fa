from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger
from apps.registrations.serializers import REGISTRATION_SERIALIZERS
from .container import build_cart_service
from .serializers import (
    CartItemAddedSerializer,
    CartItemAddSerializer,
    CartItemUpdateSerializer,
    CartNextStepSerializer,
    CartReadSerializer,
    RegistrationFormSerializer,
    RegistrationSubmittedSerializer,
)
from .services import RegistrationSaveFailed
from .store import SessionCartStore

logger = get_logger(__name__).bind(component="carts", layer="view")

ITEM_PARAMETER = OpenApiParameter("item_id", str, OpenApiParameter.PATH)


@extend_schema(tags=["Cart"])
class CartView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(summary="Current session cart", responses={200: CartReadSerializer})
    def get(self, request):
        dto = self.service.get_cart(SessionCartStore.for_request(request))
        return Response(CartReadSerializer(dto).data)

    @extend_schema(summary="Empty the cart", responses={204: None})
    def delete(self, request):
        self.service.clear(SessionCartStore.for_request(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Cart"])
class CartItemListView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        summary="Add a product to the cart",
        description=(
            "Vendor spots and volunteer shifts enter the cart with a pending registration; "
            "every other product needs none. Adding the same product again creates a new entry."
        ),
        request=CartItemAddSerializer,
        responses={
            201: CartItemAddedSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = CartItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = SessionCartStore.for_request(request)
        item = self.service.add_item(
            store,
            serializer.validated_data["productId"],
            serializer.validated_data["quantity"],
        )
        payload = {"item": item, "cart": self.service.get_cart(store)}
        return Response(CartItemAddedSerializer(payload).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Cart"])
class CartItemDetailView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Change the quantity of a cart item",
        parameters=[ITEM_PARAMETER],
        request=CartItemUpdateSerializer,
        responses={
            200: CartReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, item_id: str):
        serializer = CartItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.update_item(
            SessionCartStore.for_request(request), item_id, serializer.validated_data["quantity"]
        )
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        summary="Remove an item from the cart",
        parameters=[ITEM_PARAMETER],
        responses={200: CartReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, item_id: str):
        dto = self.service.remove_item(SessionCartStore.for_request(request), item_id)
        return Response(CartReadSerializer(dto).data)


@extend_schema(tags=["Cart"])
class CartNextStepView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartNextStepView")

    @extend_schema(
        summary="Where the checkout flow continues",
        description="The first pending registration form, or /checkout when nothing is pending.",
        responses={200: CartNextStepSerializer},
    )
    def get(self, request):
        data = self.service.next_step(SessionCartStore.for_request(request))
        return Response(CartNextStepSerializer(data).data)


@extend_schema(tags=["Cart"])
class CartItemRegistrationView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemRegistrationView")

    @extend_schema(
        summary="Registration form for a cart item, pre-filled",
        parameters=[ITEM_PARAMETER],
        responses={
            200: RegistrationFormSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, item_id: str):
        data = self.service.registration_form(
            SessionCartStore.for_request(request), item_id, request.user
        )
        return Response(RegistrationFormSerializer(data).data)

    @extend_schema(
        summary="Submit the registration for a cart item",
        description=(
            "Saves the vendor or volunteer registration, marks the cart item complete and "
            "returns the next registration path or /checkout. On failure the item stays pending."
        ),
        parameters=[ITEM_PARAMETER],
        responses={
            200: RegistrationSubmittedSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request, item_id: str):
        store = SessionCartStore.for_request(request)
        kind = self.service.registration_kind(store, item_id)
        serializer = REGISTRATION_SERIALIZERS[kind](data=request.data)
        if not serializer.is_valid():
            self.log.info("Registration form rejected", item_id=item_id, kind=kind)
            raise RegistrationSaveFailed(
                message="Registration form is invalid", details=serializer.errors
            )
        result = self.service.submit_registration(
            store,
            item_id,
            request.user.id,
            form=dict(serializer.validated_data),
            payload=dict(serializer.data),
        )
        return Response(RegistrationSubmittedSerializer(result).data)

