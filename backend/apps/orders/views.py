from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.carts.store import SessionCartStore
from apps.common import get_logger
from .container import build_checkout_service
from .serializers import CheckoutResponseSerializer, OrderReadSerializer, TicketReadSerializer

logger = get_logger(__name__).bind(component="orders", layer="view")


@extend_schema(tags=["Checkout"])
class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        summary="Start checkout for the session cart",
        description=(
            "Creates a pending order and a Stripe Checkout Session, then empties the cart. "
            "Returns 409 REGISTRATION_REQUIRED with extra.nextPath while vendor or volunteer "
            "registrations are still pending."
        ),
        request=None,
        responses={
            201: CheckoutResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
            502: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        dto = self.service.checkout(SessionCartStore.for_request(request), request.user)
        self.log.info(
            "Checkout started via API", order_number=dto.order_number, user_id=request.user.id
        )
        return Response(CheckoutResponseSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Orders"])
class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()

    @extend_schema(summary="My orders", responses={200: OrderReadSerializer(many=True)})
    def get(self, request):
        data = self.service.list_orders(request.user.id)
        return Response(OrderReadSerializer(data, many=True).data)


@extend_schema(tags=["Orders"])
class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()

    @extend_schema(
        summary="Order with items and tickets (owner or admin)",
        parameters=[OpenApiParameter("order_number", str, OpenApiParameter.PATH)],
        responses={200: OrderReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request, order_number: str):
        dto, error = self.service.get_order(
            order_number,
            actor_id=getattr(request, "validated_user_id", None),
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(OrderReadSerializer(dto).data)


@extend_schema(tags=["Orders"])
class MyTicketsView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()

    @extend_schema(summary="Tickets issued to me", responses={200: TicketReadSerializer(many=True)})
    def get(self, request):
        return Response(TicketReadSerializer(self.service.list_tickets(request.user.id), many=True).data)
