from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.api.utils import error_response
from apps.common import get_logger
from apps.orders.serializers import OrderReadSerializer, TicketReadSerializer
from .commands import TransactionQuery
from .container import build_report_service
from .pagination import TransactionPagination
from .serializers import (
    AdminNoteQuerySerializer,
    AdminNoteSerializer,
    AdminNoteWriteSerializer,
    PaymentStatusUpdateSerializer,
    StatsSerializer,
    TicketStatusUpdateSerializer,
    TransactionQuerySerializer,
    TransactionSerializer,
)

logger = get_logger(__name__).bind(component="reports", layer="view")

TRANSACTION_FILTERS = [
    OpenApiParameter("search", str, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("userId", int, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("eventId", int, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("transactionType", str, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("status", str, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("startDate", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("endDate", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False),
]

ADMIN_ERRORS = {
    401: OpenApiResponse(response=ErrorResponseSerializer),
    403: OpenApiResponse(response=ErrorResponseSerializer),
}


def _transaction_query(request) -> TransactionQuery:
    serializer = TransactionQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return TransactionQuery.from_raw(serializer.validated_data)


@extend_schema(tags=["Admin"])
class AdminStatsView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_report_service()

    @extend_schema(summary="Dashboard statistics", responses={200: StatsSerializer, **ADMIN_ERRORS})
    def get(self, request):
        return Response(StatsSerializer(self.service.dashboard_stats()).data)


@extend_schema(tags=["Admin"])
class TransactionSearchView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_report_service()

    @extend_schema(
        summary="Search transactions",
        description="One row per order item, newest first.",
        parameters=TRANSACTION_FILTERS
        + [
            OpenApiParameter("page", int, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY, required=False),
        ],
        responses={
            200: paginated_response(TransactionSerializer),
            400: OpenApiResponse(response=ErrorResponseSerializer),
            **ADMIN_ERRORS,
        },
    )
    def get(self, request):
        rows = self.service.search_transactions(_transaction_query(request))
        paginator = TransactionPagination()
        page = paginator.paginate_queryset(rows, request, view=self)
        if page is None:
            return Response(TransactionSerializer(rows, many=True).data)
        return paginator.get_paginated_response(TransactionSerializer(page, many=True).data)


@extend_schema(tags=["Admin"])
class TransactionExportView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_report_service()
    log = logger.bind(view="TransactionExportView")

    @extend_schema(
        summary="Export transactions as CSV",
        parameters=TRANSACTION_FILTERS,
        responses={(200, "text/csv"): OpenApiTypes.STR, **ADMIN_ERRORS},
    )
    def get(self, request):
        body = self.service.export_csv(_transaction_query(request))
        filename = f"transactions-{timezone.now():%Y%m%d}.csv"
        self.log.info("Transactions CSV exported", actor_id=request.user.id, filename=filename)
        response = HttpResponse(body, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


@extend_schema(tags=["Admin"])
class TicketStatusView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_report_service()

    @extend_schema(
        summary="Change a ticket's status",
        parameters=[OpenApiParameter("ticket_id", int, OpenApiParameter.PATH)],
        request=TicketStatusUpdateSerializer,
        responses={
            200: TicketReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **ADMIN_ERRORS,
        },
    )
    def patch(self, request, ticket_id: int):
        serializer = TicketStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_ticket_status(
            ticket_id,
            serializer.validated_data["status"],
            actor_id=getattr(request, "validated_user_id", None),
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(TicketReadSerializer(dto).data)


@extend_schema(tags=["Admin"])
class OrderPaymentStatusView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_report_service()

    @extend_schema(
        summary="Change an order's payment status",
        description="Refunded and cancelled orders carry the change to their active tickets.",
        parameters=[OpenApiParameter("order_number", str, OpenApiParameter.PATH)],
        request=PaymentStatusUpdateSerializer,
        responses={
            200: OrderReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **ADMIN_ERRORS,
        },
    )
    def patch(self, request, order_number: str):
        serializer = PaymentStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_order_payment_status(
            order_number,
            serializer.validated_data["paymentStatus"],
            actor_id=getattr(request, "validated_user_id", None),
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(OrderReadSerializer(dto).data)


@extend_schema(tags=["Admin"])
class AdminNoteListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_report_service()

    @extend_schema(
        summary="Notes attached to a record",
        parameters=[
            OpenApiParameter("targetType", str, OpenApiParameter.QUERY, enum=["user", "event", "order", "ticket"]),
            OpenApiParameter("targetId", int, OpenApiParameter.QUERY),
        ],
        responses={
            200: AdminNoteSerializer(many=True),
            400: OpenApiResponse(response=ErrorResponseSerializer),
            **ADMIN_ERRORS,
        },
    )
    def get(self, request):
        query = AdminNoteQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        notes = self.service.list_notes(query.validated_data["targetType"], query.validated_data["targetId"])
        return Response(AdminNoteSerializer(notes, many=True).data)

    @extend_schema(
        summary="Add a note to a record",
        request=AdminNoteWriteSerializer,
        responses={
            201: AdminNoteSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            **ADMIN_ERRORS,
        },
    )
    def post(self, request):
        serializer = AdminNoteWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        dto, error = self.service.add_note(
            data["targetType"], data["targetId"], data["content"], author_id=request.user.id
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(AdminNoteSerializer(dto).data, status=status.HTTP_201_CREATED)
