from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.api.utils import error_response
from apps.common import get_logger
from .commands import EventListQuery
from .container import build_event_service, build_product_service
from .ical import DEFAULT_REMINDER_MINUTES
from .pagination import EventListPagination
from .serializers import (
    EventCalendarQuerySerializer,
    EventListQuerySerializer,
    EventReadSerializer,
    EventWriteSerializer,
    ProductReadSerializer,
    ProductUpdateSerializer,
    ProductWriteSerializer,
)

logger = get_logger(__name__).bind(component="events", layer="view")


def _actor(request):
    return (
        getattr(request, "validated_user_id", None),
        bool(getattr(request, "is_privileged_user", False)),
    )


@extend_schema(tags=["Events"])
class EventListView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_event_service()
    log = logger.bind(view="EventListView")

    @extend_schema(
        operation_id="events_list",
        summary="List published events",
        description="Supports ?page and ?limit. Results may be served from cache.",
        parameters=[EventListQuerySerializer],
        responses={200: paginated_response(EventReadSerializer)},
    )
    def get(self, request):
        params = EventListQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        query = EventListQuery.from_raw(request.query_params)
        self.log.debug("Handling event list request", filters=query.cache_token())
        events = self.service.list_events(query)
        paginator = EventListPagination()
        page = paginator.paginate_queryset(events, request, view=self)
        if page is None:
            return Response(EventReadSerializer(events, many=True).data)
        return paginator.get_paginated_response(EventReadSerializer(page, many=True).data)

    @extend_schema(
        summary="Create event (organizers)",
        request=EventWriteSerializer,
        responses={
            201: EventReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = EventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id, _ = _actor(request)
        dto, error = self.service.create_event(serializer.validated_data, owner_id=actor_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        self.log.info("Event created via API", event_id=dto.id, owner_id=actor_id)
        return Response(EventReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Events"])
class EventDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_event_service()
    log = logger.bind(view="EventDetailView")

    @extend_schema(
        operation_id="events_retrieve",
        summary="Get event",
        parameters=[OpenApiParameter("event_id", int, OpenApiParameter.PATH)],
        responses={
            200: EventReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, event_id: int):
        actor_id, is_privileged = _actor(request)
        dto = self.service.get_event(event_id, actor_id=actor_id, is_privileged=is_privileged)
        if not dto:
            return error_response("NOT_FOUND", "Event not found", {"id": str(event_id)})
        return Response(EventReadSerializer(dto).data)

    def _update(self, request, event_id: int, *, partial: bool):
        serializer = EventWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        actor_id, is_privileged = _actor(request)
        self.log.info("Updating event", event_id=event_id, partial=partial, actor_id=actor_id)
        dto, error = self.service.update_event(
            event_id,
            serializer.validated_data,
            partial=partial,
            actor_id=actor_id,
            is_privileged=is_privileged,
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(EventReadSerializer(dto).data)

    @extend_schema(
        summary="Replace event (owner or admin)",
        request=EventWriteSerializer,
        responses={
            200: EventReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, event_id: int):
        return self._update(request, event_id, partial=False)

    @extend_schema(
        summary="Update event (owner or admin)",
        request=EventWriteSerializer,
        responses={
            200: EventReadSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, event_id: int):
        return self._update(request, event_id, partial=True)

    @extend_schema(
        summary="Delete event (owner or admin)",
        responses={
            204: None,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, event_id: int):
        actor_id, is_privileged = _actor(request)
        _, error = self.service.delete_event(
            event_id, actor_id=actor_id, is_privileged=is_privileged
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Events"])
class EventCalendarView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_event_service()
    log = logger.bind(view="EventCalendarView")

    @extend_schema(
        summary="Download the event as an iCalendar file",
        parameters=[
            OpenApiParameter("event_id", int, OpenApiParameter.PATH),
            OpenApiParameter(
                "reminders",
                str,
                OpenApiParameter.QUERY,
                description="Comma-separated minutes before start (default 15,60,1440)",
            ),
        ],
        responses={
            (200, "text/calendar"): OpenApiTypes.STR,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, event_id: int):
        query = EventCalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reminders = query.validated_data.get("reminders", DEFAULT_REMINDER_MINUTES)
        actor_id, is_privileged = _actor(request)
        exported = self.service.export_calendar(
            event_id, reminders, actor_id=actor_id, is_privileged=is_privileged
        )
        if not exported:
            return error_response("NOT_FOUND", "Event not found", {"id": str(event_id)})
        filename, body = exported
        self.log.info("Calendar exported", event_id=event_id, reminders=len(reminders))
        response = HttpResponse(body, content_type="text/calendar; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


@extend_schema(tags=["Events"])
class MyEventsView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_event_service()
    log = logger.bind(view="MyEventsView")

    @extend_schema(
        summary="Events owned by the current organizer",
        responses={
            200: EventReadSerializer(many=True),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        actor_id, _ = _actor(request)
        events = self.service.list_owner_events(actor_id)
        self.log.debug("Listing organizer events", owner_id=actor_id, count=len(events))
        return Response(EventReadSerializer(events, many=True).data)


@extend_schema(tags=["Products"])
class EventProductListView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="EventProductListView")

    @extend_schema(
        summary="List products of an event",
        parameters=[
            OpenApiParameter("event_id", int, OpenApiParameter.PATH),
            OpenApiParameter(
                "type",
                str,
                OpenApiParameter.QUERY,
                required=False,
                enum=["ticket", "merchandise", "addon", "vendor_spot", "volunteer_shift"],
            ),
        ],
        responses={
            200: ProductReadSerializer(many=True),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, event_id: int):
        actor_id, is_privileged = _actor(request)
        data, error = self.service.list_event_products(
            event_id,
            product_type=request.query_params.get("type") or None,
            actor_id=actor_id,
            is_privileged=is_privileged,
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(ProductReadSerializer(data, many=True).data)

    @extend_schema(
        summary="Add a product to an event (owner or admin)",
        request=ProductWriteSerializer,
        responses={
            201: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request, event_id: int):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id, is_privileged = _actor(request)
        dto, error = self.service.create_product(
            event_id,
            serializer.validated_data,
            actor_id=actor_id,
            is_privileged=is_privileged,
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        self.log.info("Product created via API", product_id=dto.id, event_id=event_id)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Products"])
class ProductDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        dto = self.service.get_product(product_id)
        if not dto:
            return error_response("NOT_FOUND", "Product not found", {"id": str(product_id)})
        return Response(ProductReadSerializer(dto).data)

    def _update(self, request, product_id: int, *, partial: bool):
        serializer = ProductUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        actor_id, is_privileged = _actor(request)
        dto, error = self.service.update_product(
            product_id,
            serializer.validated_data,
            partial=partial,
            actor_id=actor_id,
            is_privileged=is_privileged,
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Replace product (event owner or admin)",
        request=ProductUpdateSerializer,
        responses={
            200: ProductReadSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, product_id: int):
        return self._update(request, product_id, partial=False)

    @extend_schema(
        summary="Update product (event owner or admin)",
        request=ProductUpdateSerializer,
        responses={
            200: ProductReadSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, product_id: int):
        return self._update(request, product_id, partial=True)

    @extend_schema(
        summary="Delete product (event owner or admin)",
        responses={
            204: None,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, product_id: int):
        actor_id, is_privileged = _actor(request)
        _, error = self.service.delete_product(
            product_id, actor_id=actor_id, is_privileged=is_privileged
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        self.log.info("Product deleted via API", product_id=product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
