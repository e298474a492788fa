from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from .container import build_registration_service
from .serializers import (
    PROFILE_SERIALIZERS,
    ProfileReadSerializer,
    RegistrationListQuerySerializer,
    RegistrationReadSerializer,
    RegistrationReviewSerializer,
)

logger = get_logger(__name__).bind(component="registrations", layer="view")

KIND_PARAMETER = OpenApiParameter(
    "kind", str, OpenApiParameter.PATH, enum=["vendor", "volunteer"]
)


@extend_schema(tags=["Registrations"])
class ProfileView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_registration_service()
    log = logger.bind(view="ProfileView")

    @extend_schema(
        summary="Get my vendor or volunteer profile",
        parameters=[KIND_PARAMETER],
        responses={
            200: ProfileReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, kind: str):
        dto = self.service.get_profile(kind, request.user.id)
        if not dto:
            return error_response(
                "NOT_FOUND",
                "Profile not found",
                {"kind": kind},
                hint="The profile is created with your first registration or a PUT.",
            )
        return Response(ProfileReadSerializer(dto).data)

    @extend_schema(
        summary="Create or update my vendor or volunteer profile",
        parameters=[KIND_PARAMETER],
        responses={
            200: ProfileReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, kind: str):
        serializer = PROFILE_SERIALIZERS[kind](data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.save_profile(kind, request.user.id, serializer.validated_data)
        self.log.info("Profile updated via API", kind=kind, user_id=request.user.id)
        return Response(ProfileReadSerializer(dto).data)


@extend_schema(tags=["Registrations"])
class EventRegistrationListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_registration_service()
    log = logger.bind(view="EventRegistrationListView")

    @extend_schema(
        summary="Vendor and volunteer registrations for an event (owner or admin)",
        parameters=[
            OpenApiParameter("event_id", int, OpenApiParameter.PATH),
            RegistrationListQuerySerializer,
        ],
        responses={
            200: RegistrationReadSerializer(many=True),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, event_id: int):
        query = RegistrationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data, error = self.service.list_for_event(
            event_id,
            kind=query.validated_data.get("kind"),
            status=query.validated_data.get("status"),
            actor_id=getattr(request, "validated_user_id", None),
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(RegistrationReadSerializer(data, many=True).data)


@extend_schema(tags=["Registrations"])
class RegistrationReviewView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_registration_service()
    log = logger.bind(view="RegistrationReviewView")

    @extend_schema(
        summary="Approve or reject a registration (event owner or admin)",
        parameters=[KIND_PARAMETER, OpenApiParameter("registration_id", int, OpenApiParameter.PATH)],
        request=RegistrationReviewSerializer,
        responses={
            200: RegistrationReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request, kind: str, registration_id: int):
        serializer = RegistrationReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.review(
            kind,
            registration_id,
            serializer.validated_data["status"],
            actor_id=getattr(request, "validated_user_id", None),
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
            notes=serializer.validated_data.get("notes"),
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(RegistrationReadSerializer(dto).data)
