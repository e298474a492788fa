from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from .container import build_user_service
from .serializers import (
    UserListQuerySerializer,
    UserRoleUpdateSerializer,
    UserSerializer,
)

logger = get_logger(__name__).bind(component="users", layer="view")


@extend_schema(tags=["Users"])
class UserListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserListView")

    @extend_schema(
        summary="List users (admin)",
        parameters=[
            OpenApiParameter("search", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                "role",
                str,
                OpenApiParameter.QUERY,
                required=False,
                enum=["user", "event_owner", "admin"],
            ),
        ],
        responses={
            200: UserSerializer(many=True),
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        query = UserListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        self.log.debug("Listing users via API", **query.validated_data)
        data, error = self.service.list_users(
            search=query.validated_data.get("search") or None,
            role=query.validated_data.get("role"),
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(UserSerializer(data, many=True).data)


@extend_schema(tags=["Users"])
class UserRoleView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserRoleView")

    @extend_schema(
        summary="Change a user's role (admin)",
        parameters=[OpenApiParameter("user_id", int, OpenApiParameter.PATH)],
        request=UserRoleUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, user_id: int):
        serializer = UserRoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor_id = getattr(request, "validated_user_id", None)
        role = serializer.validated_data["role"]
        self.log.info("Updating user role", user_id=user_id, role=role, actor_id=actor_id)
        dto, error = self.service.update_role(user_id, role, actor_id=actor_id)
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response(UserSerializer(dto).data)

    patch = put
