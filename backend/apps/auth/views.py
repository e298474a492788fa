from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.common import get_logger
from .container import build_registration_service, build_session_service
from .serializers import (
    DetailResponseSerializer,
    LogoutRequestSerializer,
    MeResponseSerializer,
    RegisterRequestSerializer,
    RegisterResponseSerializer,
    RoleTokenObtainPairSerializer,
    UsernameAvailabilityRequestSerializer,
    UsernameAvailabilityResponseSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class UsernameAvailabilityView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="UsernameAvailabilityView")

    @extend_schema(
        summary="Check username availability",
        parameters=[
            OpenApiParameter(
                name="username",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
            )
        ],
        responses={
            200: UsernameAvailabilityResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        serializer = UsernameAvailabilityRequestSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data["username"]
        available = self.service.is_username_available(username)
        self.log.debug("Username availability checked", username=username, available=available)
        return Response(
            UsernameAvailabilityResponseSerializer(
                {"username": username, "available": available}
            ).data
        )


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register user",
        request=RegisterRequestSerializer,
        responses={
            201: RegisterResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Processing registration request",
            username=serializer.validated_data.get("username"),
        )
        result = self.service.register(serializer.validated_data)
        if isinstance(result, tuple):
            code, message, details = result
            self.log.warning("Registration failed", code=code, detail=message)
            return error_response(code, message, details)
        self.log.info("Registration completed", user_id=result["id"])
        return Response(
            RegisterResponseSerializer(result).data, status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Auth"], summary="Login (JWT obtain pair)")
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = RoleTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(
    tags=["Auth"], summary="Get current user", responses={200: MeResponseSerializer}
)
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="MeView")

    def get(self, request):
        user = request.user
        self.log.debug("Returning current user profile", user_id=user.id)
        payload = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "name": getattr(user, "name", "") or "",
            "phone": getattr(user, "phone", None),
            "role": getattr(user, "role", "user"),
            "stripeConnected": bool(getattr(user, "stripe_account_id", None)),
            "lastLogin": getattr(user, "last_login", None),
            "dateJoined": getattr(user, "date_joined", None),
        }
        return Response(MeResponseSerializer(payload).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_session_service()
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Logout (blacklist refresh)",
        request=LogoutRequestSerializer,
        responses={
            200: DetailResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        error = self.service.logout(
            request.data.get("refresh"), getattr(request.user, "id", None)
        )
        if error:
            code, message, details = error
            return error_response(code, message, details)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)


@extend_schema(tags=["Auth"])
class LogoutAllView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_session_service()
    log = logger.bind(view="LogoutAllView")

    @extend_schema(
        summary="Logout from all devices",
        request=None,
        responses={
            200: DetailResponseSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        result = self.service.logout_all(request.user)
        return Response(result, status=status.HTTP_200_OK)
