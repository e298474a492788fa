from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

from django.contrib.auth.hashers import make_password
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import (
    BlacklistedToken,
    OutstandingToken,
)
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common import get_logger
from .protocols import UserRegistrationRepositoryProtocol

logger = get_logger(__name__).bind(component="auth", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class RegistrationService:
    def __init__(self, users: UserRegistrationRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="RegistrationService")

    def _build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        phone = (data.get("phone") or "").strip()
        return {
            "username": data["username"].strip(),
            "email": data["email"].strip().lower(),
            "password": make_password(data["password"]),
            "name": (data.get("name") or "").strip(),
            "phone": phone or None,
        }

    def _check_uniqueness(self, username: str, email: str) -> Optional[ErrorTuple]:
        if self.users.username_exists(username):
            self.logger.info(
                "Registration rejected: username already exists", username=username
            )
            return ("VALIDATION_ERROR", "Username already exists", {"username": username})
        if self.users.email_exists(email):
            self.logger.info("Registration rejected: email already exists", email=email)
            return ("VALIDATION_ERROR", "Email is already registered", {"email": email})
        return None

    def register(self, data: Dict[str, Any]) -> Union[Dict[str, Any], ErrorTuple]:
        """Create a ``user``-role account; returns the public fields or an error tuple."""
        username = data["username"].strip()
        email = data["email"].strip().lower()
        self.logger.debug("Received registration request", username=username, email=email)
        conflict = self._check_uniqueness(username, email)
        if conflict:
            return conflict
        user = self.users.create_user(**self._build_payload(data))
        self.logger.info(
            "User registered successfully", user_id=user.id, username=user.username
        )
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "name": getattr(user, "name", "") or "",
            "role": getattr(user, "role", "user"),
        }

    def is_username_available(self, username: str) -> bool:
        normalized = username.strip()
        self.logger.debug("Checking username availability", username=normalized)
        return not self.users.username_exists(normalized)


class SessionService:
    def __init__(self):
        self.logger = logger.bind(service="SessionService")

    def logout(self, refresh_token: Optional[str], actor_id: Optional[int]) -> Optional[ErrorTuple]:
        if not refresh_token:
            self.logger.warning("Logout rejected: missing refresh token", actor_id=actor_id)
            return ("VALIDATION_ERROR", "Invalid token", {"refresh": None})
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as exc:
            self.logger.warning("Logout failed: token error", actor_id=actor_id, error=str(exc))
            return ("VALIDATION_ERROR", "Invalid token", {"error": str(exc)})
        self.logger.info("User logged out", actor_id=actor_id)
        return None

    def logout_all(self, user) -> Dict[str, Union[int, str]]:
        user_id = getattr(user, "id", None)
        invalidated = 0
        for token in OutstandingToken.objects.filter(user=user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            if created:
                invalidated += 1
        self.logger.info(
            "User logged out from all devices",
            actor_id=user_id,
            tokens_invalidated=invalidated,
        )
        return {"detail": "Logged out from all devices", "tokens_invalidated": invalidated}
