from __future__ import annotations

from typing import List, Optional, Tuple, Any

from apps.common import get_logger
from .dtos import UserDTO, user_to_dto
from .models import User
from .protocols import UserRepositoryProtocol

logger = get_logger(__name__).bind(component="users", layer="service")

ErrorTuple = Tuple[str, str, Optional[Any]]


class UserService:
    def __init__(self, users: UserRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="UserService")

    def list_users(
        self, *, search: Optional[str] = None, role: Optional[str] = None
    ) -> Tuple[Optional[List[UserDTO]], Optional[ErrorTuple]]:
        if role and role not in User.Role.values:
            self.logger.info("Rejected unknown role filter", role=role)
            return None, (
                "VALIDATION_ERROR",
                "Invalid role",
                {"role": role, "allowed": list(User.Role.values)},
            )
        self.logger.debug("Listing users", search=search, role=role)
        return [user_to_dto(u) for u in self.users.search(query=search, role=role)], None

    def get_user(self, user_id: int) -> Optional[UserDTO]:
        self.logger.debug("Fetching user", user_id=user_id)
        user = self.users.get(id=user_id)
        if not user:
            self.logger.info("User not found", user_id=user_id)
            return None
        return user_to_dto(user)

    def update_role(
        self, user_id: int, role: str, *, actor_id: Optional[int] = None
    ) -> Tuple[Optional[UserDTO], Optional[ErrorTuple]]:
        """Change a user's role; admins cannot demote themselves."""
        if role not in User.Role.values:
            self.logger.info("Rejected invalid role", user_id=user_id, role=role)
            return None, (
                "VALIDATION_ERROR",
                "Invalid role",
                {"role": role, "allowed": list(User.Role.values)},
            )
        user = self.users.get(id=user_id)
        if not user:
            self.logger.warning("Role update failed: user not found", user_id=user_id)
            return None, ("NOT_FOUND", "User not found", {"id": str(user_id)})
        if actor_id is not None and actor_id == user.id and role != User.Role.ADMIN:
            self.logger.warning("Admin attempted self-demotion", user_id=user_id)
            return None, (
                "FORBIDDEN",
                "You cannot remove your own admin role",
                None,
            )
        previous = user.role
        user = self.users.update_scalar(user, role=role)
        self.logger.info(
            "User role updated",
            user_id=user.id,
            previous_role=previous,
            role=role,
            actor_id=actor_id,
        )
        return user_to_dto(user), None
