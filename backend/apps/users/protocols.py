from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.users.models import User


class UserRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable["User"]: ...

    def search(
        self, query: Optional[str] = None, role: Optional[str] = None
    ) -> Iterable["User"]: ...

    def get(self, **filters) -> Optional["User"]: ...

    def create_user(self, **data) -> "User": ...

    def update_scalar(self, obj: "User", **fields) -> "User": ...
