from dataclasses import dataclass
from typing import Optional

from .models import User


@dataclass
class UserDTO:
    id: int
    username: str
    email: str
    name: str
    phone: Optional[str]
    role: str
    stripe_connected: bool
    date_joined: Optional[str]


def user_to_dto(u: User) -> UserDTO:
    joined = getattr(u, "date_joined", None)
    if joined is not None:
        try:
            joined = joined.isoformat()
        except AttributeError:
            joined = str(joined)
    return UserDTO(
        id=u.id,
        username=u.username,
        email=u.email,
        name=u.name or "",
        phone=u.phone,
        role=u.role,
        stripe_connected=bool(getattr(u, "stripe_account_id", None)),
        date_joined=joined,
    )
