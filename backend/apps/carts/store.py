from typing import Optional

from django.conf import settings

from apps.common import get_logger
from .coordinator import CartSession

logger = get_logger(__name__).bind(component="carts", layer="store")


class SessionCartStore:
    """Binds a ``CartSession`` to a Django session under ``CART_SESSION_KEY``."""

    def __init__(self, session, key: Optional[str] = None):
        self.session = session
        self.key = key or getattr(settings, "CART_SESSION_KEY", "cart")

    @classmethod
    def for_request(cls, request) -> "SessionCartStore":
        return cls(request.session)

    def load(self) -> CartSession:
        return CartSession.from_dict(self.session.get(self.key))

    def save(self, cart: CartSession) -> None:
        self.session[self.key] = cart.to_dict()
        self.session.modified = True
        logger.debug("Cart saved to session", items=len(cart))

    def clear(self) -> None:
        if self.key in self.session:
            del self.session[self.key]
            self.session.modified = True
        logger.debug("Cart cleared from session")
