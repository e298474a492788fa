"""Stripe Checkout gateway."""

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

import stripe
from django.conf import settings

from apps.api.exceptions import ApplicationError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="orders", layer="payments")


class PaymentError(ApplicationError):
    default_code = "PAYMENT_ERROR"
    default_message = "Payment provider request failed"


class WebhookVerificationError(ApplicationError):
    default_code = "VALIDATION_ERROR"
    default_message = "Invalid webhook payload or signature"


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1")))


class StripeCheckoutGateway:
    def __init__(
        self,
        api_key: Optional[str] = None,
        webhook_secret: Optional[str] = None,
        currency: Optional[str] = None,
    ):
        self._api_key = api_key
        self._webhook_secret = webhook_secret
        self._currency = currency

    # Resolved from settings on each access unless given explicitly.

    @property
    def api_key(self) -> str:
        return self._api_key if self._api_key is not None else settings.STRIPE_SECRET_KEY

    @property
    def webhook_secret(self) -> str:
        if self._webhook_secret is not None:
            return self._webhook_secret
        return settings.STRIPE_WEBHOOK_SECRET

    @property
    def currency(self) -> str:
        return self._currency or settings.STRIPE_CURRENCY

    @property
    def api_version(self) -> Optional[str]:
        return getattr(settings, "STRIPE_API_VERSION", None)

    def _request_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"api_key": self.api_key}
        if self.api_version:
            options["stripe_version"] = self.api_version
        return options

    def create_checkout_session(
        self,
        *,
        order_number: str,
        line_items: Iterable[Dict[str, Any]],
        customer_email: Optional[str] = None,
        destination_account: Optional[str] = None,
    ):
        """
        Create a hosted Checkout Session for an order.

        ``line_items`` carry ``name``, ``unit_price`` (Decimal) and ``quantity``.
        With ``destination_account`` the payment is transferred to that
        connected account without a platform fee.
        """
        if not self.api_key:
            logger.error("Stripe secret key missing; cannot start checkout")
            raise PaymentError(message="Payments are not configured")
        base_url = settings.FRONTEND_BASE_URL
        params: Dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {"name": item["name"]},
                        "unit_amount": to_minor_units(item["unit_price"]),
                    },
                    "quantity": item["quantity"],
                }
                for item in line_items
            ],
            "client_reference_id": order_number,
            "metadata": {"order_number": order_number},
            "success_url": f"{base_url}/order-success?order={order_number}&session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{base_url}/checkout?cancelled=true&order={order_number}",
        }
        if customer_email:
            params["customer_email"] = customer_email
        if destination_account:
            params["payment_intent_data"] = {
                "application_fee_amount": 0,
                "transfer_data": {"destination": destination_account},
            }
        try:
            session = stripe.checkout.Session.create(**params, **self._request_options())
        except stripe.StripeError as exc:
            logger.error(
                "Stripe checkout session failed",
                order_number=order_number,
                error=getattr(exc, "user_message", None) or str(exc),
            )
            raise PaymentError(details={"orderNumber": order_number}) from exc
        logger.info(
            "Stripe checkout session created",
            order_number=order_number,
            session_id=session.id,
            transfer=bool(destination_account),
        )
        return session

    def construct_event(self, payload: bytes, signature: Optional[str]):
        if not self.webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured")
            raise PaymentError(message="Webhook is not configured", status_code=500)
        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as exc:
            logger.warning("Webhook payload could not be parsed", error=str(exc))
            raise WebhookVerificationError(message="Invalid payload") from exc
        except stripe.SignatureVerificationError as exc:
            logger.warning("Webhook signature verification failed", error=str(exc))
            raise WebhookVerificationError(message="Invalid signature") from exc
