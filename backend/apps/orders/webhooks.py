"""
Stripe webhook endpoint.

Only Checkout Session events are acted on; everything else is acknowledged
so Stripe stops retrying.
"""

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.api.exceptions import ApplicationError
from apps.common import get_logger
from .container import build_checkout_service

logger = get_logger(__name__).bind(component="orders", layer="webhook")

PAID_EVENTS = frozenset(
    {"checkout.session.completed", "checkout.session.async_payment_succeeded"}
)
FAILED_EVENTS = frozenset(
    {"checkout.session.expired", "checkout.session.async_payment_failed"}
)
SETTLED_PAYMENT_STATUSES = frozenset({"paid", "no_payment_required"})


def _error(exc: ApplicationError) -> JsonResponse:
    response = exc.to_response()
    return JsonResponse(response.data, status=response.status_code)


@csrf_exempt
@require_POST
def stripe_webhook(request):
    service = build_checkout_service()
    try:
        event = service.gateway.construct_event(
            request.body, request.META.get("HTTP_STRIPE_SIGNATURE")
        )
    except ApplicationError as exc:
        return _error(exc)

    event_type = event["type"]
    session = event["data"]["object"]
    log = logger.bind(event_type=event_type, event_id=event["id"])

    if event_type in PAID_EVENTS:
        if session["payment_status"] in SETTLED_PAYMENT_STATUSES:
            order = service.fulfill_session(session["id"], session["payment_intent"])
            log.info(
                "Checkout session settled",
                session_id=session["id"],
                order_number=getattr(order, "order_number", None),
            )
        else:
            log.info("Checkout session awaiting async payment", session_id=session["id"])
    elif event_type in FAILED_EVENTS:
        service.cancel_session(session["id"])
        log.info("Checkout session closed without payment", session_id=session["id"])
    else:
        log.debug("Unhandled webhook event")

    return JsonResponse({"received": True})
