from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer

from apps.api.validation import validate_request_context
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="middleware")


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Applies the per-view access rules (authentication, roles, identifier
    parsing) before the request reaches the view.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = getattr(view_func, "view_class", None)
        if not view_class:
            return None
        view_name = getattr(view_class, "__name__", str(view_class))
        method = getattr(request, "method", None)
        logger.debug("Validating request context", view=view_name, method=method)
        response = validate_request_context(request, view_class, view_kwargs)
        if response is not None:
            _attach_renderer(response)
            logger.info(
                "Request blocked by validation",
                view=view_name,
                method=method,
                status=getattr(response, "status_code", None),
            )
        return response


def _attach_renderer(response):
    # Responses returned here never pass through APIView.finalize_response.
    if getattr(response, "accepted_renderer", None) is None:
        response.accepted_renderer = JSONRenderer()
        response.accepted_media_type = "application/json"
        response.renderer_context = {}
    return response
