from pathlib import Path

from django.conf import settings
from django.contrib import admin
from django.http import HttpResponse, JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from apps.common.views import live_health, ready_health
from apps.orders.webhooks import stripe_webhook

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.api.urls")),
    # Signature verification needs the raw request body.
    path("api/payments/webhook/", stripe_webhook, name="payments-webhook"),
    path("health/live", live_health, name="health-live"),
    path("health/ready", ready_health, name="health-ready"),
]


def _static_schema(fmt: str):  # pragma: no cover (simple IO)
    filename = "openapi.json" if fmt == "json" else "openapi.yaml"
    file_path = Path(settings.BASE_DIR) / "static" / "schema" / filename
    if not file_path.exists():
        return JsonResponse(
            {
                "error": "schema_not_found",
                "message": "Static schema not found. Export it or enable DEBUG for the dynamic schema.",
            },
            status=404,
        )
    content_type = "application/json" if fmt == "json" else "application/yaml"
    return HttpResponse(file_path.read_text(), content_type=content_type)


if settings.DEBUG:
    schema_url_name = "schema"
    urlpatterns += [path("schema/", SpectacularAPIView.as_view(), name="schema")]
else:
    schema_url_name = "schema-json"
    urlpatterns += [
        path("schema/", lambda r: _static_schema("json"), name="schema-json"),
        path("schema.yaml", lambda r: _static_schema("yaml"), name="schema-yaml"),
    ]

urlpatterns += [
    path(
        "docs/swagger/",
        SpectacularSwaggerView.as_view(url_name=schema_url_name),
        name="swagger-ui",
    ),
    path(
        "docs/redoc/",
        SpectacularRedocView.as_view(url_name=schema_url_name),
        name="redoc",
    ),
]
