from django.contrib import admin
from django.urls import path, include
from django.shortcuts import redirect
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.common.views import health_check

urlpatterns = [
    # Root -> API docs
    path("", lambda request: redirect("/api/docs/")),

    path("admin/", admin.site.urls),

    # unauthenticated, not under /v1
    path("health/", health_check, name="health-check"),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("v1/", include("core.iam.urls")),
    path("v1/", include("core.partners.urls")),
    path("v1/", include("core.leads.urls")),
    path("v1/", include("core.imports.urls")),
    path("v1/", include("core.audit.urls")),
]
