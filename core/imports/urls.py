from django.urls import path
from core.imports.api import import_cancel, import_confirm, import_detail, import_preview

urlpatterns = [
    path("imports/xls/preview", import_preview, name="import-preview"),
    path("imports/<uuid:import_id>", import_detail, name="import-detail"),
    path("imports/<uuid:import_id>/confirm", import_confirm, name="import-confirm"),
    path("imports/<uuid:import_id>/cancel", import_cancel, name="import-cancel"),
]
