from django.urls import path
from core.leads.api import lead_detail, lead_generate_message, lead_history, leads

urlpatterns = [
    path("leads", leads, name="leads"),
    path("leads/<uuid:lead_id>", lead_detail, name="lead-detail"),
    path("leads/<uuid:lead_id>/history", lead_history, name="lead-history"),
    path("leads/<uuid:lead_id>/generate-message", lead_generate_message, name="lead-generate-message"),
]
