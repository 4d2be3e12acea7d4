from django.urls import path
from .api import partner_detail, partner_me, partners

urlpatterns = [
    path("partners/me", partner_me, name="partner-me"),
    path("partners", partners, name="partners"),
    path("partners/<uuid:partner_id>", partner_detail, name="partner-detail"),
]
