from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.audit.utils import audit
from core.common.exceptions import BadRequest, NotFound
from core.iam.permissions import IsMaster
from core.partners.models import Partner
from core.partners.serializers import (
    PartnerCreateSerializer,
    PartnerSerializer,
    PartnerUpdateSerializer,
)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def partner_me(request):
    """
    GET /v1/partners/me
    MASTER gets a synthetic platform entry; PARTNER gets its own partner.
    """
    user = request.user
    if user.is_master:
        return Response({"id": None, "name": "MASTER", "is_active": True})

    if not user.partner_id:
        raise NotFound("User has no partner")

    partner = Partner.objects.filter(id=user.partner_id).first()
    if not partner:
        raise NotFound("Partner not found")

    return Response(PartnerSerializer(partner).data)


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated, IsMaster])
def partners(request):
    """
    GET  /v1/partners
    POST /v1/partners  { "name": "..." }
    """
    if request.method == "GET":
        qs = Partner.objects.all().order_by("-created_at")
        return Response({"items": PartnerSerializer(qs, many=True).data})

    s = PartnerCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)

    partner = Partner.objects.create(name=s.validated_data["name"])
    audit(partner.id, "partner.created", "partner", partner.id, actor_user_id=request.user.id, data={"name": partner.name})

    return Response(PartnerSerializer(partner).data, status=status.HTTP_201_CREATED)


@api_view(["PATCH"])
@permission_classes([IsAuthenticated, IsMaster])
def partner_detail(request, partner_id):
    """
    PATCH /v1/partners/{partner_id}  { "name"?: "...", "is_active"?: bool }
    Deactivating a partner keeps its users and leads.
    """
    partner = Partner.objects.filter(id=partner_id).first()
    if not partner:
        raise NotFound("Partner not found")

    s = PartnerUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = s.validated_data
    if not data:
        raise BadRequest("Provide at least one field to update")

    update_fields = []
    if "name" in data:
        partner.name = data["name"]
        update_fields.append("name")
    if "is_active" in data:
        partner.is_active = data["is_active"]
        update_fields.append("is_active")

    partner.save(update_fields=update_fields)
    audit(partner.id, "partner.updated", "partner", partner.id, actor_user_id=request.user.id, data=dict(data))

    return Response(PartnerSerializer(partner).data)
