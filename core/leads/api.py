from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.exceptions import NotFound
from core.common.phone import normalize_from_country_and_national
from core.iam.tenancy import Actor, resolve_partner_id, resolve_required_partner_id
from core.leads import lifecycle
from core.leads.models import Lead
from core.leads.serializers import (
    ContactEventSerializer,
    LeadCreateSerializer,
    LeadListQuerySerializer,
    LeadSerializer,
    LeadStatusHistorySerializer,
    LeadUpdateSerializer,
)
from core.partners.models import Partner


def _get_scoped_lead(request, lead_id) -> Lead:
    # existence first, then partner scope (403 on mismatch)
    lead = Lead.objects.filter(id=lead_id).first()
    if not lead:
        raise NotFound("Lead not found")
    resolve_partner_id(Actor.from_user(request.user), lead.partner_id)
    return lead


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def leads(request):
    """
    GET /v1/leads
    Query:
      partner_id=<uuid optional; PARTNER may only pass its own>
      status=<NEW|FIRST_CONTACT|RESPONDED|NO_RESPONSE|WON|LOST optional>
      school=, city=, search=<name/email/phone, case-insensitive>
      page=<int, default 1>, page_size=<int, default 20, max 100>

    POST /v1/leads
    Body: { partner_id?, student_name, email, phone_country, phone_national, school, city }
    """
    if request.method == "POST":
        return _create_lead(request)

    actor = Actor.from_user(request.user)
    partner_id = resolve_partner_id(actor, request.query_params.get("partner_id"))

    s = LeadListQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    q = s.validated_data

    qs = Lead.objects.all()
    if partner_id:
        qs = qs.filter(partner_id=partner_id)
    if q.get("status"):
        qs = qs.filter(status=q["status"])
    if q.get("school"):
        qs = qs.filter(school__icontains=q["school"])
    if q.get("city"):
        qs = qs.filter(city__icontains=q["city"])
    search = (q.get("search") or "").strip()
    if search:
        qs = qs.filter(
            Q(student_name__icontains=search) |
            Q(email__icontains=search) |
            Q(phone_e164__icontains=search)
        )

    qs = qs.order_by("-created_at", "-id")
    page, page_size = q["page"], q["page_size"]
    offset = (page - 1) * page_size

    total = qs.count()
    items = qs[offset: offset + page_size]

    return Response(
        {
            "items": LeadSerializer(items, many=True).data,
            "pagination": {"page": page, "page_size": page_size, "total": total},
        }
    )


def _create_lead(request):
    s = LeadCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    actor = Actor.from_user(request.user)
    partner_id = resolve_required_partner_id(actor, data.get("partner_id"))
    if actor.is_master and not Partner.objects.filter(id=partner_id).exists():
        raise NotFound("Partner not found")

    phone = normalize_from_country_and_national(data["phone_country"], data["phone_national"])

    lead = lifecycle.create_lead(
        partner_id=partner_id,
        created_by_id=actor.id,
        student_name=data["student_name"],
        email=data["email"],
        phone=phone,
        school=data["school"],
        city=data["city"],
    )
    return Response(LeadSerializer(lead).data, status=status.HTTP_201_CREATED)


@api_view(["GET", "PATCH"])
@permission_classes([IsAuthenticated])
def lead_detail(request, lead_id):
    """
    GET   /v1/leads/{lead_id}
    PATCH /v1/leads/{lead_id}
    Body: any of student_name, email, phone_country, phone_national, school, city,
          status (MASTER only), note
    """
    lead = _get_scoped_lead(request, lead_id)

    if request.method == "GET":
        return Response(LeadSerializer(lead).data)

    s = LeadUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)

    updated = lifecycle.patch_lead(Actor.from_user(request.user), lead, dict(s.validated_data))
    return Response(LeadSerializer(updated).data)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def lead_history(request, lead_id):
    """
    GET /v1/leads/{lead_id}/history
    Status history and contact events, newest first.
    """
    lead = _get_scoped_lead(request, lead_id)

    history = lead.status_history.order_by("-created_at", "-id")
    events = lead.contact_events.order_by("-created_at", "-id")

    return Response(
        {
            "lead_id": lead.id,
            "status_history": LeadStatusHistorySerializer(history, many=True).data,
            "contact_events": ContactEventSerializer(events, many=True).data,
        }
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def lead_generate_message(request, lead_id):
    """
    POST /v1/leads/{lead_id}/generate-message
    """
    lead = _get_scoped_lead(request, lead_id)

    result = lifecycle.generate_message(Actor.from_user(request.user), lead)
    return Response(
        {
            "lead": LeadSerializer(result.lead).data,
            "template_version": result.template_version,
            "channel": result.channel,
            "to_address": result.to_address,
            "message": result.message,
        }
    )
