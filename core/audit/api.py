from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.audit.models import AuditLog
from core.iam.tenancy import Actor, resolve_partner_id


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def audit_logs(request):
    """
    GET /v1/audit/logs?partner_id=<uuid optional>
    MASTER: all logs, or one partner's. PARTNER: own partner only.
    """
    partner_id = resolve_partner_id(Actor.from_user(request.user), request.query_params.get("partner_id"))

    qs = AuditLog.objects.all()
    if partner_id:
        qs = qs.filter(partner_id=partner_id)
    qs = qs.order_by("-created_at", "-id")[:200]

    return Response({
        "items": [
            {
                "action": a.action,
                "entity_type": a.entity_type,
                "entity_id": a.entity_id,
                "partner_id": a.partner_id,
                "actor_user_id": a.actor_user_id,
                "data": a.data_json,
                "created_at": a.created_at,
            }
            for a in qs
        ]
    })
