from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.common.exceptions import BadRequest, NotFound
from core.iam.tenancy import Actor, resolve_required_partner_id
from core.imports import pipeline
from core.imports.serializers import (
    ImportBatchSerializer,
    ImportConfirmSerializer,
    ImportPreviewUploadSerializer,
    ImportRowSerializer,
)
from core.imports.spreadsheet import read_first_sheet
from core.partners.models import Partner


@api_view(["POST"])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def import_preview(request):
    """
    POST /v1/imports/xls/preview
    multipart: file=<.xls|.xlsx|.csv>, partner_id=<uuid optional>
    Columns: student_name, email, phone, school, city
    """
    if "file" not in request.FILES:
        raise BadRequest("Missing file field 'file'")

    s = ImportPreviewUploadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    upload = s.validated_data["file"]

    if upload.size > settings.IMPORT_MAX_UPLOAD_BYTES:
        raise BadRequest(
            "File too large",
            details={"max_bytes": settings.IMPORT_MAX_UPLOAD_BYTES, "size": upload.size},
        )

    actor = Actor.from_user(request.user)
    partner_id = resolve_required_partner_id(actor, s.validated_data.get("partner_id"))
    if actor.is_master and not Partner.objects.filter(id=partner_id).exists():
        raise NotFound("Partner not found")

    rows = read_first_sheet(upload.read(), upload.name)
    result = pipeline.preview(partner_id, request.user, rows, upload.name)

    return Response(result.as_dict(), status=status.HTTP_201_CREATED)


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def import_detail(request, import_id):
    """
    GET /v1/imports/{import_id}
    Batch plus every stored row, in sheet order.
    """
    batch = pipeline.get_batch(Actor.from_user(request.user), import_id)
    data = ImportBatchSerializer(batch).data
    data["rows"] = ImportRowSerializer(batch.rows.order_by("row_number"), many=True).data
    return Response(data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
@parser_classes([JSONParser, FormParser])
def import_confirm(request, import_id):
    """
    POST /v1/imports/{import_id}/confirm
    Body: { "ignore_duplicates": true, "run_async": false }
    """
    s = ImportConfirmSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    run_async = s.validated_data["run_async"]

    batch = pipeline.confirm(
        Actor.from_user(request.user),
        import_id,
        ignore_duplicates=s.validated_data["ignore_duplicates"],
        run_async=run_async,
    )
    return Response(
        pipeline.batch_summary(batch),
        status=status.HTTP_202_ACCEPTED if run_async else status.HTTP_200_OK,
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def import_cancel(request, import_id):
    """
    POST /v1/imports/{import_id}/cancel
    """
    batch = pipeline.cancel(Actor.from_user(request.user), import_id)
    return Response(ImportBatchSerializer(batch).data)
