from rest_framework import serializers

from core.imports.models import ImportBatch, ImportRow


class ImportRowSchemaSerializer(serializers.Serializer):
    """Shape check for one spreadsheet row (all cells already stringified)."""

    student_name = serializers.CharField(min_length=2, max_length=160)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=4, max_length=40)
    school = serializers.CharField(min_length=2, max_length=160)
    city = serializers.CharField(min_length=2, max_length=120)


class ImportPreviewUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    partner_id = serializers.UUIDField(required=False, allow_null=True)


class ImportConfirmSerializer(serializers.Serializer):
    ignore_duplicates = serializers.BooleanField(required=False, default=True)
    run_async = serializers.BooleanField(required=False, default=False)


class ImportRowSerializer(serializers.ModelSerializer):
    class Meta:
        model = ImportRow
        fields = [
            "id",
            "row_number",
            "raw_data",
            "normalized_phone_e164",
            "success",
            "error_message",
            "lead_id",
            "created_at",
        ]


class ImportBatchSerializer(serializers.ModelSerializer):
    class Meta:
        model = ImportBatch
        fields = [
            "id",
            "partner_id",
            "uploaded_by_id",
            "filename",
            "status",
            "total_rows",
            "success_rows",
            "error_rows",
            "created_at",
            "updated_at",
        ]
