import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone


class ImportBatch(models.Model):
    """
    One spreadsheet upload.
    DRAFT -> PROCESSING -> DONE | FAILED, DRAFT/PROCESSING -> CANCELED.
    """

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PROCESSING = "PROCESSING", "Processing"
        DONE = "DONE", "Done"
        FAILED = "FAILED", "Failed"
        CANCELED = "CANCELED", "Canceled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    partner = models.ForeignKey("partners.Partner", on_delete=models.PROTECT, related_name="import_batches")
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="import_batches"
    )

    filename = models.CharField(max_length=255)

    total_rows = models.PositiveIntegerField(default=0)
    success_rows = models.PositiveIntegerField(default=0)
    error_rows = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.DRAFT)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "import_batches"
        indexes = [models.Index(fields=["partner", "created_at"], name="imports_partner_created_idx")]


class ImportRow(models.Model):
    id = models.BigAutoField(primary_key=True)

    batch = models.ForeignKey("imports.ImportBatch", on_delete=models.CASCADE, related_name="rows")

    # spreadsheet line: header is 1, first data row is 2
    row_number = models.PositiveIntegerField()
    raw_data = models.JSONField(default=dict)

    normalized_phone_e164 = models.CharField(max_length=20, null=True, blank=True)
    success = models.BooleanField(default=False)
    error_message = models.CharField(max_length=500, null=True, blank=True)

    lead = models.ForeignKey(
        "leads.Lead", on_delete=models.SET_NULL, null=True, blank=True, related_name="import_rows"
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "import_rows"
        constraints = [
            models.UniqueConstraint(fields=["batch", "row_number"], name="uq_import_row_batch_number"),
        ]
