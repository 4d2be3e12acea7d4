"""
Spreadsheet import: preview -> confirm | cancel.

preview() validates every row, flags duplicates against the partner's leads
and stores a DRAFT batch with one ImportRow per input row, failed rows
included. confirm() turns the rows that passed preview into leads, one
transaction per row, so a bad row never takes its siblings down with it.
"""
from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Union

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.audit.utils import audit
from core.common.exceptions import ApiError, BadRequest, NotFound
from core.common.phone import NormalizedPhone, normalize_from_international
from core.iam.tenancy import Actor, resolve_partner_id
from core.imports.dedupe import DuplicateMatch, MatchField, find_duplicate
from core.imports.models import ImportBatch, ImportRow
from core.imports.serializers import ImportRowSchemaSerializer
from core.leads.lifecycle import create_lead

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("student_name", "email", "phone", "school", "city")

DUPLICATE_PREFIX = "DUPLICATE_LEAD:"

MSG_INVALID_FIELDS = "Campos invalidos na linha"
MSG_PHONE_PREFIX = "Telefone deve iniciar com +"
MSG_INVALID_PHONE = "Telefone invalido"
MSG_LEAD_CREATE_FAILED = "Erro ao criar lead"

FIELD_LABELS = {
    MatchField.PHONE: "telefone",
    MatchField.EMAIL: "email",
    MatchField.NAME: "nome",
}

ERROR_MESSAGE_MAX = 500


class RowErrorKind(str, enum.Enum):
    INVALID_FIELDS = "invalid_fields"
    PHONE_PREFIX = "phone_prefix"
    INVALID_PHONE = "invalid_phone"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class RowOk:
    phone: NormalizedPhone


@dataclass(frozen=True)
class RowError:
    kind: RowErrorKind
    message: str
    phone: Optional[NormalizedPhone] = None
    duplicate: Optional[DuplicateMatch] = None


RowOutcome = Union[RowOk, RowError]


@dataclass
class PreviewResult:
    batch: ImportBatch
    total_rows: int = 0
    valid_rows: int = 0
    duplicate_rows: int = 0
    rows: List[Dict[str, str]] = field(default_factory=list)
    preview_rows: List[dict] = field(default_factory=list)
    errors_sample: List[dict] = field(default_factory=list)

    @property
    def invalid_rows(self) -> int:
        return self.total_rows - self.valid_rows

    def as_dict(self) -> dict:
        return {
            "import_id": self.batch.id,
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "invalid_rows": self.invalid_rows,
            "duplicate_rows": self.duplicate_rows,
            "preview_sample": self.rows,
            "preview_rows": self.preview_rows,
            "errors_sample": self.errors_sample,
        }


def batch_summary(batch: ImportBatch) -> dict:
    return {
        "import_id": str(batch.id),
        "status": batch.status,
        "total_rows": batch.total_rows,
        "success_rows": batch.success_rows,
        "error_rows": batch.error_rows,
    }


def duplicate_message(match: DuplicateMatch) -> str:
    labels = ", ".join(FIELD_LABELS[f] for f in match.ordered_fields())
    return f"{DUPLICATE_PREFIX} lead ja existe ({labels})"


def _cell(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def clean_row(row: Mapping) -> Dict[str, str]:
    return {col: _cell(row.get(col)) for col in REQUIRED_COLUMNS}


def check_row(partner_id, row: Mapping[str, str]) -> RowOutcome:
    """Validate one cleaned row. Expected failures come back as RowError."""
    if not ImportRowSchemaSerializer(data=row).is_valid():
        return RowError(RowErrorKind.INVALID_FIELDS, MSG_INVALID_FIELDS)

    if not row["phone"].startswith("+"):
        return RowError(RowErrorKind.PHONE_PREFIX, MSG_PHONE_PREFIX)

    try:
        phone = normalize_from_international(row["phone"])
    except ApiError:
        return RowError(RowErrorKind.INVALID_PHONE, MSG_INVALID_PHONE)

    match = find_duplicate(partner_id, row, phone.e164)
    if match:
        return RowError(RowErrorKind.DUPLICATE, duplicate_message(match), phone=phone, duplicate=match)

    return RowOk(phone=phone)


def _missing_columns(rows: Sequence[Mapping]) -> List[str]:
    header = set(rows[0].keys())
    return [c for c in REQUIRED_COLUMNS if c not in header]


def preview(partner_id, uploader, rows: Sequence[Mapping], filename: str) -> PreviewResult:
    """
    rows: the first sheet as dicts, header row already consumed.
    The sheet's first data row is row_number 2.
    """
    if not rows:
        raise BadRequest("Spreadsheet has no data rows")

    missing = _missing_columns(rows)
    if missing:
        raise BadRequest("Missing required columns", details={"missing_columns": missing})

    sample_size = settings.IMPORT_ERRORS_SAMPLE_SIZE
    cleaned = [clean_row(r) for r in rows]
    result = PreviewResult(batch=None, total_rows=len(cleaned), rows=cleaned)
    to_insert = []

    for index, row in enumerate(cleaned):
        row_number = index + 2
        outcome = check_row(partner_id, row)

        phone = outcome.phone
        error = outcome.message if isinstance(outcome, RowError) else None
        dup = outcome.duplicate if isinstance(outcome, RowError) else None

        if error is None:
            result.valid_rows += 1
        elif len(result.errors_sample) < sample_size:
            result.errors_sample.append({"row_number": row_number, "error": error})

        if dup is not None:
            result.duplicate_rows += 1

        to_insert.append(
            ImportRow(
                row_number=row_number,
                raw_data=row,
                normalized_phone_e164=phone.e164 if phone else None,
                success=error is None,
                error_message=error,
            )
        )
        result.preview_rows.append(
            {
                "row_number": row_number,
                **row,
                "is_duplicate": dup is not None,
                "duplicate_fields": [f.value for f in dup.ordered_fields()] if dup else [],
                "error": error,
            }
        )

    with transaction.atomic():
        batch = ImportBatch.objects.create(
            partner_id=partner_id,
            uploaded_by=uploader,
            filename=filename or "",
            total_rows=result.total_rows,
            success_rows=0,
            error_rows=0,
            status=ImportBatch.Status.DRAFT,
        )
        for r in to_insert:
            r.batch = batch
        ImportRow.objects.bulk_create(to_insert)

    result.batch = batch
    logger.info(
        "Import preview %s partner=%s rows=%s valid=%s duplicates=%s",
        batch.id, partner_id, result.total_rows, result.valid_rows, result.duplicate_rows,
    )
    return result


def get_batch(actor: Actor, batch_id) -> ImportBatch:
    # existence first, then partner scope
    batch = ImportBatch.objects.filter(id=batch_id).first()
    if not batch:
        raise NotFound("Import not found")
    resolve_partner_id(actor, batch.partner_id)
    return batch


def confirm(actor: Actor, batch_id, ignore_duplicates: bool = True, run_async: bool = False) -> ImportBatch:
    """
    Materialize the rows that passed preview into leads.

    With run_async the batch is returned in PROCESSING and the rows are handed
    to the process_import_batch Celery task.
    """
    batch = get_batch(actor, batch_id)
    if batch.status != ImportBatch.Status.DRAFT:
        raise BadRequest("Only DRAFT imports can be confirmed")

    has_duplicates = batch.rows.filter(error_message__startswith=DUPLICATE_PREFIX).exists()
    if has_duplicates and not ignore_duplicates:
        raise BadRequest(
            "Existem leads duplicados no preview. Marque para ignorar duplicados antes de confirmar.",
            details={"ignore_duplicates": False},
        )

    flipped = ImportBatch.objects.filter(id=batch.id, status=ImportBatch.Status.DRAFT).update(
        status=ImportBatch.Status.PROCESSING, updated_at=timezone.now()
    )
    if not flipped:
        raise BadRequest("Only DRAFT imports can be confirmed")

    audit(
        batch.partner_id,
        "import.confirmed",
        "import_batch",
        batch.id,
        actor_user_id=actor.id,
        data={"ignore_duplicates": ignore_duplicates, "run_async": run_async},
    )

    if run_async:
        from core.imports.tasks import process_import_batch

        process_import_batch.delay(str(batch.id), str(actor.id))
        batch.refresh_from_db()
        return batch

    return process_batch_rows(batch.id, actor.id)


def _error_text(exc: Exception) -> str:
    text = getattr(exc, "message", None) or str(exc) or MSG_LEAD_CREATE_FAILED
    return str(text)[:ERROR_MESSAGE_MAX]


def process_batch_rows(batch_id, actor_id) -> ImportBatch:
    """
    Row loop of confirm. Expects the batch in PROCESSING.
    Each row gets its own transaction; the final counts and status are
    written in one more.
    """
    batch = ImportBatch.objects.get(id=batch_id)
    rows = list(batch.rows.order_by("row_number"))

    created = 0
    failed = 0

    for row in rows:
        if not row.success or not row.normalized_phone_e164:
            failed += 1
            continue

        raw = row.raw_data or {}
        try:
            with transaction.atomic():
                phone = normalize_from_international(row.normalized_phone_e164)
                lead = create_lead(
                    partner_id=batch.partner_id,
                    created_by_id=actor_id,
                    student_name=_cell(raw.get("student_name")),
                    email=_cell(raw.get("email")),
                    phone=dataclasses.replace(phone, raw=_cell(raw.get("phone"))),
                    school=_cell(raw.get("school")),
                    city=_cell(raw.get("city")),
                )
                ImportRow.objects.filter(pk=row.pk).update(lead=lead, success=True, error_message=None)
            created += 1
        except Exception as e:
            # row failures are recorded on the row and never abort the batch
            logger.warning("Import %s row %s failed: %s", batch.id, row.row_number, e)
            ImportRow.objects.filter(pk=row.pk).update(success=False, error_message=_error_text(e))
            failed += 1

    total = len(rows)
    final_status = ImportBatch.Status.FAILED if failed == total else ImportBatch.Status.DONE

    with transaction.atomic():
        updated = ImportBatch.objects.filter(id=batch.id, status=ImportBatch.Status.PROCESSING).update(
            status=final_status,
            total_rows=total,
            success_rows=created,
            error_rows=failed,
            updated_at=timezone.now(),
        )

    if not updated:
        logger.warning("Import %s left PROCESSING before its rows finished; final counts not written", batch.id)
    else:
        logger.info("Import %s %s: created=%s failed=%s", batch.id, final_status, created, failed)

    batch.refresh_from_db()
    return batch


FINISHED_STATUSES = (ImportBatch.Status.DONE, ImportBatch.Status.FAILED)


def cancel(actor: Actor, batch_id) -> ImportBatch:
    """
    DRAFT or PROCESSING -> CANCELED. Canceling a CANCELED batch is a no-op.
    """
    batch = get_batch(actor, batch_id)
    if batch.status in FINISHED_STATUSES:
        raise BadRequest("Cannot cancel a finished import")
    if batch.status == ImportBatch.Status.CANCELED:
        return batch

    canceled = ImportBatch.objects.filter(
        id=batch.id, status__in=[ImportBatch.Status.DRAFT, ImportBatch.Status.PROCESSING]
    ).update(status=ImportBatch.Status.CANCELED, updated_at=timezone.now())
    if not canceled:
        batch.refresh_from_db()
        if batch.status == ImportBatch.Status.CANCELED:
            return batch
        raise BadRequest("Cannot cancel a finished import")

    audit(batch.partner_id, "import.canceled", "import_batch", batch.id, actor_user_id=actor.id)
    logger.info("Import %s canceled by %s", batch.id, actor.id)

    batch.refresh_from_db()
    return batch
