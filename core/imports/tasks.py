import logging

from celery import shared_task

from core.imports.models import ImportBatch

logger = logging.getLogger(__name__)


@shared_task
def process_import_batch(batch_id, actor_id):
    from core.imports.pipeline import batch_summary, process_batch_rows

    batch = ImportBatch.objects.filter(id=batch_id).first()
    if not batch:
        logger.warning("Import %s vanished before processing", batch_id)
        return None

    if batch.status != ImportBatch.Status.PROCESSING:
        logger.info("Import %s is %s, nothing to process", batch_id, batch.status)
        return batch_summary(batch)

    return batch_summary(process_batch_rows(batch.id, actor_id))
