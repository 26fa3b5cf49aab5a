import logging

from celery import shared_task
from django.conf import settings

from .models import ProcessedImage, TransformationJob
from .pipeline import process_image

log = logging.getLogger(__name__)

# Hard cap above the worst-case poll duration, plus room for HTTP timeouts
TASK_TIME_LIMIT = int(
    settings.PREDICTION_POLL_INTERVAL * settings.PREDICTION_MAX_ATTEMPTS
    + 2 * settings.PREDICTION_REQUEST_TIMEOUT
    + 30
)


@shared_task(bind=True, time_limit=TASK_TIME_LIMIT)
def process_transformation(self, job_id):
    """
    Runs the pipeline for a TransformationJob and records the outcome on it.

    No Celery-level retry: failures are final for the job.
    """
    entry = TransformationJob.objects.get(id=job_id)
    log.info(f"[TASK {self.request.id}] Processing job {entry.id} ({entry.filter_type})")

    entry.status = 'PROCESSING'
    entry.save(update_fields=['status', 'updated_at'])

    try:
        result = process_image(entry.image_url, entry.filter_type, entry.filter_settings)

        if 'error' in result:
            entry.status = 'FAILED'
            entry.error_kind = result['kind']
            entry.error_log = result['error']
            entry.save()
            log.warning(f"[TASK {self.request.id}] Job {entry.id} failed: {result['error']}")
            return {"status": "failed", "kind": result['kind'], "error": result['error']}

        entry.result = ProcessedImage.objects.get(id=result['id'])
        entry.status = 'COMPLETED'
        entry.save()
        log.info(f"[TASK {self.request.id}] Job {entry.id} completed")
        return {"status": "success", "id": result['id']}

    except Exception as e:
        log.error(f"[TASK {self.request.id}] Job {entry.id} crashed: {e}", exc_info=True)
        entry.result = None
        entry.status = 'FAILED'
        entry.error_kind = 'internal'
        entry.error_log = f"Permanent error: {e}"
        entry.save()
        return {"status": "failed", "kind": "internal", "error": str(e)}
