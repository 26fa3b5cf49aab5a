import logging
import time

from .exceptions import JobFailedError, PollTimeoutError, TransportError
from .prediction import PredictionClient

log = logging.getLogger(__name__)


def poll_until_complete(client: PredictionClient, job_id: str, interval: float = 1.0,
                        max_attempts: int = 30, sleep=time.sleep) -> str:
    """
    Query a prediction until it finishes and return its output reference.

    One query per attempt, `interval` seconds apart. There is no wait after
    the query that exhausts the budget.

    Raises:
        JobFailedError: the service reported a terminal failure
        PollTimeoutError: `max_attempts` queries without a terminal state
        TransportError: a status query failed; never retried
    """
    if not job_id:
        raise ValueError("job_id must be non-empty")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            job = client.poll(job_id)
        except TransportError:
            log.warning(f"[POLL] {job_id}: status query failed on attempt {attempt}")
            raise
        except Exception as e:
            log.warning(f"[POLL] {job_id}: status query failed on attempt {attempt}: {e}")
            raise TransportError(f"Failed to check prediction status: {e}") from e

        if job.succeeded:
            log.info(f"[POLL] {job_id}: succeeded after {attempt} queries")
            return job.output

        if job.failed:
            log.info(f"[POLL] {job_id}: {job.status} on attempt {attempt}")
            raise JobFailedError("Image processing failed")

        log.debug(f"[POLL] {job_id}: status={job.status!r} ({attempt}/{max_attempts})")
        if attempt < max_attempts:
            sleep(interval)

    log.warning(f"[POLL] {job_id}: no terminal state after {max_attempts} queries")
    raise PollTimeoutError("Processing timeout")
