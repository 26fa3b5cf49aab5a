"""
Transformation pipeline.

validate -> submit -> poll until complete -> persist

Caller-facing entry points never raise: every failure is turned into
{"error": message, "kind": kind}.
"""

import logging
import time
from collections.abc import Mapping

from django.conf import settings as django_settings

from .exceptions import EnchanterError
from .models import ProcessedImage
from .polling import poll_until_complete
from .prediction import TransformationRequest, get_prediction_client

logger = logging.getLogger(__name__)

VALID_FILTERS = ("grayscale", "sepia", "blur", "contrast", "ghibli")

GHIBLI_PROMPT = (
    "Transform this image into Studio Ghibli animation style, maintaining the same "
    "composition but with Ghibli's signature soft colors, hand-drawn aesthetic, "
    "and magical atmosphere"
)


def validate_request(image_url, filter_type):
    """Return an error message for an unusable request, or None."""
    if not image_url:
        return "Image URL is required"
    if not filter_type:
        return "Filter type is required"
    if filter_type not in VALID_FILTERS:
        return "Invalid filter type"
    return None


def _error(message, kind):
    return {"error": message, "kind": kind}


def process_image(image_url, filter_type, settings=None, client=None,
                  interval=None, max_attempts=None, sleep=time.sleep):
    """
    Run one transformation end to end.

    Args:
        image_url: Public URL of the source image
        filter_type: One of VALID_FILTERS
        settings: Extra model inputs (intensity, prompt, ...)
        client: PredictionClient; built from Django settings when omitted
        interval: Seconds between status queries
        max_attempts: Status query budget
        sleep: Wait function, swapped out in tests

    Returns:
        On success: {"originalUrl", "processedUrl", "filterType", "settings", "id"}
        On failure: {"error", "kind"}
    """
    if settings is None:
        settings = {}

    message = validate_request(image_url, filter_type)
    if not message and not isinstance(settings, Mapping):
        message = "Settings must be an object"
    if message:
        logger.info(f"[PIPELINE] Rejected request: {message}")
        return _error(message, "validation")

    settings = dict(settings)

    if interval is None:
        interval = django_settings.PREDICTION_POLL_INTERVAL
    if max_attempts is None:
        max_attempts = django_settings.PREDICTION_MAX_ATTEMPTS

    try:
        client = client or get_prediction_client()
        request = TransformationRequest(image_url=image_url, filter_type=filter_type, settings=settings)

        job_id = client.submit(request)
        processed_url = poll_until_complete(
            client, job_id, interval=interval, max_attempts=max_attempts, sleep=sleep
        )

        record = ProcessedImage.objects.create(
            original_url=image_url,
            processed_url=processed_url,
            filter_type=filter_type,
            filter_settings=settings,
        )
        logger.info(f"[PIPELINE] {filter_type} job {job_id} stored as ProcessedImage {record.id}")

        return {
            "originalUrl": image_url,
            "processedUrl": processed_url,
            "filterType": filter_type,
            "settings": settings,
            "id": record.id,
        }

    except EnchanterError as e:
        logger.warning(f"[PIPELINE] {filter_type} transformation failed ({e.kind}): {e}")
        return _error(str(e), e.kind)

    except Exception as e:
        logger.error(f"[PIPELINE] Unexpected error: {e}", exc_info=True)
        return _error(str(e) or "An unexpected error occurred", "internal")


def process_ghibli_image(image_url, **kwargs):
    """Run the AI Ghibli transform with the fixed style prompt."""
    return process_image(image_url, "ghibli", {"prompt": GHIBLI_PROMPT}, **kwargs)
