"""
Prediction API client.

Wraps the external asynchronous prediction service (Replicate) behind a small
capability interface:

- submit(request) -> job id
- poll(job_id)    -> PredictionJob

The poll loop and the pipeline only ever see this interface, so tests can
drive them with scripted fakes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from .exceptions import TransportError

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"
FAILED = "failed"
CANCELED = "canceled"

TERMINAL_FAILURE_STATUSES = {FAILED, CANCELED}


@dataclass(frozen=True)
class TransformationRequest:
    image_url: str
    filter_type: str
    settings: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PredictionJob:
    id: str
    status: str
    output: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED and bool(self.output)

    @property
    def failed(self) -> bool:
        return self.status in TERMINAL_FAILURE_STATUSES


class PredictionClient:
    """Capability interface for an asynchronous prediction service."""

    def submit(self, request: TransformationRequest) -> str:
        raise NotImplementedError

    def poll(self, job_id: str) -> PredictionJob:
        raise NotImplementedError


def _json_body(response):
    try:
        data = response.json()
    except ValueError as e:
        raise TransportError("Prediction API returned an invalid body") from e
    if not isinstance(data, dict):
        raise TransportError("Prediction API returned an invalid body")
    return data


def _normalize_output(output):
    # Replicate models return either a single URL or a list of URLs
    if isinstance(output, (list, tuple)):
        return output[0] if output else None
    return output


class ReplicateClient(PredictionClient):
    """Client for the Replicate predictions API."""

    def __init__(self, api_token: str, model_version: str,
                 base_url: str = "https://api.replicate.com/v1", timeout: int = 30,
                 session: Optional[requests.Session] = None):
        """
        Initialize the Replicate client.

        Args:
            api_token: Replicate API token
            model_version: Model version hash the predictions run against
            base_url: API root, without trailing slash
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.api_token = api_token
        self.model_version = model_version
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def headers(self):
        return {"Authorization": f"Token {self.api_token}"}

    def submit(self, request: TransformationRequest) -> str:
        """
        Start a prediction for the given request.

        Returns:
            The prediction id issued by the service

        Raises:
            TransportError: On network failure, non-2xx status or a body without an id
        """
        payload = {
            "version": self.model_version,
            "input": {
                "image": request.image_url,
                "filter": request.filter_type,
                **request.settings,
            },
        }
        try:
            response = self.session.post(
                f"{self.base_url}/predictions",
                json=payload,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Prediction API unreachable: {e}") from e

        if not response.ok:
            raise TransportError(f"Prediction API error: {response.status_code}")

        job_id = _json_body(response).get("id")
        if not job_id:
            raise TransportError("Prediction API returned no prediction id")

        logger.info(f"[PREDICTION] Submitted {request.filter_type} job {job_id}")
        return job_id

    def poll(self, job_id: str) -> PredictionJob:
        """Fetch the current state of a prediction."""
        try:
            response = self.session.get(
                f"{self.base_url}/predictions/{job_id}",
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Failed to check prediction status: {e}") from e

        if not response.ok:
            raise TransportError("Failed to check prediction status")

        data = _json_body(response)
        return PredictionJob(
            id=data.get("id", job_id),
            status=data.get("status", ""),
            output=_normalize_output(data.get("output")),
        )


def get_prediction_client() -> PredictionClient:
    return ReplicateClient(
        api_token=settings.REPLICATE_API_TOKEN,
        model_version=settings.REPLICATE_MODEL_VERSION,
        base_url=settings.REPLICATE_API_URL,
        timeout=settings.PREDICTION_REQUEST_TIMEOUT,
    )
