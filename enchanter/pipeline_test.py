# enchanter/pipeline_test.py

import os
from unittest.mock import MagicMock, patch

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
django.setup()

from enchanter.exceptions import TransportError
from enchanter.models import ProcessedImage
from enchanter.pipeline import GHIBLI_PROMPT, process_ghibli_image, process_image
from enchanter.prediction import PredictionClient, PredictionJob


class FakeClient(PredictionClient):
    def __init__(self, statuses, job_id="abc", submit_error=None):
        self.statuses = list(statuses)
        self.job_id = job_id
        self.submit_error = submit_error
        self.submitted = []
        self.polls = 0

    def submit(self, request):
        if self.submit_error:
            raise self.submit_error
        self.submitted.append(request)
        return self.job_id

    def poll(self, job_id):
        self.polls += 1
        return self.statuses[min(self.polls, len(self.statuses)) - 1]


def no_sleep(seconds):
    pass


def succeeded(output="https://x/out.png"):
    return PredictionJob(id="abc", status="succeeded", output=output)


def pending():
    return PredictionJob(id="abc", status="processing")


def test_empty_image_url_is_rejected_without_network():
    client = MagicMock(spec=PredictionClient)

    result = process_image("", "sepia", client=client)

    assert result == {"error": "Image URL is required", "kind": "validation"}
    client.submit.assert_not_called()
    client.poll.assert_not_called()


def test_invalid_filter_is_rejected_without_network():
    with patch("enchanter.pipeline.get_prediction_client") as factory:
        result = process_image("https://x/in.png", "vaporwave")

    assert result == {"error": "Invalid filter type", "kind": "validation"}
    factory.assert_not_called()


def test_missing_filter_type_is_rejected():
    assert process_image("https://x/in.png", None)["error"] == "Filter type is required"


@pytest.mark.django_db
def test_success_persists_record_and_returns_result():
    client = FakeClient([pending(), pending(), succeeded()])

    result = process_image("https://x/in.png", "sepia", {"intensity": 0.5}, client=client, sleep=no_sleep)

    record = ProcessedImage.objects.get()
    assert result == {
        "originalUrl": "https://x/in.png",
        "processedUrl": "https://x/out.png",
        "filterType": "sepia",
        "settings": {"intensity": 0.5},
        "id": record.id,
    }
    assert client.polls == 3
    assert record.filter_settings == {"intensity": 0.5}
    assert client.submitted[0].image_url == "https://x/in.png"


@pytest.mark.django_db
def test_job_failure_returns_error_and_persists_nothing():
    client = FakeClient([pending(), PredictionJob(id="abc", status="failed")])

    result = process_image("https://x/in.png", "blur", client=client, sleep=no_sleep)

    assert result == {"error": "Image processing failed", "kind": "job_failed"}
    assert ProcessedImage.objects.count() == 0


@pytest.mark.django_db
def test_timeout_is_distinct_from_job_failure():
    client = FakeClient([pending()])

    result = process_image("https://x/in.png", "contrast", client=client, max_attempts=5, sleep=no_sleep)

    assert result == {"error": "Processing timeout", "kind": "timeout"}
    assert client.polls == 5
    assert ProcessedImage.objects.count() == 0


@pytest.mark.django_db
def test_submit_transport_error_is_reported():
    client = FakeClient([], submit_error=TransportError("Prediction API error: 503"))

    result = process_image("https://x/in.png", "grayscale", client=client, sleep=no_sleep)

    assert result == {"error": "Prediction API error: 503", "kind": "transport"}
    assert client.polls == 0


@pytest.mark.django_db
def test_unexpected_error_never_raises():
    client = MagicMock(spec=PredictionClient)
    client.submit.side_effect = RuntimeError("kaboom")

    result = process_image("https://x/in.png", "grayscale", client=client, sleep=no_sleep)

    assert result == {"error": "kaboom", "kind": "internal"}


@pytest.mark.django_db
def test_poll_settings_default_to_django_settings(settings):
    settings.PREDICTION_MAX_ATTEMPTS = 3
    settings.PREDICTION_POLL_INTERVAL = 0.25
    sleeps = []
    client = FakeClient([pending()])

    result = process_image("https://x/in.png", "sepia", client=client, sleep=sleeps.append)

    assert result["kind"] == "timeout"
    assert client.polls == 3
    assert sleeps == [0.25, 0.25]


@pytest.mark.django_db
def test_ghibli_transform_sends_prompt():
    client = FakeClient([succeeded("https://x/ghibli.png")])

    result = process_ghibli_image("https://x/in.png", client=client, sleep=no_sleep)

    assert result["processedUrl"] == "https://x/ghibli.png"
    assert result["filterType"] == "ghibli"
    assert client.submitted[0].settings == {"prompt": GHIBLI_PROMPT}
    assert ProcessedImage.objects.get().filter_settings == {"prompt": GHIBLI_PROMPT}


@pytest.mark.parametrize("bad_settings", [["a"], "ab", 5])
def test_non_mapping_settings_are_a_validation_error(bad_settings):
    client = MagicMock(spec=PredictionClient)

    result = process_image("https://x/in.png", "sepia", bad_settings, client=client)

    assert result == {"error": "Settings must be an object", "kind": "validation"}
    client.submit.assert_not_called()
