# enchanter/polling_test.py

import pytest

from enchanter.exceptions import JobFailedError, PollTimeoutError, TransportError
from enchanter.polling import poll_until_complete
from enchanter.prediction import PredictionClient, PredictionJob


class ScriptedClient(PredictionClient):
    """Replays a fixed sequence of poll results; exceptions in the script are raised."""

    def __init__(self, script):
        self.script = list(script)
        self.polled = []

    def poll(self, job_id):
        self.polled.append(job_id)
        step = self.script[min(len(self.polled), len(self.script)) - 1]
        if isinstance(step, Exception):
            raise step
        return step


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def pending(job_id="abc"):
    return PredictionJob(id=job_id, status="processing")


def test_returns_output_after_pending_statuses():
    client = ScriptedClient([
        PredictionJob(id="abc", status="starting"),
        pending(),
        PredictionJob(id="abc", status="succeeded", output="https://x/out.png"),
    ])
    sleep = SleepRecorder()

    result = poll_until_complete(client, "abc", interval=0.5, max_attempts=30, sleep=sleep)

    assert result == "https://x/out.png"
    assert client.polled == ["abc", "abc", "abc"]
    assert sleep.calls == [0.5, 0.5]


@pytest.mark.parametrize("n", [1, 7, 30])
def test_success_on_query_n_consumes_exactly_n_queries(n):
    script = [pending()] * (n - 1) + [PredictionJob(id="abc", status="succeeded", output="out")]
    client = ScriptedClient(script)

    assert poll_until_complete(client, "abc", interval=0, max_attempts=30, sleep=SleepRecorder()) == "out"
    assert len(client.polled) == n


@pytest.mark.parametrize("k", [1, 4, 30])
def test_failure_on_query_k_stops_polling(k):
    script = [pending()] * (k - 1) + [PredictionJob(id="abc", status="failed")]
    client = ScriptedClient(script)

    with pytest.raises(JobFailedError) as exc:
        poll_until_complete(client, "abc", interval=0, max_attempts=30, sleep=SleepRecorder())

    assert str(exc.value) == "Image processing failed"
    assert exc.value.kind == "job_failed"
    assert len(client.polled) == k


def test_canceled_is_a_job_failure():
    client = ScriptedClient([PredictionJob(id="abc", status="canceled")])

    with pytest.raises(JobFailedError):
        poll_until_complete(client, "abc", sleep=SleepRecorder())
    assert len(client.polled) == 1


def test_times_out_after_budget_without_trailing_wait():
    client = ScriptedClient([pending()])
    sleep = SleepRecorder()

    with pytest.raises(PollTimeoutError) as exc:
        poll_until_complete(client, "abc", interval=1.0, max_attempts=30, sleep=sleep)

    assert str(exc.value) == "Processing timeout"
    assert exc.value.kind == "timeout"
    assert len(client.polled) == 30
    assert len(sleep.calls) == 29


def test_succeeded_without_output_keeps_polling():
    client = ScriptedClient([
        PredictionJob(id="abc", status="succeeded", output=None),
        PredictionJob(id="abc", status="succeeded", output="https://x/out.png"),
    ])

    assert poll_until_complete(client, "abc", interval=0, sleep=SleepRecorder()) == "https://x/out.png"
    assert len(client.polled) == 2


def test_transport_error_is_not_retried():
    client = ScriptedClient([pending(), TransportError("Failed to check prediction status"), pending()])

    with pytest.raises(TransportError):
        poll_until_complete(client, "abc", interval=0, sleep=SleepRecorder())

    assert len(client.polled) == 2


def test_unexpected_query_exception_becomes_transport_error():
    client = ScriptedClient([ConnectionResetError("reset by peer")])

    with pytest.raises(TransportError) as exc:
        poll_until_complete(client, "abc", sleep=SleepRecorder())

    assert exc.value.kind == "transport"
    assert len(client.polled) == 1


def test_empty_job_id_is_rejected_before_any_query():
    client = ScriptedClient([pending()])

    with pytest.raises(ValueError):
        poll_until_complete(client, "", sleep=SleepRecorder())

    assert client.polled == []
