class EnchanterError(Exception):
    """Base class for every failure a transformation can end in."""

    kind = "internal"


class TransportError(EnchanterError):
    """Network failure or non-2xx response while talking to the prediction API."""

    kind = "transport"


class JobFailedError(EnchanterError):
    """The prediction service reported a terminal failure for the job."""

    kind = "job_failed"


class PollTimeoutError(EnchanterError):
    """The attempt budget ran out before the job reached a terminal state."""

    kind = "timeout"
