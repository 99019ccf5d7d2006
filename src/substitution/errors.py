"""Error hierarchy for timetable retrieval failures.

Failures are split the same way a caller would triage them: transient
failures may succeed when the caller re-invokes the retrieval, permanent
failures will not.

The core never retries on its own. Callers that want to re-invoke can do so
with tenacity, keyed on the exception class:

    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    async def fetch():
        ...
"""


class RetrievalError(Exception):
    """Base exception for all timetable retrieval errors."""

    pass


class TransientError(RetrievalError):
    """Temporary failure that may succeed when re-invoked."""

    pass


class TransportError(TransientError):
    """The HTTP exchange failed.

    Either no response was received (DNS, connection refused, timeout) and the
    underlying exception is chained as ``__cause__``, or the server answered
    with a non-success status and ``status``/``body_text`` hold the details.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body_text = body_text


class PermanentError(RetrievalError):
    """Failure that won't succeed when re-invoked with the same input."""

    pass


class ConfigurationError(PermanentError):
    """School identity or query options are missing or malformed.

    Raised before any network activity.
    """

    pass


class ApiError(PermanentError):
    """The service answered with HTTP success but reported an ``error`` object."""

    def __init__(self, code: int | None, message: str) -> None:
        super().__init__(f"WebUntis API error {code}: {message}")
        self.code = code
        self.message = message


class ParseError(PermanentError):
    """The response body is not valid JSON or not a timetable envelope."""

    pass
