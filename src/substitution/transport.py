"""HTTP exchange with the WebUntis monitor endpoint and response validation.

One call issues exactly one POST. There is no retry, backoff or caching here;
callers decide whether to re-invoke on a TransientError.

WebUntis reports domain errors (unknown school, bad format name) inside a
200 response as ``{"error": {"code": ..., "message": ...}}``, so a success
status alone does not mean the retrieval worked.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

import requests
from pydantic import ValidationError

from src.substitution.errors import ApiError, ParseError, TransportError
from src.substitution.logging import get_logger
from src.substitution.models import ApiErrorDetail, ResultEnvelope, TimetablePayload
from src.substitution.request import JSON_HEADERS

log = get_logger(__name__)


def _post(
    url: str,
    body: Mapping[str, Any],
    session: requests.Session | None,
    timeout: float | None,
) -> requests.Response:
    post = session.post if session is not None else requests.post
    return post(url, json=dict(body), headers=dict(JSON_HEADERS), timeout=timeout)


def _response_text(response: requests.Response) -> str:
    try:
        return response.text
    except Exception as e:  # body decoding is best-effort on an error path
        log.debug("response_text_unreadable", error=str(e))
        return ""


def _error_detail(raw: Any) -> ApiErrorDetail:
    try:
        return ApiErrorDetail.model_validate(raw)
    except ValidationError:
        return ApiErrorDetail(message=str(raw))


async def fetch_timetable(
    url: str,
    body: Mapping[str, Any],
    *,
    session: requests.Session | None = None,
    timeout: float | None = None,
) -> TimetablePayload:
    """POST the query and return the validated timetable payload.

    The blocking requests call runs in a worker thread, so concurrent
    retrievals on one event loop do not block each other.

    Args:
        url: Monitor endpoint URL including the ``school`` query parameter.
        body: JSON request body.
        session: Optional requests session to send the request with.
        timeout: Transport timeout in seconds. None leaves it to requests.

    Raises:
        TransportError: Connection failure, or a non-2xx status (with body text).
        ParseError: The body is not JSON, or not a timetable envelope.
        ApiError: The body carries an ``error`` object.
    """
    try:
        response = await asyncio.to_thread(_post, url, body, session, timeout)
    except requests.RequestException as e:
        log.warning("transport_failed", url=url, error=str(e), type=type(e).__name__)
        raise TransportError(f"Request to {url} failed: {e}") from e

    if not 200 <= response.status_code < 300:
        text = _response_text(response)
        log.error("http_error", status=response.status_code, body=text[:500])
        raise TransportError(
            f"HTTP error {response.status_code}: {text}",
            status=response.status_code,
            body_text=text,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise ParseError(f"Response body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    if data.get("error") is not None:
        detail = _error_detail(data["error"])
        log.error("webuntis_api_error", code=detail.code, message=detail.message)
        raise ApiError(detail.code, detail.message or "")

    try:
        envelope = ResultEnvelope.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Unexpected response shape: {e}") from e

    if envelope.payload is None:
        raise ParseError("Response has neither payload nor error")

    return envelope.payload
