"""Classify model-call failures as quota/rate-limit conditions.

Provider errors arrive in several shapes: SDK exceptions carrying a status
code and a parsed body, plain exceptions with only a message, or dicts
deserialized from a proxy. Each check below looks at one aspect of the fault
and never raises; a fault that matches none of them is simply not a quota
error.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_RETRY_AFTER = 60  # seconds

QUOTA_STATUS = 429
QUOTA_MESSAGE_MARKERS = ("quota", "rate limit")
QUOTA_BODY_MARKER = "RESOURCE_EXHAUSTED"

_DELAY_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*s\s*$")


@dataclass(frozen=True)
class QuotaError:
    is_quota: bool
    retry_after_seconds: int


def _lookup(error: Any, *names: str) -> Any:
    """Read the first present attribute or mapping key among ``names``."""
    for name in names:
        if isinstance(error, Mapping):
            if name in error and error[name] is not None:
                return error[name]
        else:
            value = getattr(error, name, None)
            if value is not None:
                return value
    return None


def _status_code(error: Any) -> int | None:
    value = _lookup(error, "status_code", "statusCode", "status")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _message(error: Any) -> str:
    if isinstance(error, str):
        return error
    value = _lookup(error, "message")
    if isinstance(value, str):
        return value
    if isinstance(error, BaseException):
        return str(error)
    return ""


def _body(error: Any) -> Any:
    return _lookup(error, "body", "response_body", "responseBody")


def _body_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, (str, bytes)):
        return body.decode("utf-8", "replace") if isinstance(body, bytes) else body
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return str(body)


def _body_object(body: Any) -> Any:
    if isinstance(body, (str, bytes)):
        try:
            return json.loads(body)
        except (TypeError, ValueError):
            return None
    return body


def _parse_delay(value: Any) -> int | None:
    if not isinstance(value, str):
        return None
    match = _DELAY_RE.match(value)
    if not match:
        return None
    return math.ceil(float(match.group(1)))


def _retry_info_delay(body: Any) -> int | None:
    """Find ``{"@type": "...RetryInfo", "retryDelay": "<N>s"}`` in error details."""
    payload = _body_object(body)
    if not isinstance(payload, Mapping):
        return None
    inner = payload.get("error", payload)
    details = inner.get("details") if isinstance(inner, Mapping) else None
    if not isinstance(details, list):
        return None
    for detail in details:
        if not isinstance(detail, Mapping):
            continue
        if "RetryInfo" in str(detail.get("@type", "")):
            return _parse_delay(detail.get("retryDelay"))
    return None


def _retry_after_header(error: Any) -> int | None:
    response = _lookup(error, "response")
    headers = getattr(response, "headers", None)
    if headers is None:
        headers = _lookup(error, "headers")
    if headers is None:
        return None
    try:
        value = headers.get("retry-after")
    except AttributeError:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    return math.ceil(seconds) if seconds > 0 else None


def is_quota_error(error: Any) -> bool:
    if _status_code(error) == QUOTA_STATUS:
        return True
    message = _message(error).lower()
    if any(marker in message for marker in QUOTA_MESSAGE_MARKERS):
        return True
    return QUOTA_BODY_MARKER in _body_text(_body(error))


def retry_delay_seconds(error: Any, default: int = DEFAULT_RETRY_AFTER) -> int:
    delay = _retry_info_delay(_body(error))
    if delay is None:
        delay = _retry_after_header(error)
    return delay if delay is not None else default


def classify_error(error: Any, default_retry_after: int = DEFAULT_RETRY_AFTER) -> QuotaError:
    """Decide whether ``error`` is a quota condition and how long to wait."""
    if not is_quota_error(error):
        return QuotaError(is_quota=False, retry_after_seconds=default_retry_after)
    return QuotaError(
        is_quota=True,
        retry_after_seconds=retry_delay_seconds(error, default_retry_after),
    )
