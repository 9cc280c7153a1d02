"""Utility for logging upstream requests when COMMUTE_COFFEE_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any
from urllib.parse import parse_qsl, urlencode

logger = logging.getLogger(__name__)

_SENSITIVE_KEYS = {"authorization", "cookie", "x-api-key", "keyid", "devid", "signature"}
_REDACTED = "***REDACTED***"


def should_log_requests() -> bool:
    """Check if request logging is enabled via the COMMUTE_COFFEE_LOG_REQUESTS variable."""
    return os.getenv("COMMUTE_COFFEE_LOG_REQUESTS", "").lower() == "true"


def _redact(values: dict[str, Any]) -> dict[str, Any]:
    """Replace credentials in headers or query parameters."""
    return {k: _REDACTED if k.lower() in _SENSITIVE_KEYS else v for k, v in values.items()}


def _redact_url(url: str) -> str:
    """Redact credentials already embedded in the query string, e.g. a signed URL."""
    base, sep, query = url.partition("?")
    if not sep:
        return url
    pairs = [(k, _REDACTED if k.lower() in _SENSITIVE_KEYS else v) for k, v in parse_qsl(query)]
    return f"{base}?{urlencode(pairs, safe='*')}"


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    url = _redact_url(url)
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(_redact(params).items()))
    return f"{url}&{param_str}" if "?" in url else f"{url}?{param_str}"


def log_api_request(
    source_name: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log an outgoing GET request if request logging is enabled.

    Args:
        source_name: Name of the source issuing the request.
        url: Request URL; credentials in its query string are redacted.
        params: Query parameters; credentials are redacted.
        headers: Request headers; credentials are redacted.
    """
    if not should_log_requests():
        return

    log_parts = [f"GET {_build_url_with_params(url, params)}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact(headers), indent=2)}")

    logger.info(f"Upstream request from {source_name}:\n" + "\n".join(log_parts))
