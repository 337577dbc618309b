"""Utility for logging outgoing API requests when COMMAUTO_LOG_REQUESTS is enabled."""

import json
import logging
import os

logger = logging.getLogger(__name__)

LOG_REQUESTS_ENV_VAR = "COMMAUTO_LOG_REQUESTS"
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
REDACTED = "***REDACTED***"


def should_log_requests() -> bool:
    """Check if request logging is enabled via the COMMAUTO_LOG_REQUESTS environment variable."""
    return os.getenv(LOG_REQUESTS_ENV_VAR, "").lower() == "true"


def _redact(headers: dict[str, str]) -> dict[str, str]:
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def log_api_request(method: str, url: str, headers: dict[str, str] | None = None) -> None:
    """Log an outgoing request if COMMAUTO_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Full request URL including the query string.
        headers: Request headers (optional, sensitive headers are redacted).
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {url}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact(headers), indent=2)}")

    logger.info("API Request:\n" + "\n".join(log_parts))


def log_api_response(url: str, status: int, size: int) -> None:
    """Log a response summary if COMMAUTO_LOG_REQUESTS is enabled."""
    if not should_log_requests():
        return

    logger.info(f"API Response: {status} {url} ({size} bytes)")
