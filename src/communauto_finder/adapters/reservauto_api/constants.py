"""Constants for the Reservauto API adapter.

Uses the public front-office REST API behind communauto.com.
No authentication required.
"""

DEFAULT_TIMEOUT_SECONDS = 10.0

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# Longest body excerpt kept in error logs
ERROR_BODY_EXCERPT = 500
